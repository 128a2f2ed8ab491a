"""Upstream source adapters, one per provider.

``default_adapters`` builds the seven adapters in raw-data order.
"""

from typing import List

from ..utils.cache import TTLCache
from ..utils.http import RequestClient
from .alphafold import AlphaFoldAdapter
from .alphagenome import AlphaGenomeAdapter
from .base import SourceAdapter
from .biorxiv import BioRxivAdapter
from .chembl import ChEMBLAdapter
from .clinical_trials import ClinicalTrialsAdapter
from .open_targets import OpenTargetsAdapter
from .pubmed import PubMedAdapter

ADAPTER_CLASSES = [
    OpenTargetsAdapter,
    ChEMBLAdapter,
    PubMedAdapter,
    ClinicalTrialsAdapter,
    BioRxivAdapter,
    AlphaFoldAdapter,
    AlphaGenomeAdapter,
]


def default_adapters(client: RequestClient, cache: TTLCache) -> List[SourceAdapter]:
    return [cls(client, cache) for cls in ADAPTER_CLASSES]


__all__ = [
    "SourceAdapter", "default_adapters", "ADAPTER_CLASSES",
    "OpenTargetsAdapter", "ChEMBLAdapter", "PubMedAdapter", "ClinicalTrialsAdapter",
    "BioRxivAdapter", "AlphaFoldAdapter", "AlphaGenomeAdapter",
]
