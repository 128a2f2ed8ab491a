# targetscope/scoring/engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models import (
    AlphaFoldData,
    AlphaGenomeData,
    BioRxivData,
    ChEMBLData,
    ClinicalTrialsData,
    DimensionScore,
    OpenTargetsData,
    OverallScore,
    PubMedData,
)
from .chemical_tractability import score_chemical_tractability
from .clinical_history import score_clinical_history
from .common import round_half_up
from .genetic_evidence import score_genetic_evidence
from .innovation_signal import score_innovation_signal
from .literature_depth import score_literature_depth
from .regulatory_genomics import score_regulatory_genomics
from .structural_readiness import score_structural_readiness

# Tractability leads: a validated target with no feasible molecule is not actionable.
DIMENSION_WEIGHTS: Dict[str, float] = {
    "chemicalTractability": 0.22,
    "geneticEvidence": 0.18,
    "clinicalHistory": 0.18,
    "structuralReadiness": 0.13,
    "regulatoryGenomics": 0.12,
    "literatureDepth": 0.09,
    "innovationSignal": 0.08,
}

SCORE_BANDS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Moderate"),
    (20, "Low"),
)


@dataclass(frozen=True)
class RawDataInputs:
    """Per-source records fed to the scorers; None where the source failed."""
    open_targets: Optional[OpenTargetsData] = None
    chembl: Optional[ChEMBLData] = None
    pubmed: Optional[PubMedData] = None
    clinical_trials: Optional[ClinicalTrialsData] = None
    biorxiv: Optional[BioRxivData] = None
    alphafold: Optional[AlphaFoldData] = None
    alphagenome: Optional[AlphaGenomeData] = None


def score_label(value: float) -> str:
    for floor, label in SCORE_BANDS:
        if value >= floor:
            return label
    return "Very Low"


def score_dimensions(raw: RawDataInputs) -> Dict[str, DimensionScore]:
    return {
        "geneticEvidence": score_genetic_evidence(raw.open_targets),
        "chemicalTractability": score_chemical_tractability(raw.chembl),
        "structuralReadiness": score_structural_readiness(raw.alphafold),
        "clinicalHistory": score_clinical_history(raw.clinical_trials),
        "literatureDepth": score_literature_depth(raw.pubmed),
        "innovationSignal": score_innovation_signal(raw.biorxiv),
        "regulatoryGenomics": score_regulatory_genomics(raw.alphagenome),
    }


def calculate_scores(raw: RawDataInputs) -> OverallScore:
    dimensions = score_dimensions(raw)
    weighted = sum(dimensions[dim].score * w for dim, w in DIMENSION_WEIGHTS.items())
    value = min(100, max(0, round_half_up(weighted)))
    return OverallScore(
        value=value,
        label=score_label(value),
        dimensions=dimensions,
        weights=dict(DIMENSION_WEIGHTS),
    )
