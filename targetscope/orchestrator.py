# targetscope/orchestrator.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Iterable, Optional, Tuple, Type

from pydantic import BaseModel

from .adapters.base import SourceAdapter, error_message
from .models import (
    SOURCE_KEYS,
    AlphaFoldData,
    AlphaGenomeData,
    BioRxivData,
    ChEMBLData,
    ClinicalTrialsData,
    OpenTargetsData,
    PubMedData,
    ServiceResult,
    SourceKey,
    TargetQuery,
)

log = logging.getLogger("targetscope.orchestrator")

# raw-data key -> (provider label, record model)
SOURCE_RECORDS: Dict[SourceKey, Tuple[str, Type[BaseModel]]] = {
    "openTargets": ("Open Targets", OpenTargetsData),
    "chembl": ("ChEMBL", ChEMBLData),
    "pubmed": ("PubMed", PubMedData),
    "clinicalTrials": ("ClinicalTrials.gov", ClinicalTrialsData),
    "biorxiv": ("bioRxiv", BioRxivData),
    "alphafold": ("AlphaFold/PDB", AlphaFoldData),
    "alphagenome": ("AlphaGenome", AlphaGenomeData),
}


def failed_result(key: str, error: str, started: float) -> ServiceResult:
    label, model = SOURCE_RECORDS[key]
    return ServiceResult[model].failed(label, error, started)


async def gather_sources(
    adapters: Iterable[SourceAdapter],
    target: TargetQuery,
    deadline: Optional[float] = None,
) -> Dict[str, ServiceResult]:
    """Run every adapter concurrently; always returns all seven keys in fixed order.

    One adapter failing, raising or overrunning ``deadline`` seconds only
    affects its own entry.
    """
    started = time.monotonic()
    tasks: Dict[asyncio.Task, str] = {
        asyncio.ensure_future(a.fetch(target)): a.key for a in adapters
    }

    pending: set = set()
    if tasks:
        _, pending = await asyncio.wait(tasks.keys(), timeout=deadline)
    for t in pending:
        t.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    by_key: Dict[str, ServiceResult] = {}
    for task, key in tasks.items():
        if task in pending:
            log.warning("%s timed out after %gs for %s", key, deadline, target.symbol)
            by_key[key] = failed_result(key, f"timed out after {deadline:g} s", started)
        elif task.cancelled():
            by_key[key] = failed_result(key, "cancelled", started)
        elif task.exception() is not None:
            exc = task.exception()
            log.warning("%s raised for %s: %s", key, target.symbol, error_message(exc))
            by_key[key] = failed_result(key, error_message(exc), started)
        else:
            by_key[key] = task.result()

    return {
        key: by_key.get(key) or failed_result(key, "no adapter configured", started)
        for key in SOURCE_KEYS
    }
