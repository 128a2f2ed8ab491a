# targetscope/profiler.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

import httpx

from .adapters import default_adapters
from .adapters.base import SourceAdapter, error_message
from .adapters.open_targets import OpenTargetsAdapter
from .config import PROFILE_DEADLINE_S
from .errors import ProfileDeadlineExceeded, TargetNotFound, UpstreamError
from .models import (
    ChEMBLData,
    Candidate,
    DevelopmentLevel,
    OpenTargetsData,
    ProfileMetadata,
    RawData,
    ServiceResult,
    TargetProfile,
    TargetQuery,
    now_ms,
)
from .orchestrator import gather_sources
from .scoring.engine import RawDataInputs, calculate_scores
from .utils.cache import TTLCache
from .utils.http import RequestClient
from .utils.ids import require_gene_symbol

log = logging.getLogger("targetscope.profiler")

MIN_SEARCH_LENGTH = 2


def classify_development_level(
    chembl: Optional[ChEMBLData],
    open_targets: Optional[OpenTargetsData],
    overall: int,
) -> DevelopmentLevel:
    """Tclin (approved drug) > Tchem (clinical or chemical matter) > Tbio (biology) > Tdark."""
    max_phase = chembl.max_clinical_phase if chembl else 0
    compounds = chembl.compound_count if chembl else 0
    diseases = open_targets.disease_association_count if open_targets else 0
    if max_phase >= 4:
        return "Tclin"
    if max_phase >= 1 or compounds > 0:
        return "Tchem"
    if diseases > 0 or overall > 20:
        return "Tbio"
    return "Tdark"


def _data(result: ServiceResult):
    return result.data if result.success else None


class TargetProfiler:
    """Builds TargetProfiles: resolve -> fan out -> score -> assemble.

    ``deadline`` bounds one whole build in seconds (resolution included);
    0 or None means unbounded.
    """

    def __init__(
        self,
        client: RequestClient,
        cache: TTLCache,
        adapters: Optional[Sequence[SourceAdapter]] = None,
        deadline: Optional[float] = PROFILE_DEADLINE_S,
    ):
        self.client = client
        self.cache = cache
        self.adapters: List[SourceAdapter] = list(adapters) if adapters is not None else default_adapters(client, cache)
        self.deadline = deadline if deadline and deadline > 0 else None
        ot = [a for a in self.adapters if isinstance(a, OpenTargetsAdapter)]
        self.open_targets: OpenTargetsAdapter = ot[0] if ot else OpenTargetsAdapter(client, cache)

    def _remaining(self, started: float) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - (time.monotonic() - started)

    async def _resolve(self, gene: str, started: float) -> Dict[str, str]:
        remaining = self._remaining(started)
        try:
            resolved = await asyncio.wait_for(self.open_targets.resolve(gene), timeout=remaining)
        except asyncio.TimeoutError:
            raise ProfileDeadlineExceeded(gene, self.deadline) from None
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Could not resolve gene symbol {gene}: {error_message(e)}") from e
        if not resolved:
            raise TargetNotFound(gene)
        return resolved

    async def build_target_profile(self, gene: str) -> TargetProfile:
        started = time.monotonic()
        symbol = require_gene_symbol(gene)

        ck = ("analysis", symbol)
        hit = self.cache.get(ck)
        if hit is not None:
            return hit

        resolved = await self._resolve(symbol, started)
        target = TargetQuery(symbol=symbol, ensembl_id=resolved["id"], approved_name=resolved.get("name") or symbol)

        remaining = self._remaining(started)
        if remaining is not None and remaining <= 0:
            raise ProfileDeadlineExceeded(symbol, self.deadline)
        envelopes = await gather_sources(self.adapters, target, deadline=remaining)

        raw = RawData.model_validate(envelopes)
        inputs = RawDataInputs(
            open_targets=_data(raw.open_targets),
            chembl=_data(raw.chembl),
            pubmed=_data(raw.pubmed),
            clinical_trials=_data(raw.clinical_trials),
            biorxiv=_data(raw.biorxiv),
            alphafold=_data(raw.alphafold),
            alphagenome=_data(raw.alphagenome),
        )
        scores = calculate_scores(inputs)

        completed = sum(1 for env in envelopes.values() if env.success)
        failed = len(envelopes) - completed
        elapsed_ms = int((time.monotonic() - started) * 1000)

        profile = TargetProfile(
            gene=symbol,
            ensembl_id=target.ensembl_id,
            uniprot_id=inputs.alphafold.uniprot_id if inputs.alphafold else "",
            approved_name=(inputs.open_targets.approved_name if inputs.open_targets else "") or target.approved_name,
            development_level=classify_development_level(inputs.chembl, inputs.open_targets, scores.value),
            scores=scores,
            raw_data=raw,
            metadata=ProfileMetadata(
                analysis_timestamp=now_ms(),
                total_response_time_ms=elapsed_ms,
                services_completed=completed,
                services_failed=failed,
            ),
        )
        self.cache.set(ck, profile)
        log.info("profile %s overall=%d (%s) completed=%d failed=%d in %d ms",
                 symbol, scores.value, scores.label, completed, failed, elapsed_ms)
        return profile

    async def search_candidates(self, query: str) -> List[Candidate]:
        q = (query or "").strip()
        if len(q) < MIN_SEARCH_LENGTH:
            return []
        return await self.open_targets.search(q)
