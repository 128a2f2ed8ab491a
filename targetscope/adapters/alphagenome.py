# targetscope/adapters/alphagenome.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List

import httpx

from ..clients.sources import source_headers, source_url
from ..errors import UpstreamError
from ..models import AlphaGenomeData, RegulatoryComplexity, TargetQuery
from .base import SourceAdapter, error_message, to_int
from .schemas import EnsemblLookup

REGULATORY_FLANK = 50_000
CONSTRAINED_FLANK = 10_000


def regulatory_complexity(total: int, promoters: int, enhancers: int, ctcf: int, open_chromatin: int) -> RegulatoryComplexity:
    kinds = sum(1 for n in (promoters, enhancers, ctcf, open_chromatin) if n > 0)
    if total > 30 or (enhancers > 5 and promoters >= 1) or kinds >= 3:
        return "high"
    if total > 10 or enhancers > 2 or kinds >= 2:
        return "moderate"
    return "low"


def expression_breadth(transcripts: int, features: int) -> int:
    """Heuristic 0-100 breadth; many isoforms + regulatory elements suggest broad expression."""
    if transcripts > 10 and features > 20:
        return 90
    if transcripts > 5 and features > 10:
        return 70
    if transcripts > 3 or features > 5:
        return 50
    if transcripts > 1:
        return 30
    return 15


def _feature_text(f: Dict[str, Any]) -> str:
    return f"{f.get('feature_type') or ''} {f.get('description') or ''}".lower()


class AlphaGenomeAdapter(SourceAdapter[AlphaGenomeData]):
    key = "alphagenome"
    label = "AlphaGenome"
    record_model = AlphaGenomeData

    def cache_id(self, target: TargetQuery) -> str:
        return target.ensembl_id

    async def _get(self, path: str) -> Any:
        return await self.client.get_json(
            source_url("ensembl", path),
            headers=source_headers("ensembl", {"Content-Type": "application/json"}),
        )

    async def _overlap(self, chrom: str, start: int, end: int, flank: int, feature: str) -> List[Dict[str, Any]]:
        lo = max(1, start - flank)
        hi = end + flank
        raw = await self._get(f"/overlap/region/homo_sapiens/{chrom}:{lo}-{hi}?feature={feature}")
        return [x for x in (raw or []) if isinstance(x, dict)]

    async def collect(self, target: TargetQuery, notes: List[str]) -> AlphaGenomeData:
        try:
            info = await self._get(f"/lookup/id/{target.ensembl_id}?expand=1")
        except httpx.HTTPError as e:
            raise UpstreamError(f"Could not resolve gene coordinates: {error_message(e)}") from e
        if not isinstance(info, dict) or not info.get("seq_region_name"):
            raise UpstreamError("Could not resolve gene coordinates")
        self.validate(EnsemblLookup, info, "Ensembl lookup", notes)

        chrom = str(info["seq_region_name"])
        start = to_int(info.get("start"))
        end = to_int(info.get("end"))
        # a missing transcript list means "unknown" (one); an empty one is zero
        listed = info.get("Transcript")
        transcripts = len(listed) if isinstance(listed, list) else 1

        reg_res, con_res = await asyncio.gather(
            self._overlap(chrom, start, end, REGULATORY_FLANK, "regulatory"),
            self._overlap(chrom, start, end, CONSTRAINED_FLANK, "constrained"),
            return_exceptions=True,
        )
        if isinstance(reg_res, BaseException):
            self.degraded("Ensembl regulatory features", reg_res, notes)
            reg_res = []
        if isinstance(con_res, BaseException):
            self.degraded("Ensembl constrained elements", con_res, notes)
            con_res = []

        texts = [_feature_text(f) for f in reg_res]
        promoters = sum(1 for t in texts if "promoter" in t)
        enhancers = sum(1 for t in texts if "enhancer" in t)
        ctcf = sum(1 for t in texts if "ctcf" in t)
        open_chromatin = sum(1 for t in texts if "open_chromatin" in t or "open chromatin" in t)
        total = len(reg_res)

        return AlphaGenomeData(
            regulatory_feature_count=total,
            promoter_count=promoters,
            enhancer_count=enhancers,
            ctcf_count=ctcf,
            open_chromatin_count=open_chromatin,
            constrained_element_count=len(con_res),
            gene_length=max(0, end - start),
            chromosome=chrom,
            biotype=info.get("biotype") or "protein_coding",
            transcript_count=transcripts,
            regulatory_complexity=regulatory_complexity(total, promoters, enhancers, ctcf, open_chromatin),
            expression_breadth=expression_breadth(transcripts, total),
            estimated_fields=["expression_breadth"],
        )
