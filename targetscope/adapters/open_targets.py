# targetscope/adapters/open_targets.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..clients.sources import source_headers, source_url
from ..errors import UpstreamError
from ..models import (
    Candidate,
    DiseaseAssociation,
    OpenTargetsData,
    TargetQuery,
    Tractability,
)
from .base import SourceAdapter, to_float, to_int
from .schemas import OTSearchResponse, OTTargetResponse

SEARCH_QUERY = """
query SearchTarget($q: String!) {
  search(queryString: $q, entityNames: ["target"], page: { size: 5, index: 0 }) {
    hits { id entity name description }
    total
  }
}
"""

TARGET_QUERY = """
query TargetInfo($ensemblId: String!) {
  target(ensemblId: $ensemblId) {
    approvedSymbol
    approvedName
    biotype
    tractability { label modality value }
    associatedDiseases(page: { size: 50, index: 0 }) {
      count
      rows {
        disease { id name }
        score
        datasourceScores { id score }
      }
    }
  }
}
"""

TOP_ASSOCIATIONS = 20


class OpenTargetsAdapter(SourceAdapter[OpenTargetsData]):
    key = "openTargets"
    label = "Open Targets"
    record_model = OpenTargetsData

    def cache_id(self, target: TargetQuery) -> str:
        return target.ensembl_id

    async def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.client.post_json(
            source_url("opentargets"),
            {"query": query, "variables": variables},
            headers=source_headers("opentargets", {"Content-Type": "application/json"}),
        )
        body = body or {}
        if not isinstance(body, dict):
            raise UpstreamError(f"Open Targets returned an unexpected {type(body).__name__} body")
        errors = body.get("errors") or []
        if errors:
            first = errors[0]
            msg = first.get("message") if isinstance(first, dict) else str(first)
            raise UpstreamError(f"Open Targets GraphQL error: {msg}")
        return body

    async def _search_hits(self, q: str, notes: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        raw = await self.graphql(SEARCH_QUERY, {"q": q})
        self.validate(OTSearchResponse, raw, "Open Targets search", notes if notes is not None else [])
        hits = ((raw.get("data") or {}).get("search") or {}).get("hits") or []
        return [h for h in hits if isinstance(h, dict) and h.get("entity") == "target" and h.get("id")]

    async def resolve(self, symbol: str) -> Optional[Dict[str, str]]:
        """Symbol -> {"id": ENSG..., "name": ...} or None when nothing matches."""
        ck = ("opentargets-resolve", symbol)
        hit = self.cached(ck)
        if hit is not None:
            return hit
        hits = await self._search_hits(symbol)
        if not hits:
            return None
        first = hits[0]
        resolved = {"id": first["id"], "name": first.get("name") or symbol}
        self.remember(ck, resolved)
        return resolved

    async def search(self, query: str) -> List[Candidate]:
        ck = ("opentargets-search", query)
        hit = self.cached(ck)
        if hit is not None:
            return hit
        out = [
            Candidate(
                id=h["id"],
                name=h.get("description") or h.get("name") or "",
                symbol=h.get("name") or h["id"],
            )
            for h in await self._search_hits(query)
        ]
        self.remember(ck, out)
        return out

    async def collect(self, target: TargetQuery, notes: List[str]) -> OpenTargetsData:
        raw = await self.graphql(TARGET_QUERY, {"ensemblId": target.ensembl_id})
        self.validate(OTTargetResponse, raw, "Open Targets target", notes)

        t = (raw.get("data") or {}).get("target")
        if not t:
            raise UpstreamError("Target not found in Open Targets")

        assoc = t.get("associatedDiseases") or {}
        rows = assoc.get("rows") or []
        top = []
        for r in rows[:TOP_ASSOCIATIONS]:
            disease = r.get("disease") or {}
            diversity = sum(1 for d in (r.get("datasourceScores") or []) if (to_float(d.get("score")) or 0) > 0)
            top.append(DiseaseAssociation(
                disease_id=disease.get("id") or "",
                disease_name=disease.get("name") or "",
                score=to_float(r.get("score")) or 0.0,
                datasource_diversity=diversity,
            ))

        tract = [
            Tractability(label=x.get("label") or "", modality=x.get("modality") or "", value=bool(x.get("value")))
            for x in (t.get("tractability") or [])
            if isinstance(x, dict)
        ]

        return OpenTargetsData(
            ensembl_id=target.ensembl_id,
            approved_symbol=t.get("approvedSymbol") or target.symbol,
            approved_name=t.get("approvedName") or target.approved_name or target.symbol,
            biotype=t.get("biotype") or "protein_coding",
            disease_association_count=to_int(assoc.get("count")),
            top_disease_associations=top,
            tractability=tract,
        )
