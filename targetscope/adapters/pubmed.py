# targetscope/adapters/pubmed.py
from __future__ import annotations

import asyncio
import datetime as dt
from typing import Any, Dict, List, Optional

from ..clients.sources import source_headers, source_url
from ..config import NCBI_API_KEY, RECENT_WINDOW_DAYS
from ..models import PubMedData, TargetQuery
from .base import SourceAdapter, to_int
from .schemas import PubMedSearch

DRUG_TERMS = "(drug OR therapeutic OR inhibitor OR treatment)"


def _pdat(d: dt.date) -> str:
    return d.strftime("%Y/%m/%d")


class PubMedAdapter(SourceAdapter[PubMedData]):
    key = "pubmed"
    label = "PubMed"
    record_model = PubMedData

    def __init__(self, *args: Any, api_key: Optional[str] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.api_key = NCBI_API_KEY if api_key is None else api_key

    async def count(self, term: str, extra: Optional[Dict[str, Any]] = None, notes: Optional[List[str]] = None) -> int:
        params: Dict[str, Any] = {"db": "pubmed", "term": term, "retmax": 0, "retmode": "json"}
        if extra:
            params.update(extra)
        if self.api_key:
            params["api_key"] = self.api_key
        raw = await self.client.get_json(source_url("pubmed", "/esearch.fcgi"), params=params, headers=source_headers("pubmed"))
        raw = raw or {}
        if notes is not None:
            self.validate(PubMedSearch, raw, "PubMed esearch", notes)
        return to_int((raw.get("esearchresult") or {}).get("count"))

    async def collect(self, target: TargetQuery, notes: List[str]) -> PubMedData:
        gene = target.symbol
        today = dt.date.today()
        window = {
            "mindate": _pdat(today - dt.timedelta(days=RECENT_WINDOW_DAYS)),
            "maxdate": _pdat(today),
            "datetype": "pdat",
        }
        total, recent, drug, reviews = await asyncio.gather(
            self.count(gene, notes=notes),
            self.count(gene, window),
            self.count(f"{gene} AND {DRUG_TERMS}"),
            self.count(f"{gene} AND review[pt]"),
            return_exceptions=True,
        )
        if isinstance(total, BaseException):
            raise total

        def secondary(res: Any, what: str) -> int:
            if isinstance(res, BaseException):
                self.degraded(what, res, notes)
                return 0
            return res

        return PubMedData(
            total_publications=total,
            recent_publications=secondary(recent, "PubMed recent count"),
            drug_focused_publications=secondary(drug, "PubMed drug-focused count"),
            review_articles=secondary(reviews, "PubMed review count"),
        )
