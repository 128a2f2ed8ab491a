# targetscope/adapters/biorxiv.py
from __future__ import annotations

import asyncio
import datetime as dt
import re
from typing import Any, Dict, List

from ..clients.sources import source_headers, source_url
from ..config import PREPRINT_WINDOW_DAYS
from ..models import BioRxivData, Preprint, TargetQuery, VelocityTrend
from .base import SourceAdapter
from .schemas import BioRxivPage

PAGE_CURSORS = (0, 100, 200, 300, 400)
RECENT_ITEMS = 10


def velocity_trend(last_30d: int, prior_30d: int) -> VelocityTrend:
    if last_30d > prior_30d * 1.5:
        return "increasing"
    if last_30d < prior_30d * 0.5 and prior_30d > 0:
        return "decreasing"
    return "stable"


def gene_pattern(gene: str) -> "re.Pattern[str]":
    return re.compile(rf"\b{re.escape(gene)}\b", re.IGNORECASE)


class BioRxivAdapter(SourceAdapter[BioRxivData]):
    key = "biorxiv"
    label = "bioRxiv"
    record_model = BioRxivData

    async def _page(self, start: str, end: str, cursor: int) -> Dict[str, Any]:
        raw = await self.client.get_json(
            source_url("biorxiv", f"/details/biorxiv/{start}/{end}/{cursor}"),
            headers=source_headers("biorxiv"),
        )
        return raw or {}

    async def collect(self, target: TargetQuery, notes: List[str]) -> BioRxivData:
        today = dt.date.today()
        start = (today - dt.timedelta(days=PREPRINT_WINDOW_DAYS)).isoformat()
        d30 = (today - dt.timedelta(days=30)).isoformat()
        d60 = (today - dt.timedelta(days=60)).isoformat()

        pages = await asyncio.gather(
            *(self._page(start, today.isoformat(), c) for c in PAGE_CURSORS),
            return_exceptions=True,
        )
        collection: List[Dict[str, Any]] = []
        for cursor, page in zip(PAGE_CURSORS, pages):
            if isinstance(page, BaseException):
                self.degraded(f"bioRxiv page {cursor}", page, notes)
                continue
            self.validate(BioRxivPage, page, f"bioRxiv page {cursor}", notes)
            collection.extend(p for p in (page.get("collection") or []) if isinstance(p, dict))

        pat = gene_pattern(target.symbol)
        matching = [
            p for p in collection
            if pat.search(p.get("title") or "") or pat.search(p.get("abstract") or "")
        ]

        r30 = sum(1 for p in matching if (p.get("date") or "") >= d30)
        prior = sum(1 for p in matching if d60 <= (p.get("date") or "") < d30)
        groups = {p.get("author_corresponding_institution") for p in matching}
        groups.discard(None)
        groups.discard("")

        return BioRxivData(
            preprints_90d=len(matching),
            preprints_30d=r30,
            preprints_prior_30d=prior,
            velocity_trend=velocity_trend(r30, prior),
            unique_groups=len(groups),
            recent_preprints=[
                Preprint(
                    doi=p.get("doi") or "",
                    title=p.get("title") or "",
                    date=p.get("date") or "",
                    authors=p.get("authors") or "",
                    institution=p.get("author_corresponding_institution") or "",
                )
                for p in matching[:RECENT_ITEMS]
            ],
        )
