# targetscope/adapters/clinical_trials.py
from __future__ import annotations

import asyncio
import datetime as dt
from collections import Counter
from typing import Any, Dict, List, Optional

from ..clients.sources import source_headers, source_url
from ..config import RECENT_WINDOW_DAYS
from ..models import ClinicalTrialsData, SponsorCount, TargetQuery, TrialStudy
from .base import SourceAdapter, to_int
from .schemas import CTStudiesResponse

PAGE_SIZE = 50
MAX_SPONSORS = 20

_PHASE_RANK = {
    "EARLY_PHASE1": 0,
    "PHASE1": 1,
    "PHASE2": 2,
    "PHASE3": 3,
    "PHASE4": 4,
}


def highest_phase(phases: Optional[List[str]]) -> str:
    """A study listing several phases (e.g. PHASE1/PHASE2) counts under the highest."""
    phases = [p for p in (phases or []) if p]
    if not phases:
        return "N/A"
    return max(phases, key=lambda p: _PHASE_RANK.get(p, -1))


class ClinicalTrialsAdapter(SourceAdapter[ClinicalTrialsData]):
    key = "clinicalTrials"
    label = "ClinicalTrials.gov"
    record_model = ClinicalTrialsData

    async def _studies(self, gene: str, **filters: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = {"query.term": gene, "countTotal": "true", "pageSize": PAGE_SIZE}
        params.update(filters)
        raw = await self.client.get_json(source_url("clinicaltrials", "/studies"), params=params,
                                         headers=source_headers("clinicaltrials"))
        return raw or {}

    async def collect(self, target: TargetQuery, notes: List[str]) -> ClinicalTrialsData:
        all_res, recruiting_res = await asyncio.gather(
            self._studies(target.symbol),
            self._studies(target.symbol, **{"filter.overallStatus": "RECRUITING"}),
            return_exceptions=True,
        )
        if isinstance(all_res, BaseException):
            raise all_res
        self.validate(CTStudiesResponse, all_res, "ClinicalTrials studies", notes)

        active = 0
        if isinstance(recruiting_res, BaseException):
            self.degraded("ClinicalTrials recruiting count", recruiting_res, notes)
        else:
            active = to_int(recruiting_res.get("totalCount"))

        cutoff = (dt.date.today() - dt.timedelta(days=RECENT_WINDOW_DAYS)).isoformat()
        by_phase: Counter = Counter()
        by_status: Counter = Counter()
        by_sponsor: Counter = Counter()
        recent = 0
        studies: List[TrialStudy] = []

        for s in all_res.get("studies") or []:
            study = self._study(s)
            by_phase[study.phase] += 1
            by_status[study.status] += 1
            by_sponsor[study.sponsor] += 1
            # dates are ISO ("2024-03" or "2024-03-15"), so string order is date order
            if study.start_date and study.start_date >= cutoff:
                recent += 1
            studies.append(study)

        # Counter.most_common keeps first-seen order among ties
        ranked = [SponsorCount(sponsor=name, count=n) for name, n in by_sponsor.most_common()]
        return ClinicalTrialsData(
            total_trials=to_int(all_res.get("totalCount"), len(studies)),
            trials_by_phase=dict(by_phase),
            trials_by_status=dict(by_status),
            active_trials=active,
            sponsors=[s.sponsor for s in ranked[:MAX_SPONSORS]],
            sponsor_trial_counts=ranked,
            recent_trials=recent,
            studies=studies,
        )

    def _study(self, s: Dict[str, Any]) -> TrialStudy:
        proto = s.get("protocolSection") or {}
        ident = proto.get("identificationModule") or {}
        design = proto.get("designModule") or {}
        status = proto.get("statusModule") or {}
        interventions = [
            i.get("name") or i.get("type") or ""
            for i in ((proto.get("armsInterventionsModule") or {}).get("interventions") or [])
        ]
        enrollment = (design.get("enrollmentInfo") or {}).get("count")
        return TrialStudy(
            nct_id=ident.get("nctId") or "",
            title=ident.get("briefTitle") or "",
            phase=highest_phase(design.get("phases")),
            status=status.get("overallStatus") or "Unknown",
            sponsor=(ident.get("organization") or {}).get("fullName") or "Unknown",
            start_date=(status.get("startDateStruct") or {}).get("date") or "",
            enrollment=to_int(enrollment) if enrollment is not None else None,
            conditions=list((proto.get("conditionsModule") or {}).get("conditions") or []),
            interventions=[x for x in interventions if x],
        )
