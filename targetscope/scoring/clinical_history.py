# targetscope/scoring/clinical_history.py
from __future__ import annotations

from typing import Mapping, Optional

from ..models import ClinicalTrialsData, DimensionScore
from .common import component, dimension_score, linear_scale, no_data

DIMENSION = "clinicalHistory"

# highest phase present wins; both registry spellings are recognized
PHASE_FACTORS = (
    (("PHASE4", "Phase 4"), 1.0),
    (("PHASE3", "Phase 3"), 0.85),
    (("PHASE2", "Phase 2"), 0.60),
    (("PHASE1", "Phase 1", "EARLY_PHASE1"), 0.35),
)


def phase_factor(trials_by_phase: Mapping[str, int]) -> float:
    for keys, factor in PHASE_FACTORS:
        if any(trials_by_phase.get(k, 0) > 0 for k in keys):
            return factor
    return 0.0


def score_clinical_history(data: Optional[ClinicalTrialsData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    factor = phase_factor(data.trials_by_phase)
    sponsors = len(data.sponsors)
    recent = 15.0 if data.recent_trials > 5 else data.recent_trials / 5 * 15
    components = [
        component("Total Trials", linear_scale(data.total_trials, 100, 20), 20, f"{data.total_trials} trials (cap: 100)"),
        component("Phase Progression", factor * 30, 30, f"Highest phase factor: {factor:.2f}"),
        component("Active Trials", linear_scale(data.active_trials, 10, 20), 20, f"{data.active_trials} recruiting (cap: 10)"),
        component("Sponsor Diversity", linear_scale(sponsors, 15, 15), 15, f"{sponsors} unique sponsors (cap: 15)"),
        component("Recent Activity", recent, 15, f"{data.recent_trials} trials in last 2 years"),
    ]
    return dimension_score(
        DIMENSION, components,
        f"{data.total_trials} total trials, {data.active_trials} actively recruiting, {sponsors} sponsors.",
    )
