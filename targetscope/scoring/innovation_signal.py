# targetscope/scoring/innovation_signal.py
from __future__ import annotations

from typing import Optional

from ..models import BioRxivData, DimensionScore
from .common import component, dimension_score, linear_scale, no_data

DIMENSION = "innovationSignal"

VELOCITY_POINTS = {"increasing": 25, "stable": 15, "decreasing": 8}


def score_innovation_signal(data: Optional[BioRxivData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    components = [
        component("Preprints (90 days)", linear_scale(data.preprints_90d, 20, 35), 35,
                  f"{data.preprints_90d} preprints (cap: 20)"),
        component("Preprints (30 days)", linear_scale(data.preprints_30d, 8, 25), 25,
                  f"{data.preprints_30d} preprints (cap: 8)"),
        component("Velocity Trend", VELOCITY_POINTS[data.velocity_trend], 25, f"Trend: {data.velocity_trend}"),
        component("Novelty Indicators", linear_scale(data.unique_groups, 10, 15), 15,
                  f"{data.unique_groups} unique research groups (cap: 10)"),
    ]
    return dimension_score(
        DIMENSION, components,
        f"{data.preprints_90d} preprints in 90 days, trend: {data.velocity_trend}, {data.unique_groups} groups.",
    )
