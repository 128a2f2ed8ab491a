# targetscope/scoring/genetic_evidence.py
"""Genetic support for the target's disease links (Open Targets)."""
from __future__ import annotations

from typing import Optional

from ..models import DimensionScore, OpenTargetsData
from .common import component, dimension_score, linear_scale, no_data

DIMENSION = "geneticEvidence"


def constraint_tier(association_count: int) -> int:
    if association_count > 20:
        return 15
    if association_count > 10:
        return 10
    if association_count > 3:
        return 7
    return 3


def score_genetic_evidence(data: Optional[OpenTargetsData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    top = data.top_disease_associations
    count = data.disease_association_count
    top_score = top[0].score if top else 0.0
    diversity = max((a.datasource_diversity for a in top), default=0)

    has_sm = any(t.modality == "SM" and t.value for t in data.tractability)
    has_ab = any(t.modality == "AB" and t.value for t in data.tractability)
    if has_sm:
        tract, tract_desc = 15, "Small molecule tractable"
    elif has_ab:
        tract, tract_desc = 10, "Antibody tractable"
    elif data.tractability:
        tract, tract_desc = 5, "Limited tractability data"
    else:
        tract, tract_desc = 0, "Limited tractability data"

    components = [
        component("Disease Association Count", linear_scale(count, 50, 25), 25, f"{count} associations (cap: 50)"),
        component("Top Association Score", top_score * 25, 25, f"Best score: {top_score:.2f}"),
        component("Datasource Diversity", linear_scale(diversity, 12, 20), 20,
                  f"Up to {diversity} independent evidence sources (cap: 12)"),
        component("Tractability Bucket", tract, 15, tract_desc),
        component("Genetic Constraint", constraint_tier(count), 15, "Based on association breadth"),
    ]
    return dimension_score(DIMENSION, components, f"{count} disease associations across multiple evidence sources.")
