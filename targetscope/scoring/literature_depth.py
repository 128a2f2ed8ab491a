# targetscope/scoring/literature_depth.py
from __future__ import annotations

from typing import Optional

from ..models import DimensionScore, PubMedData
from .common import component, dimension_score, linear_scale, no_data

DIMENSION = "literatureDepth"

RECENCY_THRESHOLD = 0.10


def score_literature_depth(data: Optional[PubMedData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    total = data.total_publications
    ratio = data.recent_publications / total if total > 0 else 0.0
    components = [
        component("Total Publications", linear_scale(total, 5000, 25), 25, f"{total:,} papers (cap: 5,000)"),
        component("Recent Publications", linear_scale(data.recent_publications, 500, 25), 25,
                  f"{data.recent_publications:,} in last 2 years (cap: 500)"),
        component("Drug-Focused", linear_scale(data.drug_focused_publications, 1000, 20), 20,
                  f"{data.drug_focused_publications:,} drug/therapeutic papers (cap: 1,000)"),
        component("Review Articles", linear_scale(data.review_articles, 100, 15), 15,
                  f"{data.review_articles:,} reviews (cap: 100)"),
        component("Recency Ratio", 15 if ratio > RECENCY_THRESHOLD else 8, 15,
                  f"{ratio * 100:.1f}% recent (threshold: 10%)"),
    ]
    return dimension_score(
        DIMENSION, components,
        f"{total:,} publications, {data.recent_publications:,} recent, "
        f"{data.drug_focused_publications:,} drug-focused.",
    )
