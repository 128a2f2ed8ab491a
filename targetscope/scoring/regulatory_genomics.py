# targetscope/scoring/regulatory_genomics.py
from __future__ import annotations

from typing import Optional

from ..models import AlphaGenomeData, DimensionScore
from .common import component, dimension_score, linear_scale, no_data, round_half_up

DIMENSION = "regulatoryGenomics"


def score_regulatory_genomics(data: Optional[AlphaGenomeData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    core = data.enhancer_count + data.promoter_count
    breadth = round_half_up(data.expression_breadth / 100 * 15 * 10) / 10
    components = [
        component("Regulatory Features", linear_scale(data.regulatory_feature_count, 50, 25), 25,
                  f"{data.regulatory_feature_count} features in ±50kb (cap: 50)"),
        component("Enhancer/Promoter Landscape", linear_scale(core, 15, 25), 25,
                  f"{data.enhancer_count} enhancers + {data.promoter_count} promoters (cap: 15)"),
        component("Constrained Elements", linear_scale(data.constrained_element_count, 30, 20), 20,
                  f"{data.constrained_element_count} conserved elements (cap: 30)"),
        component("Expression Breadth", breadth, 15, f"Estimated breadth: {data.expression_breadth}%"),
        component("Transcript Complexity", linear_scale(data.transcript_count, 10, 15), 15,
                  f"{data.transcript_count} transcripts (cap: 10)"),
    ]
    return dimension_score(
        DIMENSION, components,
        f"{data.regulatory_feature_count} regulatory features, {data.constrained_element_count} constrained elements, "
        f"complexity: {data.regulatory_complexity}.",
    )
