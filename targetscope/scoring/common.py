# targetscope/scoring/common.py
from __future__ import annotations

import math
from typing import Dict, List

from ..models import DimensionScore, ScoreComponent

DIMENSION_LABELS: Dict[str, str] = {
    "geneticEvidence": "Genetic Evidence",
    "chemicalTractability": "Chemical Tractability",
    "structuralReadiness": "Structural Readiness",
    "clinicalHistory": "Clinical History",
    "literatureDepth": "Literature Depth",
    "innovationSignal": "Innovation Signal",
    "regulatoryGenomics": "Regulatory Genomics",
}

NO_DATA_DESCRIPTIONS: Dict[str, str] = {
    "geneticEvidence": "No genetic evidence data available.",
    "chemicalTractability": "No chemical tractability data available.",
    "structuralReadiness": "No structural data available.",
    "clinicalHistory": "No clinical trial data available.",
    "literatureDepth": "No literature data available.",
    "innovationSignal": "No preprint data available.",
    "regulatoryGenomics": "No regulatory genomics data available.",
}


def round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; 0.5 must go up
    return int(math.floor(x + 0.5))


def linear_scale(value: float, cap: float, max_score: float) -> float:
    """min(value, cap) / cap * max_score; 0 for a non-positive cap or value."""
    if cap <= 0 or value <= 0:
        return 0.0
    if value >= cap:
        return float(max_score)
    return value / cap * max_score


def component(name: str, value: float, max_value: float, description: str) -> ScoreComponent:
    clamped = min(max(float(value), 0.0), float(max_value))
    return ScoreComponent(name=name, value=clamped, max_value=max_value, description=description)


def no_data(dimension: str) -> DimensionScore:
    return DimensionScore(
        dimension=dimension,
        label=DIMENSION_LABELS[dimension],
        score=0,
        components=[],
        description=NO_DATA_DESCRIPTIONS[dimension],
    )


def dimension_score(dimension: str, components: List[ScoreComponent], description: str) -> DimensionScore:
    total = round_half_up(sum(c.value for c in components))
    return DimensionScore(
        dimension=dimension,
        label=DIMENSION_LABELS[dimension],
        score=min(100, max(0, total)),
        components=components,
        description=description,
    )
