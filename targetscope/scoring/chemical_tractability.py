# targetscope/scoring/chemical_tractability.py
from __future__ import annotations

from typing import Optional

from ..models import ChEMBLData, DimensionScore
from .common import component, dimension_score, linear_scale, no_data

DIMENSION = "chemicalTractability"


def _phase(p: float) -> str:
    return f"{p:g}"


def score_chemical_tractability(data: Optional[ChEMBLData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    mechanisms = len({m.mechanism_of_action for m in data.mechanisms})
    phase = data.max_clinical_phase
    components = [
        component("Max Clinical Phase", phase / 4 * 30, 30, f"Phase {_phase(phase)} reached"),
        component("Compound Count", linear_scale(data.compound_count, 100, 20), 20,
                  f"{data.compound_count} unique compounds (cap: 100)"),
        component("Mechanism Diversity", linear_scale(mechanisms, 5, 15), 15,
                  f"{mechanisms} distinct mechanisms (cap: 5)"),
        component("Bioactivity Density", linear_scale(data.bioactivity_count, 500, 20), 20,
                  f"{data.bioactivity_count} activities with pChEMBL >= 6 (cap: 500)"),
        component("Potent Compounds", linear_scale(data.potent_compound_count, 20, 15), 15,
                  f"{data.potent_compound_count} with pChEMBL >= 7 (cap: 20)"),
    ]
    return dimension_score(
        DIMENSION, components,
        f"{data.compound_count} compounds, max Phase {_phase(phase)}, {mechanisms} mechanisms.",
    )
