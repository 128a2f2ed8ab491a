# targetscope/scoring/structural_readiness.py
from __future__ import annotations

from typing import Optional

from ..models import AlphaFoldData, DimensionScore
from .common import component, dimension_score, linear_scale, no_data

DIMENSION = "structuralReadiness"


def resolution_tier(best_resolution: Optional[float]) -> int:
    """< 2.0 Å supports ligand placement, < 3.0 Å docking; worse or unknown gets the floor."""
    if best_resolution is None:
        return 5
    if best_resolution < 2.0:
        return 20
    if best_resolution < 3.0:
        return 12
    return 5


def score_structural_readiness(data: Optional[AlphaFoldData]) -> DimensionScore:
    if data is None:
        return no_data(DIMENSION)

    res = data.best_resolution
    res_text = f"{res:.1f}Å" if res is not None else "N/A"
    components = [
        component("Experimental Structures", linear_scale(data.pdb_count, 20, 30), 30,
                  f"{data.pdb_count} PDB entries (cap: 20)"),
        component("AlphaFold Confidence", data.avg_plddt / 100 * 25, 25, f"pLDDT: {data.avg_plddt:.1f}"),
        component("Ligand-Bound Structures", linear_scale(data.ligand_bound_count, 10, 25), 25,
                  f"~{data.ligand_bound_count} ligand-bound (cap: 10)"),
        component("Resolution Quality", resolution_tier(res), 20,
                  f"Best: {res_text}" if res is not None else "No structures"),
    ]
    af = "AlphaFold available" if data.has_alphafold else "no AlphaFold"
    return dimension_score(
        DIMENSION, components,
        f"{data.pdb_count} structures, {af}, best resolution: {res_text}.",
    )
