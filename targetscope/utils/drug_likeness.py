# targetscope/utils/drug_likeness.py
from __future__ import annotations

from typing import List

from ..models import CompoundDetail, DrugLikeness

# Lipinski rule-of-five limits
MAX_MW = 500
MAX_LOGP = 5
MAX_HBA = 10
MAX_HBD = 5

# Veber oral bioavailability limits
MAX_TPSA = 140
MAX_ROT_BONDS = 10


def _over(value, limit) -> bool:
    return value is not None and value > limit


def assess_drug_likeness(compound: CompoundDetail) -> DrugLikeness:
    """Lipinski + Veber check; missing properties count as passing."""
    flags: List[str] = []
    if _over(compound.molecular_weight, MAX_MW):
        flags.append("MW > 500")
    if _over(compound.alogp, MAX_LOGP):
        flags.append("LogP > 5")
    if _over(compound.hba, MAX_HBA):
        flags.append("HBA > 10")
    if _over(compound.hbd, MAX_HBD):
        flags.append("HBD > 5")
    violations = len(flags)

    veber_pass = True
    if compound.psa is not None and compound.psa >= MAX_TPSA:
        flags.append("TPSA >= 140")
        veber_pass = False
    if _over(compound.rotatable_bonds, MAX_ROT_BONDS):
        flags.append("RotBonds > 10")
        veber_pass = False

    score = 100 - 15 * violations - (0 if veber_pass else 10)
    return DrugLikeness(
        lipinski_violations=violations,
        lipinski_pass=violations <= 1,
        veber_pass=veber_pass,
        overall_score=max(0, score),
        flags=flags,
    )
