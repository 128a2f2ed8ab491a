# targetscope/adapters/chembl.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from ..clients.sources import source_headers, source_url
from ..models import (
    ChEMBLData,
    CompoundActivity,
    CompoundDetail,
    Mechanism,
    TargetQuery,
)
from ..utils.drug_likeness import assess_drug_likeness
from .base import SourceAdapter, to_float, to_int
from .schemas import ChEMBLActivitySearch, ChEMBLMechanismSearch, ChEMBLMolecule, ChEMBLTargetSearch

MAX_MECHANISMS = 50
MECHANISM_MOLECULES = 5
ACTIVITY_MOLECULES = 5
MAX_MOLECULES = 10


def _opt_int(v: Any) -> Optional[int]:
    f = to_float(v)
    return None if f is None else int(f)


class ChEMBLAdapter(SourceAdapter[ChEMBLData]):
    key = "chembl"
    label = "ChEMBL"
    record_model = ChEMBLData

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = await self.client.get_json(source_url("chembl", path), params=params, headers=source_headers("chembl"))
        return body or {}

    async def resolve_target(self, gene: str, notes: List[str]) -> Optional[str]:
        ck = ("chembl-resolve", gene)
        hit = self.cached(ck)
        if hit is not None:
            return hit
        raw = await self._get("/target/search.json", {"q": gene, "limit": 5})
        self.validate(ChEMBLTargetSearch, raw, "ChEMBL target search", notes)
        targets = [t for t in (raw.get("targets") or []) if isinstance(t, dict) and t.get("target_chembl_id")]
        if not targets:
            return None
        chosen = next(
            (t for t in targets if t.get("organism") == "Homo sapiens" and t.get("target_type") == "SINGLE PROTEIN"),
            targets[0],
        )
        tid = chosen["target_chembl_id"]
        self.remember(ck, tid)
        return tid

    def _activity_params(self, target_id: str, min_pchembl: int, limit: int) -> Dict[str, Any]:
        return {"target_chembl_id": target_id, "pchembl_value__gte": min_pchembl, "limit": limit}

    async def collect(self, target: TargetQuery, notes: List[str]) -> ChEMBLData:
        target_id = await self.resolve_target(target.symbol, notes)
        if not target_id:
            return ChEMBLData()

        mech_res, act6_res, act7_res, top_res = await asyncio.gather(
            self._get("/mechanism.json", {"target_chembl_id": target_id, "limit": 100}),
            self._get("/activity.json", self._activity_params(target_id, 6, 1)),
            self._get("/activity.json", self._activity_params(target_id, 7, 1)),
            self._get("/activity.json", self._activity_params(target_id, 7, 20)),
            return_exceptions=True,
        )
        # mechanisms carry phase + compound count; without them the record is meaningless
        if isinstance(mech_res, BaseException):
            raise mech_res
        self.validate(ChEMBLMechanismSearch, mech_res, "ChEMBL mechanisms", notes)
        mechanisms = [m for m in (mech_res.get("mechanisms") or []) if isinstance(m, dict) and m.get("molecule_chembl_id")]

        bioactivity_count = self._total_count(act6_res, "ChEMBL activities (pChEMBL >= 6)", notes)
        potent_count = self._total_count(act7_res, "ChEMBL activities (pChEMBL >= 7)", notes)

        raw_activities: List[Dict[str, Any]] = []
        if isinstance(top_res, BaseException):
            self.degraded("ChEMBL top activities", top_res, notes)
        else:
            self.validate(ChEMBLActivitySearch, top_res, "ChEMBL top activities", notes)
            raw_activities = [a for a in (top_res.get("activities") or []) if isinstance(a, dict) and a.get("molecule_chembl_id")]

        top_activities = []
        for a in raw_activities:
            p = to_float(a.get("pchembl_value"))
            if not p or p <= 0:
                continue
            top_activities.append(CompoundActivity(
                molecule_chembl_id=a["molecule_chembl_id"],
                pchembl_value=p,
                standard_type=a.get("standard_type"),
                standard_value=to_float(a.get("standard_value")) or None,
            ))

        mech_ids = list(dict.fromkeys(m["molecule_chembl_id"] for m in mechanisms))[:MECHANISM_MOLECULES]
        act_ids = [i for i in dict.fromkeys(a["molecule_chembl_id"] for a in raw_activities) if i not in mech_ids]
        molecule_ids = (mech_ids + act_ids[:ACTIVITY_MOLECULES])[:MAX_MOLECULES]

        best: Dict[str, CompoundActivity] = {}
        for act in top_activities:
            cur = best.get(act.molecule_chembl_id)
            if cur is None or act.pchembl_value > cur.pchembl_value:
                best[act.molecule_chembl_id] = act

        molecules = await asyncio.gather(
            *(self._get(f"/molecule/{mid}.json") for mid in molecule_ids),
            return_exceptions=True,
        )
        compounds: List[CompoundDetail] = []
        for mid, mol in zip(molecule_ids, molecules):
            if isinstance(mol, BaseException):
                self.degraded(f"ChEMBL molecule {mid}", mol, notes)
                continue
            self.validate(ChEMBLMolecule, mol, f"ChEMBL molecule {mid}", notes)
            compounds.append(self._compound(mol, best.get(mid)))
        compounds.sort(key=lambda c: (c.max_phase, c.pchembl_value or 0), reverse=True)

        return ChEMBLData(
            target_chembl_id=target_id,
            compound_count=len({m["molecule_chembl_id"] for m in mechanisms}),
            mechanisms=[
                Mechanism(
                    mechanism_of_action=m.get("mechanism_of_action") or "Unknown",
                    molecule_chembl_id=m["molecule_chembl_id"],
                    max_phase=to_float(m.get("max_phase")) or 0,
                    action_type=m.get("action_type") or "Unknown",
                )
                for m in mechanisms[:MAX_MECHANISMS]
            ],
            max_clinical_phase=max([0.0] + [to_float(m.get("max_phase")) or 0.0 for m in mechanisms]),
            bioactivity_count=bioactivity_count,
            potent_compound_count=potent_count,
            top_compounds=compounds,
            top_activities=top_activities,
        )

    def _total_count(self, res: Any, what: str, notes: List[str]) -> int:
        if isinstance(res, BaseException):
            self.degraded(what, res, notes)
            return 0
        return to_int((res.get("page_meta") or {}).get("total_count"))

    def _compound(self, mol: Dict[str, Any], activity: Optional[CompoundActivity]) -> CompoundDetail:
        mid = mol.get("molecule_chembl_id") or ""
        props = mol.get("molecule_properties") or {}
        smiles = (mol.get("molecule_structures") or {}).get("canonical_smiles")
        compound = CompoundDetail(
            chembl_id=mid,
            preferred_name=mol.get("pref_name"),
            molecule_type=mol.get("molecule_type") or "Unknown",
            max_phase=to_float(mol.get("max_phase")) or 0,
            smiles=smiles,
            molecular_weight=to_float(props.get("full_mwt")),
            alogp=to_float(props.get("alogp")),
            psa=to_float(props.get("psa")),
            hba=_opt_int(props.get("hba")),
            hbd=_opt_int(props.get("hbd")),
            num_ro5_violations=_opt_int(props.get("num_ro5_violations")),
            aromatic_rings=_opt_int(props.get("aromatic_rings")),
            rotatable_bonds=_opt_int(props.get("rtb")),
            structure_image_url=source_url("chembl", f"/image/{mid}.svg") if smiles and mid else "",
            pchembl_value=activity.pchembl_value if activity else None,
            activity_type=activity.standard_type if activity else None,
        )
        return compound.model_copy(update={"drug_likeness": assess_drug_likeness(compound)})
