# targetscope/adapters/alphafold.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..clients.sources import source_headers, source_url
from ..errors import UpstreamError
from ..models import AlphaFoldData, TargetQuery
from .base import SourceAdapter, error_message, to_float, to_int
from .schemas import AlphaFoldPrediction, RCSBSearchResponse

LIGAND_ROWS = 20
FULLTEXT_ROWS = 50
MAX_PDB_IDS = 20
LIGAND_FRACTION = 0.3


def estimate_best_resolution(total_structures: int) -> Optional[float]:
    """Resolution tier guessed from structure count; None when there are none."""
    if total_structures > 10:
        return 1.8
    if total_structures > 5:
        return 2.2
    if total_structures > 0:
        return 2.8
    return None


def _ligand_query(uniprot_id: str) -> Dict[str, Any]:
    return {
        "query": {
            "type": "group",
            "logical_operator": "and",
            "nodes": [
                {"type": "terminal", "service": "text", "parameters": {
                    "attribute": "rcsb_polymer_entity_container_identifiers.reference_sequence_identifiers.database_accession",
                    "operator": "in",
                    "value": [uniprot_id],
                }},
                {"type": "terminal", "service": "text", "parameters": {
                    "attribute": "rcsb_entry_info.nonpolymer_entity_count",
                    "operator": "greater",
                    "value": 0,
                }},
            ],
        },
        "return_type": "entry",
        "request_options": {"paginate": {"start": 0, "rows": LIGAND_ROWS}, "scoring_strategy": "combined"},
    }


def _fulltext_query(gene: str) -> Dict[str, Any]:
    return {
        "query": {"type": "terminal", "service": "full_text", "parameters": {"value": gene}},
        "return_type": "entry",
        "request_options": {"paginate": {"start": 0, "rows": FULLTEXT_ROWS}, "scoring_strategy": "combined"},
    }


class AlphaFoldAdapter(SourceAdapter[AlphaFoldData]):
    key = "alphafold"
    label = "AlphaFold/PDB"
    record_model = AlphaFoldData

    # ------------------------------------------------------------------ UniProt
    async def resolve_uniprot(self, gene: str) -> Optional[str]:
        ck = ("uniprot-resolve", gene)
        hit = self.cached(ck)
        if hit is not None:
            return hit
        raw = await self.client.get_json(
            source_url("uniprot", "/search"),
            params={
                "query": f"gene_exact:{gene} AND organism_id:9606 AND reviewed:true",
                "format": "json",
                "size": 1,
            },
            headers=source_headers("uniprot"),
        )
        results = (raw or {}).get("results") or []
        acc = results[0].get("primaryAccession") if results and isinstance(results[0], dict) else None
        if acc:
            self.remember(ck, acc)
        return acc

    # ---------------------------------------------------------------------- PDB
    async def search_pdb(self, body: Dict[str, Any], notes: List[str]) -> Tuple[List[str], int]:
        r = await self.client.request_with_retry(
            "POST", source_url("rcsb"), json=body,
            headers=source_headers("rcsb", {"Content-Type": "application/json"}),
        )
        if r.status_code == 204 or not r.content:
            return [], 0
        if r.status_code >= 400:
            raise httpx.HTTPStatusError(f"PDB search -> {r.status_code}", request=r.request, response=r)
        try:
            raw = r.json()
        except ValueError:
            notes.append("PDB search: response was not JSON")
            return [], 0
        self.validate(RCSBSearchResponse, raw, "PDB search", notes)
        ids = [x["identifier"] for x in (raw.get("result_set") or []) if isinstance(x, dict) and x.get("identifier")]
        return ids, to_int(raw.get("total_count"), len(ids))

    async def structures(self, gene: str, uniprot_id: Optional[str], notes: List[str]) -> Tuple[List[str], int, List[str]]:
        """(merged ids, total count, ligand-bound ids); ligand-bound entries come first."""
        async def ligand() -> Tuple[List[str], int]:
            if not uniprot_id:
                return [], 0
            return await self.search_pdb(_ligand_query(uniprot_id), notes)

        lig_res, gen_res = await asyncio.gather(
            ligand(),
            self.search_pdb(_fulltext_query(gene), notes),
            return_exceptions=True,
        )
        ligand_ids: List[str] = []
        if isinstance(lig_res, BaseException):
            self.degraded("PDB ligand-bound search", lig_res, notes)
        else:
            ligand_ids = lig_res[0]
        if isinstance(gen_res, BaseException):
            raise gen_res
        general_ids, general_total = gen_res

        merged = list(dict.fromkeys(ligand_ids + general_ids))
        return merged, max(general_total, len(merged)), ligand_ids

    # ---------------------------------------------------------------- AlphaFold
    async def plddt(self, uniprot_id: str, notes: List[str]) -> Optional[float]:
        try:
            raw = await self.client.get_json(source_url("alphafold", f"/prediction/{uniprot_id}"),
                                             headers=source_headers("alphafold"))
        except (httpx.HTTPError, ValueError) as e:
            notes.append(f"AlphaFold prediction unavailable: {error_message(e)}")
            return None
        entry = raw[0] if isinstance(raw, list) and raw else raw
        if not isinstance(entry, dict):
            return None
        self.validate(AlphaFoldPrediction, entry, "AlphaFold prediction", notes)
        value = to_float(entry.get("globalMetricValue"))
        return value if value is not None else to_float(entry.get("confidenceAvgLocalScore"))

    async def collect(self, target: TargetQuery, notes: List[str]) -> AlphaFoldData:
        uniprot_id: Optional[str] = None
        uniprot_failed = False
        try:
            uniprot_id = await self.resolve_uniprot(target.symbol)
        except httpx.HTTPError as e:
            uniprot_failed = True
            self.degraded("UniProt accession", e, notes)

        async def confidence() -> Optional[float]:
            return await self.plddt(uniprot_id, notes) if uniprot_id else None

        pdb_res, plddt = await asyncio.gather(
            self.structures(target.symbol, uniprot_id, notes),
            confidence(),
            return_exceptions=True,
        )
        if isinstance(plddt, BaseException):
            self.degraded("AlphaFold prediction", plddt, notes)
            plddt = None
        if isinstance(pdb_res, BaseException):
            if uniprot_failed:
                # neither identity nor structures could be looked up
                raise UpstreamError(f"Structure lookup failed: {error_message(pdb_res)}")
            self.degraded("PDB structure search", pdb_res, notes)
            pdb_res = ([], 0, [])

        pdb_ids, total, ligand_ids = pdb_res
        estimated = ["best_resolution"]
        if ligand_ids:
            ligand_bound = len(ligand_ids)
        else:
            ligand_bound = int(total * LIGAND_FRACTION + 0.5)
            estimated.append("ligand_bound_count")

        avg = plddt or 0.0
        return AlphaFoldData(
            uniprot_id=uniprot_id or "",
            pdb_count=total,
            avg_plddt=avg,
            ligand_bound_count=ligand_bound,
            best_resolution=estimate_best_resolution(total),
            pdb_ids=pdb_ids[:MAX_PDB_IDS],
            has_alphafold=avg > 0,
            estimated_fields=estimated,
        )
