from __future__ import annotations

import re
from typing import Dict, Optional

from ..errors import InvalidGeneSymbol

# ----------------------------- Validation -------------------------------------

# HGNC symbols may carry digits and hyphens (HLA-A, NKX2-1, MT-ND1); unknown ones fail at resolution
_SYMBOL_RE = re.compile(r"^[A-Z0-9][A-Z0-9\-]{0,19}$")

def normalize_gene_symbol(symbol: Optional[str]) -> str:
    return str(symbol or "").strip().upper()

def is_valid_gene_symbol(value: Optional[str]) -> bool:
    return bool(_SYMBOL_RE.match(normalize_gene_symbol(value)))

# ---------------------- Normalization & Mapping -------------------------------

# common shorthand -> HGNC symbol
_ALIAS_GENE_MAP: Dict[str, str] = {
    "HER2": "ERBB2",
    "NEU": "ERBB2",
    "P53": "TP53",
    "RAS": "KRAS",
    "AKT": "AKT1",
    "RAF": "BRAF",
    "MEK": "MAP2K1",
    "ERK": "MAPK1",
    "JAK": "JAK2",
    "STAT": "STAT3",
    "PD1": "PDCD1",
    "PD-1": "PDCD1",
    "PDL1": "CD274",
    "PD-L1": "CD274",
    "PARP": "PARP1",
    "CB1": "CNR1",
    "CB-1": "CNR1",
    "TGFR2": "TGFBR2",
}

def resolve_gene_alias(value: Optional[str]) -> str:
    up = normalize_gene_symbol(value)
    return _ALIAS_GENE_MAP.get(up, up)

def require_gene_symbol(value: Optional[str]) -> str:
    """Alias-resolve and validate; raises InvalidGeneSymbol on junk input."""
    sym = resolve_gene_alias(value)
    if not _SYMBOL_RE.match(sym):
        raise InvalidGeneSymbol(str(value or ""))
    return sym
