"""Shared helpers for TargetScope.

- cache:         in-memory TTL cache injected into adapters and the profiler
- http:          RequestClient (timeout + bounded retry over httpx)
- validation:    soft pydantic validation that reports instead of raising
- ids:           gene symbol validation + alias normalization
- drug_likeness: Lipinski / Veber assessment of compound records
"""

from .cache import TTLCache
from .http import RequestClient, new_async_client
from .ids import normalize_gene_symbol, require_gene_symbol, resolve_gene_alias
from .validation import soft_validate

__all__ = [
    "TTLCache",
    "RequestClient", "new_async_client",
    "normalize_gene_symbol", "require_gene_symbol", "resolve_gene_alias",
    "soft_validate",
]
