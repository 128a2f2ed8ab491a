# targetscope/utils/cache.py
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from ..config import CACHE_TTL_SECONDS

# ----------------------------------------------------------------------------
# Minimal in-memory TTL cache
# ----------------------------------------------------------------------------

class TTLCache:
    """Per-process key -> value store with per-entry expiry.

    Expiry is checked lazily on read; there is no sweeper and no size bound.
    Concurrent writers to the same key are not serialized (last write wins),
    which is fine because every value is a recomputation of the same upstream
    data.
    """

    def __init__(self, default_ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = float(default_ttl)
        self._clock = clock
        self._store: Dict[Hashable, Tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        item = self._store.get(key)
        if item is None:
            return None
        expires, value = item
        if self._clock() >= expires:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else float(ttl)
        self._store[key] = (self._clock() + ttl, value)

    def has(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
