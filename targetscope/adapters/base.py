# targetscope/adapters/base.py
from __future__ import annotations

import logging
import math
import time
from typing import Any, Generic, Hashable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from ..models import ServiceResult, TargetQuery
from ..utils.cache import TTLCache
from ..utils.http import RequestClient
from ..utils.validation import soft_validate

R = TypeVar("R", bound=BaseModel)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"{exc.request.method} {exc.request.url} -> {exc.response.status_code}"
    return str(exc) or exc.__class__.__name__


def to_float(value: Any) -> Optional[float]:
    """Upstream numbers arrive as numbers, numeric strings or null."""
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(out) else out


def to_int(value: Any, default: int = 0) -> int:
    f = to_float(value)
    return default if f is None else int(f)


class SourceAdapter(Generic[R]):
    """One upstream provider: cache lookup, collect, wrap in a ServiceResult.

    Subclasses set ``key``, ``label`` and ``record_model`` and implement
    ``collect``. ``fetch`` never raises; anything ``collect`` throws ends up
    as a failed envelope.
    """

    key: str = ""
    label: str = ""
    record_model: Type[R]

    def __init__(self, client: RequestClient, cache: TTLCache):
        self.client = client
        self.cache = cache
        self.log = logging.getLogger(f"targetscope.adapters.{self.key}")

    @property
    def envelope_type(self) -> Type[ServiceResult[R]]:
        return ServiceResult[self.record_model]

    def cache_id(self, target: TargetQuery) -> str:
        return target.symbol

    async def collect(self, target: TargetQuery, notes: List[str]) -> R:
        raise NotImplementedError

    async def fetch(self, target: TargetQuery) -> ServiceResult[R]:
        started = time.monotonic()
        ck = (self.key, self.cache_id(target))
        hit = self.cache.get(ck)
        if hit is not None:
            return self.envelope_type.ok(self.label, hit, started, cached=True)

        notes: List[str] = []
        try:
            record = await self.collect(target, notes)
        except Exception as e:  # noqa: BLE001
            msg = error_message(e)
            self.log.warning("%s failed for %s after %.0f ms: %s",
                             self.label, target.symbol, (time.monotonic() - started) * 1000, msg)
            return self.envelope_type.failed(self.label, msg, started, diagnostics=notes)

        self.cache.set(ck, record)
        return self.envelope_type.ok(self.label, record, started, diagnostics=notes)

    # ----------------------------------------------------------------------
    # helpers for subclasses
    # ----------------------------------------------------------------------
    def validate(self, schema: Type[BaseModel], payload: Any, what: str, notes: List[str]) -> Any:
        payload, issues = soft_validate(schema, payload, what)
        for issue in issues:
            self.log.warning("schema drift: %s", issue)
        notes.extend(issues)
        return payload

    def degraded(self, what: str, exc: BaseException, notes: List[str]) -> None:
        msg = f"{what} unavailable: {error_message(exc)}"
        self.log.warning("%s: %s", self.label, msg)
        notes.append(msg)

    def cached(self, key: Hashable) -> Any:
        return self.cache.get(key)

    def remember(self, key: Hashable, value: Any) -> None:
        self.cache.set(key, value)
