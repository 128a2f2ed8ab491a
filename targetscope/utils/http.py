# targetscope/utils/http.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..config import HTTP_BACKOFF, HTTP_RETRIES, REQUEST_TIMEOUT_SECONDS, USER_AGENT

log = logging.getLogger("targetscope.http")

DEFAULT_TIMEOUT = httpx.Timeout(REQUEST_TIMEOUT_SECONDS, connect=4.0)


def default_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    base = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if extra:
        base.update(extra)
    return base


def new_async_client(**kwargs: Any) -> httpx.AsyncClient:
    """Shared AsyncClient with the outbound UA; callers own closing it."""
    kwargs.setdefault("timeout", DEFAULT_TIMEOUT)
    kwargs.setdefault("headers", default_headers())
    kwargs.setdefault("follow_redirects", True)
    return httpx.AsyncClient(**kwargs)


class RequestClient:
    """Timeout + bounded-retry wrapper around a shared httpx.AsyncClient.

    Only 5xx responses and transport errors (connect/read/timeout) are
    retried. A 4xx response is handed back on the first attempt.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        retries: int = HTTP_RETRIES,
        backoff: float = HTTP_BACKOFF,
    ):
        self.http = http
        self.timeout = float(timeout)
        self.retries = int(retries)
        self.backoff = float(backoff)

    async def request_with_timeout(
        self,
        method: str,
        url: str,
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        limit = self.timeout if timeout is None else float(timeout)
        try:
            return await asyncio.wait_for(self.http.request(method, url, **kwargs), timeout=limit)
        except asyncio.TimeoutError:
            raise httpx.TimeoutException(
                f"{method} {url} timed out after {limit:g}s",
                request=httpx.Request(method, url),
            ) from None

    async def request_with_retry(
        self,
        method: str,
        url: str,
        *,
        retries: Optional[int] = None,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        retries = self.retries if retries is None else max(0, int(retries))
        last_exc: Optional[Exception] = None
        for attempt in range(retries + 1):
            try:
                r = await self.request_with_timeout(method, url, timeout=timeout, **kwargs)
                if r.status_code >= 500:
                    # retry 5xx
                    raise httpx.HTTPStatusError(f"server error {r.status_code}", request=r.request, response=r)
                return r
            except (httpx.TransportError, httpx.HTTPStatusError) as e:
                last_exc = e
                if attempt >= retries:
                    break
                log.debug("retrying %s %s after attempt %d: %s", method, url, attempt + 1, e)
                await asyncio.sleep(self.backoff * (2 ** attempt))
        assert last_exc is not None
        raise last_exc

    async def _json(self, method: str, url: str, **kwargs: Any) -> Any:
        r = await self.request_with_retry(method, url, **kwargs)
        if r.status_code >= 400:
            raise httpx.HTTPStatusError(f"{method} {url} -> {r.status_code}", request=r.request, response=r)
        if not r.content:
            return None
        return r.json()

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        return await self._json("GET", url, params=params, headers=headers)

    async def post_json(
        self,
        url: str,
        payload: Any,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        return await self._json("POST", url, json=payload, headers=headers)
