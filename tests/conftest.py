"""
Shared fixtures: an in-process fake of the upstream APIs.

Requests are routed on (host, path prefix, optional method, optional query
params) to a canned response, so no test touches the network.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from targetscope.utils.cache import TTLCache
from targetscope.utils.http import RequestClient

OT_HOST = "api.platform.opentargets.org"
CHEMBL_HOST = "www.ebi.ac.uk"
EUTILS_HOST = "eutils.ncbi.nlm.nih.gov"
CT_HOST = "clinicaltrials.gov"
BIORXIV_HOST = "api.biorxiv.org"
ALPHAFOLD_HOST = "alphafold.ebi.ac.uk"
RCSB_HOST = "search.rcsb.org"
UNIPROT_HOST = "rest.uniprot.org"
ENSEMBL_HOST = "rest.ensembl.org"


class FakeUpstream:
    """Callable handler for httpx.MockTransport.

    ``response`` may be a dict/list (200 JSON), an int (bare status), an
    httpx.Response, an exception class to raise, or a callable taking the
    request and returning any of those.
    """

    def __init__(self):
        self.routes: List[tuple] = []
        self.calls: List[httpx.Request] = []

    def add(
        self,
        host: str,
        path: str,
        response: Any,
        *,
        method: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
        body_contains: Optional[str] = None,
    ) -> "FakeUpstream":
        self.routes.append((host, path, method, params or {}, body_contains, response))
        return self

    def count(self, host: str, path: str = "") -> int:
        return sum(1 for r in self.calls if r.url.host == host and r.url.path.startswith(path))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        for host, path, method, params, body_contains, response in self.routes:
            if request.url.host != host or not request.url.path.startswith(path):
                continue
            if method and request.method != method:
                continue
            if any(request.url.params.get(k) != str(v) for k, v in params.items()):
                continue
            if body_contains and body_contains not in request.content.decode():
                continue
            return _render(response, request)
        return httpx.Response(404, json={"error": "no route"})


def _render(response: Any, request: httpx.Request) -> httpx.Response:
    if callable(response) and not isinstance(response, type):
        response = response(request)
    if isinstance(response, type) and issubclass(response, Exception):
        raise response("simulated failure", request=request)
    if isinstance(response, httpx.Response):
        return response
    if isinstance(response, int):
        return httpx.Response(response)
    return httpx.Response(200, json=response)


@pytest.fixture
def fake() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def cache() -> TTLCache:
    return TTLCache(300)


@pytest.fixture
def make_client(fake) -> Callable[..., RequestClient]:
    def factory(retries: int = 0, timeout: float = 5.0) -> RequestClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        return RequestClient(http, timeout=timeout, retries=retries, backoff=0)
    return factory


@pytest.fixture
def client(make_client) -> RequestClient:
    return make_client()


# ---------------------------------------------------------------------------
# Stub adapters for orchestration tests: real adapter classes with ``collect``
# (and, for Open Targets, ``resolve``/``search``) replaced.
# ---------------------------------------------------------------------------

def make_stub(cls, cache, *, record=None, exc=None, delay=0.0, resolved=None, candidates=()):
    calls = []

    class Stub(cls):
        async def collect(self, target, notes):
            calls.append(target)
            if delay:
                await asyncio.sleep(delay)
            if exc is not None:
                raise exc
            notes.append("stubbed")
            return record

        async def resolve(self, symbol):
            if isinstance(resolved, BaseException):
                raise resolved
            if delay:
                await asyncio.sleep(delay)
            return resolved

        async def search(self, query):
            return list(candidates)

    stub = Stub(None, cache)
    stub.calls = calls
    return stub
