# targetscope/clients/sources.py
from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import httpx

from ..config import USER_AGENT

# ------------------------------------------------------------------------------------
# Model
# ------------------------------------------------------------------------------------
@dataclass(frozen=True)
class Source:
    name: str
    base_url: str
    ping_path: str = "/"
    ping_method: str = "GET"
    default_headers: Dict[str, str] = field(default_factory=dict)


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _json_env(name: str) -> Dict[str, str]:
    raw = os.getenv(name)
    if not raw:
        return {}
    try:
        val = json.loads(raw)
    except ValueError:
        return {}
    return {str(k): str(v) for k, v in val.items()} if isinstance(val, dict) else {}


def _join_url(base: str, path: str) -> str:
    if not base:
        return path
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path:
        return base
    if base.endswith("/") and path.startswith("/"):
        return f"{base}{path[1:]}"
    if not base.endswith("/") and not path.startswith("/"):
        return f"{base}/{path}"
    return f"{base}{path}"


def _make_headers(src: Source) -> Dict[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
        **src.default_headers,
    }


def _source(name: str, env_prefix: str, default_base: str, ping_path: str = "/", **kw: Any) -> Source:
    headers = dict(kw.pop("default_headers", {}))
    headers.update(_json_env(f"{env_prefix}_EXTRA_HEADERS"))
    return Source(
        name=name,
        base_url=_env(f"{env_prefix}_BASE_URL", default_base).rstrip("/"),
        ping_path=_env(f"{env_prefix}_PING_PATH", ping_path),
        default_headers=headers,
        **kw,
    )


# ------------------------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------------------------
SOURCES: Dict[str, Source] = {
    "opentargets": _source(
        "opentargets", "OPENTARGETS",
        "https://api.platform.opentargets.org/api/v4/graphql",
        ping_path="",
        ping_method="POST",
    ),
    "chembl": _source("chembl", "CHEMBL", "https://www.ebi.ac.uk/chembl/api/data", "/status.json"),
    "pubmed": _source("pubmed", "PUBMED", "https://eutils.ncbi.nlm.nih.gov/entrez/eutils", "/einfo.fcgi?retmode=json"),
    "clinicaltrials": _source("clinicaltrials", "CLINICALTRIALS", "https://clinicaltrials.gov/api/v2", "/version"),
    "biorxiv": _source("biorxiv", "BIORXIV", "https://api.biorxiv.org", "/details/biorxiv/2024-01-01/2024-01-01/0"),
    "alphafold": _source("alphafold", "ALPHAFOLD", "https://alphafold.ebi.ac.uk/api", "/prediction/P00533"),
    "rcsb": _source("rcsb", "RCSB_SEARCH", "https://search.rcsb.org/rcsbsearch/v2/query", ping_path=""),
    "uniprot": _source("uniprot", "UNIPROT", "https://rest.uniprot.org/uniprotkb", "/P00533.json"),
    "ensembl": _source(
        "ensembl", "ENSEMBL", "https://rest.ensembl.org", "/info/ping",
        default_headers={"Content-Type": "application/json"},
    ),
}


def get_source(name: str) -> Source:
    return SOURCES[name]


def iter_sources() -> Iterable[Source]:
    return SOURCES.values()


def source_url(name: str, path: str = "") -> str:
    return _join_url(get_source(name).base_url, path)


def source_headers(name: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    hdrs = _make_headers(get_source(name))
    if extra:
        hdrs.update(extra)
    return hdrs


# ------------------------------------------------------------------------------------
# Health pings
# ------------------------------------------------------------------------------------
_PING_GRAPHQL = {"query": "{ meta { apiVersion { x y z } } }"}


async def ping_source(http: httpx.AsyncClient, src: Source, *, timeout: float = 3.0) -> Dict[str, Any]:
    url = _join_url(src.base_url, src.ping_path)
    try:
        if src.ping_method == "POST":
            r = await http.post(url, json=_PING_GRAPHQL, headers=_make_headers(src), timeout=timeout)
        else:
            r = await http.get(url, headers=_make_headers(src), timeout=timeout)
    except httpx.HTTPError as e:
        return {"ok": False, "error": str(e) or e.__class__.__name__, "url": url}
    # the search API answers a bare GET/POST without a query with 4xx; reachable is enough
    ok = r.status_code < 500 if src.name == "rcsb" else 200 <= r.status_code < 300
    return {"ok": ok, "status_code": r.status_code, "url": url}


async def ping_all(http: httpx.AsyncClient, *, per_source_timeout: float = 3.0) -> Dict[str, Dict[str, Any]]:
    configured = [src for src in iter_sources() if src.base_url]
    results = await asyncio.gather(*(ping_source(http, src, timeout=per_source_timeout) for src in configured))
    out: Dict[str, Dict[str, Any]] = {src.name: res for src, res in zip(configured, results)}
    for src in iter_sources():
        if not src.base_url:
            out[src.name] = {"ok": False, "error": "base_url not configured"}
    return out
