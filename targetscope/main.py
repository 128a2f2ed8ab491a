# targetscope/main.py
from __future__ import annotations

import logging
import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .clients.sources import ping_all
from .config import (
    APP_TITLE,
    APP_VERSION,
    CACHE_TTL_SECONDS,
    HTTP_BACKOFF,
    HTTP_RETRIES,
    LOG_LEVEL,
    PROFILE_DEADLINE_S,
    REQUEST_TIMEOUT_SECONDS,
    ROOT_PATH,
)
from .profiler import TargetProfiler
from .routers.profile_router import router as profile_router
from .utils.cache import TTLCache
from .utils.http import RequestClient, new_async_client

# ------------------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger("targetscope.main")

# ------------------------------------------------------------------------------
# Lifespan: one shared AsyncClient, one cache, one profiler per process
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    http = new_async_client()
    cache = TTLCache(CACHE_TTL_SECONDS)
    client = RequestClient(http, timeout=REQUEST_TIMEOUT_SECONDS, retries=HTTP_RETRIES, backoff=HTTP_BACKOFF)
    app.state.http = http
    app.state.cache = cache
    app.state.profiler = TargetProfiler(client, cache, deadline=PROFILE_DEADLINE_S)
    log.info("TargetScope %s up (timeout=%gs retries=%d ttl=%gs deadline=%gs)",
             APP_VERSION, REQUEST_TIMEOUT_SECONDS, HTTP_RETRIES, CACHE_TTL_SECONDS, PROFILE_DEADLINE_S)
    try:
        yield
    finally:
        await http.aclose()

# ------------------------------------------------------------------------------
# FastAPI app
# ------------------------------------------------------------------------------
app = FastAPI(
    title=APP_TITLE,
    version=APP_VERSION,
    root_path=ROOT_PATH,
    lifespan=lifespan,
)

# CORS (default permissive; tighten in prod with CORS_ALLOW_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profile_router, prefix="/v1")

# ------------------------------------------------------------------------------
# Liveness and health routes
# ------------------------------------------------------------------------------
@app.get("/healthz")
@app.get("/v1/healthz")
async def healthz():
    return {"ok": True, "version": APP_VERSION}

@app.get("/livez")
@app.get("/v1/livez")
async def livez():
    return {"ok": True}

@app.get("/readyz")
@app.get("/v1/readyz")
async def readyz(request: Request):
    upstream = await ping_all(request.app.state.http)
    return {
        "ok": all(v.get("ok") for v in upstream.values()),
        "upstream": upstream,
        "env": {
            "CACHE_TTL_SECONDS": CACHE_TTL_SECONDS,
            "PROFILE_DEADLINE_S": PROFILE_DEADLINE_S,
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("targetscope.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
