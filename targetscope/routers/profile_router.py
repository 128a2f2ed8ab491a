# targetscope/routers/profile_router.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import APP_VERSION
from ..errors import InvalidGeneSymbol, ProfileDeadlineExceeded, TargetNotFound, TargetScopeError
from ..orchestrator import SOURCE_RECORDS
from ..profiler import TargetProfiler

log = logging.getLogger("targetscope.router")

router = APIRouter(prefix="/targetscope", tags=["TargetScope"])


class AnalyzeRequest(BaseModel):
    gene: str = ""


def get_profiler(request: Request) -> TargetProfiler:
    return request.app.state.profiler


def _error(status: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": msg})


@router.post("/analyze")
async def analyze(
    body: AnalyzeRequest = Body(...),
    profiler: TargetProfiler = Depends(get_profiler),
):
    try:
        profile = await profiler.build_target_profile(body.gene)
    except InvalidGeneSymbol as e:
        return _error(400, str(e))
    except TargetNotFound as e:
        return _error(404, str(e))
    except ProfileDeadlineExceeded as e:
        return _error(504, str(e))
    except TargetScopeError as e:
        log.error("analysis of %r failed: %s", body.gene, e)
        return _error(500, str(e))
    except Exception as e:  # noqa: BLE001
        log.exception("analysis of %r failed", body.gene)
        return _error(500, str(e) or "Analysis failed")
    return JSONResponse(content=profile.model_dump(mode="json", by_alias=True))


@router.get("/search")
async def search(
    q: str = Query("", description="Symbol or name fragment"),
    profiler: TargetProfiler = Depends(get_profiler),
) -> Dict[str, Any]:
    try:
        results = await profiler.search_candidates(q)
    except Exception as e:  # noqa: BLE001
        log.warning("search %r failed: %s", q, e)
        return {"results": []}
    return {"results": [c.model_dump(by_alias=True) for c in results]}


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
        "version": APP_VERSION,
        "services": [label for label, _ in SOURCE_RECORDS.values()],
    }
