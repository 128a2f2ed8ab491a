# targetscope/config.py
from __future__ import annotations

import os

# ------------------------------------------------------------------------------
# Env helpers
# ------------------------------------------------------------------------------

def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default

def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default

def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)

# ------------------------------------------------------------------------------
# App surface
# ------------------------------------------------------------------------------
APP_TITLE = _env("APP_TITLE", "TargetScope: Target Validation Scoring")
APP_VERSION = _env("APP_VERSION", "0.6.0")
ROOT_PATH = _env("ROOT_PATH", "")
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

# ------------------------------------------------------------------------------
# HTTP policy
# ------------------------------------------------------------------------------
REQUEST_TIMEOUT_SECONDS: float = _float_env("REQUEST_TIMEOUT_SECONDS", 15.0)
HTTP_RETRIES: int = _int_env("HTTP_RETRIES", 1)
HTTP_BACKOFF: float = _float_env("HTTP_BACKOFF", 0.25)
USER_AGENT: str = _env("OUTBOUND_USER_AGENT", f"targetscope/{APP_VERSION}")

# ------------------------------------------------------------------------------
# Cache + build policy
# ------------------------------------------------------------------------------
CACHE_TTL_SECONDS: float = _float_env("CACHE_TTL_SECONDS", 5 * 60)
# 0 disables the overall deadline
PROFILE_DEADLINE_S: float = _float_env("PROFILE_DEADLINE_S", 60.0)

# Lookback windows (days)
RECENT_WINDOW_DAYS = 730
PREPRINT_WINDOW_DAYS = 90

NCBI_API_KEY: str = _env("NCBI_API_KEY", "")
