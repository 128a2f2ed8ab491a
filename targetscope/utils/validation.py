"""
Soft response validation
========================

Upstream providers drift their schemas without notice. Failing hard on every
mismatch would throw away usable data, so validation here is advisory:

    payload, diagnostics = soft_validate(ChEMBLMechanismSearch, raw, "ChEMBL mechanisms")

The payload is always returned untouched. ``diagnostics`` is a (possibly
empty) list of short human-readable issues, capped at three, that callers may
log or attach to a result envelope. Nothing in here raises.
"""

from __future__ import annotations

from typing import Any, List, Tuple, Type

from pydantic import BaseModel, ValidationError

MAX_ISSUES = 3


def _fmt_issue(source: str, err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
    return f"{source}: {loc}: {err.get('msg', 'invalid')}"


def soft_validate(schema: Type[BaseModel], payload: Any, source: str) -> Tuple[Any, List[str]]:
    try:
        schema.model_validate(payload)
    except ValidationError as e:
        issues = e.errors()
        out = [_fmt_issue(source, err) for err in issues[:MAX_ISSUES]]
        if len(issues) > MAX_ISSUES:
            out.append(f"{source}: ... {len(issues) - MAX_ISSUES} more issue(s)")
        return payload, out
    return payload, []
