"""Environment-variable configuration shared by the runner and the REPL."""

from __future__ import annotations

import os as _os
from typing import Optional

PY_TRACE_VAR = "LOX_DEBUG_PY_TRACE"
RECURSION_LIMIT_VAR = "LOX_RECURSION_LIMIT"

_TRUTHY = ("1", "true", "yes", "on")


def envvar_value_by_name(name: str) -> Optional[str]:
    """Get the current value of an env var by name, or None if missing."""
    return _os.environ.get(name)


def debug_py_trace_enabled() -> bool:
    value = envvar_value_by_name(PY_TRACE_VAR)
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[PY_TRACE_VAR] = "1"
    else:
        _os.environ.pop(PY_TRACE_VAR, None)


def recursion_limit() -> Optional[int]:
    """Requested Python recursion limit, or None when unset or not a positive integer."""
    raw = envvar_value_by_name(RECURSION_LIMIT_VAR)
    if raw is None:
        return None

    try:
        limit = int(raw)
    except ValueError:
        return None

    return limit if limit > 0 else None
