from __future__ import annotations

import os
from typing import Optional

ENV_PREFIX = "STREAMDECK_PLUGIN_"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def env_key(name: str) -> str:
    """Return *name* with the plugin prefix applied (idempotent)."""
    return name if name.startswith(ENV_PREFIX) else f"{ENV_PREFIX}{name}"


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(env_key(name))
    return v if v is not None else default


def env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(env_key(name))
    if v is None:
        return default
    s = v.strip().lower()
    if s in _TRUTHY or s in ("dbg", "debug"):
        return True
    if s in _FALSY:
        return False
    return default


def env_int(name: str, default: int) -> int:
    v = os.getenv(env_key(name))
    if not v:
        return default
    try:
        return int(v, 10)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    v = os.getenv(env_key(name))
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        return default
