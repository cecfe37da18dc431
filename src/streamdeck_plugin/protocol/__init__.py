"""Wire protocol spoken between a plugin and the Stream Deck host."""

from __future__ import annotations

from .commands import *  # noqa: F401,F403
from .events import *  # noqa: F401,F403
from .parser import KNOWN_EVENTS, EventParser, decode

__all__ = [name for name in globals().keys() if not name.startswith("_")]
