"""Event dispatch and session state engine."""

from .dispatcher import Dispatcher
from .outbox import Outbox
from .plugin_channel import PluginChannel
from .press_tracker import PressTracker, ReleaseOutcome, long_press_delay
from .session_state import SessionStateStore

__all__ = [
    "Dispatcher",
    "Outbox",
    "PluginChannel",
    "PressTracker",
    "ReleaseOutcome",
    "SessionStateStore",
    "long_press_delay",
]
