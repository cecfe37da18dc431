"""
streamdeck_plugin: runtime for Stream Deck plugins written in Python.

Register :class:`Action` subclasses on an :class:`ActionManager` and hand it
to :func:`run`.
"""

__version__ = "0.1.0"

from streamdeck_plugin.action import Action
from streamdeck_plugin.action_manager import SHARED_ACTION_UUID, ActionManager
from streamdeck_plugin.errors import (
    ActionNotFoundError,
    DecodeError,
    SendError,
    StreamDeckError,
    TransportClosedError,
    UnknownEventError,
)
from streamdeck_plugin.launcher import run
from streamdeck_plugin.stream_deck import StreamDeck

__all__ = [
    "Action",
    "ActionManager",
    "ActionNotFoundError",
    "DecodeError",
    "SHARED_ACTION_UUID",
    "SendError",
    "StreamDeck",
    "StreamDeckError",
    "TransportClosedError",
    "UnknownEventError",
    "__version__",
    "run",
]
