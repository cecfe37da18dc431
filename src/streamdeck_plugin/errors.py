"""Exception taxonomy for the plugin runtime.

Decode and routing errors are contained per frame by the dispatcher;
transport errors end the session.
"""

from __future__ import annotations


class StreamDeckError(RuntimeError):
    """Base class for every error raised by the plugin runtime."""


class DecodeError(StreamDeckError, ValueError):
    """Raised when an inbound frame cannot be decoded into an event."""


class UnknownEventError(DecodeError):
    """Raised when an inbound frame carries an unrecognised ``event`` tag."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"unknown event tag: {tag!r}")
        self.tag = tag


class ActionNotFoundError(StreamDeckError, KeyError):
    """Raised when no action is registered under the requested UUID."""

    def __init__(self, uuid: str) -> None:
        super().__init__(f"no action registered for {uuid!r}")
        self.uuid = uuid

    def __str__(self) -> str:
        return str(self.args[0])


class RegistryFrozenError(StreamDeckError):
    """Raised when an action is registered after the runtime has started."""


class SendError(StreamDeckError):
    """Raised when a frame cannot be handed to the transport."""


class TransportClosedError(StreamDeckError):
    """Raised when the websocket to the host is gone."""
