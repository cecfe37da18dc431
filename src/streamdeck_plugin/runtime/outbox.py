"""Single-writer queue that linearises every outbound frame onto the socket."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from streamdeck_plugin.errors import SendError, TransportClosedError

logger = logging.getLogger(__name__)


class Outbox:
    """FIFO of text frames drained by exactly one :meth:`pump` task.

    Frames from one caller keep their submission order. Each frame is handed
    to the transport whole, so frames from concurrent callers interleave only
    at frame boundaries.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._closed = False
        self._close_reason: Optional[BaseException] = None
        self.sent_total = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def send_nowait(self, text: str) -> None:
        if self._closed:
            raise SendError("outbound channel is closed") from self._close_reason
        self._queue.put_nowait(text)

    async def send(self, text: str) -> None:
        self.send_nowait(text)

    async def pump(self, write: Callable[[str], Awaitable[None]]) -> None:
        """Drain the queue into *write* until closed or the transport fails."""

        while True:
            msg = await self._queue.get()
            logger.debug("Outbox sender -> %s", msg)
            try:
                await write(msg)
            except Exception as exc:
                self.close(exc)
                logger.warning("Outbox write failed; closing session (%s)", exc)
                raise TransportClosedError(f"transport write failed: {exc}") from exc
            self.sent_total += 1

    def close(self, reason: Optional[BaseException] = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._close_reason = reason
        dropped = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            dropped += 1
        if dropped:
            logger.debug("Outbox closed with %d undelivered frame(s)", dropped)

    def pending(self) -> int:
        return self._queue.qsize()
