from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Any, Callable, Optional

import websockets
from websockets.exceptions import ConnectionClosedError

from streamdeck_plugin.action_manager import ActionManager
from streamdeck_plugin.config import PluginArgs, RuntimeConfig, load_runtime_config
from streamdeck_plugin.errors import DecodeError, TransportClosedError, UnknownEventError
from streamdeck_plugin.protocol.parser import EventParser
from streamdeck_plugin.runtime.dispatcher import Dispatcher
from streamdeck_plugin.runtime.outbox import Outbox
from streamdeck_plugin.runtime.press_tracker import PressTracker
from streamdeck_plugin.runtime.session_state import SessionStateStore
from streamdeck_plugin.stream_deck import StreamDeck

logger = logging.getLogger(__name__)

_PARSER = EventParser()


class PluginChannel:
    """One websocket session with the Stream Deck host.

    Connects, registers, then decodes frames until the socket goes away. There
    is no reconnect: once the transport is lost the session is over.
    """

    def __init__(
        self,
        manager: ActionManager,
        args: PluginArgs,
        *,
        config: Optional[RuntimeConfig] = None,
        external: Optional[asyncio.Queue[str]] = None,
        connect: Callable[[str], Any] = websockets.connect,
    ) -> None:
        self.manager = manager
        self.args = args
        self.config = config if config is not None else load_runtime_config()
        self._external = external
        self._connect = connect
        self.stream_deck: Optional[StreamDeck] = None
        self.dispatcher: Optional[Dispatcher] = None
        self.frames_total = 0
        self.frames_dropped = 0

    def run(self) -> None:
        """Block until the host closes the connection."""

        asyncio.run(self.run_async())

    async def run_async(self) -> None:
        url = self.config.url(self.args.port)
        logger.info("Connecting to Stream Deck at %s", url)
        async with self._connect(url) as ws:
            logger.info("Connected to Stream Deck")
            await self.serve(ws)

    async def serve(self, ws: Any) -> None:
        """Drive one connected websocket until either direction stops."""

        self.manager.freeze()
        outbox = Outbox()
        sd = StreamDeck(self.args, outbox, SessionStateStore(), external=self._external)
        tracker = PressTracker(tick_s=self.config.long_press_tick_s, double_tap_s=self.config.double_tap_s)
        dispatcher = Dispatcher(self.manager, sd, press_tracker=tracker)
        self.stream_deck = sd
        self.dispatcher = dispatcher

        send_task = asyncio.create_task(outbox.pump(ws.send), name="plugin-sender")
        await sd.register()
        logger.info("plugin %s registered (%d action(s))", self.args.plugin_uuid, len(self.manager))
        read_task = asyncio.create_task(self._read(ws, dispatcher), name="plugin-reader")

        try:
            done, _pending = await asyncio.wait({send_task, read_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            outbox.close()
            for task in (send_task, read_task):
                task.cancel()
            await asyncio.gather(send_task, read_task, return_exceptions=True)
            await dispatcher.close()

        if send_task in done and not send_task.cancelled():
            exc = send_task.exception()
            if exc is not None:
                raise exc
        if read_task in done and not read_task.cancelled():
            exc = read_task.exception()
            if exc is not None:
                raise exc
        logger.info("Stream Deck closed the connection")

    async def _read(self, ws: Any, dispatcher: Dispatcher) -> None:
        try:
            async for raw in ws:
                self.frames_total += 1
                logger.debug("Received: %s", raw)
                try:
                    event = _PARSER.parse_json(raw)
                except UnknownEventError as exc:
                    self.frames_dropped += 1
                    logger.warning("dropping frame with unknown event %r", exc.tag)
                    continue
                except DecodeError as exc:
                    self.frames_dropped += 1
                    logger.warning("dropping malformed frame: %s", exc)
                    continue
                await dispatcher.dispatch(event)
        except ConnectionClosedError as exc:
            with suppress(Exception):
                await ws.close()
            logger.warning("Stream Deck connection lost (%s)", exc)
            raise TransportClosedError(f"connection lost: {exc}") from exc
