"""Route decoded events to actions.

Session-state updates and press tracking happen inline, in frame order, before
any callback is scheduled. Each callback runs as its own task so a slow action
never delays the next frame.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from streamdeck_plugin.action import Action
from streamdeck_plugin.action_manager import ActionManager
from streamdeck_plugin.errors import ActionNotFoundError
from streamdeck_plugin.protocol import events as ev
from streamdeck_plugin.runtime.press_tracker import PressTracker
from streamdeck_plugin.stream_deck import StreamDeck

logger = logging.getLogger(__name__)

# Events whose payload carries the full settings blob of their context.
_SETTINGS_BEARING = frozenset(
    {
        ev.DID_RECEIVE_SETTINGS,
        ev.KEY_DOWN,
        ev.KEY_UP,
        ev.DIAL_ROTATE,
        ev.DIAL_PRESS,
        ev.TOUCH_TAP,
        ev.WILL_APPEAR,
        ev.WILL_DISAPPEAR,
        ev.TITLE_PARAMETERS_DID_CHANGE,
    }
)

# Scoped events that map 1:1 onto a single action callback.
_SCOPED_CALLBACKS: Dict[str, str] = {
    ev.DID_RECEIVE_SETTINGS: "on_settings_changed",
    ev.DIAL_ROTATE: "on_dial_rotate",
    ev.DIAL_PRESS: "on_dial_press",
    ev.TOUCH_TAP: "on_touch_tap",
    ev.TITLE_PARAMETERS_DID_CHANGE: "on_title_parameters_changed",
    ev.PROPERTY_INSPECTOR_DID_APPEAR: "on_property_inspector_appear",
    ev.PROPERTY_INSPECTOR_DID_DISAPPEAR: "on_property_inspector_disappear",
}

# Global events fan out to every registered action.
_BROADCAST_CALLBACKS: Dict[str, str] = {
    ev.DID_RECEIVE_GLOBAL_SETTINGS: "on_global_settings_changed",
    ev.DEVICE_DID_CONNECT: "on_device_connect",
    ev.DEVICE_DID_DISCONNECT: "on_device_disconnect",
    ev.APPLICATION_DID_LAUNCH: "on_application_launch",
    ev.APPLICATION_DID_TERMINATE: "on_application_terminate",
    ev.SYSTEM_DID_WAKE_UP: "on_system_wake_up",
}


class Dispatcher:
    def __init__(
        self,
        manager: ActionManager,
        sd: StreamDeck,
        press_tracker: Optional[PressTracker] = None,
    ) -> None:
        self._manager = manager
        self._sd = sd
        self._press = press_tracker if press_tracker is not None else PressTracker()
        self._tasks: Set[asyncio.Task[Any]] = set()
        self.dropped_total = 0

    @property
    def press_tracker(self) -> PressTracker:
        return self._press

    # ------------------------------------------------------------------
    async def dispatch(self, event: ev.InputEvent) -> None:
        """Apply state updates for *event* and schedule its callbacks."""

        tag = event.event
        store = self._sd.state

        if tag in _SETTINGS_BEARING:
            await store.set_instance_settings(event.context, event.settings)  # type: ignore[union-attr]
        elif tag == ev.DID_RECEIVE_GLOBAL_SETTINGS:
            await store.merge_global_settings(event.settings)  # type: ignore[union-attr]

        broadcast = _BROADCAST_CALLBACKS.get(tag)
        if broadcast is not None:
            for action in self._manager.actions():
                self._spawn(getattr(action, broadcast), event, label=f"{tag}:{action.uuid}")
            return

        if tag == ev.SEND_TO_PLUGIN:
            self._dispatch_send_to_plugin(event)  # type: ignore[arg-type]
            return

        # Visibility follows the host even when no action is registered for it.
        if tag == ev.WILL_APPEAR:
            await store.mark_visible(event.action, event.context)  # type: ignore[union-attr]
        elif tag == ev.WILL_DISAPPEAR:
            await store.mark_hidden(event.context)  # type: ignore[union-attr]

        action = self._resolve(event)
        if action is None:
            return

        if tag == ev.KEY_DOWN:
            await self._key_down(action, event)  # type: ignore[arg-type]
        elif tag == ev.KEY_UP:
            await self._key_up(action, event)  # type: ignore[arg-type]
        elif tag == ev.WILL_APPEAR:
            self._spawn(action.on_appear, event, label=tag)
        elif tag == ev.WILL_DISAPPEAR:
            self._spawn(action.on_disappear, event, label=tag)
        else:
            callback = _SCOPED_CALLBACKS.get(tag)
            if callback is None:
                logger.debug("no route for event %s", tag)
                return
            self._spawn(getattr(action, callback), event, label=tag)

    def _resolve(self, event: Any) -> Optional[Action]:
        try:
            return self._manager.get(event.action)
        except ActionNotFoundError:
            self.dropped_total += 1
            logger.warning("no action registered for %s; dropping %s", event.action, event.event)
            return None

    async def _key_down(self, action: Action, event: ev.KeyEvent) -> None:
        self._spawn(action.on_key_down, event, label=event.event)
        try:
            timeout = float(action.long_timeout() or 0.0)
        except Exception:
            logger.exception("long_timeout failed for %s; long press disabled", action.uuid)
            return
        if timeout <= 0:
            return

        async def long_press(evt: ev.KeyEvent, sd: StreamDeck) -> None:
            await action.on_long_press(evt, timeout, sd)

        async def fire() -> None:
            self._spawn(long_press, event, label="longPress")

        await self._press.press(event.context, timeout, fire)

    async def _key_up(self, action: Action, event: ev.KeyEvent) -> None:
        outcome = await self._press.release(event.context)
        event.is_double_tap = outcome.is_double_tap
        event.long_press_fired = outcome.long_press_fired
        if not outcome.deliver:
            logger.debug(
                "keyUp on %s not delivered (double_tap=%s long_press=%s)",
                event.context,
                outcome.is_double_tap,
                outcome.long_press_fired,
            )
            return
        self._spawn(action.on_key_up, event, label=event.event)

    def _dispatch_send_to_plugin(self, event: ev.SendToPluginEvent) -> None:
        shared = self._manager.shared()
        target = self._resolve(event)
        if target is shared:
            target = None
        if shared is None and target is None:
            return

        async def deliver(evt: ev.SendToPluginEvent, sd: StreamDeck) -> None:
            if shared is not None:
                try:
                    await shared.on_send_to_plugin(evt, sd)
                except Exception:
                    logger.exception("shared action failed on sendToPlugin for %s", evt.action)
            if target is not None:
                await target.on_send_to_plugin(evt, sd)

        self._spawn(deliver, event, label=event.event)

    # ------------------------------------------------------------------
    def _spawn(
        self,
        callback: Callable[[Any, StreamDeck], Awaitable[None]],
        event: Any,
        *,
        label: str,
    ) -> asyncio.Task[None]:
        task = asyncio.create_task(self._run_callback(callback, event, label), name=f"action:{label}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_callback(
        self,
        callback: Callable[[Any, StreamDeck], Awaitable[None]],
        event: Any,
        label: str,
    ) -> None:
        try:
            await callback(event, self._sd)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("action callback failed (%s)", label)

    def in_flight(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every scheduled callback has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        await self._press.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
