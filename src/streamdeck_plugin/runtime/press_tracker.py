"""Long-press detection and duplicate-release suppression per context.

A press schedules one long-press task for its context when the action declares
a threshold. The task fires after the threshold, rounded up to the scheduler
tick. A release cancels it if it has not fired yet. A release that ends a fired
long press is consumed. A release that follows the previous ordinary release
within the double-tap window is flagged as a duplicate.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_TICK_S = 0.1
DEFAULT_DOUBLE_TAP_S = 0.5


@dataclass
class PressState:
    pressed_at: Optional[float] = None
    last_release: Optional[float] = None
    last_release_was_long_press: bool = False
    long_press_fired: bool = False
    pending: Optional[asyncio.Task[None]] = None


@dataclass(frozen=True)
class ReleaseOutcome:
    is_double_tap: bool
    long_press_fired: bool

    @property
    def deliver(self) -> bool:
        """Whether ``on_key_up`` should run for this release."""
        return not (self.is_double_tap or self.long_press_fired)


def long_press_delay(timeout: float, tick: float = DEFAULT_TICK_S) -> float:
    """Round *timeout* up to the next multiple of *tick*."""

    if timeout <= 0:
        return 0.0
    if tick <= 0:
        return float(timeout)
    steps = math.ceil(round(timeout / tick, 9))
    return max(1, steps) * tick


class PressTracker:
    def __init__(
        self,
        *,
        tick_s: float = DEFAULT_TICK_S,
        double_tap_s: float = DEFAULT_DOUBLE_TAP_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._tick_s = float(tick_s)
        self._double_tap_s = float(double_tap_s)
        self._clock = clock
        self._lock = asyncio.Lock()
        self._states: Dict[str, PressState] = {}
        # Every long-press task, including ones whose callback is running.
        self._tasks: Set[asyncio.Task[Any]] = set()

    async def press(
        self,
        context: str,
        timeout: float,
        fire: Callable[[], Awaitable[None]],
    ) -> bool:
        """Record a press; returns True when a long-press task was scheduled.

        While a long press is pending for *context* further presses are
        ignored until it fires or a release cancels it.
        """

        async with self._lock:
            state = self._states.setdefault(context, PressState())
            if state.pending is not None and not state.pending.done():
                logger.debug("press on %s ignored; long press already pending", context)
                return False
            state.pressed_at = self._clock()
            state.long_press_fired = False
            if timeout <= 0:
                return False
            delay = long_press_delay(timeout, self._tick_s)
            state.pending = asyncio.create_task(
                self._long_press(context, delay, fire),
                name=f"long-press:{context}",
            )
            self._tasks.add(state.pending)
            state.pending.add_done_callback(self._tasks.discard)
            return True

    async def _long_press(self, context: str, delay: float, fire: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(delay)
        async with self._lock:
            state = self._states.get(context)
            if state is None or state.pending is not asyncio.current_task():
                return
            state.pending = None
            state.long_press_fired = True
        logger.debug("long press fired on %s after %.3fs", context, delay)
        try:
            await fire()
        except Exception:
            logger.exception("on_long_press callback failed for %s", context)

    async def release(self, context: str) -> ReleaseOutcome:
        async with self._lock:
            now = self._clock()
            state = self._states.setdefault(context, PressState())
            pending = state.pending
            if pending is not None and not pending.done():
                pending.cancel()
            state.pending = None

            fired = state.long_press_fired
            state.long_press_fired = False
            is_double_tap = (
                not fired
                and state.last_release is not None
                and not state.last_release_was_long_press
                and now - state.last_release < self._double_tap_s
            )
            state.last_release = now
            state.last_release_was_long_press = fired
        return ReleaseOutcome(is_double_tap=is_double_tap, long_press_fired=fired)

    def is_pending(self, context: str) -> bool:
        state = self._states.get(context)
        return bool(state and state.pending is not None and not state.pending.done())

    async def close(self) -> None:
        """Cancel every outstanding long-press task, fired or not."""

        async with self._lock:
            tasks = list(self._tasks)
            for state in self._states.values():
                state.pending = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
