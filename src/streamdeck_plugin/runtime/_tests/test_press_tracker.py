from __future__ import annotations

import asyncio

import pytest

from streamdeck_plugin.runtime.press_tracker import PressTracker, long_press_delay


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.mark.parametrize(
    ("timeout", "tick", "expected"),
    [
        (2.0, 0.1, 2.0),
        (0.25, 0.1, 0.3),
        (0.3, 0.1, 0.3),
        (0.01, 0.1, 0.1),
        (0.0, 0.1, 0.0),
        (0.25, 0.0, 0.25),
    ],
)
def test_long_press_delay_rounds_up_to_tick(timeout: float, tick: float, expected: float) -> None:
    assert long_press_delay(timeout, tick) == pytest.approx(expected)


def test_long_press_fires_once_when_held() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.01)
        fired: list[float] = []
        loop = asyncio.get_running_loop()
        start = loop.time()

        async def fire() -> None:
            fired.append(loop.time() - start)

        assert await tracker.press("ctx", 0.05, fire) is True
        await asyncio.sleep(0.15)

        assert len(fired) == 1
        # First tick at or after the threshold, not a later one.
        assert 0.049 <= fired[0] < 0.05 + 0.01 + 0.04
        assert not tracker.is_pending("ctx")

        outcome = await tracker.release("ctx")
        assert outcome.long_press_fired is True
        assert outcome.is_double_tap is False
        assert outcome.deliver is False

    asyncio.run(runner())


def test_release_before_threshold_cancels_long_press() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.01)
        fired: list[str] = []

        async def fire() -> None:
            fired.append("long")

        await tracker.press("ctx", 0.1, fire)
        await asyncio.sleep(0.02)
        outcome = await tracker.release("ctx")
        await asyncio.sleep(0.15)

        assert fired == []
        assert outcome.long_press_fired is False
        assert outcome.deliver is True

    asyncio.run(runner())


def test_second_press_while_pending_does_not_schedule_again() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.01)
        fired: list[str] = []

        async def fire() -> None:
            fired.append("long")

        assert await tracker.press("ctx", 0.05, fire) is True
        assert await tracker.press("ctx", 0.05, fire) is False
        await asyncio.sleep(0.15)

        assert fired == ["long"]

    asyncio.run(runner())


def test_zero_threshold_never_schedules() -> None:
    async def runner() -> None:
        tracker = PressTracker()

        async def fire() -> None:  # pragma: no cover - must not run
            raise AssertionError("fired")

        assert await tracker.press("ctx", 0.0, fire) is False
        assert not tracker.is_pending("ctx")

    asyncio.run(runner())


def test_double_tap_window() -> None:
    async def runner() -> None:
        clock = FakeClock()
        tracker = PressTracker(double_tap_s=0.5, clock=clock)

        first = await tracker.release("ctx")
        clock.advance(0.2)
        second = await tracker.release("ctx")
        clock.advance(0.5)
        third = await tracker.release("ctx")

        assert first.deliver is True
        assert second.is_double_tap is True
        assert second.deliver is False
        assert third.is_double_tap is False

    asyncio.run(runner())


def test_suppressed_release_still_moves_the_window() -> None:
    async def runner() -> None:
        clock = FakeClock()
        tracker = PressTracker(double_tap_s=0.5, clock=clock)

        await tracker.release("ctx")
        clock.advance(0.3)
        assert (await tracker.release("ctx")).is_double_tap is True
        clock.advance(0.3)
        assert (await tracker.release("ctx")).is_double_tap is True

    asyncio.run(runner())


def test_contexts_are_independent() -> None:
    async def runner() -> None:
        clock = FakeClock()
        tracker = PressTracker(double_tap_s=0.5, clock=clock)

        await tracker.release("a")
        clock.advance(0.1)
        assert (await tracker.release("b")).is_double_tap is False

    asyncio.run(runner())


def test_release_after_long_press_does_not_arm_double_tap() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.01, double_tap_s=10.0)

        async def fire() -> None:
            pass

        await tracker.press("ctx", 0.02, fire)
        await asyncio.sleep(0.08)
        terminal = await tracker.release("ctx")
        follow_up = await tracker.release("ctx")
        again = await tracker.release("ctx")

        assert terminal.long_press_fired is True
        assert terminal.is_double_tap is False
        assert follow_up.is_double_tap is False
        assert follow_up.deliver is True
        assert again.is_double_tap is True

    asyncio.run(runner())


def test_close_cancels_pending_long_press() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.01)
        fired: list[str] = []

        async def fire() -> None:
            fired.append("long")

        await tracker.press("ctx", 0.05, fire)
        await tracker.close()
        await asyncio.sleep(0.1)
        assert fired == []

    asyncio.run(runner())


def test_threshold_between_ticks_fires_on_next_tick() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.1)
        fired: list[float] = []
        loop = asyncio.get_running_loop()
        start = loop.time()

        async def fire() -> None:
            fired.append(loop.time() - start)

        await tracker.press("ctx", 0.25, fire)
        await asyncio.sleep(0.27)
        assert fired == []

        await asyncio.sleep(0.2)
        assert len(fired) == 1
        assert 0.299 <= fired[0] < 0.38

    asyncio.run(runner())


def test_close_cancels_long_press_already_firing() -> None:
    async def runner() -> None:
        tracker = PressTracker(tick_s=0.01)
        started = asyncio.Event()
        outcome: list[str] = []

        async def fire() -> None:
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                outcome.append("cancelled")
                raise

        await tracker.press("ctx", 0.01, fire)
        await asyncio.wait_for(started.wait(), 1.0)
        assert not tracker.is_pending("ctx")

        await tracker.close()
        assert outcome == ["cancelled"]

    asyncio.run(runner())
