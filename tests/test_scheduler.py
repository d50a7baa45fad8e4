"""Tests for the manual and asyncio schedulers."""

import asyncio
import logging
import time

import pytest

from snake_arena.scheduler import AsyncioScheduler, ManualScheduler, TimerHandle


class TestTimerHandle:
    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError, match="positive"):
            TimerHandle(0, lambda: None)

    def test_cancel_is_idempotent(self):
        calls = []
        handle = TimerHandle(10, lambda: None)
        handle._on_cancel = lambda: calls.append(1)
        handle.cancel()
        handle.cancel()
        assert not handle.active
        assert calls == [1]


class TestManualScheduler:
    def test_nothing_fires_without_advance(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule_repeating(100, lambda: fired.append(scheduler.now))
        assert fired == []
        assert scheduler.pending() == 1

    def test_repeats_at_interval(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule_repeating(100, lambda: fired.append(scheduler.now))
        assert scheduler.advance(350) == 3
        assert fired == [100, 200, 300]
        assert scheduler.now == 350

    def test_timers_fire_in_time_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule_repeating(30, lambda: fired.append("a"))
        scheduler.schedule_repeating(20, lambda: fired.append("b"))
        scheduler.advance(60)
        assert fired == ["b", "a", "b", "a", "b"]

    def test_cancel_stops_firing(self):
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.schedule_repeating(10, lambda: fired.append(1))
        scheduler.advance(25)
        handle.cancel()
        scheduler.advance(100)
        assert fired == [1, 1]
        assert scheduler.pending() == 0

    def test_replacement_from_inside_callback(self):
        scheduler = ManualScheduler()
        fired = []
        handles = {}

        def first():
            fired.append(("first", scheduler.now))
            handles["first"].cancel()
            handles["second"] = scheduler.schedule_repeating(
                30, lambda: fired.append(("second", scheduler.now)),
            )

        handles["first"] = scheduler.schedule_repeating(100, first)
        scheduler.advance(200)
        assert fired == [("first", 100), ("second", 130), ("second", 160), ("second", 190)]
        assert scheduler.pending() == 1

    def test_run_next(self):
        scheduler = ManualScheduler()
        assert not scheduler.run_next()
        scheduler.schedule_repeating(70, lambda: None)
        assert scheduler.next_due() == 70
        assert scheduler.run_next()
        assert scheduler.now == 70
        assert scheduler.next_due() == 140

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError, match="backwards"):
            ManualScheduler().advance(-1)


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_fires_repeatedly_until_cancelled(self):
        scheduler = AsyncioScheduler()
        fired = []
        handle = scheduler.schedule_repeating(10, lambda: fired.append(1))
        await asyncio.sleep(0.08)
        handle.cancel()
        count = len(fired)
        assert count >= 2
        await asyncio.sleep(0.05)
        assert len(fired) == count

    @pytest.mark.asyncio
    async def test_slow_callback_does_not_stretch_interval(self):
        scheduler = AsyncioScheduler()
        loop = asyncio.get_running_loop()
        fired = []

        def slow():
            fired.append(loop.time())
            time.sleep(0.012)

        handle = scheduler.schedule_repeating(30, slow)
        await asyncio.sleep(0.2)
        handle.cancel()
        assert len(fired) >= 4
        mean_gap = (fired[-1] - fired[0]) / (len(fired) - 1)
        assert mean_gap < 0.038

    @pytest.mark.asyncio
    async def test_cancel_inside_callback(self):
        scheduler = AsyncioScheduler()
        fired = []
        handles = {}

        def once():
            fired.append(1)
            handles["h"].cancel()

        handles["h"] = scheduler.schedule_repeating(5, once)
        await asyncio.sleep(0.06)
        assert fired == [1]
        assert scheduler.pending() == 0

    @pytest.mark.asyncio
    async def test_callback_error_stops_timer(self, caplog):
        scheduler = AsyncioScheduler()

        def boom():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="snake_arena.scheduler"):
            handle = scheduler.schedule_repeating(5, boom)
            await asyncio.sleep(0.05)
        assert not handle.active
        assert "Timer callback failed" in caplog.text

    @pytest.mark.asyncio
    async def test_shutdown_cancels_everything(self):
        scheduler = AsyncioScheduler()
        scheduler.schedule_repeating(1000, lambda: None)
        scheduler.schedule_repeating(1000, lambda: None)
        assert scheduler.pending() == 2
        await scheduler.shutdown()
        await asyncio.sleep(0)
        assert scheduler.pending() == 0

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().schedule_repeating(10, lambda: None)
