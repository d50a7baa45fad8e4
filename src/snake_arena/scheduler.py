"""Repeating-timer schedulers that drive simulation ticks.

Two implementations share one interface: :class:`ManualScheduler` runs on
a virtual millisecond clock advanced explicitly (tests, headless runs) and
:class:`AsyncioScheduler` paces callbacks with ``asyncio`` tasks.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """A live repeating timer. Cancelling it is final."""

    def __init__(self, interval_ms: int, callback: Callback) -> None:
        if interval_ms <= 0:
            raise ValueError("Timer interval must be positive.")
        self.interval_ms = interval_ms
        self.callback = callback
        self._cancelled = False
        self._on_cancel: Callable[[], object] | None = None

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        """Stop the timer; its callback will not run again."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def __repr__(self) -> str:
        state = "active" if self.active else "cancelled"
        return f"<TimerHandle every {self.interval_ms}ms {state}>"


class Scheduler(Protocol):
    def schedule_repeating(
        self, interval_ms: int, callback: Callback,
    ) -> TimerHandle:
        ...


class ManualScheduler:
    """Deterministic scheduler on a virtual clock.

    Nothing fires until :meth:`advance` is called. Callbacks run in due-time
    order; a callback may cancel its own timer and schedule a replacement,
    which is first due one interval after the current virtual time.
    """

    def __init__(self) -> None:
        self.now = 0
        self._queue: list[tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()

    def schedule_repeating(
        self, interval_ms: int, callback: Callback,
    ) -> TimerHandle:
        handle = TimerHandle(interval_ms, callback)
        self._push(handle, self.now + interval_ms)
        return handle

    def _push(self, handle: TimerHandle, due: int) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), handle))

    def advance(self, ms: int) -> int:
        """Move the clock forward by *ms*, firing due callbacks.

        Returns the number of callbacks executed.
        """
        if ms < 0:
            raise ValueError("Cannot move the clock backwards.")
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = due
            self._push(handle, due + handle.interval_ms)
            handle.callback()
            fired += 1
        self.now = target
        return fired

    def next_due(self) -> int | None:
        """Virtual time of the next live timer, or ``None`` when idle."""
        for due, _, handle in sorted(self._queue):
            if handle.active:
                return due
        return None

    def run_next(self) -> bool:
        """Advance exactly to the next due callback and fire it."""
        due = self.next_due()
        if due is None:
            return False
        self.advance(due - self.now)
        return True

    def pending(self) -> int:
        """Number of timers still able to fire."""
        return sum(1 for _, _, handle in self._queue if handle.active)


class AsyncioScheduler:
    """Wall-clock scheduler backed by one ``asyncio`` task per timer.

    Must be used from inside a running event loop.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def schedule_repeating(
        self, interval_ms: int, callback: Callback,
    ) -> TimerHandle:
        handle = TimerHandle(interval_ms, callback)
        task = asyncio.get_running_loop().create_task(self._run(handle))
        handle._on_cancel = task.cancel
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return handle

    async def _run(self, handle: TimerHandle) -> None:
        loop = asyncio.get_running_loop()
        delay = handle.interval_ms / 1000.0
        # Fixed-rate deadlines counted from when the timer was scheduled.
        next_due = loop.time() + delay
        try:
            while handle.active:
                await asyncio.sleep(max(0.0, next_due - loop.time()))
                if not handle.active:
                    break
                handle.callback()
                next_due += delay
        except asyncio.CancelledError:
            logger.debug("Timer %r cancelled.", handle)
        except Exception:
            logger.exception("Timer callback failed; stopping %r.", handle)
            handle._cancelled = True

    def pending(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Cancel every outstanding timer and wait for the tasks to end."""
        tasks = [t for t in self._tasks if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
