"""Delayed callbacks for the two pacing pauses in play.

The session only needs ``call_later`` and ``cancel_all``. The window plugs in
a Qt timer implementation; tests and headless runs use ``ManualScheduler``,
which only moves when told to.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Protocol, Tuple


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> object:
        ...

    def cancel_all(self) -> None:
        ...


class ScheduledCall:
    """A pending callback that can be cancelled before it fires."""

    def __init__(self, due: int, callback: Callable[[], None]) -> None:
        self.due = due
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._callback()


class ManualScheduler:
    """Virtual-time scheduler. Nothing fires until ``advance`` is called."""

    def __init__(self) -> None:
        self._now = 0
        self._seq = itertools.count()
        self._queue: List[Tuple[int, int, ScheduledCall]] = []

    @property
    def now(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self._now + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (call.due, next(self._seq), call))
        return call

    def cancel_all(self) -> None:
        for _, _, call in self._queue:
            call.cancel()
        self._queue.clear()

    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due callbacks in order (FIFO for ties)."""
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            self._now = due
            call.fire()
        self._now = target
