from __future__ import annotations

import heapq
from itertools import count
from typing import Any, Callable, List, Optional, Tuple

from crossing.internal.log import get_logger

log = get_logger("scheduler")


class TaskHandle:
    """Cancellation token for a scheduled callback."""

    def __init__(
        self,
        callback: Callable[[], Any],
        due: float,
        interval: Optional[float] = None,
    ):
        self.callback = callback
        self.due = due
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"TaskHandle(due={self.due}, interval={self.interval}, cancelled={self._cancelled})"


class Scheduler:
    """
    Virtual clock in milliseconds with delayed and repeating callbacks.

    Nothing runs on its own: the owner advances the clock (`advance` or
    `advance_to`) and every task falling due inside that window runs in due
    order, with insertion order breaking ties. While a task runs, `now` equals
    its due time, so callbacks scheduled from inside a task are relative to
    the moment it fired.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, TaskHandle]] = []
        self._sequence = count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TaskHandle:
        if delay < 0:
            log.error("Refusing negative delay %s", delay)
            raise ValueError(f"Delay must be non-negative, got {delay}.")
        task = TaskHandle(callback, self._now + delay)
        self._push(task)
        return task

    def call_every(self, interval: float, callback: Callable[[], Any]) -> TaskHandle:
        if interval <= 0:
            log.error("Refusing non-positive interval %s", interval)
            raise ValueError(f"Interval must be positive, got {interval}.")
        task = TaskHandle(callback, self._now + interval, interval=interval)
        self._push(task)
        return task

    def advance(self, delta: float) -> int:
        return self.advance_to(self._now + delta)

    def advance_to(self, target: float) -> int:
        """Run every task due at or before `target`; returns how many ran."""
        if target < self._now:
            return 0

        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = due
            task.callback()
            ran += 1
            if task.repeating and not task.cancelled:
                task.due = due + task.interval
                self._push(task)
        self._now = target
        return ran

    def cancel_all(self) -> None:
        for _, _, task in self._queue:
            task.cancel()
        self._queue.clear()
        log.debug("Cancelled every scheduled task at t=%.1f", self._now)

    def _push(self, task: TaskHandle) -> None:
        heapq.heappush(self._queue, (task.due, next(self._sequence), task))
