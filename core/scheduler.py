"""
Beat schedulers: the clock the engine runs its periodic beat timer on.

The engine only needs ``now()`` and ``schedule_periodic()``. The app plugs in
``core.qt_scheduler.QtBeatScheduler``; tests and offline runs use
``VirtualScheduler`` and move its clock by hand.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class ScheduledTask(Protocol):
    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


@runtime_checkable
class BeatScheduler(Protocol):
    def now(self) -> float:
        ...

    def schedule_periodic(self, interval: float, callback: Callable[[], None]) -> ScheduledTask:
        """Call ``callback`` every ``interval`` seconds, first one interval from now."""
        ...


class VirtualTask:
    def __init__(self, scheduler: "VirtualScheduler", start: float, interval: Optional[float]) -> None:
        self._scheduler = scheduler
        self.start = start
        self.interval = interval
        self.fired = 0
        self._cancelled = False

    @property
    def active(self) -> bool:
        if self._cancelled:
            return False
        return self.interval is not None or self.fired == 0

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._scheduler._forget(self)

    def next_due(self) -> float:
        if self.interval is None:
            return self.start
        # start + k * interval, not a running sum, so long runs do not drift
        return self.start + (self.fired + 1) * self.interval


class VirtualScheduler:
    """Deterministic clock. Nothing happens until ``advance_to``/``advance_by``."""

    def __init__(self, initial_clock: float = 0.0) -> None:
        self._now = float(initial_clock)
        self._queue: List[Tuple[float, int, VirtualTask, Callable[[], None]]] = []
        self._seq = itertools.count()
        self._active: List[VirtualTask] = []

    def now(self) -> float:
        return self._now

    @property
    def active_count(self) -> int:
        return len(self._active)

    def schedule_at(self, time: float, callback: Callable[[], None]) -> VirtualTask:
        task = VirtualTask(self, float(time), None)
        self._push(task, callback)
        return task

    def schedule_periodic(self, interval: float, callback: Callable[[], None]) -> VirtualTask:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        task = VirtualTask(self, self._now, float(interval))
        self._push(task, callback)
        return task

    def advance_by(self, delta: float) -> None:
        self.advance_to(self._now + float(delta))

    def advance_to(self, time: float) -> None:
        time = float(time)
        if time < self._now:
            raise ValueError(f"cannot move clock backwards ({self._now} -> {time})")

        while self._queue and self._queue[0][0] <= time:
            due, _, task, callback = heapq.heappop(self._queue)
            if not task.active:
                continue
            self._now = max(self._now, due)
            task.fired += 1
            if task.interval is None:
                self._forget(task)
            callback()
            if task.active and task.interval is not None:
                self._push(task, callback)

        self._now = time

    # ---------- Internals ----------
    def _push(self, task: VirtualTask, callback: Callable[[], None]) -> None:
        if task not in self._active:
            self._active.append(task)
        heapq.heappush(self._queue, (task.next_due(), next(self._seq), task, callback))

    def _forget(self, task: VirtualTask) -> None:
        if task in self._active:
            self._active.remove(task)
