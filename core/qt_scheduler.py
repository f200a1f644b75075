from __future__ import annotations

import math
import time
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Qt, QTimer


class QtTimerTask:
    """
    One periodic task driven by a single-shot QTimer.

    Tick k is due at ``start + k * interval`` on the monotonic clock. The timer
    is re-armed after every tick for the time left until the next deadline, so
    millisecond rounding and event-loop latency never add up. Deadlines that
    already passed (a stalled loop) are skipped rather than fired in a burst.
    """

    def __init__(self, owner: "QtBeatScheduler", interval: float, callback: Callable[[], None],
                 parent: Optional[QObject] = None) -> None:
        self._owner = owner
        self._callback = callback
        self.interval = float(interval)
        self.start = owner.now()
        self.ticks = 0

        self._timer: Optional[QTimer] = QTimer(parent)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    @property
    def active(self) -> bool:
        return self._timer is not None

    def deadline(self, k: int) -> float:
        return self.start + k * self.interval

    def next_deadline(self) -> float:
        return self.deadline(self.ticks + 1)

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None
        self._owner._forget(self)

    def _arm(self) -> None:
        now = self._owner.now()
        if self.next_deadline() < now:
            self.ticks = int(math.floor((now - self.start) / self.interval))
        remaining = self.next_deadline() - now
        # ceil: a QTimer never fires early, so the tick lands on or just after its deadline
        self._timer.start(max(0, int(math.ceil(remaining * 1000.0))))

    def _fire(self) -> None:
        if self._timer is None:
            return
        if self._owner.now() < self.next_deadline():
            self._arm()
            return
        self.ticks += 1
        self._callback()
        # the callback may have cancelled this task
        if self._timer is not None:
            self._arm()


class QtBeatScheduler:
    """
    QTimer-backed beat scheduler. Callbacks run on the Qt event loop of the
    thread that created the scheduler, so the engine stays single-threaded.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._tasks: List[QtTimerTask] = []

    def now(self) -> float:
        return time.monotonic()

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def schedule_periodic(self, interval: float, callback: Callable[[], None]) -> QtTimerTask:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")

        task = QtTimerTask(self, interval, callback, self._parent)
        self._tasks.append(task)
        task._arm()
        return task

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    def _forget(self, task: QtTimerTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)
