from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from core.scheduler import VirtualScheduler
from core.streams import Stream


class Recorder:
    """Collects (virtual time, value) pairs from a stream."""

    def __init__(self, scheduler: VirtualScheduler, stream: Stream) -> None:
        self._scheduler = scheduler
        self.events: List[Tuple[float, Any]] = []
        self.sub = stream.subscribe(lambda v: self.events.append((scheduler.now(), v)))

    @property
    def values(self) -> List[Any]:
        return [v for _, v in self.events]

    @property
    def times(self) -> List[float]:
        return [t for t, _ in self.events]


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler(initial_clock=0.0)


@pytest.fixture
def record(scheduler):
    def _record(stream: Stream) -> Recorder:
        return Recorder(scheduler, stream)
    return _record
