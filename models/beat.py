# models/beat.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Beat(Enum):
    FIRST = "first"
    REGULAR = "regular"

    @property
    def audio_file(self) -> str:
        return f"{self.value}.wav"


class BeatParity(Enum):
    EVEN = "even"
    ODD = "odd"


@dataclass(frozen=True)
class BeatEvent:
    beat: Beat
    total_beats: int  # zero-based count since the timer (re)started

    @property
    def parity(self) -> BeatParity:
        return BeatParity.EVEN if self.total_beats % 2 == 0 else BeatParity.ODD
