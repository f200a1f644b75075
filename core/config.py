from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from models.meter import Meter

# Controls
TEMPO_MIN = 30.0
TEMPO_MAX = 300.0
DENOMINATOR_STEP_MIN = 1
DENOMINATOR_STEP_MAX = 4

# Feedback
FLASH_MS = 90
STRIP_BEATS = 32

# Clicks
CLICK_SR = 44100
CLICK_FIRST_HZ = 1500.0
CLICK_REGULAR_HZ = 1000.0
CLICK_MS = 18.0


@dataclass
class MetronomeConfig:
    initial_meter: str = "4/4"
    initial_tempo: float = 120.0
    autoplay: bool = False
    click_dir: Optional[Path] = None

    def meter(self) -> Meter:
        return Meter.parse(self.initial_meter)

    @staticmethod
    def from_args(ns: Any) -> "MetronomeConfig":
        click_dir = getattr(ns, "clicks", None)
        return MetronomeConfig(
            initial_meter=str(getattr(ns, "signature", "4/4")),
            initial_tempo=float(getattr(ns, "tempo", 120.0)),
            autoplay=bool(getattr(ns, "autoplay", False)),
            click_dir=Path(click_dir) if click_dir else None,
        )
