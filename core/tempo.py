from __future__ import annotations

from models.meter import Meter, round_half_up


def round_tempo(bpm: float) -> int:
    return round_half_up(bpm)


def subdivision(meter: Meter) -> float:
    # quarter-note pulse is the reference: /8 ticks twice as fast as /4
    return meter.denominator / 4.0


def beat_interval(tempo: float, meter: Meter) -> float:
    """Seconds between two ticks; tempo is rounded to whole BPM first."""
    return 60.0 / (round_tempo(tempo) * subdivision(meter))
