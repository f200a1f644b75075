from __future__ import annotations

import logging
import math
from typing import Any, Callable, List, Optional, Tuple, Union

from core.config import DENOMINATOR_STEP_MAX, DENOMINATOR_STEP_MIN
from core.scheduler import BeatScheduler, ScheduledTask
from core.streams import BehaviorSubject, CompositeSubscription, PublishSubject, Stream
from core.tempo import beat_interval, round_tempo
from models.beat import Beat, BeatEvent, BeatParity
from models.meter import Meter, denominator_to_stepper_value, round_half_up, stepper_value_to_denominator

logger = logging.getLogger(__name__)


class BeatEngine:
    """
    Metronome state machine.

    Inputs are subjects the UI pushes into:
    - stepped_numerator: numerator stepper value (float, rounded here)
    - stepped_denominator: denominator stepper step 1..4 (denominator = 2 ** (step + 1))
    - tempo: tempo slider value in BPM
    - tapped_play_pause: one event per play/pause tap

    Outputs are streams. All of them replay their latest value to a new
    subscriber except ``beat`` and ``beat_parity``, which only fire on ticks.

    One periodic timer runs on the injected scheduler while playing. It is
    replaced whenever the beat interval or the play state changes, and the
    beat counters start over with it.
    """

    def __init__(
        self,
        initial_meter: Union[str, Meter] = "4/4",
        initial_tempo: float = 120.0,
        autoplay: bool = False,
        scheduler: Optional[BeatScheduler] = None,
    ) -> None:
        meter0 = initial_meter if isinstance(initial_meter, Meter) else Meter.parse(initial_meter)

        if scheduler is None:
            from core.qt_scheduler import QtBeatScheduler
            scheduler = QtBeatScheduler()
        self._scheduler = scheduler

        self._streams: List[Stream] = []
        self._subs = CompositeSubscription()
        self._task: Optional[ScheduledTask] = None
        self._beat_index = -1
        self._total_beats = -1
        self._disposed = False

        # Inputs
        self.stepped_numerator: BehaviorSubject[float] = BehaviorSubject(float(meter0.numerator))
        self.stepped_denominator: BehaviorSubject[float] = BehaviorSubject(
            float(denominator_to_stepper_value(meter0.denominator))
        )
        self.tempo: BehaviorSubject[float] = BehaviorSubject(float(initial_tempo))
        self.tapped_play_pause: PublishSubject[None] = PublishSubject()

        # Play state
        self.is_playing: Stream[bool] = self._own(
            self.tapped_play_pause.scan(bool(autoplay), lambda playing, _: not playing)
        )

        # Meter
        current_denominator = self._own(
            self._own(self.stepped_denominator.map(_denominator_from_step)).distinct()
        )
        numerator_input = self._own(self._own(self.stepped_numerator.map(round_half_up)).distinct())

        self.max_numerator: Stream[int] = current_denominator
        self.meter: Stream[Meter] = self._own(
            self._own(Stream.combine_latest(numerator_input, current_denominator, fn=_clamped_meter)).distinct()
        )
        self.numerator_value: Stream[int] = self._from_meter(lambda m: m.numerator)
        self.numerator_text: Stream[str] = self._from_meter(lambda m: str(m.numerator))
        self.denominator_text: Stream[str] = self._from_meter(lambda m: str(m.denominator))
        self.signature_text: Stream[str] = self._from_meter(lambda m: m.signature)

        if self.meter.value != meter0:
            logger.warning("initial meter %s clamped to %s", meter0, self.meter.value)

        # Tempo
        self.current_tempo: Stream[int] = self._own(self._own(self.tempo.map(round_tempo)).distinct())
        self.tempo_text: Stream[str] = self._own(self.current_tempo.map(lambda bpm: f"{bpm} BPM"))

        # Beats
        self.beat_interval: Stream[float] = self._own(
            self._own(Stream.combine_latest(self.current_tempo, self.meter, fn=_safe_interval)).distinct()
        )
        self._beats: PublishSubject[BeatEvent] = self._own(PublishSubject())
        self.beat: Stream[Beat] = self._own(self._beats.map(lambda e: e.beat))
        self.beat_parity: Stream[BeatParity] = self._own(self._beats.map(lambda e: e.parity))

        self._subs.add(self.is_playing.subscribe(self._log_play_state))

        timer_state = self._own(
            self._own(Stream.combine_latest(self.beat_interval, self.is_playing)).distinct()
        )
        self._subs.add(timer_state.subscribe(self._restart_timer))

    # ---------- Public API ----------
    @property
    def scheduler(self) -> BeatScheduler:
        return self._scheduler

    @property
    def timer_active(self) -> bool:
        return self._task is not None and self._task.active

    @property
    def disposed(self) -> bool:
        return self._disposed

    def toggle(self) -> None:
        self.tapped_play_pause.on_next(None)

    def dispose(self) -> None:
        """Stop the beat timer and detach every internal stream."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_timer()
        self._subs.dispose()
        for s in reversed(self._streams):
            s.dispose()
        for s in (self.stepped_numerator, self.stepped_denominator, self.tempo, self.tapped_play_pause):
            s.dispose()
        logger.debug("engine disposed")

    # ---------- Internals ----------
    def _own(self, stream: Stream) -> Stream:
        self._streams.append(stream)
        return stream

    def _from_meter(self, fn: Callable[[Meter], Any]) -> Stream:
        return self._own(self._own(self.meter.map(fn)).distinct())

    def _log_play_state(self, playing: bool) -> None:
        logger.info("metronome %s", "playing" if playing else "stopped")

    def _cancel_timer(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _restart_timer(self, state: Tuple[float, bool]) -> None:
        interval, playing = state
        self._cancel_timer()
        self._beat_index = -1
        self._total_beats = -1

        if not playing:
            logger.debug("beat timer stopped")
            return
        if not (0.0 < interval < math.inf):
            logger.warning("tempo %s gives no usable beat interval; staying silent", self.tempo.value)
            return

        self._task = self._scheduler.schedule_periodic(interval, self._tick)
        logger.debug("beat timer started: %.4fs (%s @ %s BPM)", interval, self.meter.value, self.current_tempo.value)

    def _tick(self) -> None:
        meter = self.meter.value
        self._beat_index = (self._beat_index + 1) % meter.numerator
        self._total_beats += 1
        beat = Beat.FIRST if self._beat_index == 0 else Beat.REGULAR
        self._beats.on_next(BeatEvent(beat=beat, total_beats=self._total_beats))


def _denominator_from_step(step: float) -> int:
    # out-of-range stepper values pin to the nearest legal denominator
    step = max(DENOMINATOR_STEP_MIN, min(round_half_up(step), DENOMINATOR_STEP_MAX))
    return stepper_value_to_denominator(step)


def _clamped_meter(numerator: int, denominator: int) -> Meter:
    # legal numerator ceiling is the active denominator
    return Meter(numerator=max(1, min(numerator, denominator)), denominator=denominator)


def _safe_interval(tempo: int, meter: Meter) -> float:
    if tempo <= 0:
        return math.inf
    return beat_interval(tempo, meter)
