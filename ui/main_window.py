from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QPushButton, QSpinBox, QSlider, QLabel, QMessageBox
)

from audio.clicks import AudioFileError
from audio.player import ClickPlayer
from core.config import (
    DENOMINATOR_STEP_MAX, DENOMINATOR_STEP_MIN, TEMPO_MAX, TEMPO_MIN, MetronomeConfig,
)
from core.engine import BeatEngine
from core.qt_scheduler import QtBeatScheduler
from core.streams import CompositeSubscription
from models.beat import Beat, BeatParity
from models.meter import denominator_to_stepper_value, stepper_value_to_denominator
from ui.beat_strip import BeatStrip
from ui.theme import Theme, APP_QSS

logger = logging.getLogger(__name__)


class DenominatorSpinBox(QSpinBox):
    """Holds the stepper step (1..4) but shows the denominator (4..32)."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setRange(DENOMINATOR_STEP_MIN, DENOMINATOR_STEP_MAX)
        # arrows only; typed text would be validated against 1..4, not the shown value
        self.lineEdit().setReadOnly(True)

    def textFromValue(self, value: int) -> str:
        return str(stepper_value_to_denominator(value))

    def valueFromText(self, text: str) -> int:
        try:
            return denominator_to_stepper_value(int(text))
        except ValueError:
            return self.value()


class MetronomeWindow(QMainWindow):
    def __init__(self, config: Optional[MetronomeConfig] = None) -> None:
        super().__init__()
        self.config = config or MetronomeConfig()
        self.setWindowTitle("Metronome")
        self.resize(520, 480)

        self.theme = Theme()
        self.setStyleSheet(APP_QSS)

        self.scheduler = QtBeatScheduler(self)
        self.engine = BeatEngine(
            initial_meter=self.config.meter(),
            initial_tempo=self.config.initial_tempo,
            autoplay=self.config.autoplay,
            scheduler=self.scheduler,
        )
        self.player = ClickPlayer()
        self._bag = CompositeSubscription()
        self._last_beat: Beat = Beat.FIRST

        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        self.strip = BeatStrip(self.theme)
        root.addWidget(self.strip)

        self.lbl_signature = QLabel("")
        self.lbl_signature.setObjectName("signature")
        self.lbl_signature.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lbl_signature, 1)

        grid = QGridLayout()
        grid.setHorizontalSpacing(10)

        self.step_numerator = QSpinBox()
        self.step_numerator.setMinimum(1)
        self.lbl_numerator = QLabel("")
        grid.addWidget(QLabel("Beats"), 0, 0)
        grid.addWidget(self.step_numerator, 0, 1)
        grid.addWidget(self.lbl_numerator, 0, 2)

        self.step_denominator = DenominatorSpinBox()
        self.lbl_denominator = QLabel("")
        grid.addWidget(QLabel("Note value"), 1, 0)
        grid.addWidget(self.step_denominator, 1, 1)
        grid.addWidget(self.lbl_denominator, 1, 2)
        root.addLayout(grid)

        tempo_row = QHBoxLayout()
        self.slider_tempo = QSlider(Qt.Horizontal)
        self.slider_tempo.setRange(int(TEMPO_MIN), int(TEMPO_MAX))
        self.lbl_tempo = QLabel("")
        self.lbl_tempo.setObjectName("tempo")
        tempo_row.addWidget(self.slider_tempo, 1)
        tempo_row.addWidget(self.lbl_tempo)
        root.addLayout(tempo_row)

        self.btn_play = QPushButton("Play (Space)")
        root.addWidget(self.btn_play)

        self._make_menu()
        self._prepare_audio()
        self._bind()

        act_space = QAction(self)
        act_space.setShortcut(QKeySequence(Qt.Key_Space))
        act_space.triggered.connect(self.engine.toggle)
        self.addAction(act_space)

        self.statusBar().showMessage("Ready.")

    def _make_menu(self) -> None:
        file_menu = self.menuBar().addMenu("File")

        act_quit = QAction("Quit", self)
        act_quit.setShortcut(QKeySequence.Quit)
        act_quit.triggered.connect(self.close)

        file_menu.addAction(act_quit)

    def _prepare_audio(self) -> None:
        try:
            self.player.prepare(self.config.click_dir)
        except AudioFileError as e:
            logger.warning("click samples unavailable: %s", e)
            QMessageBox.warning(self, "Click Sounds", f"Falling back to built-in clicks:\n{e}")
            self.player.prepare(None)

    def _bind(self) -> None:
        engine = self.engine

        # Initial widget state before widget signals are connected
        self.step_numerator.setMaximum(engine.max_numerator.value)
        self.step_numerator.setValue(engine.numerator_value.value)
        self.step_denominator.setValue(int(engine.stepped_denominator.value))
        self.slider_tempo.setValue(int(engine.current_tempo.value))

        # Inputs
        self.step_numerator.valueChanged.connect(lambda v: engine.stepped_numerator.on_next(float(v)))
        self.step_denominator.valueChanged.connect(lambda v: engine.stepped_denominator.on_next(float(v)))
        self.slider_tempo.valueChanged.connect(lambda v: engine.tempo.on_next(float(v)))
        self.btn_play.clicked.connect(engine.toggle)

        # Outputs
        self._bag.add(engine.numerator_text.subscribe(self.lbl_numerator.setText))
        self._bag.add(engine.denominator_text.subscribe(self.lbl_denominator.setText))
        self._bag.add(engine.max_numerator.subscribe(self._set_max_numerator))
        self._bag.add(engine.numerator_value.subscribe(self._set_numerator))
        self._bag.add(engine.signature_text.subscribe(self.lbl_signature.setText))
        self._bag.add(engine.tempo_text.subscribe(self.lbl_tempo.setText))
        self._bag.add(engine.is_playing.subscribe(self._on_playing))
        self._bag.add(engine.beat.subscribe(self._on_beat))
        self._bag.add(engine.beat_parity.subscribe(self._on_parity))

    # Engine-driven updates must not echo back into stepped_numerator: the raw
    # input keeps its value while a smaller denominator clamps the meter.
    def _set_max_numerator(self, value: int) -> None:
        self.step_numerator.blockSignals(True)
        self.step_numerator.setMaximum(max(value, self.step_numerator.value()))
        self.step_numerator.blockSignals(False)

    def _set_numerator(self, value: int) -> None:
        self.step_numerator.blockSignals(True)
        if value > self.step_numerator.maximum():
            self.step_numerator.setMaximum(value)
        self.step_numerator.setValue(value)
        self.step_numerator.setMaximum(self.engine.max_numerator.value)
        self.step_numerator.blockSignals(False)

    def _on_playing(self, playing: bool) -> None:
        self.btn_play.setText("Stop (Space)" if playing else "Play (Space)")
        if playing:
            self.statusBar().showMessage("Playing...")
        else:
            self.strip.clear()
            self.statusBar().showMessage("Stopped.")

    def _on_beat(self, beat: Beat) -> None:
        self._last_beat = beat
        self.player.play(beat)

    def _on_parity(self, parity: BeatParity) -> None:
        self.strip.push(self._last_beat, parity)

    def closeEvent(self, event) -> None:
        self._bag.dispose()
        self.engine.dispose()
        self.scheduler.cancel_all()
        self.player.release()
        super().closeEvent(event)
