from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from core.config import FLASH_MS, STRIP_BEATS
from models.beat import Beat, BeatParity
from ui.theme import Theme


class BeatMonitor(QLabel):
    def __init__(self, theme: Theme, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._theme = theme
        self.setAlignment(Qt.AlignCenter)
        self.setFixedHeight(56)
        self.setText("BEAT")
        self._color = theme.monitor_off
        self._apply()

    def flash(self, beat: Beat, parity: BeatParity) -> None:
        if beat is Beat.FIRST:
            self._color = self._theme.beat_first
        elif parity is BeatParity.EVEN:
            self._color = self._theme.beat_even
        else:
            self._color = self._theme.beat_odd
        self.setText("1" if beat is Beat.FIRST else "•")
        self._apply()
        QTimer.singleShot(FLASH_MS, self.off)

    def off(self) -> None:
        self._color = self._theme.monitor_off
        self.setText("BEAT")
        self._apply()

    def _apply(self) -> None:
        self.setStyleSheet(
            f"QLabel {{ background:{self._color}; color:{self._theme.fg}; "
            "border: 1px solid #263241; border-radius: 12px; font-size: 22px; font-weight: 700; }}"
        )


class BeatStrip(QWidget):
    """
    Beat feedback:
    - monitor that flashes on every beat (red on the first beat of a measure)
    - bar strip of the most recent beats, tall bars for first beats
    """
    def __init__(self, theme: Theme, size: int = STRIP_BEATS, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._theme = theme
        self._size = int(size)
        self._beats: Deque[Tuple[Beat, BeatParity]] = deque(maxlen=self._size)
        self._count = 0

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.monitor = BeatMonitor(theme)
        layout.addWidget(self.monitor)

        pg.setConfigOptions(antialias=True)
        self.plot = pg.PlotWidget()
        self.plot.setBackground(theme.bg)
        self.plot.showGrid(x=False, y=False)
        self.plot.setMouseEnabled(x=False, y=False)
        self.plot.hideButtons()
        self.plot.setMenuEnabled(False)
        self.plot.getAxis("left").setStyle(showValues=False)
        self.plot.getAxis("left").setPen(pg.mkPen(theme.grid))
        self.plot.getAxis("bottom").setPen(pg.mkPen(theme.grid))
        self.plot.getAxis("bottom").setTextPen(pg.mkPen(theme.fg))
        self.plot.setYRange(0, 1.0, padding=0.05)
        self.plot.setFixedHeight(120)
        layout.addWidget(self.plot)

        self._bars: Optional[pg.BarGraphItem] = None
        self._redraw()

    # ---------- Public API ----------
    def push(self, beat: Beat, parity: BeatParity) -> None:
        self._beats.append((beat, parity))
        self._count += 1
        self.monitor.flash(beat, parity)
        self._redraw()

    def clear(self) -> None:
        self._beats.clear()
        self._count = 0
        self.monitor.off()
        self._redraw()

    # ---------- Internals ----------
    def _redraw(self) -> None:
        if self._bars is not None:
            self.plot.removeItem(self._bars)
            self._bars = None

        end = max(self._count, self._size)
        self.plot.setXRange(end - self._size - 0.5, end - 0.5, padding=0.0)
        if not self._beats:
            return

        first_x = self._count - len(self._beats)
        xs = np.arange(first_x, self._count, dtype=np.float32)
        hs = np.array([1.0 if b is Beat.FIRST else 0.5 for b, _ in self._beats], dtype=np.float32)
        brushes = [
            pg.mkBrush(
                self._theme.beat_first if b is Beat.FIRST
                else self._theme.beat_even if p is BeatParity.EVEN
                else self._theme.beat_odd
            )
            for b, p in self._beats
        ]

        self._bars = pg.BarGraphItem(x=xs, height=hs, width=0.7, y0=0.0, brushes=brushes, pen=pg.mkPen(None))
        self.plot.addItem(self._bars)
