from dataclasses import dataclass

@dataclass(frozen=True)
class Theme:
    bg: str = "#0B0F14"
    fg: str = "#D7DEE7"
    grid: str = "#263241"
    monitor_off: str = "#2A3442"
    beat_first: str = "#FF2E2E"
    beat_even: str = "#4CC3FF"
    beat_odd: str = "#44FFAA"

APP_QSS = """
QMainWindow { background: #0B0F14; }
QLabel { color: #D7DEE7; }
QLabel#signature { font-size: 42px; font-weight: 700; }
QLabel#tempo { color: #9FB0C3; font-size: 18px; }
QPushButton {
    background: #111826;
    color: #D7DEE7;
    border: 1px solid #263241;
    padding: 6px 10px;
    border-radius: 10px;
}
QPushButton:hover { border-color: #3B4D63; }
QPushButton:pressed { background: #0F1520; }
QSpinBox {
    background: #0F1520;
    color: #D7DEE7;
    border: 1px solid #263241;
    padding: 4px 8px;
    border-radius: 10px;
}
QSlider::groove:horizontal { background: #263241; height: 6px; border-radius: 3px; }
QSlider::handle:horizontal { background: #4CC3FF; width: 14px; margin: -5px 0; border-radius: 7px; }
QStatusBar { color: #9FB0C3; }
QMenuBar { background: #0B0F14; color: #D7DEE7; }
QMenuBar::item:selected { background: #111826; }
QMenu { background: #0B0F14; color: #D7DEE7; border: 1px solid #263241; }
QMenu::item:selected { background: #111826; }
"""
