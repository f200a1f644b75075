from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import List, Optional

from core.config import TEMPO_MAX, TEMPO_MIN, MetronomeConfig
from models.beat import Beat
from models.meter import InvalidSignature

logger = logging.getLogger("metronome")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="metronome", description="Desktop metronome")
    p.add_argument("--signature", default="4/4", help="time signature N/D, D in 4, 8, 16, 32 (default: 4/4)")
    p.add_argument("--tempo", type=float, default=120.0, help=f"tempo in BPM ({TEMPO_MIN:g}-{TEMPO_MAX:g}, default: 120)")
    p.add_argument("--autoplay", action="store_true", help="start playing immediately")
    p.add_argument("--clicks", default=None, help="folder with first.wav / regular.wav click samples")
    p.add_argument("--headless", action="store_true", help="print beats to the console instead of opening a window")
    p.add_argument("--beats", type=int, default=0, help="headless: stop after this many beats (0 = run until Ctrl+C)")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def parse_config(argv: Optional[List[str]] = None) -> tuple[argparse.Namespace, MetronomeConfig]:
    parser = build_parser()
    ns = parser.parse_args(argv)
    cfg = MetronomeConfig.from_args(ns)
    try:
        cfg.meter()
    except InvalidSignature as e:
        parser.error(str(e))
    if not (TEMPO_MIN <= cfg.initial_tempo <= TEMPO_MAX):
        parser.error(f"--tempo must be between {TEMPO_MIN:g} and {TEMPO_MAX:g}")
    if ns.beats < 0:
        parser.error("--beats must be >= 0")
    return ns, cfg


def run_headless(cfg: MetronomeConfig, max_beats: int = 0) -> int:
    from PySide6.QtCore import QCoreApplication

    from core.engine import BeatEngine
    from core.qt_scheduler import QtBeatScheduler

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    engine = BeatEngine(
        initial_meter=cfg.meter(),
        initial_tempo=cfg.initial_tempo,
        autoplay=True,
        scheduler=QtBeatScheduler(),
    )
    count = 0

    def on_beat(beat: Beat) -> None:
        nonlocal count
        count += 1
        print("TICK!" if beat is Beat.FIRST else "tick", flush=True)
        if max_beats and count >= max_beats:
            engine.dispose()
            app.quit()

    sub = engine.beat.subscribe(on_beat)
    print(f"{engine.signature_text.value} @ {engine.tempo_text.value}", flush=True)
    # let Ctrl+C end the Qt loop
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    try:
        return app.exec()
    finally:
        sub.dispose()
        engine.dispose()


def run_window(cfg: MetronomeConfig) -> int:
    from PySide6.QtWidgets import QApplication

    from ui.main_window import MetronomeWindow

    app = QApplication.instance() or QApplication(sys.argv)
    win = MetronomeWindow(cfg)
    win.show()
    return app.exec()


def main(argv: Optional[List[str]] = None) -> int:
    ns, cfg = parse_config(argv)
    logging.basicConfig(
        level=getattr(logging, ns.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("config: %s", cfg)
    if ns.headless:
        return run_headless(cfg, max_beats=ns.beats)
    return run_window(cfg)


if __name__ == "__main__":
    sys.exit(main())
