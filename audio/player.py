from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional

import soundfile as sf
from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect

from audio.clicks import find_click_files, load_click, write_click_set
from core.config import CLICK_SR
from models.beat import Beat

logger = logging.getLogger(__name__)


class ClickPlayer:
    """One QSoundEffect per beat kind; ``play(beat)`` fires the matching click."""

    def __init__(self) -> None:
        self._effects: Dict[Beat, QSoundEffect] = {}
        self._tmp: Optional[tempfile.TemporaryDirectory] = None
        self._volume: float = 0.8

    def prepare(self, sample_dir: Optional[Path] = None) -> Dict[Beat, Path]:
        self.release()
        self._tmp = tempfile.TemporaryDirectory(prefix="metronome_clicks_")
        tmp_dir = Path(self._tmp.name)

        paths = write_click_set(tmp_dir, sr=CLICK_SR)
        for beat, src in find_click_files(sample_dir).items():
            # QSoundEffect only plays wav; re-encode whatever the user gave us
            y, sr = load_click(src)
            dst = tmp_dir / f"user_{beat.audio_file}"
            sf.write(str(dst), y, sr, subtype="PCM_16")
            paths[beat] = dst
            logger.info("using %s for %s beats", src, beat.value)

        for beat, path in paths.items():
            effect = QSoundEffect()
            effect.setSource(QUrl.fromLocalFile(str(path.resolve())))
            effect.setVolume(self._volume)
            self._effects[beat] = effect
        return paths

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, float(volume)))
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def play(self, beat: Beat) -> None:
        effect = self._effects.get(beat)
        if effect is None:
            return
        effect.play()

    def release(self) -> None:
        for effect in self._effects.values():
            effect.stop()
        self._effects.clear()
        if self._tmp is not None:
            self._tmp.cleanup()
            self._tmp = None
