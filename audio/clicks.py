# audio/clicks.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import soundfile as sf

from core.config import CLICK_FIRST_HZ, CLICK_MS, CLICK_REGULAR_HZ, CLICK_SR
from models.beat import Beat

SUPPORTED_EXTS = ("wav", "ogg", "flac")


class AudioFileError(RuntimeError):
    pass


def render_click(
    sr: int = CLICK_SR,
    freq: float = CLICK_REGULAR_HZ,
    dur_ms: float = CLICK_MS,
    vol: float = 0.5,
) -> np.ndarray:
    """
    Sine burst with an exponential decay: one click.
    """
    n = max(1, int(sr * dur_ms / 1000.0))
    t = np.arange(n, dtype=np.float32) / float(sr)
    y = np.sin(2.0 * np.pi * freq * t) * np.exp(-t * 300.0) * vol
    return y.astype(np.float32)


def render_click_set(sr: int = CLICK_SR, vol: float = 0.5) -> Dict[Beat, np.ndarray]:
    return {
        Beat.FIRST: render_click(sr, CLICK_FIRST_HZ, CLICK_MS, min(1.0, vol * 1.3)),
        Beat.REGULAR: render_click(sr, CLICK_REGULAR_HZ, CLICK_MS * 0.8, vol),
    }


def write_click_set(directory: Path, sr: int = CLICK_SR, vol: float = 0.5) -> Dict[Beat, Path]:
    """
    Synthesize both clicks and write them as PCM16 wav files named after the beat kind.
    """
    directory.mkdir(parents=True, exist_ok=True)
    out: Dict[Beat, Path] = {}
    for beat, y in render_click_set(sr, vol).items():
        path = directory / beat.audio_file
        sf.write(str(path), y, sr, subtype="PCM_16")
        out[beat] = path
    return out


def _load_with_soundfile(path: Path) -> Tuple[np.ndarray, int]:
    try:
        y, sr = sf.read(str(path), always_2d=False)
    except RuntimeError as e:
        raise AudioFileError(f"cannot read {path}: {e}") from e
    return y.astype(np.float32), int(sr)


def load_click(path: Path, max_seconds: float = 2.0) -> Tuple[np.ndarray, int]:
    """
    Load a user click sample as mono float32, trimmed and peak-normalized.
    """
    if not path.exists():
        raise AudioFileError(f"click file not found: {path}")

    ext = path.suffix.lower().lstrip(".")
    if ext not in SUPPORTED_EXTS:
        raise AudioFileError(f"unsupported click format: {path.name} (use {', '.join(SUPPORTED_EXTS)})")

    y, sr = _load_with_soundfile(path)

    if y.ndim == 2:
        y = y.mean(axis=1)

    if max_seconds and max_seconds > 0:
        max_n = int(max_seconds * sr)
        if len(y) > max_n:
            y = y[:max_n]

    m = float(np.max(np.abs(y))) if len(y) else 0.0
    if m <= 0:
        raise AudioFileError(f"click file is silent: {path}")
    return (y / m).astype(np.float32), sr


def find_click_files(directory: Optional[Path]) -> Dict[Beat, Path]:
    """
    Look for first.wav / regular.wav (or .ogg/.flac) in a user folder.
    Missing kinds are simply left out.
    """
    found: Dict[Beat, Path] = {}
    if directory is None:
        return found
    if not directory.is_dir():
        raise AudioFileError(f"click folder not found: {directory}")
    for beat in Beat:
        for ext in SUPPORTED_EXTS:
            p = directory / f"{beat.value}.{ext}"
            if p.exists():
                found[beat] = p
                break
    return found
