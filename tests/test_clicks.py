from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from audio.clicks import AudioFileError, find_click_files, load_click, render_click, render_click_set, write_click_set
from models.beat import Beat


def test_render_click_shape_and_decay():
    y = render_click(sr=44100, freq=1000.0, dur_ms=20.0, vol=0.5)
    assert y.dtype == np.float32
    assert len(y) == 882
    assert float(np.max(np.abs(y))) <= 0.5
    head = float(np.max(np.abs(y[:100])))
    tail = float(np.max(np.abs(y[-100:])))
    assert tail < head


def test_first_click_is_accented():
    clicks = render_click_set(sr=22050)
    assert set(clicks) == {Beat.FIRST, Beat.REGULAR}
    assert np.max(np.abs(clicks[Beat.FIRST])) > np.max(np.abs(clicks[Beat.REGULAR]))


def test_write_click_set_round_trips_through_soundfile(tmp_path: Path):
    paths = write_click_set(tmp_path / "clicks", sr=22050)
    assert paths[Beat.FIRST].name == "first.wav"
    assert paths[Beat.REGULAR].name == "regular.wav"

    y, sr = load_click(paths[Beat.REGULAR])
    assert sr == 22050
    assert float(np.max(np.abs(y))) == pytest.approx(1.0)


def test_load_click_downmixes_stereo(tmp_path: Path):
    p = tmp_path / "first.wav"
    stereo = np.stack([render_click(8000), render_click(8000)], axis=1)
    sf.write(str(p), stereo, 8000)
    y, _ = load_click(p)
    assert y.ndim == 1


def test_load_click_errors(tmp_path: Path):
    with pytest.raises(AudioFileError):
        load_click(tmp_path / "missing.wav")

    mp3 = tmp_path / "first.mp3"
    mp3.write_bytes(b"ID3")
    with pytest.raises(AudioFileError):
        load_click(mp3)

    broken = tmp_path / "broken.wav"
    broken.write_bytes(b"not a wav file")
    with pytest.raises(AudioFileError):
        load_click(broken)

    silent = tmp_path / "silent.wav"
    sf.write(str(silent), np.zeros(100, dtype=np.float32), 8000)
    with pytest.raises(AudioFileError):
        load_click(silent)


def test_find_click_files(tmp_path: Path):
    assert find_click_files(None) == {}
    sf.write(str(tmp_path / "first.flac"), render_click(8000), 8000)
    found = find_click_files(tmp_path)
    assert found == {Beat.FIRST: tmp_path / "first.flac"}

    with pytest.raises(AudioFileError):
        find_click_files(tmp_path / "nope")
