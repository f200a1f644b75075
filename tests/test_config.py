from __future__ import annotations

from pathlib import Path

import pytest

from core.config import MetronomeConfig
from main import parse_config
from models.meter import InvalidSignature, Meter


def test_config_defaults():
    cfg = MetronomeConfig()
    assert cfg.meter() == Meter(4, 4)
    assert cfg.initial_tempo == 120.0
    assert cfg.autoplay is False
    assert cfg.click_dir is None


def test_config_meter_fails_fast():
    with pytest.raises(InvalidSignature):
        MetronomeConfig(initial_meter="4/7").meter()


def test_parse_config_from_cli():
    ns, cfg = parse_config(["--signature", "7/8", "--tempo", "96.5", "--autoplay", "--clicks", "samples"])
    assert cfg.meter() == Meter(7, 8)
    assert cfg.initial_tempo == 96.5
    assert cfg.autoplay is True
    assert cfg.click_dir == Path("samples")
    assert ns.headless is False


@pytest.mark.parametrize(
    "argv",
    [
        ["--signature", "4/6"],
        ["--signature", "four/4"],
        ["--tempo", "10"],
        ["--beats", "-1"],
    ],
)
def test_parse_config_rejects_bad_values(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        parse_config(argv)
    assert exc.value.code == 2
