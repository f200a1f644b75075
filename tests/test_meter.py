from __future__ import annotations

import pytest

from models.meter import (
    InvalidSignature,
    Meter,
    denominator_to_stepper_value,
    round_half_up,
    stepper_value_to_denominator,
)


@pytest.mark.parametrize("step", [1, 2, 3, 4])
def test_stepper_round_trip(step):
    assert denominator_to_stepper_value(2 ** (step + 1)) == step
    assert stepper_value_to_denominator(step) == 2 ** (step + 1)


def test_stepper_values_map_to_denominators():
    assert [stepper_value_to_denominator(s) for s in (1, 2, 3, 4)] == [4, 8, 16, 32]
    # UI steppers report floats
    assert stepper_value_to_denominator(3.0) == 16


def test_denominator_to_stepper_rejects_unknown_denominator():
    with pytest.raises(InvalidSignature):
        denominator_to_stepper_value(12)


def test_parse_signature():
    m = Meter.parse("4/4")
    assert (m.numerator, m.denominator) == (4, 4)
    assert m.signature == "4/4"
    assert Meter.parse(" 7 / 8 ") == Meter(7, 8)


def test_numerator_has_no_upper_bound_in_model():
    assert Meter.parse("24/4").numerator == 24


@pytest.mark.parametrize(
    "text",
    ["", "4", "4/4/4", "a/4", "4/b", "0/4", "-3/4", "4/0", "4/3", "4/64", "4/2", "3.5/4", "/4", "٤/٤", "４/４", "+4/4"],
)
def test_parse_rejects_invalid_signatures(text):
    with pytest.raises(InvalidSignature):
        Meter.parse(text)


def test_invalid_signature_is_a_value_error():
    with pytest.raises(ValueError):
        Meter.parse("x")


def test_constructor_enforces_invariants():
    with pytest.raises(InvalidSignature):
        Meter(0, 4)
    with pytest.raises(InvalidSignature):
        Meter(4, 6)


def test_from_stepper_values_rounds_numerator():
    assert Meter.from_stepper_values(3.0, 2) == Meter(3, 8)
    assert Meter.from_stepper_values(2.5, 1) == Meter(3, 4)
    assert Meter.from_stepper_values(4.4, 4) == Meter(4, 32)


def test_round_half_up():
    assert [round_half_up(v) for v in (0.5, 1.5, 2.5, 119.5, 120.49)] == [1, 2, 3, 120, 120]


def test_meters_compare_by_value():
    assert Meter(4, 4) == Meter.parse("4/4")
    assert Meter(3, 4) != Meter(3, 8)
    assert len({Meter(4, 4), Meter.parse("4/4")}) == 1
