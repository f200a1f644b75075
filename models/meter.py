# models/meter.py
from __future__ import annotations

import math
from dataclasses import dataclass

DENOMINATORS = (4, 8, 16, 32)


class InvalidSignature(ValueError):
    pass


def round_half_up(value: float) -> int:
    # Qt spin boxes and sliders report floats; 2.5 must land on 3, not 2.
    return int(math.floor(float(value) + 0.5))


def stepper_value_to_denominator(step: float) -> int:
    """
    Denominator stepper values are 1..4.
    2 ** (step + 1) -> 4, 8, 16, 32
    """
    return 2 ** (round_half_up(step) + 1)


def denominator_to_stepper_value(denominator: int) -> int:
    """
    log2(4, 8, 16, 32) - 1 -> 1, 2, 3, 4
    """
    if denominator not in DENOMINATORS:
        raise InvalidSignature(f"denominator must be one of {DENOMINATORS}, got {denominator!r}")
    return int(math.log2(denominator)) - 1


@dataclass(frozen=True)
class Meter:
    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        if isinstance(self.numerator, bool) or not isinstance(self.numerator, int) or self.numerator < 1:
            raise InvalidSignature(f"numerator must be a positive integer, got {self.numerator!r}")
        if self.denominator not in DENOMINATORS:
            raise InvalidSignature(f"denominator must be one of {DENOMINATORS}, got {self.denominator!r}")

    @property
    def signature(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def __str__(self) -> str:
        return self.signature

    @staticmethod
    def parse(signature: str) -> "Meter":
        parts = str(signature).split("/")
        if len(parts) != 2:
            raise InvalidSignature(f"expected 'N/D', got {signature!r}")

        values = []
        for part in parts:
            part = part.strip()
            if not (part.isascii() and part.isdigit()):
                raise InvalidSignature(f"expected 'N/D' with positive integers, got {signature!r}")
            values.append(int(part))

        return Meter(numerator=values[0], denominator=values[1])

    @staticmethod
    def from_stepper_values(numerator_value: float, denominator_step: float) -> "Meter":
        return Meter(
            numerator=round_half_up(numerator_value),
            denominator=stepper_value_to_denominator(denominator_step),
        )
