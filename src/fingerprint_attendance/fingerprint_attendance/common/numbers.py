from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal, str]

CENT = Decimal("0.01")


def to_money(value: Number) -> Decimal:
    """Decimal amount rounded half-up to 2 places."""
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def round2(value: Number) -> float:
    """Hours and day-fractions are stored as 2-decimal floats."""
    return float(to_money(value))
