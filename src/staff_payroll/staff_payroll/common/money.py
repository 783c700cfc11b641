from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..core.constants import CURRENCY_QUANTUM, DAY_QUANTUM

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 do not leak binary noise
    return Decimal(str(value))


def round_currency(value: Number) -> Decimal:
    """Round to the smallest currency unit, half-up."""
    return to_decimal(value).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def round_days(value: Number) -> Decimal:
    return to_decimal(value).quantize(DAY_QUANTUM, rounding=ROUND_HALF_UP)
