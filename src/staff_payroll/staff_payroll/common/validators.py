from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Type, TypeVar, Union

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

E = TypeVar("E", bound=Enum)


def require_date(value: Union[date, str, None], field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid date (YYYY-MM-DD)")


def require_positive_int(value: object, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}")
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid {field_name}")
    # 1.9 must not silently become 1
    if number <= 0 or (isinstance(value, (float, Decimal)) and number != value):
        raise ValidationError(f"Invalid {field_name}")
    return number


def require_month(value: object) -> int:
    month = require_positive_int(value, "month")
    if month > 12:
        raise ValidationError("Month must be between 1 and 12")
    return month


def require_year(value: object) -> int:
    year = require_positive_int(value, "year")
    if year < 1900 or year > 9999:
        raise ValidationError("Year is out of range")
    return year


def require_non_negative_decimal(value: object, field_name: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid {field_name}")
    if not number.is_finite() or number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def parse_enum(enum_cls: Type[E], value: Union[E, str, None], field_name: str) -> Optional[E]:
    """Parse an optional enum value; None and "" mean "not given"."""
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name} (allowed: {allowed})")
