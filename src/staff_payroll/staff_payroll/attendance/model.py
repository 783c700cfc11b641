from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceCategory


@dataclass(frozen=True)
class AttendanceFact:
    """One categorized attendance day for a staff member.

    ``fractional_weight`` is the share of a day the fact stands for: the
    worked share for present/half-day, the extra share for overtime. None
    means the category default.
    """

    staff_id: int
    work_date: date
    category: AttendanceCategory
    fractional_weight: Optional[Decimal] = None
