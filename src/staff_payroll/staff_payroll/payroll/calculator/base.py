from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import FrozenSet, Tuple

from ...attendance.model import AttendanceFact
from ...core.constants import DEFAULT_HALF_DAY_WEIGHT, DEFAULT_OVERTIME_DAY_RATE, DEFAULT_SHORT_DAY_WEIGHT
from ...leaves.model import LeaveRequest
from ..model import PayrollFigures


@dataclass(frozen=True)
class PayrollPolicy:
    """Business weights that are configured, not decided, by the engine.

    short_day_weight: payable share earned by a short day (1 = full day).
    half_day_weight: working-day credit of a half-day without explicit weight.
    overtime_day_rate: payable days credited per overtime day.
    """

    short_day_weight: Decimal = DEFAULT_SHORT_DAY_WEIGHT
    half_day_weight: Decimal = DEFAULT_HALF_DAY_WEIGHT
    overtime_day_rate: Decimal = DEFAULT_OVERTIME_DAY_RATE

    @classmethod
    def from_settings(cls, settings) -> "PayrollPolicy":
        return cls(
            short_day_weight=Decimal(str(getattr(settings, "SHORT_DAY_WEIGHT", DEFAULT_SHORT_DAY_WEIGHT))),
            half_day_weight=Decimal(str(getattr(settings, "HALF_DAY_WEIGHT", DEFAULT_HALF_DAY_WEIGHT))),
            overtime_day_rate=Decimal(str(getattr(settings, "OVERTIME_DAY_RATE", DEFAULT_OVERTIME_DAY_RATE))),
        )


@dataclass(frozen=True)
class PayrollInputs:
    """Everything a calculator needs for one (staff, month, year)."""

    month: int
    year: int
    base_daily_salary: Decimal
    commission: Decimal = Decimal("0")
    closure_dates: FrozenSet[date] = field(default_factory=frozenset)
    attendance: Tuple[AttendanceFact, ...] = ()
    leaves: Tuple[LeaveRequest, ...] = ()


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, inputs: PayrollInputs) -> PayrollFigures:
        raise NotImplementedError
