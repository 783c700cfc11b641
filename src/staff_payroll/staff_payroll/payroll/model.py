from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import SalaryStatus
from ..staff.model import StaffBrief


@dataclass(frozen=True)
class PayrollFigures:
    """Computed part of a monthly salary record.

    Day figures are Decimals because half-days and overtime shares are
    fractional.
    """

    base_daily_salary: Decimal
    base_monthly_salary: Decimal
    working_days_in_month: int
    actual_working_days: Decimal
    paid_leaves_taken: int
    unpaid_leaves_taken: int
    overtime_days: Decimal
    short_days: int
    company_closure_days: int
    payable_days: Decimal
    deduction_days: Decimal
    commission: Decimal
    net_salary: Decimal
    negative_pay_flagged: bool = False


@dataclass(frozen=True)
class MonthlySalaryRecord:
    salary_id: int
    staff_id: int
    month: int
    year: int
    figures: PayrollFigures
    status: SalaryStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_draft(self) -> bool:
        return self.status == SalaryStatus.DRAFT


def _num(value: Decimal) -> float:
    return float(value)


@dataclass(frozen=True)
class SalaryView:
    """Salary record joined with the staff display fields at read time."""

    record: MonthlySalaryRecord
    staff: Optional[StaffBrief]

    def to_dict(self) -> dict:
        rec = self.record
        f = rec.figures
        return {
            "id": rec.salary_id,
            "staff_id": rec.staff_id,
            "staff": self.staff.to_dict() if self.staff else None,
            "month": rec.month,
            "year": rec.year,
            "base_daily_salary": _num(f.base_daily_salary),
            "base_monthly_salary": _num(f.base_monthly_salary),
            "working_days_in_month": f.working_days_in_month,
            "actual_working_days": _num(f.actual_working_days),
            "paid_leaves_taken": f.paid_leaves_taken,
            "unpaid_leaves_taken": f.unpaid_leaves_taken,
            "overtime_days": _num(f.overtime_days),
            "short_days": f.short_days,
            "company_closure_days": f.company_closure_days,
            "payable_days": _num(f.payable_days),
            "deduction_days": _num(f.deduction_days),
            "commission": _num(f.commission),
            "net_salary": _num(f.net_salary),
            "negative_pay_flagged": f.negative_pay_flagged,
            "status": rec.status.value,
            "created_at": rec.created_at.strftime("%Y-%m-%d %H:%M") if rec.created_at else None,
            "updated_at": rec.updated_at.strftime("%Y-%m-%d %H:%M") if rec.updated_at else None,
        }


@dataclass(frozen=True)
class BulkDeleteResult:
    deleted_count: int
    requested_count: int
    skipped_ids: tuple[int, ...]

    def to_dict(self) -> dict:
        return {
            "deleted_count": self.deleted_count,
            "requested_count": self.requested_count,
            "skipped_ids": list(self.skipped_ids),
        }
