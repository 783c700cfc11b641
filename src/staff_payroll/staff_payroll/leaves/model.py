from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import span_days
from ..core.enums import LeaveKind, LeaveStatus
from ..staff.model import StaffBrief


@dataclass(frozen=True)
class LeaveRequest:
    """One contiguous leave span (both ends inclusive) for one staff member."""

    leave_id: int
    staff_id: int
    start_date: date
    end_date: date
    kind: LeaveKind
    reason: Optional[str]
    status: LeaveStatus
    days: int
    year: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def consumes_quota(self) -> bool:
        return self.kind == LeaveKind.PAID and self.status == LeaveStatus.APPROVED

    def with_span(self, start_date: date, end_date: date) -> "LeaveRequest":
        """Copy with a new span; days and year always follow the span."""
        return replace(
            self,
            start_date=start_date,
            end_date=end_date,
            days=span_days(start_date, end_date),
            year=start_date.year,
        )


@dataclass(frozen=True)
class NewLeave:
    staff_id: int
    start_date: date
    end_date: date
    kind: LeaveKind
    reason: Optional[str]

    @property
    def days(self) -> int:
        return span_days(self.start_date, self.end_date)

    @property
    def year(self) -> int:
        return self.start_date.year


@dataclass(frozen=True)
class QuotaUsage:
    """Approved paid days for one (staff, year) and the version they were read at."""

    used_days: int
    version: int


@dataclass(frozen=True)
class LeaveQuota:
    total_quota: int
    used_quota: int
    remaining_quota: int
    year: int

    def to_dict(self) -> dict:
        return {
            "total_quota": self.total_quota,
            "used_quota": self.used_quota,
            "remaining_quota": self.remaining_quota,
            "year": self.year,
        }


@dataclass(frozen=True)
class LeaveView:
    """Leave request joined with the staff display fields at read time."""

    leave: LeaveRequest
    staff: Optional[StaffBrief]

    def to_dict(self) -> dict:
        lv = self.leave
        return {
            "id": lv.leave_id,
            "staff_id": lv.staff_id,
            "staff": self.staff.to_dict() if self.staff else None,
            "start_date": lv.start_date.strftime("%Y-%m-%d"),
            "end_date": lv.end_date.strftime("%Y-%m-%d"),
            "type": lv.kind.value,
            "reason": lv.reason,
            "status": lv.status.value,
            "days": lv.days,
            "year": lv.year,
            "created_at": lv.created_at.strftime("%Y-%m-%d %H:%M") if lv.created_at else None,
            "updated_at": lv.updated_at.strftime("%Y-%m-%d %H:%M") if lv.updated_at else None,
        }
