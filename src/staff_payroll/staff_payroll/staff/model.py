from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_ANNUAL_PAID_LEAVES_QUOTA
from ..core.enums import StaffStatus


@dataclass(frozen=True)
class Staff:
    """Staff member as seen by leave and payroll (read-only here)."""

    staff_id: int
    full_name: str
    phone: Optional[str]
    email: Optional[str]
    status: StaffStatus
    annual_paid_leaves_quota: int = DEFAULT_ANNUAL_PAID_LEAVES_QUOTA
    base_daily_salary: Decimal = Decimal("0")

    @property
    def is_active(self) -> bool:
        return self.status == StaffStatus.ACTIVE


@dataclass(frozen=True)
class StaffBrief:
    """Display fields joined onto leave and salary views at read time."""

    staff_id: int
    full_name: str
    phone: Optional[str]
    email: Optional[str]

    @classmethod
    def of(cls, staff: Staff) -> "StaffBrief":
        return cls(staff_id=staff.staff_id, full_name=staff.full_name, phone=staff.phone, email=staff.email)

    def to_dict(self) -> dict:
        return {"id": self.staff_id, "name": self.full_name, "phone": self.phone, "email": self.email}
