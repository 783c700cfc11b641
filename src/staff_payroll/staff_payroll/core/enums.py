from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles as set in the session by the auth layer."""

    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    STAFF = "staff"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class LeaveKind(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class LeaveStatus(str, Enum):
    """Approval flow of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceCategory(str, Enum):
    """Daily attendance categories delivered by the attendance source."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    OVERTIME = "overtime"
    SHORT_DAY = "short-day"


class SalaryStatus(str, Enum):
    """Lifecycle of a monthly salary record: draft -> finalized -> paid."""

    DRAFT = "draft"
    FINALIZED = "finalized"
    PAID = "paid"
