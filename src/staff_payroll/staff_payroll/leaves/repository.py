from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import LeaveKind, LeaveStatus
from .model import LeaveRequest, NewLeave, QuotaUsage


class LeaveRepository(Protocol):
    """Storage for leave requests plus the per-(staff, year) quota version.

    Every write that may change the set of approved paid leaves of a
    (staff, year) bumps that pair's version, so a guarded write made against
    a stale ``QuotaUsage`` snapshot is refused instead of over-spending.
    """

    def create(self, *, leave: NewLeave) -> int:
        """Insert a pending request and return its id."""

        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def get_versioned(self, leave_id: int) -> Optional[Tuple[LeaveRequest, int]]:
        """The request and the quota version of its (staff, year), read in one snapshot."""

        raise NotImplementedError

    def list_leaves(
        self,
        *,
        staff_id: Optional[int] = None,
        kind: Optional[LeaveKind] = None,
        year: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        """Matching requests, newest start date first."""

        raise NotImplementedError

    def list_approved_overlapping(self, *, staff_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        """Approved requests of the staff member that touch [start_date, end_date]."""

        raise NotImplementedError

    def paid_usage(self, *, staff_id: int, year: int, exclude_leave_id: Optional[int] = None) -> QuotaUsage:
        raise NotImplementedError

    def update(
        self,
        *,
        leave: LeaveRequest,
        previous_year: int,
        expected_version: int,
        expected_previous_version: Optional[int] = None,
    ) -> bool:
        """Persist all mutable fields of ``leave``.

        The write only happens if the quota version of (leave.staff_id,
        leave.year) is still ``expected_version`` and, when the request moves
        out of ``previous_year``, that year's version is still
        ``expected_previous_version``. Returns False when a guard fails or the
        row no longer exists; nothing is written then.
        """

        raise NotImplementedError

    def delete(self, leave_id: int) -> bool:
        raise NotImplementedError
