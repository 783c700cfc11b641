from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..common.datetime_utils import now_local
from ..common.validators import parse_enum, require_date, require_positive_int, require_year
from ..core.constants import DEFAULT_QUOTA_WRITE_RETRIES
from ..core.enums import LeaveKind, LeaveStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from ..staff.model import Staff, StaffBrief
from ..staff.repository import StaffRepository
from .model import LeaveQuota, LeaveRequest, LeaveView, NewLeave, QuotaUsage
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

DateInput = Union[date, str, None]

UPDATABLE_FIELDS = frozenset({"start_date", "end_date", "kind", "reason", "status"})
APPROVER_ROLES = frozenset({Role.MANAGER})


class LeaveService:
    """Leave ledger: leave requests and the annual paid-leave quota.

    Quota is consumed only by approved paid requests. It is checked when a
    paid request is created and again on every update that leaves a request
    approved and paid; the second check is written through the repository's
    version guard so two concurrent approvals cannot both spend the same days.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        staff: StaffRepository,
        *,
        write_retries: int = DEFAULT_QUOTA_WRITE_RETRIES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._staff = staff
        self._write_retries = max(int(write_retries), 1)
        self._clock = clock

    # -------- helpers --------
    def _require_staff(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(int(staff_id))
        if not staff:
            raise NotFoundError("Staff member not found")
        return staff

    def _require_leave(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    @staticmethod
    def _require_approver(current_role: Role) -> None:
        if current_role not in APPROVER_ROLES:
            raise AuthorizationError("Only a manager can change or delete leave requests")

    @staticmethod
    def _clean_reason(reason: Optional[str]) -> Optional[str]:
        return (reason or "").strip() or None

    def _check_quota(
        self,
        staff: Staff,
        *,
        year: int,
        days: int,
        exclude_leave_id: Optional[int] = None,
    ) -> QuotaUsage:
        usage = self._leaves.paid_usage(staff_id=staff.staff_id, year=year, exclude_leave_id=exclude_leave_id)
        remaining = staff.annual_paid_leaves_quota - usage.used_days
        if days > remaining:
            logger.warning(
                "Paid leave quota exceeded: staff=%s year=%s requested=%s remaining=%s",
                staff.staff_id,
                year,
                days,
                remaining,
            )
            raise QuotaExceededError(remaining=remaining, requested=days)
        return usage

    def _to_view(self, leave: LeaveRequest, cache: Optional[Dict[int, Optional[StaffBrief]]] = None) -> LeaveView:
        cache = {} if cache is None else cache
        if leave.staff_id not in cache:
            staff = self._staff.get_by_id(leave.staff_id)
            cache[leave.staff_id] = StaffBrief.of(staff) if staff else None
        return LeaveView(leave=leave, staff=cache[leave.staff_id])

    # -------- commands --------
    def create_leave(
        self,
        *,
        staff_id: Any,
        start_date: DateInput,
        end_date: DateInput,
        kind: Union[LeaveKind, str, None],
        reason: Optional[str] = None,
    ) -> LeaveView:
        if staff_id in (None, ""):
            raise ValidationError("Staff ID is required")
        sid = require_positive_int(staff_id, "staff ID")
        start = require_date(start_date, "Start date")
        end = require_date(end_date, "End date")
        leave_kind = parse_enum(LeaveKind, kind, "leave type")
        if leave_kind is None:
            raise ValidationError("Leave type is required")
        if start > end:
            raise ValidationError("Start date must be before end date")

        staff = self._require_staff(sid)
        if not staff.is_active:
            raise ValidationError("Staff member is not active")

        new_leave = NewLeave(
            staff_id=sid,
            start_date=start,
            end_date=end,
            kind=leave_kind,
            reason=self._clean_reason(reason),
        )
        if new_leave.kind == LeaveKind.PAID:
            self._check_quota(staff, year=new_leave.year, days=new_leave.days)

        leave_id = self._leaves.create(leave=new_leave)
        logger.info(
            "Leave request %s created: staff=%s %s %s..%s (%s days)",
            leave_id,
            sid,
            new_leave.kind.value,
            start,
            end,
            new_leave.days,
        )
        return self._to_view(self._require_leave(leave_id), {sid: StaffBrief.of(staff)})

    def update_leave(self, *, current_role: Role, leave_id: int, changes: Mapping[str, Any]) -> LeaveView:
        self._require_approver(current_role)

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        new_start = require_date(changes["start_date"], "Start date") if changes.get("start_date") is not None else None
        new_end = require_date(changes["end_date"], "End date") if changes.get("end_date") is not None else None
        new_kind = parse_enum(LeaveKind, changes.get("kind"), "leave type")
        new_status = parse_enum(LeaveStatus, changes.get("status"), "status")

        for _ in range(self._write_retries):
            found = self._leaves.get_versioned(int(leave_id))
            if not found:
                raise NotFoundError("Leave request not found")
            current, row_version = found
            updated = current
            if new_start is not None or new_end is not None:
                start = new_start or current.start_date
                end = new_end or current.end_date
                if start > end:
                    raise ValidationError("Start date must be before end date")
                updated = updated.with_span(start, end)
            if new_kind is not None:
                updated = replace(updated, kind=new_kind)
            if new_status is not None:
                updated = replace(updated, status=new_status)
            if "reason" in changes:
                updated = replace(updated, reason=self._clean_reason(changes["reason"]))

            usage: Optional[QuotaUsage] = None
            if updated.consumes_quota:
                staff = self._require_staff(updated.staff_id)
                usage = self._check_quota(
                    staff,
                    year=updated.year,
                    days=updated.days,
                    exclude_leave_id=updated.leave_id,
                )

            # guarded by the version read together with the row
            expected_version = row_version
            expected_previous_version: Optional[int] = None
            if updated.year != current.year:
                expected_previous_version = row_version
                if usage is None:
                    usage = self._leaves.paid_usage(staff_id=updated.staff_id, year=updated.year)
                expected_version = usage.version

            if self._leaves.update(
                leave=updated,
                previous_year=current.year,
                expected_version=expected_version,
                expected_previous_version=expected_previous_version,
            ):
                if updated.status != current.status:
                    logger.info("Leave request %s: %s -> %s", updated.leave_id, current.status.value, updated.status.value)
                return self._to_view(self._require_leave(updated.leave_id))

            logger.info("Leave request %s: changed concurrently, re-reading", leave_id)

        raise ConflictError("Leave request changed concurrently, please retry")

    def delete_leave(self, *, current_role: Role, leave_id: int) -> None:
        self._require_approver(current_role)
        if not self._leaves.delete(int(leave_id)):
            raise NotFoundError("Leave request not found")
        logger.info("Leave request %s deleted", leave_id)

    # -------- queries --------
    def get_leave(self, *, leave_id: int) -> LeaveView:
        return self._to_view(self._require_leave(leave_id))

    def list_leaves(
        self,
        *,
        staff_id: Any = None,
        kind: Union[LeaveKind, str, None] = None,
        year: Any = None,
        status: Union[LeaveStatus, str, None] = None,
    ) -> list[LeaveView]:
        rows = self._leaves.list_leaves(
            staff_id=require_positive_int(staff_id, "staff ID") if staff_id not in (None, "") else None,
            kind=parse_enum(LeaveKind, kind, "leave type"),
            year=require_year(year) if year not in (None, "") else None,
            status=parse_enum(LeaveStatus, status, "status"),
        )
        cache: Dict[int, Optional[StaffBrief]] = {}
        return [self._to_view(r, cache) for r in rows]

    def list_leaves_for_staff(
        self,
        *,
        staff_id: Any,
        year: Any = None,
        kind: Union[LeaveKind, str, None] = None,
    ) -> list[LeaveView]:
        return self.list_leaves(staff_id=require_positive_int(staff_id, "staff ID"), year=year, kind=kind)

    def get_quota(self, *, staff_id: Any, year: Any = None) -> LeaveQuota:
        staff = self._require_staff(require_positive_int(staff_id, "staff ID"))
        target_year = require_year(year) if year not in (None, "") else self._clock().year
        usage = self._leaves.paid_usage(staff_id=staff.staff_id, year=target_year)
        total = staff.annual_paid_leaves_quota
        return LeaveQuota(
            total_quota=total,
            used_quota=usage.used_days,
            remaining_quota=total - usage.used_days,
            year=target_year,
        )
