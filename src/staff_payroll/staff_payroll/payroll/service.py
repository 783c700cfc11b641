from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Union

from ..attendance.repository import AttendanceRepository
from ..closures.repository import ClosureRepository
from ..common.datetime_utils import month_bounds
from ..common.money import round_currency
from ..common.validators import (
    parse_enum,
    require_month,
    require_non_negative_decimal,
    require_positive_int,
    require_year,
)
from ..core.enums import Role, SalaryStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..staff.model import StaffBrief
from ..staff.repository import StaffRepository
from .calculator.base import PayrollCalculator, PayrollInputs
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import BulkDeleteResult, MonthlySalaryRecord, SalaryView
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

PAYROLL_ROLES = frozenset({Role.MANAGER, Role.RECEPTIONIST})


class PayrollService:
    """Monthly salary records: compute drafts, then finalize and mark paid.

    A record moves draft -> finalized -> paid and never back. Only drafts
    can be recomputed, have their commission changed, or be deleted.
    """

    def __init__(
        self,
        salaries: SalaryRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        closures: ClosureRepository,
        leaves: LeaveRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._salaries = salaries
        self._staff = staff
        self._attendance = attendance
        self._closures = closures
        self._leaves = leaves
        self._calculator = calculator or StandardPayrollCalculator()

    @staticmethod
    def _require_payroll_role(current_role: Role) -> None:
        if current_role not in PAYROLL_ROLES:
            raise AuthorizationError("Only a manager or receptionist can manage salaries")

    def _require_record(self, salary_id: Any) -> MonthlySalaryRecord:
        record = self._salaries.get_by_id(require_positive_int(salary_id, "salary ID"))
        if not record:
            raise NotFoundError("Monthly salary record not found")
        return record

    def _to_view(self, record: MonthlySalaryRecord, cache: Optional[Dict[int, Optional[StaffBrief]]] = None) -> SalaryView:
        cache = {} if cache is None else cache
        if record.staff_id not in cache:
            staff = self._staff.get_by_id(record.staff_id)
            cache[record.staff_id] = StaffBrief.of(staff) if staff else None
        return SalaryView(record=record, staff=cache[record.staff_id])

    def _transition(self, salary_id: Any, from_status: SalaryStatus, to_status: SalaryStatus) -> SalaryView:
        record = self._require_record(salary_id)
        if record.status != from_status or not self._salaries.transition(
            salary_id=record.salary_id, from_status=from_status, to_status=to_status
        ):
            # re-read: the status may have moved between our read and the conditional write
            latest = self._salaries.get_by_id(record.salary_id)
            if latest is None:
                raise NotFoundError("Monthly salary record not found")
            raise ConflictError(
                f"Salary record is {latest.status.value}; only {from_status.value} records can become {to_status.value}"
            )
        logger.info("Salary record %s: %s -> %s", record.salary_id, from_status.value, to_status.value)
        return self._to_view(self._require_record(record.salary_id))

    # -------- commands --------
    def compute_draft(
        self,
        *,
        current_role: Role,
        staff_id: Any,
        month: Any,
        year: Any,
        commission: Any = None,
    ) -> SalaryView:
        self._require_payroll_role(current_role)
        if staff_id in (None, "") or month in (None, "") or year in (None, ""):
            raise ValidationError("Staff ID, month, and year are required")
        sid = require_positive_int(staff_id, "staff ID")
        m = require_month(month)
        y = require_year(year)
        commission_value = require_non_negative_decimal(commission, "Commission")

        staff = self._staff.get_by_id(sid)
        if not staff:
            raise NotFoundError("Staff member not found")
        if staff.base_daily_salary <= 0:
            raise ValidationError("Staff member does not have a daily wage configured")

        existing = self._salaries.get_for_period(staff_id=sid, month=m, year=y)
        if existing and not existing.is_draft:
            raise ConflictError(f"Salary for {m:02d}/{y} is already {existing.status.value}")

        first, last = month_bounds(m, y)
        inputs = PayrollInputs(
            month=m,
            year=y,
            base_daily_salary=staff.base_daily_salary,
            commission=commission_value,
            closure_dates=frozenset(self._closures.dates_for_month(month=m, year=y)),
            attendance=tuple(self._attendance.list_for_month(staff_id=sid, month=m, year=y)),
            leaves=tuple(self._leaves.list_approved_overlapping(staff_id=sid, start_date=first, end_date=last)),
        )
        figures = self._calculator.compute(inputs)

        salary_id = self._salaries.save_draft(staff_id=sid, month=m, year=y, figures=figures)
        if salary_id is None:
            raise ConflictError(f"Salary for {m:02d}/{y} changed while it was being computed, please retry")

        logger.info(
            "Salary draft %s computed: staff=%s %02d/%s payable=%s net=%s",
            salary_id,
            sid,
            m,
            y,
            figures.payable_days,
            figures.net_salary,
        )
        return self._to_view(self._require_record(salary_id), {sid: StaffBrief.of(staff)})

    def finalize(self, *, current_role: Role, salary_id: Any) -> SalaryView:
        self._require_payroll_role(current_role)
        return self._transition(salary_id, SalaryStatus.DRAFT, SalaryStatus.FINALIZED)

    def mark_paid(self, *, current_role: Role, salary_id: Any) -> SalaryView:
        self._require_payroll_role(current_role)
        return self._transition(salary_id, SalaryStatus.FINALIZED, SalaryStatus.PAID)

    def update_commission(self, *, current_role: Role, salary_id: Any, commission: Any) -> SalaryView:
        self._require_payroll_role(current_role)
        record = self._require_record(salary_id)
        if not record.is_draft:
            raise ConflictError(f"Salary record is {record.status.value}; only drafts can change commission")

        value = round_currency(require_non_negative_decimal(commission, "Commission"))
        f = record.figures
        raw_net = f.base_daily_salary * f.payable_days + value
        if not self._salaries.update_commission(
            salary_id=record.salary_id,
            commission=value,
            net_salary=round_currency(max(raw_net, Decimal("0"))),
            negative_pay_flagged=raw_net < 0,
        ):
            raise ConflictError("Salary record is no longer a draft")
        logger.info("Salary draft %s commission set to %s", record.salary_id, value)
        return self._to_view(self._require_record(record.salary_id))

    def delete_draft(self, *, current_role: Role, salary_id: Any) -> None:
        self._require_payroll_role(current_role)
        record = self._require_record(salary_id)
        if not record.is_draft or not self._salaries.delete_draft(record.salary_id):
            raise ConflictError("Only draft salary records can be deleted")
        logger.info("Salary draft %s deleted", record.salary_id)

    def bulk_delete_drafts(self, *, current_role: Role, salary_ids: Iterable[Any]) -> BulkDeleteResult:
        self._require_payroll_role(current_role)
        if salary_ids is None or isinstance(salary_ids, (str, bytes)):
            raise ValidationError("Array of salary record IDs is required")
        requested = list(salary_ids)
        if not requested:
            raise ValidationError("Array of salary record IDs is required")

        valid: list[int] = []
        for raw in requested:
            try:
                valid.append(require_positive_int(raw, "salary ID"))
            except ValidationError:
                continue
        if not valid:
            raise ValidationError("No valid salary record IDs provided")

        deleted = set(self._salaries.delete_drafts(valid))
        skipped = tuple(i for i in valid if i not in deleted)
        logger.info("Bulk delete: %d salary drafts deleted, %d skipped", len(deleted), len(skipped))
        return BulkDeleteResult(deleted_count=len(deleted), requested_count=len(requested), skipped_ids=skipped)

    # -------- queries --------
    def get_salary(self, *, current_role: Role, salary_id: Any) -> SalaryView:
        self._require_payroll_role(current_role)
        return self._to_view(self._require_record(salary_id))

    def list_salaries(
        self,
        *,
        current_role: Role,
        staff_id: Any = None,
        month: Any = None,
        year: Any = None,
        status: Union[SalaryStatus, str, None] = None,
    ) -> list[SalaryView]:
        self._require_payroll_role(current_role)
        rows = self._salaries.list_records(
            staff_id=require_positive_int(staff_id, "staff ID") if staff_id not in (None, "") else None,
            month=require_month(month) if month not in (None, "") else None,
            year=require_year(year) if year not in (None, "") else None,
            status=parse_enum(SalaryStatus, status, "status"),
        )
        cache: Dict[int, Optional[StaffBrief]] = {}
        return [self._to_view(r, cache) for r in rows]
