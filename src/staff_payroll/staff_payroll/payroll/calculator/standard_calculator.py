from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional, Set

from ...attendance.model import AttendanceFact
from ...common.datetime_utils import days_in_month, iter_dates, month_bounds, overlap, span_days
from ...common.money import round_currency, round_days
from ...core.enums import AttendanceCategory, LeaveKind, LeaveStatus
from ..model import PayrollFigures
from .base import PayrollCalculator, PayrollInputs, PayrollPolicy

logger = logging.getLogger(__name__)

ONE = Decimal("1")
ZERO = Decimal("0")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule set.

    payable   = worked + paid leave + closures + overtime - short-day shortfall
    deduction = unpaid leave + absences not covered by approved leave
    net       = daily rate * payable + commission, half-up to cents, never < 0
    """

    def __init__(self, policy: Optional[PayrollPolicy] = None):
        self._policy = policy or PayrollPolicy()

    def compute(self, inputs: PayrollInputs) -> PayrollFigures:
        first, last = month_bounds(inputs.month, inputs.year)
        closures = {d for d in inputs.closure_dates if first <= d <= last}
        working_days = days_in_month(inputs.month, inputs.year) - len(closures)

        paid_leave = 0
        unpaid_leave = 0
        leave_dates: Set = set()
        for leave in inputs.leaves:
            if leave.status != LeaveStatus.APPROVED:
                continue
            window = overlap(leave.start_date, leave.end_date, first, last)
            if window is None:
                continue
            if leave.kind == LeaveKind.PAID:
                paid_leave += span_days(*window)
            else:
                unpaid_leave += span_days(*window)
            leave_dates.update(iter_dates(*window))

        # last fact wins when the source reports a date twice
        by_date: Dict = {}
        for fact in inputs.attendance:
            if first <= fact.work_date <= last and fact.work_date not in closures:
                by_date[fact.work_date] = fact

        worked = ZERO
        overtime = ZERO
        short_days = 0
        uncovered_absences = 0
        for fact in by_date.values():
            if fact.category == AttendanceCategory.ABSENT:
                if fact.work_date not in leave_dates:
                    uncovered_absences += 1
                continue
            worked += self._worked_credit(fact)
            if fact.category == AttendanceCategory.OVERTIME:
                share = fact.fractional_weight if fact.fractional_weight is not None else ONE
                overtime += share * self._policy.overtime_day_rate
            elif fact.category == AttendanceCategory.SHORT_DAY:
                short_days += 1

        shortfall = Decimal(short_days) * (ONE - self._policy.short_day_weight)
        payable = round_days(max(worked + paid_leave + len(closures) + overtime - shortfall, ZERO))
        deduction = round_days(Decimal(unpaid_leave + uncovered_absences))

        daily = inputs.base_daily_salary
        raw_net = daily * payable + inputs.commission
        flagged = raw_net < 0
        if flagged:
            logger.warning(
                "Negative net salary %s for %02d/%s floored at 0 (daily=%s payable=%s commission=%s)",
                raw_net,
                inputs.month,
                inputs.year,
                daily,
                payable,
                inputs.commission,
            )

        return PayrollFigures(
            base_daily_salary=round_currency(daily),
            base_monthly_salary=round_currency(max(daily * working_days, ZERO)),
            working_days_in_month=working_days,
            actual_working_days=round_days(worked),
            paid_leaves_taken=paid_leave,
            unpaid_leaves_taken=unpaid_leave,
            overtime_days=round_days(overtime),
            short_days=short_days,
            company_closure_days=len(closures),
            payable_days=payable,
            deduction_days=deduction,
            commission=round_currency(inputs.commission),
            net_salary=round_currency(max(raw_net, ZERO)),
            negative_pay_flagged=flagged,
        )

    def _worked_credit(self, fact: AttendanceFact) -> Decimal:
        if fact.category == AttendanceCategory.HALF_DAY:
            return fact.fractional_weight if fact.fractional_weight is not None else self._policy.half_day_weight
        if fact.category == AttendanceCategory.PRESENT and fact.fractional_weight is not None:
            return fact.fractional_weight
        # overtime and short days count as a full working day
        return ONE
