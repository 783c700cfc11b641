from datetime import date, timedelta
from decimal import Decimal

from src.staff_payroll.staff_payroll.attendance.model import AttendanceFact
from src.staff_payroll.staff_payroll.core.enums import AttendanceCategory, LeaveKind, LeaveStatus
from src.staff_payroll.staff_payroll.leaves.model import LeaveRequest
from src.staff_payroll.staff_payroll.payroll.calculator.base import PayrollInputs, PayrollPolicy
from src.staff_payroll.staff_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _june(day: int) -> date:
    return date(2025, 6, day)


def _fact(day: int, category=AttendanceCategory.PRESENT, weight=None) -> AttendanceFact:
    return AttendanceFact(staff_id=1, work_date=_june(day), category=category, fractional_weight=weight)


def _leave(start: date, end: date, kind=LeaveKind.PAID, status=LeaveStatus.APPROVED) -> LeaveRequest:
    return LeaveRequest(
        leave_id=1,
        staff_id=1,
        start_date=start,
        end_date=end,
        kind=kind,
        reason=None,
        status=status,
        days=(end - start).days + 1,
        year=start.year,
    )


def _inputs(**kw) -> PayrollInputs:
    kw.setdefault("month", 6)
    kw.setdefault("year", 2025)
    kw.setdefault("base_daily_salary", Decimal("100"))
    return PayrollInputs(**kw)


def test_full_month_present():
    figures = StandardPayrollCalculator().compute(_inputs(attendance=tuple(_fact(d) for d in range(1, 31))))

    assert figures.working_days_in_month == 30
    assert figures.base_monthly_salary == Decimal("3000.00")
    assert figures.payable_days == Decimal("30")
    assert figures.deduction_days == Decimal("0")
    assert figures.net_salary == Decimal("3000.00")
    assert figures.negative_pay_flagged is False


def test_closures_are_paid_and_attendance_on_them_ignored():
    facts = tuple(_fact(d) for d in range(1, 31))
    figures = StandardPayrollCalculator().compute(_inputs(attendance=facts, closure_dates=frozenset({_june(16), date(2025, 7, 1)})))

    assert figures.company_closure_days == 1
    assert figures.working_days_in_month == 29
    assert figures.actual_working_days == Decimal("29")
    assert figures.payable_days == Decimal("30")


def test_leave_counts_only_days_inside_the_month():
    leaves = (
        _leave(date(2025, 5, 30), _june(2)),
        _leave(_june(29), date(2025, 7, 4), kind=LeaveKind.UNPAID),
        _leave(_june(10), _june(12), status=LeaveStatus.PENDING),
    )
    figures = StandardPayrollCalculator().compute(_inputs(leaves=leaves))

    assert figures.paid_leaves_taken == 2
    assert figures.unpaid_leaves_taken == 2
    assert figures.payable_days == Decimal("2")
    assert figures.deduction_days == Decimal("2")
    assert figures.net_salary == Decimal("200.00")


def test_category_weights_follow_policy():
    facts = (
        _fact(2, AttendanceCategory.HALF_DAY),
        _fact(3, AttendanceCategory.SHORT_DAY),
        _fact(4, AttendanceCategory.OVERTIME),
        _fact(5, AttendanceCategory.OVERTIME, Decimal("0.5")),
        _fact(6, AttendanceCategory.PRESENT, Decimal("0.75")),
    )
    figures = StandardPayrollCalculator().compute(_inputs(attendance=facts))

    assert figures.actual_working_days == Decimal("4.25")
    assert figures.overtime_days == Decimal("1.50")
    assert figures.short_days == 1
    # 4.25 worked + 1.5 overtime - 0.5 short-day shortfall
    assert figures.payable_days == Decimal("5.25")


def test_custom_policy():
    policy = PayrollPolicy(short_day_weight=Decimal("1"), half_day_weight=Decimal("0.4"), overtime_day_rate=Decimal("1.5"))
    facts = (
        _fact(2, AttendanceCategory.HALF_DAY),
        _fact(3, AttendanceCategory.SHORT_DAY),
        _fact(4, AttendanceCategory.OVERTIME),
    )
    figures = StandardPayrollCalculator(policy).compute(_inputs(attendance=facts))

    assert figures.payable_days == Decimal("3.90")


def test_absence_covered_by_leave_is_not_deducted_twice():
    facts = (_fact(2, AttendanceCategory.ABSENT), _fact(3, AttendanceCategory.ABSENT))
    leaves = (_leave(_june(3), _june(3), kind=LeaveKind.UNPAID),)
    figures = StandardPayrollCalculator().compute(_inputs(attendance=facts, leaves=leaves))

    assert figures.unpaid_leaves_taken == 1
    assert figures.deduction_days == Decimal("2")
    assert figures.payable_days == Decimal("0")


def test_net_rounds_half_up_and_adds_commission():
    figures = StandardPayrollCalculator().compute(
        _inputs(base_daily_salary=Decimal("33.335"), attendance=(_fact(1),), commission=Decimal("0.005"))
    )

    assert figures.net_salary == Decimal("33.34")
    assert figures.commission == Decimal("0.01")


def test_negative_net_is_floored_and_flagged():
    figures = StandardPayrollCalculator().compute(_inputs(attendance=(_fact(1),), commission=Decimal("-500")))

    assert figures.net_salary == Decimal("0.00")
    assert figures.negative_pay_flagged is True


def test_same_inputs_give_same_figures():
    start = _june(1)
    facts = tuple(_fact((start + timedelta(days=i)).day) for i in range(0, 20, 2))
    calc = StandardPayrollCalculator()

    assert calc.compute(_inputs(attendance=facts)) == calc.compute(_inputs(attendance=facts))
