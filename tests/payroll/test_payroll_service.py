from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.staff_payroll.staff_payroll.attendance.model import AttendanceFact
from src.staff_payroll.staff_payroll.core.enums import AttendanceCategory, LeaveKind, Role, SalaryStatus
from src.staff_payroll.staff_payroll.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.staff_payroll.staff_payroll.payroll.service import PayrollService
from tests.fakes import (
    FakeAttendanceRepo,
    FakeClosureRepo,
    FakeLeaveRepo,
    FakeSalaryRepo,
    FakeStaffRepo,
    make_staff,
)

MGR = Role.MANAGER


@pytest.fixture
def env():
    facts = [AttendanceFact(staff_id=1, work_date=date(2025, 6, d), category=AttendanceCategory.PRESENT) for d in range(1, 21)]
    leaves = FakeLeaveRepo()
    leaves.add(staff_id=1, start=date(2025, 6, 23), end=date(2025, 6, 24))
    leaves.add(staff_id=1, start=date(2025, 6, 25), end=date(2025, 6, 25), kind=LeaveKind.UNPAID)
    salaries = FakeSalaryRepo()
    svc = PayrollService(
        salaries,
        FakeStaffRepo(make_staff(1), make_staff(2, daily=Decimal("0"))),
        FakeAttendanceRepo(facts),
        FakeClosureRepo({date(2025, 6, 2), date(2025, 6, 30)}),
        leaves,
    )
    return svc, salaries


def test_compute_draft_gathers_inputs(env):
    svc, _ = env

    data = svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025, commission="150").to_dict()

    assert data["status"] == "draft"
    assert data["working_days_in_month"] == 28
    assert data["company_closure_days"] == 2
    assert data["actual_working_days"] == 19.0
    assert data["paid_leaves_taken"] == 2
    assert data["unpaid_leaves_taken"] == 1
    assert data["payable_days"] == 23.0
    assert data["deduction_days"] == 1.0
    assert data["net_salary"] == 2450.0
    assert data["staff"]["name"] == "Staff 1"


def test_recompute_replaces_the_same_draft(env):
    svc, salaries = env

    first = svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025)
    second = svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025)

    assert first.record.salary_id == second.record.salary_id
    assert first.record.figures == second.record.figures
    assert len(salaries.rows) == 1


def test_compute_requires_wage_and_known_staff(env):
    svc, _ = env

    with pytest.raises(ValidationError):
        svc.compute_draft(current_role=MGR, staff_id=1, month=None, year=2025)
    with pytest.raises(ValidationError):
        svc.compute_draft(current_role=MGR, staff_id=1, month=13, year=2025)
    with pytest.raises(ValidationError):
        svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025, commission="-1")
    with pytest.raises(ValidationError):
        svc.compute_draft(current_role=MGR, staff_id=2, month=6, year=2025)
    with pytest.raises(NotFoundError):
        svc.compute_draft(current_role=MGR, staff_id=9, month=6, year=2025)


def test_staff_role_cannot_manage_salaries(env):
    svc, _ = env

    with pytest.raises(AuthorizationError):
        svc.compute_draft(current_role=Role.STAFF, staff_id=1, month=6, year=2025)
    with pytest.raises(AuthorizationError):
        svc.list_salaries(current_role=Role.STAFF)


def test_lifecycle_moves_forward_only(env):
    svc, _ = env
    sid = svc.compute_draft(current_role=Role.RECEPTIONIST, staff_id=1, month=6, year=2025).record.salary_id

    with pytest.raises(ConflictError):
        svc.mark_paid(current_role=MGR, salary_id=sid)

    assert svc.finalize(current_role=MGR, salary_id=sid).record.status == SalaryStatus.FINALIZED
    with pytest.raises(ConflictError):
        svc.finalize(current_role=MGR, salary_id=sid)
    with pytest.raises(ConflictError):
        svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025)
    with pytest.raises(ConflictError):
        svc.update_commission(current_role=MGR, salary_id=sid, commission=10)
    with pytest.raises(ConflictError):
        svc.delete_draft(current_role=MGR, salary_id=sid)

    assert svc.mark_paid(current_role=MGR, salary_id=sid).record.status == SalaryStatus.PAID
    with pytest.raises(NotFoundError):
        svc.finalize(current_role=MGR, salary_id=999)


def test_update_commission_recomputes_net(env):
    svc, _ = env
    sid = svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025).record.salary_id

    view = svc.update_commission(current_role=MGR, salary_id=sid, commission="99.995")

    assert view.record.figures.commission == Decimal("100.00")
    assert view.record.figures.net_salary == Decimal("2400.00")


def test_delete_and_bulk_delete_skip_non_drafts(env):
    svc, salaries = env
    a = svc.compute_draft(current_role=MGR, staff_id=1, month=4, year=2025).record.salary_id
    b = svc.compute_draft(current_role=MGR, staff_id=1, month=5, year=2025).record.salary_id
    c = svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025).record.salary_id
    svc.finalize(current_role=MGR, salary_id=c)

    svc.delete_draft(current_role=MGR, salary_id=a)
    result = svc.bulk_delete_drafts(current_role=MGR, salary_ids=[b, c, "x", 404])

    assert result.to_dict()["deleted_count"] == 1
    assert result.requested_count == 4
    assert set(result.skipped_ids) == {c, 404}
    assert list(salaries.rows) == [c]


def test_bulk_delete_requires_ids(env):
    svc, _ = env

    with pytest.raises(ValidationError):
        svc.bulk_delete_drafts(current_role=MGR, salary_ids=[])
    with pytest.raises(ValidationError):
        svc.bulk_delete_drafts(current_role=MGR, salary_ids=["a", 0])


def test_list_salaries_filters(env):
    svc, _ = env
    svc.compute_draft(current_role=MGR, staff_id=1, month=5, year=2025)
    sid = svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025).record.salary_id
    svc.finalize(current_role=MGR, salary_id=sid)

    assert [v.record.month for v in svc.list_salaries(current_role=MGR, staff_id=1, status="finalized")] == [6]
    assert len(svc.list_salaries(current_role=MGR, year="2025")) == 2


class LostRaceSalaryRepo(FakeSalaryRepo):
    def save_draft(self, *, staff_id, month, year, figures):
        return None


def test_lost_draft_save_is_a_conflict():
    svc = PayrollService(
        LostRaceSalaryRepo(),
        FakeStaffRepo(make_staff(1)),
        FakeAttendanceRepo(),
        FakeClosureRepo(),
        FakeLeaveRepo(),
    )

    with pytest.raises(ConflictError):
        svc.compute_draft(current_role=MGR, staff_id=1, month=6, year=2025)
