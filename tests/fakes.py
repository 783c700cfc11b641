from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from src.staff_payroll.staff_payroll.core.enums import LeaveKind, LeaveStatus, SalaryStatus, StaffStatus
from src.staff_payroll.staff_payroll.leaves.model import LeaveRequest, QuotaUsage
from src.staff_payroll.staff_payroll.payroll.model import MonthlySalaryRecord
from src.staff_payroll.staff_payroll.staff.model import Staff


def make_staff(staff_id=1, *, quota=12, daily=Decimal("100"), status=StaffStatus.ACTIVE):
    return Staff(
        staff_id=staff_id,
        full_name=f"Staff {staff_id}",
        phone="0900000000",
        email=f"staff{staff_id}@example.com",
        status=status,
        annual_paid_leaves_quota=quota,
        base_daily_salary=daily,
    )


class FakeStaffRepo:
    def __init__(self, *staff):
        self._staff = {s.staff_id: s for s in staff}

    def get_by_id(self, staff_id):
        return self._staff.get(int(staff_id))


class FakeLeaveRepo:
    """In-memory leave store with the same per-(staff, year) version guard as MySQL."""

    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, LeaveRequest] = {}
        self.versions: dict[tuple[int, int], int] = {}

    def _bump(self, staff_id, year):
        key = (staff_id, year)
        self.versions[key] = self.versions.get(key, 0) + 1

    def add(self, *, staff_id, start, end, kind=LeaveKind.PAID, status=LeaveStatus.APPROVED, reason=None):
        lid = self._next_id
        self._next_id += 1
        self.rows[lid] = LeaveRequest(
            leave_id=lid,
            staff_id=staff_id,
            start_date=start,
            end_date=end,
            kind=kind,
            reason=reason,
            status=status,
            days=(end - start).days + 1,
            year=start.year,
            created_at=datetime(2025, 1, 1, 9, 0),
        )
        self._bump(staff_id, start.year)
        return lid

    def create(self, *, leave):
        return self.add(
            staff_id=leave.staff_id,
            start=leave.start_date,
            end=leave.end_date,
            kind=leave.kind,
            status=LeaveStatus.PENDING,
            reason=leave.reason,
        )

    def get_by_id(self, leave_id):
        return self.rows.get(int(leave_id))

    def get_versioned(self, leave_id):
        row = self.rows.get(int(leave_id))
        if row is None:
            return None
        return row, self.versions.get((row.staff_id, row.year), 0)

    def list_leaves(self, *, staff_id=None, kind=None, year=None, status=None):
        out = [
            r
            for r in self.rows.values()
            if (staff_id is None or r.staff_id == staff_id)
            and (kind is None or r.kind == kind)
            and (year is None or r.year == year)
            and (status is None or r.status == status)
        ]
        return sorted(out, key=lambda r: (r.start_date, r.leave_id), reverse=True)

    def list_approved_overlapping(self, *, staff_id, start_date, end_date):
        return [
            r
            for r in self.rows.values()
            if r.staff_id == staff_id
            and r.status == LeaveStatus.APPROVED
            and r.start_date <= end_date
            and r.end_date >= start_date
        ]

    def paid_usage(self, *, staff_id, year, exclude_leave_id=None):
        used = sum(
            r.days
            for r in self.rows.values()
            if r.staff_id == staff_id and r.year == year and r.consumes_quota and r.leave_id != exclude_leave_id
        )
        return QuotaUsage(used_days=used, version=self.versions.get((staff_id, year), 0))

    def update(self, *, leave, previous_year, expected_version, expected_previous_version=None):
        if leave.leave_id not in self.rows:
            return False
        if self.versions.get((leave.staff_id, leave.year), 0) != expected_version:
            return False
        if (
            previous_year != leave.year
            and expected_previous_version is not None
            and self.versions.get((leave.staff_id, previous_year), 0) != expected_previous_version
        ):
            return False
        self._bump(leave.staff_id, leave.year)
        if previous_year != leave.year:
            self._bump(leave.staff_id, previous_year)
        self.rows[leave.leave_id] = leave
        return True

    def delete(self, leave_id):
        row = self.rows.pop(int(leave_id), None)
        if row is None:
            return False
        self._bump(row.staff_id, row.year)
        return True


class FakeAttendanceRepo:
    def __init__(self, facts=()):
        self.facts = list(facts)

    def list_for_month(self, *, staff_id, month, year):
        return [f for f in self.facts if f.staff_id == staff_id and f.work_date.month == month and f.work_date.year == year]


class FakeClosureRepo:
    def __init__(self, dates=()):
        self.dates = set(dates)

    def dates_for_month(self, *, month, year):
        return {d for d in self.dates if d.month == month and d.year == year}


class FakeSalaryRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, MonthlySalaryRecord] = {}

    def get_by_id(self, salary_id):
        return self.rows.get(int(salary_id))

    def get_for_period(self, *, staff_id, month, year):
        for r in self.rows.values():
            if (r.staff_id, r.month, r.year) == (staff_id, month, year):
                return r
        return None

    def list_records(self, *, staff_id=None, month=None, year=None, status=None):
        return [
            r
            for r in self.rows.values()
            if (staff_id is None or r.staff_id == staff_id)
            and (month is None or r.month == month)
            and (year is None or r.year == year)
            and (status is None or r.status == status)
        ]

    def save_draft(self, *, staff_id, month, year, figures):
        existing = self.get_for_period(staff_id=staff_id, month=month, year=year)
        if existing is not None:
            if not existing.is_draft:
                return None
            self.rows[existing.salary_id] = replace(existing, figures=figures)
            return existing.salary_id
        sid = self._next_id
        self._next_id += 1
        self.rows[sid] = MonthlySalaryRecord(
            salary_id=sid,
            staff_id=staff_id,
            month=month,
            year=year,
            figures=figures,
            status=SalaryStatus.DRAFT,
        )
        return sid

    def transition(self, *, salary_id, from_status, to_status):
        r = self.rows.get(salary_id)
        if not r or r.status != from_status:
            return False
        self.rows[salary_id] = replace(r, status=to_status)
        return True

    def update_commission(self, *, salary_id, commission, net_salary, negative_pay_flagged):
        r = self.rows.get(salary_id)
        if not r or not r.is_draft:
            return False
        figures = replace(r.figures, commission=commission, net_salary=net_salary, negative_pay_flagged=negative_pay_flagged)
        self.rows[salary_id] = replace(r, figures=figures)
        return True

    def delete_draft(self, salary_id):
        r = self.rows.get(salary_id)
        if not r or not r.is_draft:
            return False
        del self.rows[salary_id]
        return True

    def delete_drafts(self, ids):
        return [i for i in ids if self.delete_draft(i)]


def d(s: str) -> date:
    return date.fromisoformat(s)
