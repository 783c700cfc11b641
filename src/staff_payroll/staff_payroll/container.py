from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .closures.mysql_closure_repository import MySQLClosureRepository
from .core.constants import DEFAULT_ANNUAL_PAID_LEAVES_QUOTA, DEFAULT_QUOTA_WRITE_RETRIES
from .database.connection import DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .payroll.calculator.base import PayrollPolicy
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.service import PayrollService
from .staff.mysql_staff_repository import MySQLStaffRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    leave_service: LeaveService
    payroll_service: PayrollService


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.from_dict(db_config)

    default_quota = int(getattr(settings, "DEFAULT_ANNUAL_PAID_LEAVES_QUOTA", DEFAULT_ANNUAL_PAID_LEAVES_QUOTA))
    retries = int(getattr(settings, "QUOTA_WRITE_RETRIES", DEFAULT_QUOTA_WRITE_RETRIES))

    staff_repo = MySQLStaffRepository(conn, default_quota=default_quota)
    leaves_repo = MySQLLeaveRepository(conn)
    salaries_repo = MySQLSalaryRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    closures_repo = MySQLClosureRepository(conn)

    leave_service = LeaveService(leaves_repo, staff_repo, write_retries=retries)
    payroll_service = PayrollService(
        salaries_repo,
        staff_repo,
        attendance_repo,
        closures_repo,
        leaves_repo,
        calculator=StandardPayrollCalculator(PayrollPolicy.from_settings(settings)),
    )

    return Container(conn=conn, leave_service=leave_service, payroll_service=payroll_service)
