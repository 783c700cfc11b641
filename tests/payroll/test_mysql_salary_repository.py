from __future__ import annotations

from decimal import Decimal

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.staff_payroll.staff_payroll.payroll.model import PayrollFigures
from src.staff_payroll.staff_payroll.payroll.mysql_salary_repository import MySQLSalaryRepository


class FakeCursor:
    def __init__(self, insert_error):
        self._insert_error = insert_error
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=()):
        if "INSERT INTO monthly_salaries" in sql and self._insert_error is not None:
            raise self._insert_error
        self.lastrowid = 7

    def fetchone(self):
        # no record holds the period yet
        return None

    def fetchall(self):
        return []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, insert_error):
        self._insert_error = insert_error
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return FakeCursor(self._insert_error)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, insert_error=None):
        self.conn = FakeConnection(insert_error)

    def connect(self):
        return self.conn


def _figures() -> PayrollFigures:
    zero = Decimal("0")
    return PayrollFigures(
        base_daily_salary=Decimal("100"),
        base_monthly_salary=Decimal("3000"),
        working_days_in_month=30,
        actual_working_days=zero,
        paid_leaves_taken=0,
        unpaid_leaves_taken=0,
        overtime_days=zero,
        short_days=0,
        company_closure_days=0,
        payable_days=zero,
        deduction_days=zero,
        commission=zero,
        net_salary=zero,
    )


def test_first_save_inserts_a_draft():
    factory = FakeConnectionFactory()

    assert MySQLSalaryRepository(factory).save_draft(staff_id=1, month=6, year=2025, figures=_figures()) == 7
    assert factory.conn.committed


@pytest.mark.parametrize("errno", [errorcode.ER_DUP_ENTRY, errorcode.ER_LOCK_DEADLOCK])
def test_concurrent_first_save_reports_nothing_written(errno):
    factory = FakeConnectionFactory(mysql.connector.Error(msg="lost race", errno=errno))

    assert MySQLSalaryRepository(factory).save_draft(staff_id=1, month=6, year=2025, figures=_figures()) is None
    assert factory.conn.rolled_back
    assert not factory.conn.committed


def test_other_database_errors_propagate():
    factory = FakeConnectionFactory(mysql.connector.Error(msg="gone away", errno=errorcode.CR_SERVER_GONE_ERROR))

    with pytest.raises(mysql.connector.Error):
        MySQLSalaryRepository(factory).save_draft(staff_id=1, month=6, year=2025, figures=_figures())
