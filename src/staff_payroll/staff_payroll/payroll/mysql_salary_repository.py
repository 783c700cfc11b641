from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import SalaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_where, db_cursor, fetchall, fetchone
from .model import MonthlySalaryRecord, PayrollFigures
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

# two first saves of one period collide on the unique key or deadlock on the gap lock
_LOST_RACE_ERRNOS = frozenset({errorcode.ER_DUP_ENTRY, errorcode.ER_LOCK_DEADLOCK})

_FIGURE_COLUMNS = (
    "base_daily_salary",
    "base_monthly_salary",
    "working_days_in_month",
    "actual_working_days",
    "paid_leaves_taken",
    "unpaid_leaves_taken",
    "overtime_days",
    "short_days",
    "company_closure_days",
    "payable_days",
    "deduction_days",
    "commission",
    "net_salary",
    "negative_pay_flagged",
)

_COLUMNS = "salary_id, staff_id, month, year, status, created_at, updated_at, " + ", ".join(_FIGURE_COLUMNS)


def _row_to_record(r: dict) -> MonthlySalaryRecord:
    return MonthlySalaryRecord(
        salary_id=int(r["salary_id"]),
        staff_id=int(r["staff_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        status=SalaryStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        figures=PayrollFigures(
            base_daily_salary=as_decimal(r["base_daily_salary"]),
            base_monthly_salary=as_decimal(r["base_monthly_salary"]),
            working_days_in_month=int(r["working_days_in_month"]),
            actual_working_days=as_decimal(r["actual_working_days"]),
            paid_leaves_taken=int(r["paid_leaves_taken"]),
            unpaid_leaves_taken=int(r["unpaid_leaves_taken"]),
            overtime_days=as_decimal(r["overtime_days"]),
            short_days=int(r["short_days"]),
            company_closure_days=int(r["company_closure_days"]),
            payable_days=as_decimal(r["payable_days"]),
            deduction_days=as_decimal(r["deduction_days"]),
            commission=as_decimal(r["commission"]),
            net_salary=as_decimal(r["net_salary"]),
            negative_pay_flagged=bool(r.get("negative_pay_flagged")),
        ),
    )


def _figure_values(figures: PayrollFigures) -> tuple:
    return tuple(
        int(getattr(figures, c)) if c == "negative_pay_flagged" else getattr(figures, c) for c in _FIGURE_COLUMNS
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, salary_id: int) -> Optional[MonthlySalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM monthly_salaries WHERE salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_period(self, *, staff_id: int, month: int, year: int) -> Optional[MonthlySalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM monthly_salaries WHERE staff_id=%s AND month=%s AND year=%s",
                (int(staff_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(
        self,
        *,
        staff_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
    ) -> Sequence[MonthlySalaryRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if month is not None:
            clauses.append("month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("year=%s")
            params.append(int(year))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM monthly_salaries
                WHERE {build_where(clauses)}
                ORDER BY year DESC, month DESC, salary_id DESC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def save_draft(self, *, staff_id: int, month: int, year: int, figures: PayrollFigures) -> Optional[int]:
        try:
            return self._upsert_draft(staff_id=staff_id, month=month, year=year, figures=figures)
        except mysql.connector.Error as e:
            if e.errno not in _LOST_RACE_ERRNOS:
                raise
            logger.warning("Salary draft save for staff=%s %02d/%s lost a race: %s", staff_id, month, year, e)
            return None

    def _upsert_draft(self, *, staff_id: int, month: int, year: int, figures: PayrollFigures) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # row lock: a concurrent finalize waits for this transaction, or we see its result
            cur.execute(
                """
                SELECT salary_id, status FROM monthly_salaries
                WHERE staff_id=%s AND month=%s AND year=%s
                FOR UPDATE
                """,
                (int(staff_id), int(month), int(year)),
            )
            existing = fetchone(cur)
            values = _figure_values(figures)

            if existing is None:
                placeholders = ",".join(["%s"] * len(_FIGURE_COLUMNS))
                cur.execute(
                    f"""
                    INSERT INTO monthly_salaries(staff_id, month, year, status, {", ".join(_FIGURE_COLUMNS)})
                    VALUES(%s,%s,%s,%s,{placeholders})
                    """,
                    (int(staff_id), int(month), int(year), SalaryStatus.DRAFT.value, *values),
                )
                return int(cur.lastrowid)

            if existing["status"] != SalaryStatus.DRAFT.value:
                return None

            assignments = ", ".join(f"{c}=%s" for c in _FIGURE_COLUMNS)
            cur.execute(
                f"""
                UPDATE monthly_salaries
                SET {assignments}, updated_at=NOW()
                WHERE salary_id=%s AND status=%s
                """,
                (*values, int(existing["salary_id"]), SalaryStatus.DRAFT.value),
            )
            return int(existing["salary_id"])

    def transition(self, *, salary_id: int, from_status: SalaryStatus, to_status: SalaryStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE monthly_salaries
                SET status=%s, updated_at=NOW()
                WHERE salary_id=%s AND status=%s
                """,
                (to_status.value, int(salary_id), from_status.value),
            )
            return cur.rowcount > 0

    def update_commission(self, *, salary_id: int, commission, net_salary, negative_pay_flagged: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE monthly_salaries
                SET commission=%s, net_salary=%s, negative_pay_flagged=%s, updated_at=NOW()
                WHERE salary_id=%s AND status=%s
                """,
                (commission, net_salary, int(negative_pay_flagged), int(salary_id), SalaryStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def delete_draft(self, salary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM monthly_salaries WHERE salary_id=%s AND status=%s",
                (int(salary_id), SalaryStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def delete_drafts(self, salary_ids: Iterable[int]) -> Sequence[int]:
        ids = [int(i) for i in salary_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT salary_id FROM monthly_salaries
                WHERE salary_id IN ({placeholders}) AND status=%s
                FOR UPDATE
                """,
                (*ids, SalaryStatus.DRAFT.value),
            )
            deletable = [int(r["salary_id"]) for r in fetchall(cur)]
            if deletable:
                marks = ",".join(["%s"] * len(deletable))
                cur.execute(
                    f"DELETE FROM monthly_salaries WHERE salary_id IN ({marks}) AND status=%s",
                    (*deletable, SalaryStatus.DRAFT.value),
                )
            return deletable
