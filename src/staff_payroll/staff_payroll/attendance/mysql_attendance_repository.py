from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall
from .model import AttendanceFact
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    """Reads categorized attendance days imported by the attendance module."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_month(self, *, staff_id: int, month: int, year: int) -> Sequence[AttendanceFact]:
        first, last = month_bounds(month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, work_date, category, fractional_weight
                FROM attendance
                WHERE staff_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(staff_id), first, last),
            )
            return [
                AttendanceFact(
                    staff_id=int(r["staff_id"]),
                    work_date=r["work_date"],
                    category=AttendanceCategory(r["category"]),
                    fractional_weight=(
                        as_decimal(r["fractional_weight"]) if r.get("fractional_weight") is not None else None
                    ),
                )
                for r in fetchall(cur)
            ]
