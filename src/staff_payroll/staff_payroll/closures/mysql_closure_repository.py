from __future__ import annotations

from datetime import date
from typing import Set

from ..common.datetime_utils import month_bounds
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import ClosureRepository


class MySQLClosureRepository(ClosureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def dates_for_month(self, *, month: int, year: int) -> Set[date]:
        first, last = month_bounds(month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT closure_date FROM company_closures WHERE closure_date BETWEEN %s AND %s",
                (first, last),
            )
            return {r["closure_date"] for r in fetchall(cur)}
