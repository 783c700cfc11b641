from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_ANNUAL_PAID_LEAVES_QUOTA
from ..core.enums import StaffStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import Staff
from .repository import StaffRepository


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_quota: int = DEFAULT_ANNUAL_PAID_LEAVES_QUOTA):
        self._conn_factory = conn_factory
        self._default_quota = int(default_quota)

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, full_name, phone, email, status,
                       annual_paid_leaves_quota, daily_wage
                FROM staff
                WHERE staff_id=%s
                """,
                (int(staff_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            quota = r.get("annual_paid_leaves_quota")
            return Staff(
                staff_id=int(r["staff_id"]),
                full_name=r["full_name"],
                phone=r.get("phone"),
                email=r.get("email"),
                status=StaffStatus(r["status"]),
                annual_paid_leaves_quota=int(quota) if quota is not None else self._default_quota,
                base_daily_salary=as_decimal(r.get("daily_wage")),
            )
