from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Tuple

from ..core.enums import LeaveKind, LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import LeaveRequest, NewLeave, QuotaUsage
from .repository import LeaveRepository

_COLUMNS = """
    leave_id, staff_id, start_date, end_date, kind, reason,
    status, days, year, created_at, updated_at
"""


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        staff_id=int(r["staff_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        kind=LeaveKind(r["kind"]),
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        days=int(r["days"]),
        year=int(r["year"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, leave: NewLeave) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(staff_id, start_date, end_date, kind, reason, status, days, year)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(leave.staff_id),
                    leave.start_date,
                    leave.end_date,
                    leave.kind.value,
                    leave.reason,
                    LeaveStatus.PENDING.value,
                    leave.days,
                    leave.year,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def get_versioned(self, leave_id: int) -> Optional[Tuple[LeaveRequest, int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            if not r:
                return None
            leave = _row_to_leave(r)
            return leave, self._read_version(cur, staff_id=leave.staff_id, year=leave.year)

    def list_leaves(
        self,
        *,
        staff_id: Optional[int] = None,
        kind: Optional[LeaveKind] = None,
        year: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []

        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)
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
                FROM leave_requests
                WHERE {build_where(clauses)}
                ORDER BY start_date DESC, leave_id DESC
                """,
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_approved_overlapping(self, *, staff_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE staff_id=%s AND status=%s AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                """,
                (int(staff_id), LeaveStatus.APPROVED.value, end_date, start_date),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def paid_usage(self, *, staff_id: int, year: int, exclude_leave_id: Optional[int] = None) -> QuotaUsage:
        with db_cursor(self._conn_factory) as (_, cur):
            version = self._read_version(cur, staff_id=staff_id, year=year)
            cur.execute(
                """
                SELECT COALESCE(SUM(days), 0) AS used_days
                FROM leave_requests
                WHERE staff_id=%s AND year=%s AND kind=%s AND status=%s AND leave_id<>%s
                """,
                (
                    int(staff_id),
                    int(year),
                    LeaveKind.PAID.value,
                    LeaveStatus.APPROVED.value,
                    int(exclude_leave_id or 0),
                ),
            )
            used = fetchone(cur) or {}
            return QuotaUsage(
                used_days=int(used.get("used_days") or 0),
                version=version,
            )

    @staticmethod
    def _read_version(cur, *, staff_id: int, year: int) -> int:
        cur.execute(
            "SELECT version FROM leave_quota_versions WHERE staff_id=%s AND year=%s",
            (int(staff_id), int(year)),
        )
        v = fetchone(cur)
        return int(v["version"]) if v else 0

    @staticmethod
    def _bump_version(cur, *, staff_id: int, year: int) -> None:
        cur.execute(
            """
            INSERT INTO leave_quota_versions(staff_id, year, version) VALUES(%s,%s,1)
            ON DUPLICATE KEY UPDATE version=version+1
            """,
            (int(staff_id), int(year)),
        )

    @staticmethod
    def _compare_and_bump(cur, *, staff_id: int, year: int, expected: int) -> bool:
        if expected == 0:
            cur.execute(
                "INSERT IGNORE INTO leave_quota_versions(staff_id, year, version) VALUES(%s,%s,1)",
                (int(staff_id), int(year)),
            )
        else:
            cur.execute(
                """
                UPDATE leave_quota_versions SET version=version+1
                WHERE staff_id=%s AND year=%s AND version=%s
                """,
                (int(staff_id), int(year), int(expected)),
            )
        return cur.rowcount > 0

    def update(
        self,
        *,
        leave: LeaveRequest,
        previous_year: int,
        expected_version: int,
        expected_previous_version: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (conn, cur):
            if not self._compare_and_bump(cur, staff_id=leave.staff_id, year=leave.year, expected=expected_version):
                conn.rollback()
                return False
            if previous_year != leave.year:
                if expected_previous_version is None:
                    self._bump_version(cur, staff_id=leave.staff_id, year=previous_year)
                elif not self._compare_and_bump(
                    cur, staff_id=leave.staff_id, year=previous_year, expected=expected_previous_version
                ):
                    conn.rollback()
                    return False

            cur.execute(
                """
                UPDATE leave_requests
                SET start_date=%s, end_date=%s, kind=%s, reason=%s, status=%s, days=%s, year=%s,
                    updated_at=NOW()
                WHERE leave_id=%s
                """,
                (
                    leave.start_date,
                    leave.end_date,
                    leave.kind.value,
                    leave.reason,
                    leave.status.value,
                    leave.days,
                    leave.year,
                    int(leave.leave_id),
                ),
            )
            if cur.rowcount == 0:
                # MySQL reports 0 for unchanged rows too; tell the two apart
                cur.execute("SELECT 1 AS found FROM leave_requests WHERE leave_id=%s", (int(leave.leave_id),))
                if not fetchone(cur):
                    conn.rollback()
                    return False
            return True

    def delete(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT staff_id, year FROM leave_requests WHERE leave_id=%s FOR UPDATE",
                (int(leave_id),),
            )
            r = fetchone(cur)
            if not r:
                return False
            self._bump_version(cur, staff_id=int(r["staff_id"]), year=int(r["year"]))
            cur.execute("DELETE FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            return cur.rowcount > 0
