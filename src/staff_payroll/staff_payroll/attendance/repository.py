from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceFact


class AttendanceRepository(Protocol):
    def list_for_month(self, *, staff_id: int, month: int, year: int) -> Sequence[AttendanceFact]:
        raise NotImplementedError
