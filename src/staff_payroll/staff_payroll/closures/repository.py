from __future__ import annotations

from datetime import date
from typing import Protocol, Set


class ClosureRepository(Protocol):
    """Company-wide non-working dates (holidays, forced closures)."""

    def dates_for_month(self, *, month: int, year: int) -> Set[date]:
        raise NotImplementedError
