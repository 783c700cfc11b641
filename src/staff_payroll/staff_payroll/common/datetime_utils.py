from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, or a full ISO datetime, into a date."""
    if len(value) > 10:
        return datetime.fromisoformat(value).date()
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time; services take it as an injectable clock."""
    return datetime.now()


def span_days(start: date, end: date) -> int:
    """Inclusive number of calendar days covered by [start, end]."""
    return (end - start).days + 1


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def overlap(start: date, end: date, window_start: date, window_end: date) -> Optional[Tuple[date, date]]:
    """Return the part of [start, end] inside the window, or None."""
    lo = max(start, window_start)
    hi = min(end, window_end)
    if lo > hi:
        return None
    return lo, hi


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
