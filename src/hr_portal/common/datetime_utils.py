from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo

from ..core.constants import SATURDAY, SUNDAY


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current aware UTC time; tests monkeypatch this to pin "today"."""
    return datetime.now(timezone.utc)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar date of a month."""
    if not 1 <= int(month) <= 12:
        raise ValueError(f"Invalid month: {month!r}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def clip_range(start: date, end: date, lower: date, upper: date) -> tuple[date, date] | None:
    """Intersect [start, end] with [lower, upper]; None when they do not overlap."""
    lo = max(start, lower)
    hi = min(end, upper)
    if lo > hi:
        return None
    return lo, hi


def local_date(moment: datetime, tz: ZoneInfo) -> date:
    """Calendar date of a timestamp in the given zone.

    Naive timestamps are taken to be local already.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def local_day_start(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, datetime.min.time(), tzinfo=tz)
