from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayStatus


@dataclass(frozen=True)
class TimeEntry:
    """A tracked work session from the time-tracking database (read-only)."""

    id: str
    profile_id: str
    start_time: datetime
    duration_seconds: int

    @property
    def hours(self) -> float:
        return (self.duration_seconds or 0) / 3600


@dataclass(frozen=True)
class DayAttendance:
    day: date
    status: DayStatus
    is_working_day: bool
    hours_worked: float = 0.0
    entries: tuple[TimeEntry, ...] = ()
    holiday_name: Optional[str] = None


@dataclass(frozen=True)
class MonthlyAttendance:
    """Read-model: one employee's attendance summary for a month."""

    user_id: str
    full_name: str
    year: int
    month: int
    total_working_days: int
    days_present: int
    days_absent: int
    total_hours_worked: float
    overtime_hours: float
    days: tuple[DayAttendance, ...] = ()
    # Dates with at least one entry, including the padding around the month.
    worked_dates: frozenset[date] = field(default_factory=frozenset)
    tracked: bool = True
