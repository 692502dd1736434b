from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Mapping, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import is_weekend, iter_dates, local_date, local_day_start, month_bounds
from ..core.constants import DEFAULT_LOCAL_TIMEZONE, DEFAULT_WORKING_HOURS, WEEKEND_PADDING_DAYS
from ..core.enums import DayStatus
from ..leaves.model import Holiday, holiday_calendar
from ..users.model import Employee
from .model import DayAttendance, MonthlyAttendance, TimeEntry
from .repository import TimeTrackingRepository

logger = logging.getLogger(__name__)


def working_days_in_month(year: int, month: int, holidays: Iterable[Holiday] = ()) -> int:
    """Calendar days minus Saturdays/Sundays minus non-optional holidays."""
    first, last = month_bounds(year, month)
    closed = holiday_calendar(holidays)
    return sum(1 for d in iter_dates(first, last) if not is_weekend(d) and d not in closed)


def _build_days(
    first: date,
    last: date,
    closed: Mapping[date, Holiday],
    entries_by_day: Mapping[date, Sequence[TimeEntry]],
) -> list[DayAttendance]:
    days: list[DayAttendance] = []
    for d in iter_dates(first, last):
        weekend = is_weekend(d)
        holiday = closed.get(d)
        day_entries = tuple(entries_by_day.get(d, ()))
        if weekend:
            status = DayStatus.WEEKEND
        elif holiday:
            status = DayStatus.HOLIDAY
        elif day_entries:
            status = DayStatus.PRESENT
        else:
            status = DayStatus.ABSENT
        days.append(
            DayAttendance(
                day=d,
                status=status,
                is_working_day=not weekend and holiday is None,
                hours_worked=round(sum(e.hours for e in day_entries), 2),
                entries=day_entries,
                holiday_name=holiday.name if holiday else None,
            )
        )
    return days


class AttendanceAggregator:
    """Reduces raw time entries into a month of per-day presence.

    Every entry is allocated to the local calendar date of its start time, so a
    night shift starting 23:30 counts wholly for the day it started.
    """

    def __init__(
        self,
        time_tracking: TimeTrackingRepository,
        *,
        local_tz: ZoneInfo | str = DEFAULT_LOCAL_TIMEZONE,
        working_hours_per_day: float = DEFAULT_WORKING_HOURS,
        padding_days: int = WEEKEND_PADDING_DAYS,
    ):
        self._time_tracking = time_tracking
        self._tz = local_tz if isinstance(local_tz, ZoneInfo) else ZoneInfo(local_tz)
        self._working_hours = float(working_hours_per_day)
        self._padding = timedelta(days=int(padding_days))

    def aggregate(self, employee: Employee, year: int, month: int, holidays: Sequence[Holiday] = ()) -> MonthlyAttendance:
        first, last = month_bounds(year, month)
        closed = holiday_calendar(holidays)
        total_working_days = working_days_in_month(year, month, holidays)

        profile_id = self._time_tracking.find_profile_id_by_email(employee.email)
        if not profile_id:
            logger.info("no time-tracking profile for %s; using zero attendance", employee.email)
            return MonthlyAttendance(
                user_id=employee.id,
                full_name=employee.full_name,
                year=year,
                month=month,
                total_working_days=total_working_days,
                days_present=0,
                days_absent=total_working_days,
                total_hours_worked=0.0,
                overtime_hours=0.0,
                days=tuple(_build_days(first, last, closed, {})),
                tracked=False,
            )

        entries = self._time_tracking.list_entries(
            profile_id=profile_id,
            start=local_day_start(first - self._padding, self._tz),
            end=local_day_start(last + self._padding + timedelta(days=1), self._tz),
        )

        entries_by_day: dict[date, list[TimeEntry]] = defaultdict(list)
        for entry in entries:
            entries_by_day[local_date(entry.start_time, self._tz)].append(entry)

        days = _build_days(first, last, closed, entries_by_day)
        days_present = sum(1 for d in days if d.status == DayStatus.PRESENT)
        total_hours = sum(e.hours for d in days for e in d.entries)

        return MonthlyAttendance(
            user_id=employee.id,
            full_name=employee.full_name,
            year=year,
            month=month,
            total_working_days=total_working_days,
            days_present=days_present,
            days_absent=max(0, total_working_days - days_present),
            total_hours_worked=round(total_hours, 2),
            overtime_hours=max(0.0, round(total_hours - days_present * self._working_hours, 2)),
            days=tuple(days),
            worked_dates=frozenset(entries_by_day),
        )

    def aggregate_all(
        self,
        employees: Iterable[Employee],
        year: int,
        month: int,
        holidays: Sequence[Holiday] = (),
    ) -> list[MonthlyAttendance]:
        out: list[MonthlyAttendance] = []
        for employee in employees:
            try:
                out.append(self.aggregate(employee, year, month, holidays))
            except Exception:
                logger.exception("attendance aggregation failed for %s", employee.email)
        out.sort(key=lambda a: a.full_name)
        return out
