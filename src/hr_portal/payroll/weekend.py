from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import AbstractSet

from ..common.datetime_utils import iter_dates, month_bounds
from ..core.constants import SATURDAY, SUNDAY


@dataclass(frozen=True)
class WeekendDecision:
    day: date
    friday: date
    monday: date
    qualified: bool


@dataclass(frozen=True)
class WeekendQualification:
    decisions: tuple[WeekendDecision, ...]

    @property
    def qualified_days(self) -> int:
        return sum(1 for d in self.decisions if d.qualified)

    @property
    def qualified_dates(self) -> tuple[date, ...]:
        return tuple(d.day for d in self.decisions if d.qualified)


def adjoining_weekdays(day: date) -> tuple[date, date]:
    """Friday before and Monday after a Saturday or Sunday."""
    weekday = day.weekday()
    if weekday == SATURDAY:
        return day - timedelta(days=1), day + timedelta(days=2)
    if weekday == SUNDAY:
        return day - timedelta(days=2), day + timedelta(days=1)
    raise ValueError(f"{day.isoformat()} is not a weekend day")


class WeekendQualifier:
    """A Saturday/Sunday is payable only when both the Friday before and the
    Monday after were worked or covered by approved leave. Approved leave
    qualifies even when it carries LOP."""

    def qualify(
        self,
        year: int,
        month: int,
        worked_dates: AbstractSet[date],
        leave_dates: AbstractSet[date] = frozenset(),
    ) -> WeekendQualification:
        attended = set(worked_dates) | set(leave_dates)
        first, last = month_bounds(year, month)

        decisions: list[WeekendDecision] = []
        for day in iter_dates(first, last):
            if day.weekday() not in (SATURDAY, SUNDAY):
                continue
            friday, monday = adjoining_weekdays(day)
            decisions.append(
                WeekendDecision(
                    day=day,
                    friday=friday,
                    monday=monday,
                    qualified=friday in attended and monday in attended,
                )
            )
        return WeekendQualification(decisions=tuple(decisions))