from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Sequence

from ..common.datetime_utils import clip_range, is_weekend, iter_dates, month_bounds
from ..core.constants import WEEKEND_PADDING_DAYS
from ..core.enums import LeaveStatus
from .model import Holiday, LeaveApplication, holiday_calendar
from .repository import LeaveRepository


@dataclass(frozen=True)
class LeaveInMonth:
    leave: LeaveApplication
    days_in_month: float
    lop_fraction: float
    paid_days_in_month: float

    @property
    def lop_days_in_month(self) -> float:
        return self.days_in_month - self.paid_days_in_month


@dataclass(frozen=True)
class ResolvedLeaves:
    leaves: tuple[LeaveInMonth, ...] = ()
    # Every date inside an approved leave (LOP or not), padding window included.
    leave_dates: frozenset[date] = field(default_factory=frozenset)

    @property
    def paid_leave_days_in_month(self) -> float:
        return sum(item.paid_days_in_month for item in self.leaves)

    @property
    def lop_days_in_month(self) -> float:
        return sum(item.lop_days_in_month for item in self.leaves)


def resolve_leave(leave: LeaveApplication, first: date, last: date, closed: dict[date, Holiday]) -> LeaveInMonth:
    """Split one approved leave into paid and loss-of-pay days within a month.

    Days are counted as working days (weekends and holidays are not part of
    total working days) and capped at the leave's own ``days_count`` so half
    days stay half days.
    """
    if leave.days_count <= 0:
        return LeaveInMonth(leave=leave, days_in_month=0.0, lop_fraction=0.0, paid_days_in_month=0.0)

    clipped = clip_range(leave.start_date, leave.end_date, first, last)
    working = 0
    if clipped:
        working = sum(1 for d in iter_dates(*clipped) if not is_weekend(d) and d not in closed)
    days_in_month = min(float(working), float(leave.days_count))

    lop_fraction = min(1.0, max(0.0, leave.lop_days / leave.days_count))
    return LeaveInMonth(
        leave=leave,
        days_in_month=days_in_month,
        lop_fraction=lop_fraction,
        paid_days_in_month=days_in_month * (1 - lop_fraction),
    )


class LeaveResolver:
    """Classifies an employee's approved leave for a month into paid and LOP days."""

    def __init__(self, leaves: LeaveRepository, *, padding_days: int = WEEKEND_PADDING_DAYS):
        self._leaves = leaves
        self._padding = timedelta(days=int(padding_days))

    def resolve(self, user_id: str, year: int, month: int, holidays: Sequence[Holiday] = ()) -> ResolvedLeaves:
        first, last = month_bounds(year, month)
        window_start, window_end = first - self._padding, last + self._padding
        approved = self._leaves.list_overlapping(
            user_id=user_id,
            start=window_start,
            end=window_end,
            status=LeaveStatus.APPROVED,
        )
        closed = holiday_calendar(holidays)

        items: list[LeaveInMonth] = []
        leave_dates: set[date] = set()
        for leave in approved:
            if leave.status != LeaveStatus.APPROVED:
                continue
            clipped = clip_range(leave.start_date, leave.end_date, window_start, window_end)
            if clipped:
                leave_dates.update(iter_dates(*clipped))
            if clip_range(leave.start_date, leave.end_date, first, last):
                items.append(resolve_leave(leave, first, last, closed))

        return ResolvedLeaves(leaves=tuple(items), leave_dates=frozenset(leave_dates))
