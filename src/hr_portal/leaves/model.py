from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveApplication:
    id: str
    user_id: str
    start_date: date
    end_date: date
    days_count: float
    status: LeaveStatus
    reason: str
    lop_days: float = 0.0
    leave_type: Optional[str] = None
    applied_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None


@dataclass(frozen=True)
class Holiday:
    id: str
    day: date
    name: str
    is_optional: bool = False


def holiday_calendar(holidays: Iterable[Holiday]) -> dict[date, Holiday]:
    """Non-optional holidays keyed by date; optional ones stay working days."""
    return {h.day: h for h in holidays if not h.is_optional}
