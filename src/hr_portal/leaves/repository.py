from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import Holiday, LeaveApplication


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        leave_type: Optional[str],
        start_date: date,
        end_date: date,
        days_count: float,
        lop_days: float,
        reason: str,
    ) -> str:
        raise NotImplementedError

    def get(self, leave_id: str) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: int = 200) -> Sequence[LeaveApplication]:
        raise NotImplementedError

    def list_overlapping(
        self,
        *,
        user_id: str,
        start: date,
        end: date,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveApplication]:
        """Applications whose [start_date, end_date] intersects [start, end]."""

        raise NotImplementedError

    def set_status(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        expected: Sequence[LeaveStatus],
        decided_by: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> bool:
        """Transition only when the current status is one of ``expected``."""

        raise NotImplementedError

    def set_lop_days(self, *, leave_id: str, lop_days: float) -> bool:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def list_between(self, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, day: date, name: str, is_optional: bool = False) -> str:
        raise NotImplementedError

    def delete(self, holiday_id: str) -> bool:
        raise NotImplementedError
