from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.best_effort import best_effort
from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import EmployeeRepository
from ..users.service import HR_ROLES, require_role
from .model import Holiday, LeaveApplication
from .repository import HolidayRepository, LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Use case: leave applications (apply, decide, withdraw, correct) and holidays."""

    def __init__(
        self,
        leaves: LeaveRepository,
        holidays: HolidayRepository,
        employees: EmployeeRepository,
        notifications: NotificationService,
    ):
        self._leaves = leaves
        self._holidays = holidays
        self._employees = employees
        self._notifications = notifications

    def _get(self, leave_id: str) -> LeaveApplication:
        leave = self._leaves.get(leave_id)
        if not leave:
            raise NotFoundError("Leave application not found")
        return leave

    def apply(
        self,
        *,
        user_id: str,
        start_date: date,
        end_date: date,
        days_count: float,
        reason: str,
        lop_days: float = 0.0,
        leave_type: Optional[str] = None,
    ) -> str:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        days_count = require_non_negative(days_count, "Days count")
        if days_count <= 0:
            raise ValidationError("Days count must be greater than zero")
        lop_days = require_non_negative(lop_days, "LOP days")
        if lop_days > days_count:
            raise ValidationError("LOP days cannot exceed days count")

        reason = require_non_empty(reason, "Reason")
        leave_id = self._leaves.create(
            user_id=user_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days_count=days_count,
            lop_days=lop_days,
            reason=reason,
        )

        applicant = self._employees.get_by_id(user_id)
        name = applicant.full_name if applicant else "An employee"
        best_effort(
            lambda: self._notifications.notify(
                [u.id for u in self._employees.list_by_roles([Role.HR, Role.ADMIN]) if u.id != user_id],
                title="New Leave Application",
                message=f"{name} applied for leave from {start_date.isoformat()} to {end_date.isoformat()}.",
                type="leave_submitted",
                data={"leave_application_id": leave_id, "target": "employees/leave"},
            ),
            label="leave submission notifications",
        )
        return leave_id

    def _decide(
        self,
        *,
        current_role: Role,
        approver_id: str,
        leave_id: str,
        status: LeaveStatus,
        comments: str,
    ) -> LeaveApplication:
        require_role(current_role, HR_ROLES)
        leave = self._get(leave_id)
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("Leave application has already been processed")

        ok = self._leaves.set_status(
            leave_id=leave_id,
            status=status,
            expected=[LeaveStatus.PENDING],
            decided_by=approver_id,
            comments=(comments or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Leave application has already been processed")

        self._notify_applicant(leave, status)
        return leave

    def approve(self, *, current_role: Role, approver_id: str, leave_id: str, comments: str = "") -> None:
        self._decide(
            current_role=current_role,
            approver_id=approver_id,
            leave_id=leave_id,
            status=LeaveStatus.APPROVED,
            comments=comments,
        )

    def reject(self, *, current_role: Role, approver_id: str, leave_id: str, comments: str = "") -> None:
        self._decide(
            current_role=current_role,
            approver_id=approver_id,
            leave_id=leave_id,
            status=LeaveStatus.REJECTED,
            comments=comments,
        )

    def withdraw(self, *, user_id: str, leave_id: str) -> None:
        leave = self._get(leave_id)
        if leave.user_id != user_id:
            raise AuthorizationError("Only the applicant can withdraw a leave application")

        withdrawable = [LeaveStatus.PENDING, LeaveStatus.APPROVED]
        if leave.status not in withdrawable:
            raise ValidationError("Leave application can no longer be withdrawn")
        if not self._leaves.set_status(leave_id=leave_id, status=LeaveStatus.WITHDRAWN, expected=withdrawable):
            raise ValidationError("Withdrawal failed")

    def correct_lop_days(self, *, current_role: Role, leave_id: str, lop_days: float) -> None:
        """Administrative correction; allowed in any status."""
        require_role(current_role, {Role.ADMIN})
        leave = self._get(leave_id)
        lop_days = require_non_negative(lop_days, "LOP days")
        if lop_days > leave.days_count:
            raise ValidationError("LOP days cannot exceed days count")
        if not self._leaves.set_lop_days(leave_id=leave_id, lop_days=lop_days):
            raise ValidationError("LOP correction failed")
        logger.info("LOP days for leave %s corrected from %s to %s", leave_id, leave.lop_days, lop_days)

    def list_mine(self, *, user_id: str) -> Sequence[LeaveApplication]:
        return self._leaves.list_for_user(user_id)

    def _notify_applicant(self, leave: LeaveApplication, status: LeaveStatus) -> None:
        best_effort(
            lambda: self._notifications.notify(
                [leave.user_id],
                title=f"Leave Application {status.value.title()}",
                message=(
                    f"Your leave from {leave.start_date.isoformat()} to {leave.end_date.isoformat()} "
                    f"has been {status.value}."
                ),
                type=f"leave_{status.value}",
                data={"leave_application_id": leave.id, "target": "dashboard/leave"},
            ),
            label="leave decision notification",
        )

    # Holidays
    def list_holidays(self, *, year: int) -> Sequence[Holiday]:
        return self._holidays.list_between(date(int(year), 1, 1), date(int(year), 12, 31))

    def add_holiday(self, *, current_role: Role, day: date, name: str, is_optional: bool = False) -> str:
        require_role(current_role, HR_ROLES)
        name = require_non_empty(name, "Holiday name")
        return self._holidays.create(day=day, name=name, is_optional=bool(is_optional))

    def remove_holiday(self, *, current_role: Role, holiday_id: str) -> None:
        require_role(current_role, HR_ROLES)
        if not self._holidays.delete(holiday_id):
            raise NotFoundError("Holiday not found")
