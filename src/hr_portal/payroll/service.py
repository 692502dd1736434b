from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..core.constants import WEEKEND_PADDING_DAYS
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..leaves.model import Holiday
from ..leaves.repository import HolidayRepository
from ..leaves.resolver import LeaveResolver
from ..timetracking.aggregator import AttendanceAggregator
from ..timetracking.model import MonthlyAttendance
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from ..users.service import PAYROLL_ROLES, require_role
from .calculator.base import PayrollCalculator
from .calculator.prorated_calculator import ProratedPayrollCalculator
from .model import PayrollFailure, PayrollResult, PayrollRun
from .weekend import WeekendQualifier

logger = logging.getLogger(__name__)


def _check_period(year: int, month: int) -> tuple[int, int]:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Invalid month: {month}")
    return int(year), int(month)


class PayrollService:
    """Monthly payroll: attendance -> leave -> weekends -> composition."""

    def __init__(
        self,
        employees: EmployeeRepository,
        holidays: HolidayRepository,
        aggregator: AttendanceAggregator,
        leave_resolver: LeaveResolver,
        *,
        weekend_qualifier: Optional[WeekendQualifier] = None,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._employees = employees
        self._holidays = holidays
        self._aggregator = aggregator
        self._leave_resolver = leave_resolver
        self._weekends = weekend_qualifier or WeekendQualifier()
        self._calculator = calculator or ProratedPayrollCalculator()

    def _holidays_for(self, year: int, month: int) -> Sequence[Holiday]:
        first, last = month_bounds(year, month)
        padding = timedelta(days=WEEKEND_PADDING_DAYS)
        return self._holidays.list_between(first - padding, last + padding)

    def _compute(self, employee: Employee, year: int, month: int, holidays: Sequence[Holiday]) -> PayrollResult:
        attendance = self._aggregator.aggregate(employee, year, month, holidays)
        leaves = self._leave_resolver.resolve(employee.id, year, month, holidays)
        weekends = self._weekends.qualify(year, month, attendance.worked_dates, leaves.leave_dates)

        composition = self._calculator.compose(
            employee.compensation,
            total_working_days=attendance.total_working_days,
            days_present=attendance.days_present,
            paid_leave_days=leaves.paid_leave_days_in_month,
            qualified_weekend_days=weekends.qualified_days,
        )
        return PayrollResult(
            user_id=employee.id,
            full_name=employee.full_name,
            employee_code=employee.employee_code,
            year=year,
            month=month,
            composition=composition,
            attendance=attendance,
            lop_days_in_month=leaves.lop_days_in_month,
            qualified_weekends=weekends.qualified_dates,
        )

    def compute_for_employee(self, *, current_role: Role, user_id: str, year: int, month: int) -> PayrollResult:
        require_role(current_role, PAYROLL_ROLES)
        employee = self._employees.get_by_id(user_id)
        if not employee:
            raise NotFoundError("Employee not found")
        year, month = _check_period(year, month)
        return self._compute(employee, year, month, self._holidays_for(year, month))

    def run_month(self, *, current_role: Role, year: int, month: int) -> PayrollRun:
        """Process active employees one after another; one failure does not stop the run."""
        require_role(current_role, PAYROLL_ROLES)
        year, month = _check_period(year, month)
        holidays = self._holidays_for(year, month)

        run = PayrollRun(year=year, month=month)
        for employee in self._employees.list_by_status(EmployeeStatus.ACTIVE):
            try:
                run.results.append(self._compute(employee, year, month, holidays))
            except Exception as exc:
                logger.exception("payroll failed for %s (%s-%02d)", employee.email, year, month)
                run.failures.append(PayrollFailure(user_id=employee.id, full_name=employee.full_name, error=str(exc)))

        logger.info(
            "payroll run %s-%02d: %d processed, %d failed",
            year,
            month,
            len(run.results),
            len(run.failures),
        )
        return run

    def attendance_report(self, *, current_role: Role, year: int, month: int) -> list[MonthlyAttendance]:
        require_role(current_role, PAYROLL_ROLES)
        year, month = _check_period(year, month)
        employees = self._employees.list_by_status(EmployeeStatus.ACTIVE)
        return self._aggregator.aggregate_all(employees, year, month, self._holidays_for(year, month))
