from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..timetracking.model import MonthlyAttendance


@dataclass(frozen=True)
class PayrollLines:
    """Compensation and deduction figures after attendance scaling."""

    basic_pay: float
    hra: float
    night_allowance: float
    special_allowance: float
    gross_pay: float
    pf_deduction: float
    esi_deduction: float
    tds: float
    professional_tax: float
    vpf: float
    total_deductions: float
    net_pay: float


@dataclass(frozen=True)
class PayrollComposition:
    total_working_days: int
    days_present: float
    paid_leave_days: float
    qualified_weekend_days: int
    payable_days: float
    attendance_ratio: float
    lines: PayrollLines


@dataclass(frozen=True)
class PayrollResult:
    """Derived payroll for one employee and month (not persisted)."""

    user_id: str
    full_name: str
    employee_code: Optional[str]
    year: int
    month: int
    composition: PayrollComposition
    attendance: MonthlyAttendance
    lop_days_in_month: float = 0.0
    qualified_weekends: tuple[date, ...] = ()

    @property
    def payable_days(self) -> float:
        return self.composition.payable_days

    @property
    def attendance_ratio(self) -> float:
        return self.composition.attendance_ratio

    @property
    def net_pay(self) -> float:
        return self.composition.lines.net_pay


@dataclass(frozen=True)
class PayrollFailure:
    user_id: str
    full_name: str
    error: str


@dataclass
class PayrollRun:
    year: int
    month: int
    results: list[PayrollResult] = field(default_factory=list)
    failures: list[PayrollFailure] = field(default_factory=list)

    @property
    def total_net_pay(self) -> float:
        return round(sum(r.net_pay for r in self.results), 2)
