from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Compensation:
    """Monthly salary annexure for one employee (full-attendance figures)."""

    monthly_basic_pay: float = 0.0
    hra: float = 0.0
    night_allowance: float = 0.0
    special_allowance: float = 0.0
    monthly_gross: float = 0.0
    pf_employee: float = 0.0
    esi_employee: float = 0.0
    tds: float = 0.0
    professional_tax: float = 0.0
    vpf: float = 0.0
    monthly_take_home_salary: float = 0.0
    pf_applicable: bool = False
    esi_applicable: bool = False


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee (row in ``users``)."""

    id: str
    email: str
    full_name: str
    employee_code: Optional[str]
    department: Optional[str]
    role: Role
    status: EmployeeStatus
    password_hash: Optional[str] = None
    compensation: Compensation = field(default_factory=Compensation)

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
