from __future__ import annotations

from abc import ABC, abstractmethod

from ...users.model import Compensation
from ..model import PayrollComposition


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compose(
        self,
        compensation: Compensation,
        *,
        total_working_days: int,
        days_present: float,
        paid_leave_days: float,
        qualified_weekend_days: int,
    ) -> PayrollComposition:
        raise NotImplementedError
