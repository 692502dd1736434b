from __future__ import annotations

from ...users.model import Compensation
from ..model import PayrollComposition, PayrollLines
from .base import PayrollCalculator


def payable_days(
    *,
    total_working_days: int,
    days_present: float,
    paid_leave_days: float,
    qualified_weekend_days: int,
) -> float:
    raw = days_present + paid_leave_days + qualified_weekend_days
    return max(0.0, min(float(total_working_days), float(raw)))


def attendance_ratio(payable: float, total_working_days: int) -> float:
    if total_working_days <= 0:
        return 0.0
    return payable / total_working_days


class ProratedPayrollCalculator(PayrollCalculator):
    """Standard rule: every line item scales linearly with the attendance ratio.

    Net pay is the monthly take-home salary times the ratio. It is not gross
    minus the scaled deductions; deductions are reported alongside.
    """

    def compose(
        self,
        compensation: Compensation,
        *,
        total_working_days: int,
        days_present: float,
        paid_leave_days: float,
        qualified_weekend_days: int,
    ) -> PayrollComposition:
        payable = payable_days(
            total_working_days=total_working_days,
            days_present=days_present,
            paid_leave_days=paid_leave_days,
            qualified_weekend_days=qualified_weekend_days,
        )
        ratio = attendance_ratio(payable, total_working_days)

        pf = compensation.pf_employee * ratio if compensation.pf_applicable else 0.0
        esi = compensation.esi_employee * ratio if compensation.esi_applicable else 0.0
        tds = compensation.tds * ratio
        professional_tax = compensation.professional_tax * ratio
        vpf = compensation.vpf * ratio

        lines = PayrollLines(
            basic_pay=compensation.monthly_basic_pay * ratio,
            hra=compensation.hra * ratio,
            night_allowance=compensation.night_allowance * ratio,
            special_allowance=compensation.special_allowance * ratio,
            gross_pay=compensation.monthly_gross * ratio,
            pf_deduction=pf,
            esi_deduction=esi,
            tds=tds,
            professional_tax=professional_tax,
            vpf=vpf,
            total_deductions=pf + esi + tds + professional_tax + vpf,
            net_pay=compensation.monthly_take_home_salary * ratio,
        )
        return PayrollComposition(
            total_working_days=int(total_working_days),
            days_present=float(days_present),
            paid_leave_days=float(paid_leave_days),
            qualified_weekend_days=int(qualified_weekend_days),
            payable_days=payable,
            attendance_ratio=ratio,
            lines=lines,
        )
