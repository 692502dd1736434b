import pytest

from hr_portal.payroll.calculator.prorated_calculator import ProratedPayrollCalculator, payable_days
from hr_portal.users.model import Compensation


COMPENSATION = Compensation(
    monthly_basic_pay=30000,
    hra=12000,
    night_allowance=2000,
    special_allowance=6000,
    monthly_gross=50000,
    pf_employee=1800,
    esi_employee=375,
    tds=2500,
    professional_tax=200,
    vpf=500,
    monthly_take_home_salary=45000,
    pf_applicable=True,
    esi_applicable=True,
)


def test_worked_example_scales_by_twenty_one_of_twenty_two():
    comp = ProratedPayrollCalculator().compose(
        COMPENSATION,
        total_working_days=22,
        days_present=18,
        paid_leave_days=2,
        qualified_weekend_days=1,
    )

    assert comp.payable_days == 21
    assert comp.attendance_ratio == pytest.approx(21 / 22)
    assert round(comp.attendance_ratio, 4) == 0.9545
    assert comp.lines.basic_pay == pytest.approx(30000 * 21 / 22)
    assert comp.lines.pf_deduction == pytest.approx(1800 * 21 / 22)


def test_net_pay_is_take_home_times_ratio_not_gross_minus_deductions():
    comp = ProratedPayrollCalculator().compose(
        COMPENSATION,
        total_working_days=20,
        days_present=15,
        paid_leave_days=0,
        qualified_weekend_days=0,
    )

    assert comp.lines.net_pay == pytest.approx(45000 * 0.75)
    assert comp.lines.net_pay != pytest.approx(comp.lines.gross_pay - comp.lines.total_deductions)


def test_payable_days_never_exceed_working_days():
    assert payable_days(total_working_days=21, days_present=21, paid_leave_days=3, qualified_weekend_days=8) == 21
    assert payable_days(total_working_days=21, days_present=0, paid_leave_days=0, qualified_weekend_days=0) == 0


def test_zero_working_days_gives_zero_ratio():
    comp = ProratedPayrollCalculator().compose(
        COMPENSATION,
        total_working_days=0,
        days_present=3,
        paid_leave_days=0,
        qualified_weekend_days=0,
    )

    assert comp.payable_days == 0
    assert comp.attendance_ratio == 0
    assert comp.lines.net_pay == 0


def test_statutory_deductions_skipped_when_not_applicable():
    comp = ProratedPayrollCalculator().compose(
        Compensation(pf_employee=1800, esi_employee=375, tds=100, monthly_take_home_salary=1000),
        total_working_days=10,
        days_present=10,
        paid_leave_days=0,
        qualified_weekend_days=0,
    )

    assert comp.lines.pf_deduction == 0
    assert comp.lines.esi_deduction == 0
    assert comp.lines.total_deductions == pytest.approx(100)
