from datetime import date

import pytest

from hr_portal.payroll.weekend import WeekendQualifier, adjoining_weekdays

# March 2025 starts on a Saturday: weekends are 1/2, 8/9, 15/16, 22/23, 29/30.


def test_weekend_qualifies_when_friday_and_monday_worked():
    result = WeekendQualifier().qualify(2025, 3, {date(2025, 3, 7), date(2025, 3, 10)})

    assert result.qualified_dates == (date(2025, 3, 8), date(2025, 3, 9))
    assert result.qualified_days == 2


def test_one_sided_attendance_never_qualifies():
    friday_only = WeekendQualifier().qualify(2025, 3, {date(2025, 3, 7)})
    monday_only = WeekendQualifier().qualify(2025, 3, {date(2025, 3, 10)})

    assert friday_only.qualified_days == 0
    assert monday_only.qualified_days == 0


def test_approved_leave_counts_as_attendance():
    result = WeekendQualifier().qualify(
        2025,
        3,
        worked_dates={date(2025, 3, 14)},
        leave_dates={date(2025, 3, 17)},
    )

    assert result.qualified_dates == (date(2025, 3, 15), date(2025, 3, 16))


def test_first_weekend_uses_friday_of_previous_month():
    result = WeekendQualifier().qualify(2025, 3, {date(2025, 2, 28), date(2025, 3, 3)})

    assert result.qualified_dates == (date(2025, 3, 1), date(2025, 3, 2))


def test_every_weekend_day_of_month_gets_a_decision():
    result = WeekendQualifier().qualify(2025, 3, set())

    assert len(result.decisions) == 10
    assert all(not d.qualified for d in result.decisions)


def test_adjoining_weekdays():
    assert adjoining_weekdays(date(2025, 3, 8)) == (date(2025, 3, 7), date(2025, 3, 10))
    assert adjoining_weekdays(date(2025, 3, 9)) == (date(2025, 3, 7), date(2025, 3, 10))
    with pytest.raises(ValueError):
        adjoining_weekdays(date(2025, 3, 11))
