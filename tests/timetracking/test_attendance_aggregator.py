from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from hr_portal.core.enums import DayStatus, EmployeeStatus, Role
from hr_portal.leaves.model import Holiday
from hr_portal.timetracking.aggregator import AttendanceAggregator, working_days_in_month
from hr_portal.timetracking.model import TimeEntry
from hr_portal.users.model import Employee

IST = ZoneInfo("Asia/Kolkata")


def _employee(email: str = "asha@example.com") -> Employee:
    return Employee(
        id="u-1",
        email=email,
        full_name="Asha Rao",
        employee_code="E001",
        department="Support",
        role=Role.EMPLOYEE,
        status=EmployeeStatus.ACTIVE,
    )


class InMemoryTimeTracking:
    def __init__(self, profiles: dict[str, str], entries: list[TimeEntry]):
        self._profiles = profiles
        self._entries = entries
        self.queries: list[tuple[datetime, datetime]] = []

    def find_profile_id_by_email(self, email):
        return self._profiles.get(email.lower())

    def list_entries(self, *, profile_id, start, end):
        self.queries.append((start, end))
        return [e for e in self._entries if e.profile_id == profile_id and start <= e.start_time < end]


def _entry(entry_id: str, start: datetime, hours: float) -> TimeEntry:
    return TimeEntry(id=entry_id, profile_id="p-1", start_time=start, duration_seconds=int(hours * 3600))


def test_working_days_exclude_weekends_and_holidays():
    assert working_days_in_month(2025, 3) == 21
    assert working_days_in_month(2025, 3, [Holiday(id="h1", day=date(2025, 3, 14), name="Holi")]) == 20


def test_optional_and_weekend_holidays_do_not_reduce_working_days():
    holidays = [
        Holiday(id="h1", day=date(2025, 3, 14), name="Holi", is_optional=True),
        Holiday(id="h2", day=date(2025, 3, 15), name="Saturday fair"),
    ]
    assert working_days_in_month(2025, 3, holidays) == 21


def test_night_shift_counts_for_the_day_it_started():
    # 23:30 IST on Thursday 13 March, ending 02:30 on the 14th.
    night = _entry("e1", datetime(2025, 3, 13, 23, 30, tzinfo=IST), 3)
    repo = InMemoryTimeTracking({"asha@example.com": "p-1"}, [night])

    att = AttendanceAggregator(repo).aggregate(_employee(), 2025, 3)

    by_day = {d.day: d for d in att.days}
    assert by_day[date(2025, 3, 13)].status == DayStatus.PRESENT
    assert by_day[date(2025, 3, 13)].hours_worked == 3
    assert by_day[date(2025, 3, 14)].status == DayStatus.ABSENT
    assert att.days_present == 1
    assert att.worked_dates == frozenset({date(2025, 3, 13)})


def test_utc_timestamps_are_converted_to_local_date():
    # 19:00 UTC is 00:30 IST the next day.
    late = _entry("e1", datetime(2025, 3, 12, 19, 0, tzinfo=ZoneInfo("UTC")), 4)
    repo = InMemoryTimeTracking({"asha@example.com": "p-1"}, [late])

    att = AttendanceAggregator(repo).aggregate(_employee(), 2025, 3)

    assert att.worked_dates == frozenset({date(2025, 3, 13)})


def test_overtime_beyond_standard_hours():
    entries = [
        _entry("e1", datetime(2025, 3, 10, 9, 0, tzinfo=IST), 6),
        _entry("e2", datetime(2025, 3, 10, 16, 0, tzinfo=IST), 4),
    ]
    repo = InMemoryTimeTracking({"asha@example.com": "p-1"}, entries)

    att = AttendanceAggregator(repo, working_hours_per_day=8).aggregate(_employee(), 2025, 3)

    assert att.days_present == 1
    assert att.total_hours_worked == 10
    assert att.overtime_hours == 2
    assert att.days_absent == 20


def test_entries_around_the_month_feed_worked_dates_only():
    entries = [
        _entry("e1", datetime(2025, 2, 28, 9, 0, tzinfo=IST), 8),
        _entry("e2", datetime(2025, 3, 3, 9, 0, tzinfo=IST), 8),
    ]
    repo = InMemoryTimeTracking({"asha@example.com": "p-1"}, entries)

    att = AttendanceAggregator(repo).aggregate(_employee(), 2025, 3)

    assert att.days_present == 1
    assert att.total_hours_worked == 8
    assert date(2025, 2, 28) in att.worked_dates


def test_missing_profile_yields_zero_attendance():
    repo = InMemoryTimeTracking({}, [])

    att = AttendanceAggregator(repo).aggregate(_employee("new.joiner@example.com"), 2025, 3)

    assert att.tracked is False
    assert att.days_present == 0
    assert att.total_hours_worked == 0
    assert att.days_absent == att.total_working_days == 21
    assert len(att.days) == 31
    assert repo.queries == []


def test_aggregate_all_skips_failures_and_sorts_by_name():
    class FlakyTimeTracking(InMemoryTimeTracking):
        def find_profile_id_by_email(self, email):
            if email.startswith("broken"):
                raise RuntimeError("time tracking down")
            return super().find_profile_id_by_email(email)

    repo = FlakyTimeTracking({}, [])
    employees = [
        Employee("u-2", "zoe@example.com", "Zoe", None, None, Role.EMPLOYEE, EmployeeStatus.ACTIVE),
        Employee("u-3", "broken@example.com", "Bob", None, None, Role.EMPLOYEE, EmployeeStatus.ACTIVE),
        Employee("u-1", "amy@example.com", "Amy", None, None, Role.EMPLOYEE, EmployeeStatus.ACTIVE),
    ]

    report = AttendanceAggregator(repo).aggregate_all(employees, 2025, 3)

    assert [a.full_name for a in report] == ["Amy", "Zoe"]
