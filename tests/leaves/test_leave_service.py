from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from hr_portal.core.enums import EmployeeStatus, LeaveStatus, Role
from hr_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hr_portal.leaves.model import LeaveApplication
from hr_portal.leaves.service import LeaveService
from hr_portal.notifications.service import NotificationService
from hr_portal.users.model import Employee


class InMemoryLeaves:
    def __init__(self):
        self._next_id = 1
        self.leaves: dict[str, LeaveApplication] = {}

    def create(self, *, user_id, leave_type, start_date, end_date, days_count, lop_days, reason):
        leave_id = f"lv-{self._next_id}"
        self._next_id += 1
        self.leaves[leave_id] = LeaveApplication(
            id=leave_id,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            days_count=days_count,
            lop_days=lop_days,
            status=LeaveStatus.PENDING,
            reason=reason,
            leave_type=leave_type,
        )
        return leave_id

    def get(self, leave_id):
        return self.leaves.get(leave_id)

    def list_for_user(self, user_id, *, limit=200):
        return [lv for lv in self.leaves.values() if lv.user_id == user_id][:limit]

    def set_status(self, *, leave_id, status, expected, decided_by=None, comments=None):
        leave = self.leaves.get(leave_id)
        if not leave or leave.status not in expected:
            return False
        self.leaves[leave_id] = replace(leave, status=status, approved_by=decided_by, comments=comments)
        return True

    def set_lop_days(self, *, leave_id, lop_days):
        leave = self.leaves.get(leave_id)
        if not leave:
            return False
        self.leaves[leave_id] = replace(leave, lop_days=lop_days)
        return True


class InMemoryHolidays:
    def list_between(self, start, end):
        return []


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_id = {e.id: e for e in employees}

    def get_by_id(self, user_id):
        return self._by_id.get(user_id)

    def list_by_roles(self, roles):
        return [e for e in self._by_id.values() if e.role in roles]


class RecordingNotifications:
    def __init__(self, fail_for=()):
        self.sent: list[tuple[str, str]] = []
        self._fail_for = set(fail_for)

    def create(self, *, user_id, title, message, type, data=None):
        if user_id in self._fail_for:
            raise RuntimeError("notifications table locked")
        self.sent.append((user_id, type))
        return f"n-{len(self.sent)}"


def _person(user_id: str, role: Role) -> Employee:
    return Employee(user_id, f"{user_id}@example.com", user_id.title(), None, None, role, EmployeeStatus.ACTIVE)


@pytest.fixture
def setup():
    leaves = InMemoryLeaves()
    notes = RecordingNotifications()
    employees = InMemoryEmployees(
        [_person("emp", Role.EMPLOYEE), _person("hr", Role.HR), _person("boss", Role.ADMIN), _person("fin", Role.FINANCE)]
    )
    svc = LeaveService(leaves, InMemoryHolidays(), employees, NotificationService(notes, max_workers=2))
    return svc, leaves, notes


def _apply(svc, **overrides):
    values = dict(
        user_id="emp",
        start_date=date(2025, 3, 10),
        end_date=date(2025, 3, 11),
        days_count=2,
        reason="Wedding",
    )
    values.update(overrides)
    return svc.apply(**values)


def test_apply_creates_pending_leave_and_notifies_hr_and_admins(setup):
    svc, leaves, notes = setup

    leave_id = _apply(svc)

    assert leaves.leaves[leave_id].status == LeaveStatus.PENDING
    assert sorted(user for user, _ in notes.sent) == ["boss", "hr"]
    assert {kind for _, kind in notes.sent} == {"leave_submitted"}


@pytest.mark.parametrize(
    "overrides",
    [
        {"end_date": date(2025, 3, 9)},
        {"days_count": 0},
        {"days_count": "nan"},
        {"days_count": "inf"},
        {"lop_days": float("nan")},
        {"reason": 42},
        {"lop_days": 3},
        {"reason": "  "},
    ],
)
def test_apply_rejects_invalid_input(setup, overrides):
    svc, leaves, _ = setup

    with pytest.raises(ValidationError):
        _apply(svc, **overrides)
    assert leaves.leaves == {}


def test_approve_requires_hr_or_admin(setup):
    svc, leaves, _ = setup
    leave_id = _apply(svc)

    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.EMPLOYEE, approver_id="emp", leave_id=leave_id)
    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.FINANCE, approver_id="fin", leave_id=leave_id)
    assert leaves.leaves[leave_id].status == LeaveStatus.PENDING


def test_approve_notifies_applicant_and_cannot_repeat(setup):
    svc, leaves, notes = setup
    leave_id = _apply(svc)

    svc.approve(current_role=Role.HR, approver_id="hr", leave_id=leave_id, comments="Enjoy")

    assert leaves.leaves[leave_id].status == LeaveStatus.APPROVED
    assert leaves.leaves[leave_id].approved_by == "hr"
    assert ("emp", "leave_approved") in notes.sent
    with pytest.raises(ValidationError):
        svc.reject(current_role=Role.ADMIN, approver_id="boss", leave_id=leave_id)


def test_notification_failure_does_not_fail_decision():
    leaves = InMemoryLeaves()
    notes = RecordingNotifications(fail_for={"emp"})
    svc = LeaveService(
        leaves,
        InMemoryHolidays(),
        InMemoryEmployees([_person("emp", Role.EMPLOYEE), _person("hr", Role.HR)]),
        NotificationService(notes),
    )
    leave_id = _apply(svc)

    svc.reject(current_role=Role.HR, approver_id="hr", leave_id=leave_id)

    assert leaves.leaves[leave_id].status == LeaveStatus.REJECTED


def test_withdraw_only_by_applicant_and_only_while_open(setup):
    svc, leaves, _ = setup
    approved = _apply(svc)
    svc.approve(current_role=Role.HR, approver_id="hr", leave_id=approved)
    rejected = _apply(svc, start_date=date(2025, 3, 20), end_date=date(2025, 3, 20), days_count=1)
    svc.reject(current_role=Role.HR, approver_id="hr", leave_id=rejected)

    with pytest.raises(AuthorizationError):
        svc.withdraw(user_id="hr", leave_id=approved)

    svc.withdraw(user_id="emp", leave_id=approved)
    assert leaves.leaves[approved].status == LeaveStatus.WITHDRAWN

    with pytest.raises(ValidationError):
        svc.withdraw(user_id="emp", leave_id=rejected)


def test_lop_correction_is_admin_only_and_bounded(setup):
    svc, leaves, _ = setup
    leave_id = _apply(svc)

    with pytest.raises(AuthorizationError):
        svc.correct_lop_days(current_role=Role.HR, leave_id=leave_id, lop_days=1)
    with pytest.raises(ValidationError):
        svc.correct_lop_days(current_role=Role.ADMIN, leave_id=leave_id, lop_days=2.5)
    with pytest.raises(ValidationError):
        svc.correct_lop_days(current_role=Role.ADMIN, leave_id=leave_id, lop_days="nan")

    svc.correct_lop_days(current_role=Role.ADMIN, leave_id=leave_id, lop_days=1.5)
    assert leaves.leaves[leave_id].lop_days == 1.5


def test_unknown_leave(setup):
    svc, _, _ = setup

    with pytest.raises(NotFoundError):
        svc.approve(current_role=Role.HR, approver_id="hr", leave_id="missing")
