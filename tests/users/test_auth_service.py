from __future__ import annotations

from dataclasses import replace

import pytest
from werkzeug.security import generate_password_hash

from hr_portal.core.enums import EmployeeStatus, Role
from hr_portal.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from hr_portal.users.model import Compensation, Employee
from hr_portal.users.service import AuthService, EmployeeService


class InMemoryEmployees:
    def __init__(self, employees):
        self.by_id = {e.id: e for e in employees}

    def get_by_id(self, user_id):
        return self.by_id.get(user_id)

    def list_by_status(self, status):
        return [e for e in self.by_id.values() if e.status == status]

    def get_by_email(self, email):
        return next((e for e in self.by_id.values() if e.email.lower() == email.lower()), None)

    def update_compensation(self, user_id, compensation):
        self.by_id[user_id] = replace(self.by_id[user_id], compensation=compensation)
        return True

    def set_status(self, user_id, status):
        self.by_id[user_id] = replace(self.by_id[user_id], status=status)
        return True


@pytest.fixture
def employees():
    return InMemoryEmployees(
        [
            Employee(
                id="u-1",
                email="asha@example.com",
                full_name="Asha Rao",
                employee_code="E001",
                department="Support",
                role=Role.HR,
                status=EmployeeStatus.ACTIVE,
                password_hash=generate_password_hash("s3cret!"),
            ),
            Employee(
                id="u-2",
                email="left@example.com",
                full_name="Gone Person",
                employee_code="E002",
                department=None,
                role=Role.EMPLOYEE,
                status=EmployeeStatus.INACTIVE,
                password_hash=generate_password_hash("s3cret!"),
            ),
            Employee(
                id="u-3",
                email="root@example.com",
                full_name="Root",
                employee_code=None,
                department=None,
                role=Role.ADMIN,
                status=EmployeeStatus.ACTIVE,
                password_hash="CHANGE_ME",
            ),
        ]
    )


def test_login_is_case_insensitive_on_email(employees):
    user = AuthService(employees).authenticate("  Asha@Example.com ", "s3cret!")

    assert user.user_id == "u-1"
    assert user.role == Role.HR


@pytest.mark.parametrize(
    "email, password",
    [
        ("asha@example.com", "wrong"),
        ("left@example.com", "s3cret!"),
        ("nobody@example.com", "s3cret!"),
        ("root@example.com", "CHANGE_ME"),
    ],
)
def test_login_failures(employees, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(employees).authenticate(email, password)


def test_hr_updates_compensation_fields(employees):
    comp = EmployeeService(employees).update_compensation(
        current_role=Role.HR,
        user_id="u-1",
        values={"monthly_take_home_salary": "42000", "pf_applicable": True},
    )

    assert comp.monthly_take_home_salary == 42000
    assert comp.pf_applicable is True
    assert employees.by_id["u-1"].compensation == comp
    assert comp.hra == Compensation().hra


def test_compensation_rules(employees):
    svc = EmployeeService(employees)

    with pytest.raises(AuthorizationError):
        svc.update_compensation(current_role=Role.FINANCE, user_id="u-1", values={"tds": 10})
    with pytest.raises(ValidationError):
        svc.update_compensation(current_role=Role.HR, user_id="u-1", values={"bonus": 10})
    with pytest.raises(ValidationError):
        svc.update_compensation(current_role=Role.HR, user_id="u-1", values={"tds": -1})


def test_deactivate_is_admin_only_and_spares_admins(employees):
    svc = EmployeeService(employees)

    with pytest.raises(AuthorizationError):
        svc.deactivate(current_role=Role.HR, user_id="u-1")
    with pytest.raises(ValidationError):
        svc.deactivate(current_role=Role.ADMIN, user_id="u-3")

    svc.deactivate(current_role=Role.ADMIN, user_id="u-1")
    assert employees.by_id["u-1"].status == EmployeeStatus.INACTIVE


def test_active_employee_listing_is_for_payroll_roles(employees):
    svc = EmployeeService(employees)

    assert [e.id for e in svc.list_active(current_role=Role.FINANCE)] == ["u-1", "u-3"]
    with pytest.raises(AuthorizationError):
        svc.list_active(current_role=Role.EMPLOYEE)
