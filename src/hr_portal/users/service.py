from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Sequence

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Compensation, Employee
from .repository import EmployeeRepository

HR_ROLES = frozenset({Role.HR, Role.ADMIN})
PAYROLL_ROLES = frozenset({Role.HR, Role.FINANCE, Role.ADMIN})


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    full_name: str
    role: Role


def require_role(current_role: Role, allowed: frozenset[Role] | set[Role]) -> None:
    if current_role not in allowed:
        raise AuthorizationError("You do not have permission for this action")


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        user = self._employees.get_by_email(email)
        if not user or not user.is_active or not user.password_hash:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except Exception:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.id, full_name=user.full_name, role=user.role)


class EmployeeService:
    """Use case: employee lookups and HR-managed profile changes."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, user_id: str) -> Employee:
        employee = self._employees.get_by_id(user_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_active(self, *, current_role: Role) -> Sequence[Employee]:
        require_role(current_role, PAYROLL_ROLES)
        return self._employees.list_by_status(EmployeeStatus.ACTIVE)

    def update_compensation(self, *, current_role: Role, user_id: str, values: Mapping[str, Any]) -> Compensation:
        require_role(current_role, HR_ROLES)
        employee = self.get(user_id)

        known = {f.name for f in fields(Compensation)}
        unknown = set(values) - known
        if unknown:
            raise ValidationError(f"Unknown compensation fields: {', '.join(sorted(unknown))}")

        current = {f.name: getattr(employee.compensation, f.name) for f in fields(Compensation)}
        for name, value in values.items():
            if name in ("pf_applicable", "esi_applicable"):
                current[name] = bool(value)
            else:
                current[name] = require_non_negative(value, name)

        compensation = Compensation(**current)
        self._employees.update_compensation(user_id, compensation)
        return compensation

    def deactivate(self, *, current_role: Role, user_id: str) -> None:
        require_role(current_role, {Role.ADMIN})
        employee = self.get(user_id)
        if employee.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deactivated")
        if not self._employees.set_status(user_id, EmployeeStatus.INACTIVE):
            raise ValidationError("Deactivation failed")
