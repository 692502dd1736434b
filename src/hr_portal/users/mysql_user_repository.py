from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import parse_amount
from ..core.enums import EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Compensation, Employee
from .repository import EmployeeRepository

_COMPENSATION_COLUMNS = (
    "monthly_basic_pay",
    "hra",
    "night_allowance",
    "special_allowance",
    "monthly_gross",
    "pf_employee",
    "esi_employee",
    "tds",
    "professional_tax",
    "vpf",
    "monthly_take_home_salary",
)

_SELECT = f"""
    SELECT u.id, u.email, u.full_name, u.employee_id, u.role, u.status, u.password_hash,
           u.pf_applicable, u.esi_applicable, d.name AS department_name,
           {", ".join("u." + c for c in _COMPENSATION_COLUMNS)}
    FROM users u
    LEFT JOIN departments d ON d.id = u.department_id
"""


def _to_employee(r: dict) -> Employee:
    compensation = Compensation(
        **{c: parse_amount(r.get(c)) for c in _COMPENSATION_COLUMNS},
        pf_applicable=bool(r.get("pf_applicable")),
        esi_applicable=bool(r.get("esi_applicable")),
    )
    return Employee(
        id=str(r["id"]),
        email=str(r["email"]),
        full_name=str(r["full_name"]),
        employee_code=r.get("employee_id"),
        department=r.get("department_name"),
        role=Role(r["role"]),
        status=EmployeeStatus(r["status"]),
        password_hash=r.get("password_hash"),
        compensation=compensation,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.id=%s", (user_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE LOWER(u.email)=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_by_status(self, status: EmployeeStatus) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.status=%s ORDER BY u.full_name", (status.value,))
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_roles(self, roles: Sequence[Role]) -> Sequence[Employee]:
        if not roles:
            return []
        placeholders = ", ".join(["%s"] * len(roles))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE u.status='active' AND u.role IN ({placeholders}) ORDER BY u.full_name",
                tuple(r.value for r in roles),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def update_compensation(self, user_id: str, compensation: Compensation) -> bool:
        assignments = ", ".join(f"{c}=%s" for c in _COMPENSATION_COLUMNS)
        values = [str(getattr(compensation, c)) for c in _COMPENSATION_COLUMNS]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments}, pf_applicable=%s, esi_applicable=%s WHERE id=%s",
                (*values, int(compensation.pf_applicable), int(compensation.esi_applicable), user_id),
            )
            return cur.rowcount > 0

    def set_status(self, user_id: str, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET status=%s WHERE id=%s", (status.value, user_id))
            return cur.rowcount > 0
