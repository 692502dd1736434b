from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, tolerate_missing_table
from .model import Holiday, LeaveApplication
from .repository import HolidayRepository, LeaveRepository

_SELECT = """
    SELECT la.id, la.user_id, la.start_date, la.end_date, la.days_count, la.lop_days, la.status,
           la.reason, la.applied_at, la.approved_by, la.approved_at, la.comments,
           lt.name AS leave_type_name
    FROM leave_applications la
    LEFT JOIN leave_types lt ON lt.id = la.leave_type_id
"""


def _to_leave(r: dict) -> LeaveApplication:
    return LeaveApplication(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days_count=as_float(r.get("days_count")),
        lop_days=as_float(r.get("lop_days")),
        status=LeaveStatus(r["status"]),
        reason=r.get("reason") or "",
        leave_type=r.get("leave_type_name"),
        applied_at=r.get("applied_at"),
        approved_by=str(r["approved_by"]) if r.get("approved_by") else None,
        approved_at=r.get("approved_at"),
        comments=r.get("comments"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        leave_type: Optional[str],
        start_date: date,
        end_date: date,
        days_count: float,
        lop_days: float,
        reason: str,
    ) -> str:
        leave_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_applications
                    (id, user_id, leave_type_id, start_date, end_date, days_count, lop_days, reason, status, applied_at)
                VALUES (%s, %s, (SELECT id FROM leave_types WHERE name=%s LIMIT 1), %s, %s, %s, %s, %s, 'pending', UTC_TIMESTAMP())
                """,
                (leave_id, user_id, leave_type, start_date, end_date, days_count, lop_days, reason),
            )
        return leave_id

    def get(self, leave_id: str) -> Optional[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE la.id=%s", (leave_id,))
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def list_for_user(self, user_id: str, *, limit: int = 200) -> Sequence[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE la.user_id=%s ORDER BY la.start_date DESC LIMIT %s", (user_id, int(limit)))
            return [_to_leave(r) for r in fetchall(cur)]

    def list_overlapping(
        self,
        *,
        user_id: str,
        start: date,
        end: date,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveApplication]:
        where = ["la.user_id=%s", "la.start_date <= %s", "la.end_date >= %s"]
        params: list = [user_id, end, start]
        if status:
            where.append("la.status=%s")
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE " + " AND ".join(where) + " ORDER BY la.start_date", tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]

    def set_status(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        expected: Sequence[LeaveStatus],
        decided_by: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> bool:
        placeholders = ", ".join(["%s"] * len(expected))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_applications
                SET status=%s,
                    approved_by=COALESCE(%s, approved_by),
                    approved_at=CASE WHEN %s IS NULL THEN approved_at ELSE UTC_TIMESTAMP() END,
                    comments=COALESCE(%s, comments)
                WHERE id=%s AND status IN ({placeholders})
                """,
                (status.value, decided_by, decided_by, comments, leave_id, *(s.value for s in expected)),
            )
            return cur.rowcount > 0

    def set_lop_days(self, *, leave_id: str, lop_days: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE leave_applications SET lop_days=%s WHERE id=%s", (lop_days, leave_id))
            return cur.rowcount > 0


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, start: date, end: date) -> Sequence[Holiday]:
        rows: list[dict] = []
        with tolerate_missing_table("holidays"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT id, date, name, is_optional FROM holidays WHERE date BETWEEN %s AND %s ORDER BY date",
                    (start, end),
                )
                rows = fetchall(cur)
        return [
            Holiday(id=str(r["id"]), day=r["date"], name=str(r["name"]), is_optional=bool(r.get("is_optional")))
            for r in rows
        ]

    def create(self, *, day: date, name: str, is_optional: bool = False) -> str:
        holiday_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays (id, date, name, is_optional) VALUES (%s, %s, %s, %s)",
                (holiday_id, day, name, int(is_optional)),
            )
        return holiday_id

    def delete(self, holiday_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE id=%s", (holiday_id,))
            return cur.rowcount > 0
