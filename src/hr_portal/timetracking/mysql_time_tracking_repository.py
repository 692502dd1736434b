from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeEntry
from .repository import TimeTrackingRepository


def _as_utc(value: datetime) -> datetime:
    # DATETIME columns in the time-tracking database hold UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MySQLTimeTrackingRepository(TimeTrackingRepository):
    """Reads the separate time-tracking database (profiles, time_entries)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_profile_id_by_email(self, email: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM profiles WHERE LOWER(email)=%s LIMIT 1", (email.strip().lower(),))
            row = fetchone(cur)
            return str(row["id"]) if row else None

    def list_entries(self, *, profile_id: str, start: datetime, end: datetime) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, start_time, duration
                FROM time_entries
                WHERE user_id=%s AND start_time >= %s AND start_time < %s
                ORDER BY start_time
                """,
                (
                    profile_id,
                    _as_utc(start).replace(tzinfo=None),
                    _as_utc(end).replace(tzinfo=None),
                ),
            )
            return [
                TimeEntry(
                    id=str(r["id"]),
                    profile_id=str(r["user_id"]),
                    start_time=_as_utc(r["start_time"]),
                    duration_seconds=int(r.get("duration") or 0),
                )
                for r in fetchall(cur)
            ]
