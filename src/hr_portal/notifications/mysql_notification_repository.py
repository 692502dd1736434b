from __future__ import annotations

import json
import uuid
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, tolerate_missing_table
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: str, title: str, message: str, type: str, data: Optional[dict[str, Any]] = None) -> str:
        notification_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications (id, user_id, title, message, type, data, is_read, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, 0, UTC_TIMESTAMP())
                """,
                (notification_id, user_id, title, message, type, json.dumps(data or {})),
            )
        return notification_id

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        sql = "SELECT id, user_id, title, message, type, data, is_read, created_at FROM notifications WHERE user_id=%s"
        if unread_only:
            sql += " AND is_read=0"
        sql += " ORDER BY created_at DESC LIMIT %s"

        rows: list[dict] = []
        with tolerate_missing_table("notifications"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, (user_id, int(limit)))
                rows = fetchall(cur)
        return [
            Notification(
                id=str(r["id"]),
                user_id=str(r["user_id"]),
                title=r["title"],
                message=r["message"],
                type=r["type"],
                data=json.loads(r["data"]) if r.get("data") else {},
                is_read=bool(r.get("is_read")),
                created_at=r.get("created_at"),
            )
            for r in rows
        ]

    def mark_read(self, *, notification_id: str, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE id=%s AND user_id=%s", (notification_id, user_id))
            return cur.rowcount > 0
