from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, user_id: str, title: str, message: str, type: str, data: Optional[dict[str, Any]] = None) -> str:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, *, notification_id: str, user_id: str) -> bool:
        raise NotImplementedError
