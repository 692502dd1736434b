from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from ..common.best_effort import SettledResults, settle_all
from ..core.constants import DEFAULT_NOTIFICATION_WORKERS
from ..core.exceptions import NotFoundError
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    def __init__(self, notifications: NotificationRepository, *, max_workers: int = DEFAULT_NOTIFICATION_WORKERS):
        self._notifications = notifications
        self._max_workers = int(max_workers)

    def notify(
        self,
        user_ids: Iterable[str],
        *,
        title: str,
        message: str,
        type: str,
        data: Optional[dict[str, Any]] = None,
    ) -> SettledResults:
        """Create one notification per recipient; individual failures are reported, not raised."""

        recipients = list(dict.fromkeys(u for u in user_ids if u))

        def _send(user_id: str):
            return lambda: self._notifications.create(user_id=user_id, title=title, message=message, type=type, data=data)

        return settle_all(
            [_send(u) for u in recipients],
            label=f"{type} notification",
            max_workers=self._max_workers,
        )

    def list_for_user(self, *, user_id: str, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id, unread_only=unread_only)

    def mark_read(self, *, user_id: str, notification_id: str) -> None:
        if not self._notifications.mark_read(notification_id=notification_id, user_id=user_id):
            raise NotFoundError("Notification not found")
