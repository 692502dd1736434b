from __future__ import annotations

from flask import Flask, request

from ..common.http import current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        unread_only = request.args.get("unread") in {"1", "true", "yes"}
        return ok(container.notification_service.list_for_user(user_id=current_user_id(), unread_only=unread_only))

    @app.route("/api/notifications/<notification_id>/read", methods=["POST"], endpoint="mark_notification_read")
    @login_required
    def mark_notification_read(notification_id: str):
        container.notification_service.mark_read(user_id=current_user_id(), notification_id=notification_id)
        return ok(message="Marked as read")
