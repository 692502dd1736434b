"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def to_payload(value: Any) -> Any:
    """Turn domain objects into JSON-ready values (ISO dates, enum values)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_payload(getattr(value, f.name)) for f in dataclasses.fields(value) if f.name != "password_hash"}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_payload(v) for k, v in value.items()}
    if isinstance(value, (frozenset, set)):
        return sorted(to_payload(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    return value


def ok(data: Any = None, status: int = 200, **extra: Any):
    body = {"success": True, **extra}
    if data is not None:
        body["data"] = to_payload(data)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = exc.status_code
        if status >= 403:
            logger.info("%s %s -> %d: %s", request.method, request.path, status, exc)
        return jsonify({"success": False, "message": str(exc)}), status
