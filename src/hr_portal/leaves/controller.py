from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def _date_field(data: dict, name: str) -> date:
    value = data.get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be a YYYY-MM-DD date")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        return ok(container.leave_service.list_mine(user_id=current_user_id()))

    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    @login_required
    def apply_leave():
        data = json_body()
        leave_id = container.leave_service.apply(
            user_id=current_user_id(),
            start_date=_date_field(data, "start_date"),
            end_date=_date_field(data, "end_date"),
            days_count=data.get("days_count"),
            reason=str(data.get("reason") or ""),
            lop_days=data.get("lop_days") or 0,
            leave_type=data.get("leave_type"),
        )
        return ok({"id": leave_id}, status=201)

    @app.route("/api/leaves/<leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    @login_required
    def approve_leave(leave_id: str):
        container.leave_service.approve(
            current_role=current_role(),
            approver_id=current_user_id(),
            leave_id=leave_id,
            comments=str(json_body().get("comments") or ""),
        )
        return ok(message="Leave approved")

    @app.route("/api/leaves/<leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    @login_required
    def reject_leave(leave_id: str):
        container.leave_service.reject(
            current_role=current_role(),
            approver_id=current_user_id(),
            leave_id=leave_id,
            comments=str(json_body().get("comments") or ""),
        )
        return ok(message="Leave rejected")

    @app.route("/api/leaves/<leave_id>/withdraw", methods=["POST"], endpoint="withdraw_leave")
    @login_required
    def withdraw_leave(leave_id: str):
        container.leave_service.withdraw(user_id=current_user_id(), leave_id=leave_id)
        return ok(message="Leave withdrawn")

    @app.route("/api/leaves/<leave_id>/lop", methods=["PATCH"], endpoint="correct_lop_days")
    @login_required
    def correct_lop_days(leave_id: str):
        container.leave_service.correct_lop_days(
            current_role=current_role(), leave_id=leave_id, lop_days=json_body().get("lop_days")
        )
        return ok(message="LOP days updated")

    @app.route("/api/holidays/<int:year>", methods=["GET"], endpoint="list_holidays")
    @login_required
    def list_holidays(year: int):
        return ok(container.leave_service.list_holidays(year=year))

    @app.route("/api/holidays", methods=["POST"], endpoint="add_holiday")
    @login_required
    def add_holiday():
        data = json_body()
        holiday_id = container.leave_service.add_holiday(
            current_role=current_role(),
            day=_date_field(data, "date"),
            name=str(data.get("name") or ""),
            is_optional=bool(data.get("is_optional")),
        )
        return ok({"id": holiday_id}, status=201)

    @app.route("/api/holidays/<holiday_id>", methods=["DELETE"], endpoint="remove_holiday")
    @login_required
    def remove_holiday(holiday_id: str):
        container.leave_service.remove_holiday(current_role=current_role(), holiday_id=holiday_id)
        return ok(message="Holiday removed")
