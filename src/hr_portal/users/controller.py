from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.http import current_role, current_user_id, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(str(data.get("email", "")), str(data.get("password", "")))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        return ok(s_user)

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(container.employee_service.get(current_user_id()))

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @login_required
    def list_employees():
        return ok(container.employee_service.list_active(current_role=current_role()))

    @app.route("/api/employees/<user_id>/compensation", methods=["PUT"], endpoint="update_compensation")
    @login_required
    def update_compensation(user_id: str):
        compensation = container.employee_service.update_compensation(
            current_role=current_role(), user_id=user_id, values=json_body()
        )
        return ok(compensation)

    @app.route("/api/employees/<user_id>/deactivate", methods=["POST"], endpoint="deactivate_employee")
    @login_required
    def deactivate_employee(user_id: str):
        container.employee_service.deactivate(current_role=current_role(), user_id=user_id)
        return ok(message="Employee deactivated")
