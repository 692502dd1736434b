from __future__ import annotations

from flask import Flask

from ..common.http import current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def _split_body(data: dict) -> tuple[dict, list | None]:
    changes = dict(data)
    tasks = changes.pop("tasks", None)
    if tasks is not None and not isinstance(tasks, list):
        raise ValidationError("tasks must be a list")
    return changes, tasks


def register(app: Flask, container: Container) -> None:
    @app.route("/api/invoices", methods=["POST"], endpoint="create_invoice")
    @login_required
    def create_invoice():
        values, tasks = _split_body(json_body())
        invoice = container.invoice_service.create_invoice(
            current_role=current_role(), actor_id=current_user_id(), values=values, tasks=tasks or []
        )
        return ok(invoice, status=201)

    @app.route("/api/invoices/<invoice_id>", methods=["GET"], endpoint="get_invoice")
    @login_required
    def get_invoice(invoice_id: str):
        return ok(container.invoice_service.get(current_role=current_role(), invoice_id=invoice_id))

    @app.route("/api/invoices/<invoice_id>", methods=["PATCH"], endpoint="update_invoice")
    @login_required
    def update_invoice(invoice_id: str):
        changes, tasks = _split_body(json_body())
        update = container.invoice_service.update_invoice(
            current_role=current_role(),
            actor_id=current_user_id(),
            invoice_id=invoice_id,
            changes=changes,
            tasks=tasks,
        )
        return ok(
            update.invoice,
            changes=len(update.invoice_changes) + len(update.task_changes),
        )

    @app.route("/api/invoices/<invoice_id>", methods=["DELETE"], endpoint="delete_invoice")
    @login_required
    def delete_invoice(invoice_id: str):
        container.invoice_service.delete_invoice(
            current_role=current_role(), actor_id=current_user_id(), invoice_id=invoice_id
        )
        return ok(message="Invoice deleted")

    @app.route("/api/invoices/<invoice_id>/logs", methods=["GET"], endpoint="invoice_logs")
    @login_required
    def invoice_logs(invoice_id: str):
        role = current_role()
        return ok(
            {
                "invoice": container.invoice_service.list_logs(current_role=role, invoice_id=invoice_id),
                "tasks": container.invoice_service.list_task_logs(current_role=role, invoice_id=invoice_id),
            }
        )
