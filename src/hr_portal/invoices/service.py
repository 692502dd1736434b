from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.best_effort import best_effort
from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import InvoiceStatus, LogAction, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.service import require_role
from .change_log import TRACKED_INVOICE_FIELDS, FieldChange, diff_invoice, diff_tasks, to_json
from .model import Invoice, InvoiceLogEntry, InvoiceTask
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)

INVOICE_ROLES = frozenset({Role.FINANCE, Role.ADMIN})

_DATE_FIELDS = {"invoice_date", "due_date", "service_period_start", "service_period_end", "payment_receive_date"}
_AMOUNT_FIELDS = {"amount_received", "pending_amount"}
# invoice_amount is editable only on invoices without tasks and is never logged.
_UNTRACKED_EDITABLE = {"invoice_amount"}


@dataclass(frozen=True)
class InvoiceUpdate:
    invoice: Invoice
    invoice_changes: tuple[FieldChange, ...]
    task_changes: tuple[FieldChange, ...]


def _coerce(name: str, value: Any) -> Any:
    if name == "client_name":
        return require_non_empty(value, "Client name")
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if name in _DATE_FIELDS:
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError(f"{name} must be a YYYY-MM-DD date")
    if name in _AMOUNT_FIELDS or name == "invoice_amount":
        return require_non_negative(value, name)
    if name == "status":
        try:
            return InvoiceStatus(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Unknown invoice status: {value!r}")
    if name == "reference_invoice_numbers":
        if isinstance(value, str):
            value = value.split(",")
        elif not isinstance(value, (list, tuple)):
            raise ValidationError("reference_invoice_numbers must be a list or a comma-separated string")
        return tuple(str(v).strip() for v in value if str(v).strip())
    return value


def _coerce_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    allowed = set(TRACKED_INVOICE_FIELDS) | _UNTRACKED_EDITABLE
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
    return {name: _coerce(name, value) for name, value in changes.items()}


def _build_tasks(invoice_id: str, rows: Sequence[Mapping[str, Any]], *, known_ids: set[str]) -> list[InvoiceTask]:
    tasks: list[InvoiceTask] = []
    seen: set[str] = set()
    for position, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ValidationError("Each task must be an object")
        task_id = row.get("id")
        if task_id:
            if not isinstance(task_id, str) or task_id not in known_ids:
                raise ValidationError(f"Task {task_id} does not belong to this invoice")
        else:
            task_id = str(uuid.uuid4())
        if task_id in seen:
            raise ValidationError(f"Task {task_id} listed twice")
        seen.add(task_id)

        hours = require_non_negative(row.get("hours"), "Hours")
        rate = require_non_negative(row.get("rate_per_hour"), "Rate per hour")
        if hours <= 0 or rate <= 0:
            raise ValidationError("Task hours and rate must be greater than zero")
        order = row.get("display_order")
        if order is not None:
            try:
                order = int(order)
            except (TypeError, ValueError):
                raise ValidationError("Display order must be a whole number")
        description = row.get("task_description")
        if description is not None and not isinstance(description, str):
            raise ValidationError("Task description must be text")
        tasks.append(
            InvoiceTask(
                id=str(task_id),
                invoice_id=invoice_id,
                task_name=require_non_empty(row.get("task_name"), "Task name"),
                task_description=(description or "").strip() or None,
                hours=hours,
                rate_per_hour=rate,
                display_order=order if order is not None else position,
            )
        )
    return tasks


def _tasks_total(tasks: Sequence[InvoiceTask]) -> float:
    return round(sum(t.total_amount for t in tasks), 2)


class InvoiceService:
    """Invoice writes with an append-only change log.

    Every update runs in one transaction: snapshot before, apply, snapshot
    after, diff, write log rows. A failed log write fails the update.
    Notifications go out after commit and never fail the update.
    """

    def __init__(self, invoices: InvoiceRepository, notifications: NotificationService):
        self._invoices = invoices
        self._notifications = notifications

    def get(self, *, current_role: Role, invoice_id: str) -> Invoice:
        require_role(current_role, INVOICE_ROLES)
        invoice = self._invoices.get_with_tasks(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    def _next_invoice_number(self, repo: InvoiceRepository, invoice_date: date) -> str:
        prefix = invoice_date.strftime("%b").upper()
        return f"{prefix}{repo.max_sequence_for_month(prefix=prefix, invoice_date=invoice_date) + 1:03d}"

    def create_invoice(
        self,
        *,
        current_role: Role,
        actor_id: str,
        values: Mapping[str, Any],
        tasks: Sequence[Mapping[str, Any]] = (),
    ) -> Invoice:
        require_role(current_role, INVOICE_ROLES)
        fields_ = _coerce_changes(values)
        if not fields_.get("client_name"):
            raise ValidationError("Client name is required")
        fields_["status"] = fields_.get("status") or InvoiceStatus.DRAFT
        fields_["currency"] = fields_.get("currency") or "USD"
        fields_["invoice_date"] = fields_.get("invoice_date") or now_utc().date()

        invoice_id = str(uuid.uuid4())
        new_tasks = _build_tasks(invoice_id, tasks, known_ids=set())
        manual_amount = fields_.pop("invoice_amount", None) or 0.0
        amount = _tasks_total(new_tasks) if new_tasks else float(manual_amount)

        with self._invoices.transaction() as tx:
            invoice = Invoice(
                id=invoice_id,
                invoice_number=self._next_invoice_number(tx, fields_["invoice_date"]),
                invoice_amount=amount,
                created_by=actor_id,
                last_modified_by=actor_id,
                **fields_,
            )
            tx.insert_invoice(invoice)
            for task in new_tasks:
                tx.upsert_task(task)
            tx.insert_invoice_log(
                invoice_id,
                FieldChange(
                    action=LogAction.CREATED,
                    field_name=None,
                    old_value=None,
                    new_value=to_json({"invoice_number": invoice.invoice_number, "client_name": invoice.client_name}),
                    reason=f"Invoice {invoice.invoice_number} created",
                ),
                changed_by=actor_id,
            )
            created = tx.get_with_tasks(invoice_id)

        logger.info("invoice %s created by %s", invoice.invoice_number, actor_id)
        return created or replace(invoice, tasks=tuple(new_tasks))

    def update_invoice(
        self,
        *,
        current_role: Role,
        actor_id: str,
        invoice_id: str,
        changes: Mapping[str, Any],
        tasks: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> InvoiceUpdate:
        """Apply header changes and, when ``tasks`` is given, replace the task list.

        Tasks without an id are new and get one here; tasks missing from the
        list are deleted.
        """
        require_role(current_role, INVOICE_ROLES)
        values = _coerce_changes(changes)
        manual_amount = values.pop("invoice_amount", None)

        with self._invoices.transaction() as tx:
            before = tx.get_with_tasks(invoice_id)
            if not before:
                raise NotFoundError("Invoice not found")

            if tasks is None:
                new_tasks = list(before.tasks)
            else:
                new_tasks = _build_tasks(invoice_id, tasks, known_ids={t.id for t in before.tasks})
                kept = {t.id for t in new_tasks}
                for old in before.tasks:
                    if old.id not in kept:
                        tx.delete_task(old.id)
                for task in new_tasks:
                    tx.upsert_task(task)

            if new_tasks:
                amount = _tasks_total(new_tasks)
            elif manual_amount is not None:
                amount = float(manual_amount)
            else:
                amount = before.invoice_amount

            tx.update_invoice(invoice_id, values, invoice_amount=amount, modified_by=actor_id)
            after = tx.get_with_tasks(invoice_id)
            if not after:
                raise NotFoundError("Invoice not found")

            invoice_changes = diff_invoice(before, after)
            task_changes = diff_tasks(before.tasks, after.tasks)
            for change in invoice_changes:
                tx.insert_invoice_log(invoice_id, change, changed_by=actor_id)
            for change in task_changes:
                tx.insert_task_log(invoice_id, change, changed_by=actor_id)

        logger.info(
            "invoice %s updated by %s: %d field change(s), %d task change(s)",
            after.invoice_number,
            actor_id,
            len(invoice_changes),
            len(task_changes),
        )
        if before.status != after.status:
            self._notify_status_change(after, actor_id=actor_id, old_status=before.status)
        return InvoiceUpdate(invoice=after, invoice_changes=tuple(invoice_changes), task_changes=tuple(task_changes))

    def delete_invoice(self, *, current_role: Role, actor_id: str, invoice_id: str) -> None:
        require_role(current_role, INVOICE_ROLES)
        with self._invoices.transaction() as tx:
            invoice = tx.get_with_tasks(invoice_id)
            if not invoice:
                raise NotFoundError("Invoice not found")
            tx.insert_invoice_log(
                invoice_id,
                FieldChange(
                    action=LogAction.DELETED,
                    field_name=None,
                    old_value=to_json({"invoice_number": invoice.invoice_number, "client_name": invoice.client_name}),
                    new_value=None,
                    reason=f"Invoice {invoice.invoice_number} deleted",
                ),
                changed_by=actor_id,
            )
            tx.delete_invoice(invoice_id)
        logger.info("invoice %s deleted by %s", invoice.invoice_number, actor_id)

    def list_logs(self, *, current_role: Role, invoice_id: str) -> Sequence[InvoiceLogEntry]:
        require_role(current_role, INVOICE_ROLES)
        return self._invoices.list_invoice_logs(invoice_id)

    def list_task_logs(self, *, current_role: Role, invoice_id: str) -> Sequence[InvoiceLogEntry]:
        require_role(current_role, INVOICE_ROLES)
        return self._invoices.list_task_logs(invoice_id)

    def _notify_status_change(self, invoice: Invoice, *, actor_id: str, old_status: InvoiceStatus) -> None:
        recipients = [u for u in (invoice.assigned_finance_poc, invoice.created_by) if u and u != actor_id]
        if not recipients:
            return
        best_effort(
            lambda: self._notifications.notify(
                recipients,
                title="Invoice Status Updated",
                message=(
                    f"Invoice {invoice.invoice_number} for {invoice.client_name} moved from "
                    f"{old_status.value} to {invoice.status.value}."
                ),
                type="invoice_status_changed",
                data={"invoice_id": invoice.id, "target": "finance/invoices"},
            ),
            label="invoice status notification",
        )
