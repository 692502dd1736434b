"""Field-level diffing of invoices and their tasks.

Only user-editable fields are tracked; derived values (invoice total, task
totals, timestamps) never produce log rows. Tasks are matched by their stable
id, never by content.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from ..core.enums import LogAction
from .model import Invoice, InvoiceTask

TRACKED_INVOICE_FIELDS: dict[str, str] = {
    "invoice_type": "Invoice type",
    "invoice_title": "Invoice title",
    "client_name": "Client name",
    "client_address": "Client address",
    "client_state": "Client state",
    "client_zip_code": "Client ZIP code",
    "project": "Project",
    "billing_reference": "Billing reference",
    "invoice_date": "Invoice date",
    "due_date": "Due date",
    "payment_terms": "Payment terms",
    "currency": "Currency",
    "notes_to_finance": "Notes to finance",
    "status": "Status",
    "service_period_start": "Service period start",
    "service_period_end": "Service period end",
    "reference_invoice_numbers": "Reference invoice numbers",
    "payment_receive_date": "Payment receive date",
    "amount_received": "Amount received",
    "pending_amount": "Pending amount",
    "payment_remarks": "Payment remarks",
    "assigned_finance_poc": "Assigned finance POC",
}

TRACKED_TASK_FIELDS: dict[str, str] = {
    "task_name": "Task name",
    "task_description": "Task description",
    "hours": "Hours",
    "rate_per_hour": "Rate per hour",
    "display_order": "Display order",
}


@dataclass(frozen=True)
class FieldChange:
    action: LogAction
    field_name: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    reason: str
    task_id: Optional[str] = None


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Cannot serialise {type(value)!r}")


def to_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, tuple):
        value = list(value)
    return json.dumps(value, default=_json_default, sort_keys=True)


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, (Decimal, int, float)) and not isinstance(value, bool):
        return round(float(value), 2)
    if isinstance(value, list):
        return tuple(value)
    return value


def diff_invoice(before: Invoice, after: Invoice) -> list[FieldChange]:
    changes: list[FieldChange] = []
    for name, label in TRACKED_INVOICE_FIELDS.items():
        old, new = getattr(before, name), getattr(after, name)
        if _normalize(old) == _normalize(new):
            continue
        action = LogAction.STATUS_CHANGED if name == "status" else LogAction.UPDATED
        if name == "status":
            reason = f"Status changed from {_normalize(old)} to {_normalize(new)}"
        else:
            reason = f"{label} changed"
        changes.append(FieldChange(action=action, field_name=name, old_value=to_json(old), new_value=to_json(new), reason=reason))
    return changes


def task_snapshot(task: InvoiceTask) -> dict[str, Any]:
    snapshot = {name: getattr(task, name) for name in TRACKED_TASK_FIELDS}
    snapshot["total_amount"] = task.total_amount
    return snapshot


def diff_tasks(before: Iterable[InvoiceTask], after: Iterable[InvoiceTask]) -> list[FieldChange]:
    old_by_id = {t.id: t for t in before}
    new_by_id = {t.id: t for t in after}

    changes: list[FieldChange] = []
    for task_id, task in new_by_id.items():
        previous = old_by_id.get(task_id)
        if previous is None:
            changes.append(
                FieldChange(
                    action=LogAction.CREATED,
                    field_name=None,
                    old_value=None,
                    new_value=to_json(task_snapshot(task)),
                    reason=f"Task '{task.task_name}' added",
                    task_id=task_id,
                )
            )
            continue
        for name, label in TRACKED_TASK_FIELDS.items():
            old, new = getattr(previous, name), getattr(task, name)
            if _normalize(old) == _normalize(new):
                continue
            changes.append(
                FieldChange(
                    action=LogAction.UPDATED,
                    field_name=name,
                    old_value=to_json(old),
                    new_value=to_json(new),
                    reason=f"{label} of task '{task.task_name}' changed",
                    task_id=task_id,
                )
            )

    for task_id, task in old_by_id.items():
        if task_id not in new_by_id:
            changes.append(
                FieldChange(
                    action=LogAction.DELETED,
                    field_name=None,
                    old_value=to_json(task_snapshot(task)),
                    new_value=None,
                    reason=f"Task '{task.task_name}' deleted",
                    task_id=task_id,
                )
            )
    return changes
