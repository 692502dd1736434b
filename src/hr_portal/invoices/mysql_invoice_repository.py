from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import InvoiceStatus, LogAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .change_log import TRACKED_INVOICE_FIELDS, FieldChange
from .model import Invoice, InvoiceLogEntry, InvoiceTask
from .repository import InvoiceRepository


def _to_task(r: dict) -> InvoiceTask:
    return InvoiceTask(
        id=str(r["id"]),
        invoice_id=str(r["invoice_id"]),
        task_name=r["task_name"],
        task_description=r.get("task_description"),
        hours=as_float(r["hours"]),
        rate_per_hour=as_float(r["rate_per_hour"]),
        display_order=int(r.get("display_order") or 0),
    )


def _to_invoice(r: dict, tasks: Sequence[InvoiceTask]) -> Invoice:
    refs = r.get("reference_invoice_numbers") or ""
    return Invoice(
        id=str(r["id"]),
        invoice_number=r["invoice_number"],
        client_name=r["client_name"],
        status=InvoiceStatus(r["status"]),
        invoice_amount=as_float(r.get("invoice_amount")),
        invoice_type=r.get("invoice_type"),
        invoice_title=r.get("invoice_title"),
        project=r.get("project"),
        billing_reference=r.get("billing_reference"),
        invoice_date=r.get("invoice_date"),
        due_date=r.get("due_date"),
        payment_terms=r.get("payment_terms"),
        currency=r.get("currency") or "USD",
        notes_to_finance=r.get("notes_to_finance"),
        client_address=r.get("client_address"),
        client_state=r.get("client_state"),
        client_zip_code=r.get("client_zip_code"),
        service_period_start=r.get("service_period_start"),
        service_period_end=r.get("service_period_end"),
        reference_invoice_numbers=tuple(x for x in refs.split(",") if x),
        payment_receive_date=r.get("payment_receive_date"),
        amount_received=as_float(r["amount_received"]) if r.get("amount_received") is not None else None,
        pending_amount=as_float(r["pending_amount"]) if r.get("pending_amount") is not None else None,
        payment_remarks=r.get("payment_remarks"),
        assigned_finance_poc=str(r["assigned_finance_poc"]) if r.get("assigned_finance_poc") else None,
        created_by=str(r["created_by"]) if r.get("created_by") else None,
        last_modified_by=str(r["last_modified_by"]) if r.get("last_modified_by") else None,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        tasks=tuple(tasks),
    )


def _column_value(name: str, value: Any) -> Any:
    if name == "reference_invoice_numbers":
        return ",".join(value or ())
    if name == "status" and isinstance(value, InvoiceStatus):
        return value.value
    return value


def _json_text(value: Any) -> Optional[str]:
    # JSON columns may come back as bytes depending on the connector build.
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value


def _to_log(r: dict) -> InvoiceLogEntry:
    return InvoiceLogEntry(
        id=str(r["id"]),
        invoice_id=str(r["invoice_id"]),
        task_id=str(r["task_id"]) if r.get("task_id") else None,
        action=LogAction(r["action"]),
        field_name=r.get("field_name"),
        old_value=_json_text(r.get("old_value")),
        new_value=_json_text(r.get("new_value")),
        changed_by=str(r["changed_by"]) if r.get("changed_by") else None,
        change_reason=r.get("change_reason") or "",
        created_at=r.get("created_at"),
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, cursor=None):
        self._conn_factory = conn_factory
        self._bound_cursor = cursor

    @contextmanager
    def _cursor(self):
        if self._bound_cursor is not None:
            yield self._bound_cursor
            return
        with db_cursor(self._conn_factory) as (_, cur):
            yield cur

    @contextmanager
    def transaction(self):
        if self._bound_cursor is not None:
            yield self
            return
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLInvoiceRepository(self._conn_factory, cursor=cur)

    def get_with_tasks(self, invoice_id: str) -> Optional[Invoice]:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM invoices WHERE id=%s", (invoice_id,))
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                "SELECT * FROM invoice_tasks WHERE invoice_id=%s ORDER BY display_order, created_at",
                (invoice_id,),
            )
            tasks = [_to_task(r) for r in fetchall(cur)]
            return _to_invoice(row, tasks)

    def max_sequence_for_month(self, *, prefix: str, invoice_date: date) -> int:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT COALESCE(MAX(CAST(SUBSTRING(invoice_number, %s) AS UNSIGNED)), 0) AS seq
                FROM invoices
                WHERE invoice_number REGEXP %s
                  AND YEAR(invoice_date)=%s AND MONTH(invoice_date)=%s
                """,
                (len(prefix) + 1, f"^{prefix}[0-9]{{3}}$", invoice_date.year, invoice_date.month),
            )
            row = fetchone(cur)
            return int(row["seq"]) if row else 0

    def insert_invoice(self, invoice: Invoice) -> None:
        columns = ["id", "invoice_number", "invoice_amount", "created_by", "last_modified_by", *TRACKED_INVOICE_FIELDS]
        values = [
            invoice.id,
            invoice.invoice_number,
            invoice.invoice_amount,
            invoice.created_by,
            invoice.last_modified_by,
            *(_column_value(c, getattr(invoice, c)) for c in TRACKED_INVOICE_FIELDS),
        ]
        with self._cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO invoices ({", ".join(columns)}, created_at, updated_at)
                VALUES ({", ".join(["%s"] * len(columns))}, UTC_TIMESTAMP(), UTC_TIMESTAMP())
                """,
                tuple(values),
            )

    def update_invoice(
        self,
        invoice_id: str,
        values: Mapping[str, Any],
        *,
        invoice_amount: float,
        modified_by: str,
    ) -> bool:
        unknown = set(values) - set(TRACKED_INVOICE_FIELDS)
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        assignments = [f"{c}=%s" for c in values]
        params = [_column_value(c, v) for c, v in values.items()]
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE invoices
                SET {"".join(a + ", " for a in assignments)}invoice_amount=%s, last_modified_by=%s, updated_at=UTC_TIMESTAMP()
                WHERE id=%s
                """,
                (*params, invoice_amount, modified_by, invoice_id),
            )
            return cur.rowcount > 0

    def delete_invoice(self, invoice_id: str) -> bool:
        with self._cursor() as cur:
            cur.execute("DELETE FROM invoice_tasks WHERE invoice_id=%s", (invoice_id,))
            cur.execute("DELETE FROM invoices WHERE id=%s", (invoice_id,))
            return cur.rowcount > 0

    def upsert_task(self, task: InvoiceTask) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO invoice_tasks
                    (id, invoice_id, task_name, task_description, hours, rate_per_hour, display_order, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, UTC_TIMESTAMP(), UTC_TIMESTAMP())
                ON DUPLICATE KEY UPDATE
                    task_name=VALUES(task_name),
                    task_description=VALUES(task_description),
                    hours=VALUES(hours),
                    rate_per_hour=VALUES(rate_per_hour),
                    display_order=VALUES(display_order),
                    updated_at=UTC_TIMESTAMP()
                """,
                (
                    task.id,
                    task.invoice_id,
                    task.task_name,
                    task.task_description,
                    task.hours,
                    task.rate_per_hour,
                    task.display_order,
                ),
            )

    def delete_task(self, task_id: str) -> bool:
        with self._cursor() as cur:
            cur.execute("DELETE FROM invoice_tasks WHERE id=%s", (task_id,))
            return cur.rowcount > 0

    def insert_invoice_log(self, invoice_id: str, change: FieldChange, *, changed_by: str) -> str:
        log_id = str(uuid.uuid4())
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO invoice_logs
                    (id, invoice_id, action, field_name, old_value, new_value, changed_by, change_reason, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, UTC_TIMESTAMP(6))
                """,
                (
                    log_id,
                    invoice_id,
                    change.action.value,
                    change.field_name,
                    change.old_value,
                    change.new_value,
                    changed_by,
                    change.reason,
                ),
            )
        return log_id

    def insert_task_log(self, invoice_id: str, change: FieldChange, *, changed_by: str) -> str:
        log_id = str(uuid.uuid4())
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO invoice_task_logs
                    (id, invoice_id, task_id, action, field_name, old_value, new_value, changed_by, change_reason, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, UTC_TIMESTAMP(6))
                """,
                (
                    log_id,
                    invoice_id,
                    change.task_id,
                    change.action.value,
                    change.field_name,
                    change.old_value,
                    change.new_value,
                    changed_by,
                    change.reason,
                ),
            )
        return log_id

    def list_invoice_logs(self, invoice_id: str) -> Sequence[InvoiceLogEntry]:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM invoice_logs WHERE invoice_id=%s ORDER BY created_at DESC", (invoice_id,))
            return [_to_log(r) for r in fetchall(cur)]

    def list_task_logs(self, invoice_id: str) -> Sequence[InvoiceLogEntry]:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM invoice_task_logs WHERE invoice_id=%s ORDER BY created_at DESC", (invoice_id,))
            return [_to_log(r) for r in fetchall(cur)]
