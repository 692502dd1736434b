from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .change_log import FieldChange
from .model import Invoice, InvoiceLogEntry, InvoiceTask


class InvoiceRepository(Protocol):
    def transaction(self) -> AbstractContextManager["InvoiceRepository"]:
        """A repository bound to one transaction; commits on clean exit, rolls back on error."""

        raise NotImplementedError

    def get_with_tasks(self, invoice_id: str) -> Optional[Invoice]:
        raise NotImplementedError

    def max_sequence_for_month(self, *, prefix: str, invoice_date: date) -> int:
        """Highest numeric suffix of invoice numbers ``<prefix>NNN`` dated in that month."""

        raise NotImplementedError

    def insert_invoice(self, invoice: Invoice) -> None:
        raise NotImplementedError

    def update_invoice(
        self,
        invoice_id: str,
        values: Mapping[str, Any],
        *,
        invoice_amount: float,
        modified_by: str,
    ) -> bool:
        raise NotImplementedError

    def delete_invoice(self, invoice_id: str) -> bool:
        raise NotImplementedError

    def upsert_task(self, task: InvoiceTask) -> None:
        raise NotImplementedError

    def delete_task(self, task_id: str) -> bool:
        raise NotImplementedError

    def insert_invoice_log(self, invoice_id: str, change: FieldChange, *, changed_by: str) -> str:
        raise NotImplementedError

    def insert_task_log(self, invoice_id: str, change: FieldChange, *, changed_by: str) -> str:
        raise NotImplementedError

    def list_invoice_logs(self, invoice_id: str) -> Sequence[InvoiceLogEntry]:
        raise NotImplementedError

    def list_task_logs(self, invoice_id: str) -> Sequence[InvoiceLogEntry]:
        raise NotImplementedError
