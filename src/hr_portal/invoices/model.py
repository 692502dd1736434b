from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import InvoiceStatus, LogAction


@dataclass(frozen=True)
class InvoiceTask:
    """A billable task line. ``id`` is assigned once, when the task is created."""

    id: str
    invoice_id: str
    task_name: str
    hours: float
    rate_per_hour: float
    task_description: Optional[str] = None
    display_order: int = 0

    @property
    def total_amount(self) -> float:
        return round(self.hours * self.rate_per_hour, 2)


@dataclass(frozen=True)
class Invoice:
    id: str
    invoice_number: str
    client_name: str
    status: InvoiceStatus
    invoice_amount: float = 0.0
    invoice_type: Optional[str] = None
    invoice_title: Optional[str] = None
    project: Optional[str] = None
    billing_reference: Optional[str] = None
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    payment_terms: Optional[str] = None
    currency: str = "USD"
    notes_to_finance: Optional[str] = None
    client_address: Optional[str] = None
    client_state: Optional[str] = None
    client_zip_code: Optional[str] = None
    service_period_start: Optional[date] = None
    service_period_end: Optional[date] = None
    reference_invoice_numbers: tuple[str, ...] = ()
    payment_receive_date: Optional[date] = None
    amount_received: Optional[float] = None
    pending_amount: Optional[float] = None
    payment_remarks: Optional[str] = None
    assigned_finance_poc: Optional[str] = None
    created_by: Optional[str] = None
    last_modified_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tasks: tuple[InvoiceTask, ...] = ()


@dataclass(frozen=True)
class InvoiceLogEntry:
    """Append-only record of one invoice change; never updated or deleted."""

    id: str
    invoice_id: str
    action: LogAction
    field_name: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    changed_by: Optional[str]
    change_reason: str
    created_at: Optional[datetime] = None
    task_id: Optional[str] = None
