from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization checks."""

    ADMIN = "admin"
    HR = "hr"
    FINANCE = "finance"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class LeaveStatus(str, Enum):
    """Leave application workflow states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class LogAction(str, Enum):
    """Actions recorded in invoice and invoice task change logs."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STATUS_CHANGED = "status_changed"


class DayStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    WEEKEND = "Weekend"
    HOLIDAY = "Holiday"
