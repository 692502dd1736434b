from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_LOCAL_TIMEZONE, DEFAULT_NOTIFICATION_WORKERS, DEFAULT_WORKING_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.service import InvoiceService
from .leaves.mysql_leave_repository import MySQLHolidayRepository, MySQLLeaveRepository
from .leaves.resolver import LeaveResolver
from .leaves.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .payroll.service import PayrollService
from .timetracking.aggregator import AttendanceAggregator
from .timetracking.mysql_time_tracking_repository import MySQLTimeTrackingRepository
from .users.mysql_user_repository import MySQLEmployeeRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    time_tracking_conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    leaves_repo: MySQLLeaveRepository
    holidays_repo: MySQLHolidayRepository
    notifications_repo: MySQLNotificationRepository
    invoices_repo: MySQLInvoiceRepository
    time_tracking_repo: MySQLTimeTrackingRepository

    auth_service: AuthService
    employee_service: EmployeeService
    notification_service: NotificationService
    leave_service: LeaveService
    payroll_service: PayrollService
    invoice_service: InvoiceService


def build_container(
    *,
    db_config: dict,
    time_tracking_db_config: dict,
    local_timezone: str = DEFAULT_LOCAL_TIMEZONE,
    working_hours_per_day: float = DEFAULT_WORKING_HOURS,
    notification_workers: int = DEFAULT_NOTIFICATION_WORKERS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config, default_database="hr_portal"))
    time_tracking_conn = DatabaseConnection(
        DBConfig.from_dict(time_tracking_db_config, default_database="time_tracking")
    )

    employees_repo = MySQLEmployeeRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    invoices_repo = MySQLInvoiceRepository(conn)
    time_tracking_repo = MySQLTimeTrackingRepository(time_tracking_conn)

    auth_service = AuthService(employees_repo)
    employee_service = EmployeeService(employees_repo)
    notification_service = NotificationService(notifications_repo, max_workers=notification_workers)
    leave_service = LeaveService(leaves_repo, holidays_repo, employees_repo, notification_service)
    payroll_service = PayrollService(
        employees_repo,
        holidays_repo,
        AttendanceAggregator(
            time_tracking_repo,
            local_tz=local_timezone,
            working_hours_per_day=working_hours_per_day,
        ),
        LeaveResolver(leaves_repo),
    )
    invoice_service = InvoiceService(invoices_repo, notification_service)

    return Container(
        conn=conn,
        time_tracking_conn=time_tracking_conn,
        employees_repo=employees_repo,
        leaves_repo=leaves_repo,
        holidays_repo=holidays_repo,
        notifications_repo=notifications_repo,
        invoices_repo=invoices_repo,
        time_tracking_repo=time_tracking_repo,
        auth_service=auth_service,
        employee_service=employee_service,
        notification_service=notification_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        invoice_service=invoice_service,
    )
