from __future__ import annotations

from flask import Flask

from ..common.http import current_role, login_required, ok, to_payload
from ..container import Container
from .model import PayrollResult


def _result_payload(result: PayrollResult) -> dict:
    payload = to_payload(result)
    payload["payable_days"] = result.payable_days
    payload["attendance_ratio"] = result.attendance_ratio
    payload["net_pay"] = result.net_pay
    return payload


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/<int:year>/<int:month>", methods=["GET"], endpoint="payroll_month")
    @login_required
    def payroll_month(year: int, month: int):
        run = container.payroll_service.run_month(current_role=current_role(), year=year, month=month)
        return ok(
            {
                "year": run.year,
                "month": run.month,
                "total_net_pay": run.total_net_pay,
                "results": [_result_payload(r) for r in run.results],
                "failures": run.failures,
            }
        )

    @app.route("/api/payroll/<int:year>/<int:month>/<user_id>", methods=["GET"], endpoint="payroll_employee")
    @login_required
    def payroll_employee(year: int, month: int, user_id: str):
        result = container.payroll_service.compute_for_employee(
            current_role=current_role(), user_id=user_id, year=year, month=month
        )
        return ok(_result_payload(result))

    @app.route("/api/attendance/<int:year>/<int:month>", methods=["GET"], endpoint="attendance_month")
    @login_required
    def attendance_month(year: int, month: int):
        report = container.payroll_service.attendance_report(current_role=current_role(), year=year, month=month)
        return ok(report)
