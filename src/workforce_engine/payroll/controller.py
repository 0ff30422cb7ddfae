from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, current_tenant, json_body, json_ok, to_date, to_datetime, to_id
from ..common.validators import require_positive_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_aggregator

    @app.route("/api/staff/payroll/calculate", methods=["POST"], endpoint="calculate_payroll")
    @admin_required
    def calculate_payroll():
        body = json_body()
        calc = payroll.calculate(
            tenant_id=current_tenant(),
            staff_id=require_positive_id(body.get("staff_id"), "staff_id"),
            period_start=to_date(body.get("start_date"), "start_date"),
            period_end=to_date(body.get("end_date"), "end_date"),
            deductions=body.get("deductions") or 0,
        )
        return json_ok(calc.to_dict())

    @app.route("/api/staff/payroll/runs", methods=["GET"], endpoint="list_payroll_runs")
    @admin_required
    def list_payroll_runs():
        runs = payroll.list_runs(
            tenant_id=current_tenant(),
            staff_id=to_id(request.args.get("staff_id"), "staff_id"),
            status=request.args.get("status") or None,
        )
        return json_ok([r.to_dict() for r in runs])

    @app.route("/api/staff/payroll/runs", methods=["POST"], endpoint="create_payroll_run")
    @admin_required
    def create_payroll_run():
        body = json_body()
        run = payroll.create_run(
            tenant_id=current_tenant(),
            staff_id=require_positive_id(body.get("staff_id"), "staff_id"),
            period_start=to_date(body.get("period_start"), "period_start"),
            period_end=to_date(body.get("period_end"), "period_end"),
            hours_worked=body.get("hours_worked") or 0,
            gross_pay=body.get("gross_pay"),
            deductions=body.get("deductions") or 0,
            net_pay=body.get("net_pay"),
            notes=body.get("notes"),
        )
        return json_ok(run.to_dict(), 201)

    @app.route("/api/staff/payroll/runs/<int:run_id>", methods=["GET"], endpoint="get_payroll_run")
    @admin_required
    def get_payroll_run(run_id: int):
        return json_ok(payroll.get_run(tenant_id=current_tenant(), run_id=run_id).to_dict())

    @app.route("/api/staff/payroll/runs/<int:run_id>", methods=["PATCH"], endpoint="update_payroll_run")
    @admin_required
    def update_payroll_run(run_id: int):
        body = json_body()
        run = payroll.update_run_status(
            tenant_id=current_tenant(),
            run_id=run_id,
            status=body.get("status") or "",
            paid_at=to_datetime(body.get("paid_at"), "paid_at"),
            notes=body.get("notes"),
        )
        return json_ok(run.to_dict())

    @app.route("/api/staff/payroll/runs/<int:run_id>", methods=["DELETE"], endpoint="delete_payroll_run")
    @admin_required
    def delete_payroll_run(run_id: int):
        payroll.delete_run(tenant_id=current_tenant(), run_id=run_id)
        return json_ok({"run_id": run_id}, message="Payroll run deleted")
