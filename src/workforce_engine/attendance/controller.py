from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, current_role, current_tenant, json_body, json_ok, to_date, to_id
from ..common.validators import require_positive_id
from ..container import Container
from .projections import manager_view, staff_view, view_for


def register(app: Flask, container: Container) -> None:
    ledger = container.attendance_ledger

    def _staff_and_shift(body: dict) -> tuple[int, int]:
        return (
            require_positive_id(body.get("staff_id"), "staff_id"),
            require_positive_id(body.get("shift_id"), "shift_id"),
        )

    @app.route("/api/staff/attendance/check-in", methods=["POST"], endpoint="check_in")
    def check_in():
        staff_id, shift_id = _staff_and_shift(json_body())
        record = ledger.check_in(tenant_id=current_tenant(), staff_id=staff_id, shift_id=shift_id)
        return json_ok(view_for(current_role(), record), 201, message="Checked in")

    @app.route("/api/staff/attendance/check-out", methods=["POST"], endpoint="check_out")
    def check_out():
        staff_id, shift_id = _staff_and_shift(json_body())
        record = ledger.check_out(tenant_id=current_tenant(), staff_id=staff_id, shift_id=shift_id)
        return json_ok(view_for(current_role(), record), message="Checked out")

    @app.route("/api/staff/attendance/live", methods=["GET"], endpoint="live_roster")
    @admin_required
    def live_roster():
        entries = ledger.live_roster(tenant_id=current_tenant())
        data = []
        for e in entries:
            row = manager_view(e.record)
            row["hours_worked_so_far"] = float(e.hours_worked_so_far)
            data.append(row)
        return json_ok(data)

    @app.route("/api/staff/attendance/today", methods=["GET"], endpoint="daily_view")
    @admin_required
    def daily_view():
        work_date = to_date(request.args.get("date"), "date") or container.clock().date()
        view = ledger.daily_view(tenant_id=current_tenant(), work_date=work_date)
        return json_ok(
            {
                "date": view.work_date.isoformat(),
                "attendance": [manager_view(r) for r in view.attendance],
                "scheduled_shifts": [s.to_dict() for s in view.scheduled_shifts],
                "absences": [s.to_dict() for s in view.absences],
                "summary": view.summary,
            }
        )

    @app.route("/api/staff/attendance/report", methods=["GET"], endpoint="attendance_report")
    @admin_required
    def attendance_report():
        report = ledger.report(
            tenant_id=current_tenant(),
            start_date=to_date(request.args.get("start"), "start"),
            end_date=to_date(request.args.get("end"), "end"),
            staff_id=to_id(request.args.get("staff_id"), "staff_id"),
        )
        return json_ok(
            {
                "start": report.start_date.isoformat(),
                "end": report.end_date.isoformat(),
                "rows": [manager_view(r) for r in report.rows],
                "summary": [s.to_dict() for s in report.summary],
                "totals": report.totals.to_dict(),
            }
        )

    @app.route("/api/staff/attendance/my-status", methods=["GET"], endpoint="my_status")
    def my_status():
        staff_id = require_positive_id(request.args.get("staff_id"), "staff_id")
        status = ledger.staff_status(tenant_id=current_tenant(), staff_id=staff_id)
        return json_ok(
            {
                "today": [staff_view(r) for r in status.today],
                "upcoming_shifts": [s.to_dict() for s in status.upcoming_shifts],
            }
        )
