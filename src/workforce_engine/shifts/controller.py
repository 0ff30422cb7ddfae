from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, current_tenant, json_body, json_ok, to_date, to_id, to_time
from ..common.validators import require_positive_id
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    catalog = container.shift_catalog

    def _day_of_week(value):
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("day_of_week must be an integer 0-6")

    @app.route("/api/staff/shifts", methods=["GET"], endpoint="list_shifts")
    def list_shifts():
        shifts = catalog.list_shifts(
            tenant_id=current_tenant(),
            staff_id=to_id(request.args.get("staff_id"), "staff_id"),
            start=to_date(request.args.get("start"), "start"),
            end=to_date(request.args.get("end"), "end"),
        )
        return json_ok([s.to_dict() for s in shifts])

    @app.route("/api/staff/shifts", methods=["POST"], endpoint="create_shift")
    @admin_required
    def create_shift():
        body = json_body()
        shift = catalog.create_shift(
            tenant_id=current_tenant(),
            staff_id=require_positive_id(body.get("staff_id"), "staff_id"),
            shift_name=body.get("shift_name") or "",
            start_time=to_time(body.get("start_time"), "start_time"),
            end_time=to_time(body.get("end_time"), "end_time"),
            recurrence=body.get("recurrence") or "",
            day_of_week=_day_of_week(body.get("day_of_week")),
            specific_date=to_date(body.get("specific_date"), "specific_date"),
        )
        return json_ok(shift.to_dict(), 201)

    @app.route("/api/staff/shifts/resolve", methods=["GET"], endpoint="resolve_shifts")
    def resolve_shifts():
        work_date = to_date(request.args.get("date"), "date")
        if work_date is None:
            raise ValidationError("date is required")
        shifts = catalog.resolve_shifts_for_date(
            tenant_id=current_tenant(),
            work_date=work_date,
            staff_id=to_id(request.args.get("staff_id"), "staff_id"),
        )
        return json_ok([s.to_dict() for s in shifts])

    @app.route("/api/staff/shifts/<int:shift_id>", methods=["GET"], endpoint="get_shift")
    def get_shift(shift_id: int):
        return json_ok(catalog.get_shift(tenant_id=current_tenant(), shift_id=shift_id).to_dict())

    @app.route("/api/staff/shifts/<int:shift_id>", methods=["PUT", "PATCH"], endpoint="update_shift")
    @admin_required
    def update_shift(shift_id: int):
        body = json_body()
        shift = catalog.update_shift(
            tenant_id=current_tenant(),
            shift_id=shift_id,
            staff_id=to_id(body.get("staff_id"), "staff_id"),
            shift_name=body.get("shift_name"),
            start_time=to_time(body.get("start_time"), "start_time"),
            end_time=to_time(body.get("end_time"), "end_time"),
            recurrence=body.get("recurrence"),
            day_of_week=_day_of_week(body.get("day_of_week")),
            specific_date=to_date(body.get("specific_date"), "specific_date"),
        )
        return json_ok(shift.to_dict())

    @app.route("/api/staff/shifts/<int:shift_id>", methods=["DELETE"], endpoint="delete_shift")
    @admin_required
    def delete_shift(shift_id: int):
        catalog.delete_shift(tenant_id=current_tenant(), shift_id=shift_id)
        return json_ok({"shift_id": shift_id})
