from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, current_tenant, json_body, json_ok, to_date, to_id
from ..common.validators import require_positive_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ledger = container.leave_ledger

    @app.route("/api/staff/pto", methods=["GET"], endpoint="list_pto")
    def list_pto():
        requests_ = ledger.list_requests(
            tenant_id=current_tenant(),
            staff_id=to_id(request.args.get("staff_id"), "staff_id"),
            status=request.args.get("status") or None,
        )
        return json_ok([r.to_dict() for r in requests_])

    @app.route("/api/staff/pto", methods=["POST"], endpoint="submit_pto")
    def submit_pto():
        body = json_body()
        req = ledger.submit_request(
            tenant_id=current_tenant(),
            staff_id=require_positive_id(body.get("staff_id"), "staff_id"),
            start_date=to_date(body.get("start_date"), "start_date"),
            end_date=to_date(body.get("end_date"), "end_date"),
            reason=body.get("reason"),
        )
        return json_ok(req.to_dict(), 201)

    @app.route("/api/staff/pto/<int:request_id>", methods=["GET"], endpoint="get_pto")
    def get_pto(request_id: int):
        return json_ok(ledger.get_request(tenant_id=current_tenant(), request_id=request_id).to_dict())

    @app.route("/api/staff/pto/<int:request_id>/approve", methods=["POST"], endpoint="approve_pto")
    @admin_required
    def approve_pto(request_id: int):
        body = json_body()
        req = ledger.approve(
            tenant_id=current_tenant(),
            request_id=request_id,
            approver_id=require_positive_id(body.get("approver_id"), "approver_id"),
        )
        return json_ok(req.to_dict(), message="PTO request approved")

    @app.route("/api/staff/pto/<int:request_id>/deny", methods=["POST"], endpoint="deny_pto")
    @admin_required
    def deny_pto(request_id: int):
        body = json_body()
        req = ledger.deny(
            tenant_id=current_tenant(),
            request_id=request_id,
            reviewer_id=require_positive_id(body.get("reviewer_id"), "reviewer_id"),
            reason=body.get("reason"),
        )
        return json_ok(req.to_dict(), message="PTO request denied")

    @app.route("/api/staff/<int:staff_id>/leave-balance", methods=["GET"], endpoint="leave_balance")
    def leave_balance(staff_id: int):
        return json_ok(ledger.leave_balance(tenant_id=current_tenant(), staff_id=staff_id).to_dict())
