from __future__ import annotations

import logging
from datetime import date, datetime, time
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.constants import ROLE_HEADER, TENANT_HEADER
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from .datetime_utils import parse_hhmm, parse_iso_date, parse_iso_datetime
from .validators import require_positive_id

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "not_found": 404,
    "conflict": 409,
    "invalid_state": 409,
    "insufficient_balance": 422,
    "validation_error": 400,
    "unavailable": 503,
}


def json_ok(data: Any = None, status: int = 200, **extra):
    payload = {"success": True, "data": data}
    payload.update(extra)
    return jsonify(payload), status


def json_error(message: str, status: int, kind: str):
    return jsonify({"success": False, "error": message, "kind": kind}), status


def current_tenant() -> int:
    raw = request.headers.get(TENANT_HEADER)
    if not raw:
        raise ValidationError("Tenant ID is required")
    return require_positive_id(raw, TENANT_HEADER)


def current_role() -> Role:
    raw = (request.headers.get(ROLE_HEADER) or Role.STAFF.value).lower()
    try:
        return Role(raw)
    except ValueError:
        raise ValidationError(f"{ROLE_HEADER} must be admin or staff")


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_role() != Role.ADMIN:
            return json_error("Admin role required", 403, "forbidden")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("JSON object body is required")
    return body


def to_date(value: Optional[str], field_name: str) -> Optional[date]:
    if value in (None, ""):
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")


def to_datetime(value: Optional[str], field_name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date or datetime")


def to_time(value: Optional[str], field_name: str) -> Optional[time]:
    if value in (None, ""):
        return None
    try:
        return parse_hhmm(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM")


def to_id(value, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    return require_positive_id(value, field_name)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return json_error(str(exc), STATUS_BY_KIND.get(exc.kind, 400), exc.kind)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return json_error(exc.description or exc.name, exc.code or 500, "http_error")

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500, "internal_error")
