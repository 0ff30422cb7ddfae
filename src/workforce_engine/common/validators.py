from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_id(value, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer id")
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be an integer id")
    return parsed


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start is None or end is None:
        raise ValidationError("start and end dates are required")
    if end < start:
        raise ValidationError("end date must be on or after start date")


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
