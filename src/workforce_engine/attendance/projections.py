"""Two shapes of an attendance record.

Managers see the classification (status, minutes late). Staff only ever see
their own timestamps and hours.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from .model import AttendanceRecord


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def staff_view(record: AttendanceRecord) -> dict:
    return {
        "attendance_id": record.attendance_id,
        "shift_id": record.shift_id,
        "work_date": record.work_date.isoformat(),
        "actual_check_in": _iso(record.actual_check_in),
        "actual_check_out": _iso(record.actual_check_out),
        "total_hours": float(record.total_hours) if record.total_hours is not None else None,
    }


def manager_view(record: AttendanceRecord) -> dict:
    view = staff_view(record)
    view.update(
        {
            "staff_id": record.staff_id,
            "scheduled_start": _iso(record.scheduled_start),
            "scheduled_end": _iso(record.scheduled_end),
            "status": record.status.value,
            "minutes_late": record.minutes_late,
        }
    )
    return view


def view_for(role: Role, record: AttendanceRecord) -> dict:
    if role == Role.ADMIN:
        return manager_view(record)
    return staff_view(record)
