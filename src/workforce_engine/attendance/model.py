from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..shifts.model import Shift


@dataclass(frozen=True)
class AttendanceRecord:
    """What actually happened for one shift on one date (unique per shift/date)."""

    attendance_id: int
    tenant_id: int
    staff_id: int
    shift_id: int
    work_date: date
    scheduled_start: datetime
    scheduled_end: datetime
    status: AttendanceStatus
    actual_check_in: Optional[datetime] = None
    actual_check_out: Optional[datetime] = None
    minutes_late: Optional[int] = None
    total_hours: Optional[Decimal] = None

    @property
    def is_open(self) -> bool:
        return self.actual_check_in is not None and self.actual_check_out is None


@dataclass(frozen=True)
class LiveRosterEntry:
    record: AttendanceRecord
    hours_worked_so_far: Decimal


@dataclass(frozen=True)
class DailyView:
    work_date: date
    attendance: list[AttendanceRecord]
    scheduled_shifts: list[Shift]
    absences: list[Shift]

    @property
    def summary(self) -> dict:
        counts = {status: 0 for status in AttendanceStatus}
        for r in self.attendance:
            counts[r.status] += 1
        return {
            "total": len(self.attendance),
            "on_time": counts[AttendanceStatus.ON_TIME],
            "late": counts[AttendanceStatus.LATE],
            "early_departure": counts[AttendanceStatus.EARLY_DEPARTURE],
            "approved_pto": counts[AttendanceStatus.APPROVED_PTO],
            "absent": len(self.absences),
        }


@dataclass
class AttendanceSummary:
    """Per-staff (or grand total) aggregate built in memory for reports."""

    staff_id: Optional[int]
    days_present: int = 0
    total_hours: Decimal = Decimal("0.00")
    on_time: int = 0
    late: int = 0
    early_departure: int = 0
    approved_pto: int = 0
    absent: int = 0

    def add(self, record: AttendanceRecord) -> None:
        if record.actual_check_in is not None:
            self.days_present += 1
        self.total_hours += record.total_hours or Decimal("0")
        if record.status == AttendanceStatus.ON_TIME:
            self.on_time += 1
        elif record.status == AttendanceStatus.LATE:
            self.late += 1
        elif record.status == AttendanceStatus.EARLY_DEPARTURE:
            self.early_departure += 1
        elif record.status == AttendanceStatus.APPROVED_PTO:
            self.approved_pto += 1

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "days_present": self.days_present,
            "total_hours": float(self.total_hours),
            "on_time": self.on_time,
            "late": self.late,
            "early_departure": self.early_departure,
            "approved_pto": self.approved_pto,
            "absent": self.absent,
        }


@dataclass(frozen=True)
class AttendanceReport:
    start_date: date
    end_date: date
    rows: list[AttendanceRecord]
    summary: list[AttendanceSummary]
    totals: AttendanceSummary


@dataclass(frozen=True)
class StaffStatus:
    """A staff member's own view: today's records and the coming week's shifts."""

    today: list[AttendanceRecord]
    upcoming_shifts: list[Shift] = field(default_factory=list)
