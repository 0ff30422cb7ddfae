from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, CompensationModel, PayrollStatus


@dataclass(frozen=True)
class PayrollEntry:
    """One completed shift counted towards a pay period."""

    work_date: date
    shift_id: int
    hours: Decimal
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "work_date": self.work_date.isoformat(),
            "shift_id": self.shift_id,
            "hours": float(self.hours),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class PayrollCalculation:
    staff_id: int
    compensation_model: CompensationModel
    period_start: date
    period_end: date
    days_worked: int
    total_hours: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    entries: list[PayrollEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "compensation_model": self.compensation_model.value,
            "period": {"start": self.period_start.isoformat(), "end": self.period_end.isoformat()},
            "calculation": {
                "days_worked": self.days_worked,
                "total_hours": float(self.total_hours),
                "gross_pay": float(self.gross_pay),
                "deductions": float(self.deductions),
                "net_pay": float(self.net_pay),
            },
            "attendance": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class PayrollRun:
    run_id: int
    tenant_id: int
    staff_id: int
    period_start: date
    period_end: date
    hours_worked: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus
    created_at: datetime
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PayrollStatus.PAID

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "staff_id": self.staff_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "hours_worked": float(self.hours_worked),
            "gross_pay": float(self.gross_pay),
            "deductions": float(self.deductions),
            "net_pay": float(self.net_pay),
            "status": self.status.value,
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "paid_at": self.paid_at.isoformat(timespec="seconds") if self.paid_at else None,
            "notes": self.notes,
        }
