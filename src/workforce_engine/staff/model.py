from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import CompensationModel


@dataclass(frozen=True)
class Staff:
    """Staff member as seen by this engine.

    Owned by the tenant directory; only the leave counters are ever written here.
    """

    staff_id: int
    tenant_id: int
    full_name: str
    compensation_model: CompensationModel
    hourly_rate: Optional[Decimal]
    fixed_salary: Optional[Decimal]
    leave_days_total: int
    leave_days_used: int

    @property
    def leave_days_remaining(self) -> int:
        return self.leave_days_total - self.leave_days_used


@dataclass(frozen=True)
class LeaveBalance:
    staff_id: int
    total: int
    used: int
    remaining: int

    def to_dict(self) -> dict:
        return {"staff_id": self.staff_id, "total": self.total, "used": self.used, "remaining": self.remaining}
