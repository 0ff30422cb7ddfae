from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PTOStatus


@dataclass(frozen=True)
class PTORequest:
    request_id: int
    tenant_id: int
    staff_id: int
    start_date: date
    end_date: date
    days_requested: int
    status: PTOStatus
    created_at: datetime
    reason: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PTOStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "staff_id": self.staff_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days_requested": self.days_requested,
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at.isoformat(timespec="seconds") if self.reviewed_at else None,
            "review_note": self.review_note,
        }
