from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    minutes_late: Optional[int] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, scheduled_start: datetime, grace_minutes: int) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, now: datetime, scheduled_end: datetime, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
