from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class EarlyDepartureStrategy(AttendanceStrategy):
    """Early departure on checkout (only when check-in was ON_TIME)."""

    def decide_checkin(self, *, now: datetime, scheduled_start: datetime, grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)

    def decide_checkout(self, *, now: datetime, scheduled_end: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EARLY_DEPARTURE)
