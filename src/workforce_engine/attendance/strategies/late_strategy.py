from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in. A late arrival stays LATE whenever it checks out."""

    def decide_checkin(self, *, now: datetime, scheduled_start: datetime, grace_minutes: int) -> StatusDecision:
        elapsed_minutes = int((now - scheduled_start).total_seconds() // 60)
        return StatusDecision(
            status=AttendanceStatus.LATE,
            minutes_late=max(elapsed_minutes - grace_minutes, 1),
        )

    def decide_checkout(self, *, now: datetime, scheduled_end: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
