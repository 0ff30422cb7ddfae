from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy
from .strategies.early_departure_strategy import EarlyDepartureStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, scheduled_start: datetime, grace_minutes: int) -> AttendanceStrategy:
        if now > scheduled_start + timedelta(minutes=grace_minutes):
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, *, now: datetime, scheduled_end: datetime, current_status: AttendanceStatus) -> AttendanceStrategy:
        if now < scheduled_end and current_status == AttendanceStatus.ON_TIME:
            return EarlyDepartureStrategy()
        return NormalStrategy()
