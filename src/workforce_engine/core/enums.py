from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role, used only to shape attendance projections."""

    ADMIN = "admin"
    STAFF = "staff"


class CompensationModel(str, Enum):
    HOURLY = "HOURLY"
    SALARIED = "SALARIED"


class Recurrence(str, Enum):
    """How a shift repeats: every week on one weekday, or on a single date."""

    RECURRING = "RECURRING"
    ONE_TIME = "ONE_TIME"


class AttendanceStatus(str, Enum):
    """Stored attendance status.

    ABSENT is only ever derived on read (a scheduled shift without a row).
    """

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    EARLY_DEPARTURE = "EARLY_DEPARTURE"
    APPROVED_PTO = "APPROVED_PTO"
    ABSENT = "ABSENT"


class PTOStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
