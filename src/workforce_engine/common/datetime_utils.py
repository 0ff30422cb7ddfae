from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

TWO_PLACES = Decimal("0.01")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse YYYY-MM-DD or YYYY-MM-DDTHH:MM[:SS] into a naive datetime."""
    return datetime.fromisoformat(value)


def parse_hhmm(value: str):
    """Parse HH:MM (or HH:MM:SS) into a time-of-day."""
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current tenant-local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_of_week(value: date) -> int:
    """Weekday number with 0 = Sunday ... 6 = Saturday."""
    return (value.weekday() + 1) % 7


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Elapsed hours rounded to 2 decimals."""
    seconds = Decimal(str((end - start).total_seconds()))
    return (seconds / Decimal(3600)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
