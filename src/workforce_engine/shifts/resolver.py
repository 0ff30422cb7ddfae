from __future__ import annotations

from datetime import date
from typing import Iterable

from .model import Shift


def resolve_shifts(candidates: Iterable[Shift], work_date: date) -> list[Shift]:
    """Shifts that should have happened on ``work_date``.

    Pure: the same candidates and date always give the same ordered,
    duplicate-free list, whichever ledger asks.
    """

    by_id: dict[int, Shift] = {}
    for shift in candidates:
        if shift.applies_on(work_date):
            by_id.setdefault(shift.shift_id, shift)
    return sorted(by_id.values(), key=lambda s: (s.start_time, s.shift_id))


def catalog_order(shifts: Iterable[Shift]) -> list[Shift]:
    """Recurring first, then by date, then by start time."""
    return sorted(
        shifts,
        key=lambda s: (
            0 if s.is_recurring else 1,
            s.specific_date or date.min,
            s.start_time,
            s.shift_id,
        ),
    )
