from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import Recurrence
from ..database.connection import Transaction
from .model import Shift


class ShiftRepository(Protocol):
    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        shift_name: str,
        start_time: time,
        end_time: time,
        recurrence: Recurrence,
        day_of_week: Optional[int],
        specific_date: Optional[date],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, *, tenant_id: int, shift_id: int, tx: Optional[Transaction] = None) -> Optional[Shift]:
        raise NotImplementedError

    def update(self, shift: Shift) -> None:
        raise NotImplementedError

    def delete(self, *, tenant_id: int, shift_id: int, tx: Transaction) -> bool:
        raise NotImplementedError

    def list_all(self, *, tenant_id: int, staff_id: Optional[int] = None) -> Sequence[Shift]:
        raise NotImplementedError

    def list_candidates(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        staff_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> Sequence[Shift]:
        """Every recurring shift plus the one-time shifts dated within [start, end]."""

        raise NotImplementedError
