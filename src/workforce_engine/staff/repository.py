from __future__ import annotations

from typing import Optional, Protocol

from ..database.connection import Transaction
from .model import Staff


class StaffRepository(Protocol):
    """Read port onto the tenant's staff directory."""

    def get_by_id(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[Staff]:
        raise NotImplementedError

    def add_leave_days_used(self, *, tenant_id: int, staff_id: int, days: int, tx: Transaction) -> bool:
        """Debit the leave balance.

        Returns False (and changes nothing) when the debit would push
        leave_days_used past leave_days_total.
        """

        raise NotImplementedError
