from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PayrollStatus
from ..database.connection import Transaction
from .model import PayrollRun


class PayrollRepository(Protocol):
    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        period_start: date,
        period_end: date,
        hours_worked: Decimal,
        gross_pay: Decimal,
        deductions: Decimal,
        net_pay: Decimal,
        notes: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(
        self,
        *,
        tenant_id: int,
        run_id: int,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[PayrollRun]:
        raise NotImplementedError

    def mark_paid(self, *, run_id: int, paid_at: datetime, notes: Optional[str], tx: Transaction) -> bool:
        """PENDING -> PAID. ``notes=None`` keeps the stored notes."""

        raise NotImplementedError

    def delete_pending(self, *, tenant_id: int, run_id: int, tx: Transaction) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[PayrollRun]:
        raise NotImplementedError
