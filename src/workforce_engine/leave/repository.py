from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PTOStatus
from ..database.connection import Transaction
from .model import PTORequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        start_date: date,
        end_date: date,
        days_requested: int,
        reason: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(
        self,
        *,
        tenant_id: int,
        request_id: int,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[PTORequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: PTOStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_note: Optional[str],
        tx: Transaction,
    ) -> bool:
        """Move a PENDING request to ``status``. False if it was no longer pending."""

        raise NotImplementedError

    def list(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: Optional[PTOStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[PTORequest]:
        raise NotImplementedError
