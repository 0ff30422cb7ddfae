from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import Transaction
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_shift_and_date(
        self,
        *,
        tenant_id: int,
        shift_id: int,
        work_date: date,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        shift_id: int,
        work_date: date,
        scheduled_start: datetime,
        scheduled_end: datetime,
        status: AttendanceStatus,
        actual_check_in: Optional[datetime] = None,
        minutes_late: Optional[int] = None,
        tx: Transaction,
    ) -> int:
        """Insert a new row. Raises ConflictError if (shift_id, work_date) exists."""

        raise NotImplementedError

    def record_check_in(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        status: AttendanceStatus,
        minutes_late: Optional[int],
        scheduled_start: datetime,
        scheduled_end: datetime,
        tx: Transaction,
    ) -> bool:
        """Fill in a check-in on a row that has none yet."""

        raise NotImplementedError

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        total_hours: Decimal,
        status: AttendanceStatus,
        tx: Transaction,
    ) -> bool:
        raise NotImplementedError

    def mark_approved_pto(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        shift_id: int,
        work_date: date,
        scheduled_start: datetime,
        scheduled_end: datetime,
        tx: Transaction,
    ) -> None:
        """Upsert (shift_id, work_date) with status APPROVED_PTO."""

        raise NotImplementedError

    def delete_for_shift(self, *, tenant_id: int, shift_id: int, tx: Transaction) -> int:
        raise NotImplementedError

    def list_range(
        self,
        *,
        tenant_id: int,
        start_date: date,
        end_date: date,
        staff_id: Optional[int] = None,
        completed_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_open(self, *, tenant_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        """Rows checked in but not yet checked out, oldest check-in first."""

        raise NotImplementedError
