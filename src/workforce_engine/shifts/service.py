from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time, timedelta
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_UPCOMING_DAYS
from ..core.enums import Recurrence
from ..core.exceptions import NotFoundError, ValidationError
from ..database.connection import Transaction, TransactionManager
from ..staff.repository import StaffRepository
from .model import Shift
from .repository import ShiftRepository
from .resolver import catalog_order, resolve_shifts

logger = logging.getLogger(__name__)


def _coerce_recurrence(value) -> Recurrence:
    try:
        return Recurrence(value)
    except ValueError:
        raise ValidationError("recurrence must be RECURRING or ONE_TIME")


def _validated(shift: Shift) -> Shift:
    """Check a shift's fields and clear the recurrence field that does not apply."""

    name = require_non_empty(shift.shift_name or "", "Shift name")
    if not isinstance(shift.start_time, time) or not isinstance(shift.end_time, time):
        raise ValidationError("start_time and end_time are required")

    recurrence = _coerce_recurrence(shift.recurrence)
    if recurrence == Recurrence.RECURRING:
        if shift.day_of_week is None:
            raise ValidationError("day_of_week is required for recurring shifts")
        try:
            weekday = int(shift.day_of_week)
        except (TypeError, ValueError):
            raise ValidationError("day_of_week must be an integer")
        if not 0 <= weekday <= 6:
            raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
        return replace(shift, shift_name=name, recurrence=recurrence, day_of_week=weekday, specific_date=None)

    if shift.specific_date is None:
        raise ValidationError("specific_date is required for one-time shifts")
    return replace(shift, shift_name=name, recurrence=recurrence, day_of_week=None)


class ShiftCatalog:
    """Stores shifts and answers "which shifts apply on date D"."""

    def __init__(
        self,
        shifts: ShiftRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        transactions: TransactionManager,
    ):
        self._shifts = shifts
        self._staff = staff
        self._attendance = attendance
        self._transactions = transactions

    def _require_staff(self, tenant_id: int, staff_id: int) -> None:
        if not self._staff.get_by_id(tenant_id=tenant_id, staff_id=int(staff_id)):
            raise NotFoundError("Staff member not found")

    def create_shift(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        shift_name: str,
        start_time: time,
        end_time: time,
        recurrence: Recurrence | str,
        day_of_week: Optional[int] = None,
        specific_date: Optional[date] = None,
    ) -> Shift:
        draft = _validated(
            Shift(
                shift_id=0,
                tenant_id=int(tenant_id),
                staff_id=int(staff_id),
                shift_name=shift_name,
                start_time=start_time,
                end_time=end_time,
                recurrence=recurrence,
                day_of_week=day_of_week,
                specific_date=specific_date,
            )
        )
        self._require_staff(tenant_id, staff_id)

        shift_id = self._shifts.create(
            tenant_id=draft.tenant_id,
            staff_id=draft.staff_id,
            shift_name=draft.shift_name,
            start_time=draft.start_time,
            end_time=draft.end_time,
            recurrence=draft.recurrence,
            day_of_week=draft.day_of_week,
            specific_date=draft.specific_date,
        )
        logger.info("Created %s shift %s for staff %s (tenant %s)", draft.recurrence.value, shift_id, staff_id, tenant_id)
        return replace(draft, shift_id=shift_id)

    def get_shift(self, *, tenant_id: int, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(tenant_id=int(tenant_id), shift_id=int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def update_shift(
        self,
        *,
        tenant_id: int,
        shift_id: int,
        staff_id: Optional[int] = None,
        shift_name: Optional[str] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        recurrence: Recurrence | str | None = None,
        day_of_week: Optional[int] = None,
        specific_date: Optional[date] = None,
    ) -> Shift:
        """Apply the given (non-None) changes. Switching recurrence clears the other field."""

        current = self.get_shift(tenant_id=tenant_id, shift_id=shift_id)

        if staff_id is not None and int(staff_id) != current.staff_id:
            self._require_staff(tenant_id, staff_id)

        merged = replace(
            current,
            staff_id=int(staff_id) if staff_id is not None else current.staff_id,
            shift_name=shift_name if shift_name is not None else current.shift_name,
            start_time=start_time or current.start_time,
            end_time=end_time or current.end_time,
            recurrence=recurrence if recurrence is not None else current.recurrence,
            day_of_week=day_of_week if day_of_week is not None else current.day_of_week,
            specific_date=specific_date or current.specific_date,
        )
        updated = _validated(merged)
        self._shifts.update(updated)
        logger.info("Updated shift %s (tenant %s)", shift_id, tenant_id)
        return updated

    def delete_shift(self, *, tenant_id: int, shift_id: int) -> None:
        """Delete a shift together with every attendance row recorded against it."""

        self.get_shift(tenant_id=tenant_id, shift_id=shift_id)

        with self._transactions.transaction() as tx:
            removed = self._attendance.delete_for_shift(tenant_id=int(tenant_id), shift_id=int(shift_id), tx=tx)
            if not self._shifts.delete(tenant_id=int(tenant_id), shift_id=int(shift_id), tx=tx):
                raise NotFoundError("Shift not found")

        logger.info("Deleted shift %s and %s attendance rows (tenant %s)", shift_id, removed, tenant_id)

    def list_shifts(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[Shift]:
        if start is not None and end is not None:
            if end < start:
                raise ValidationError("end date must be on or after start date")
            shifts = self._shifts.list_candidates(tenant_id=int(tenant_id), start=start, end=end, staff_id=staff_id)
        else:
            shifts = self._shifts.list_all(tenant_id=int(tenant_id), staff_id=staff_id)
        return catalog_order(shifts)

    def candidates_for_range(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        staff_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> Sequence[Shift]:
        """Shifts that may apply somewhere in [start, end]; feed to ``resolve_shifts`` per date."""

        return self._shifts.list_candidates(tenant_id=int(tenant_id), start=start, end=end, staff_id=staff_id, tx=tx)

    def resolve_shifts_for_date(
        self,
        *,
        tenant_id: int,
        work_date: date,
        staff_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> list[Shift]:
        candidates = self.candidates_for_range(tenant_id=tenant_id, start=work_date, end=work_date, staff_id=staff_id, tx=tx)
        return resolve_shifts(candidates, work_date)

    def upcoming_shifts(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        today: date,
        days: int = DEFAULT_UPCOMING_DAYS,
    ) -> list[Shift]:
        shifts = self._shifts.list_candidates(
            tenant_id=int(tenant_id),
            start=today,
            end=today + timedelta(days=days),
            staff_id=int(staff_id),
        )
        return catalog_order(shifts)
