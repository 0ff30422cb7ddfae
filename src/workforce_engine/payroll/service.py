from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import money, now_local
from ..common.validators import optional_text, require_date_range
from ..core.enums import PayrollStatus
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..database.connection import TransactionManager
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from .calculator.base import PayrollCalculator
from .calculator.factory import calculator_for
from .model import PayrollCalculation, PayrollEntry, PayrollRun
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _amount(value, field_name: str) -> Decimal:
    try:
        amount = money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def _coerce_status(value) -> PayrollStatus:
    try:
        return PayrollStatus(value)
    except ValueError:
        raise ValidationError("status must be PENDING or PAID")


class PayrollAggregator:
    def __init__(
        self,
        runs: PayrollRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        transactions: TransactionManager,
        *,
        calculator_factory: Callable[..., PayrollCalculator] = calculator_for,
        clock: Callable[[], datetime] = now_local,
    ):
        self._runs = runs
        self._staff = staff
        self._attendance = attendance
        self._transactions = transactions
        self._calculator_for = calculator_factory
        self._clock = clock

    def _require_staff(self, tenant_id: int, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(tenant_id=tenant_id, staff_id=int(staff_id))
        if not staff:
            raise NotFoundError("Staff member not found")
        return staff

    def calculate(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        period_start: date,
        period_end: date,
        deductions=0,
    ) -> PayrollCalculation:
        """Gross and net pay from completed shifts in the period. Writes nothing."""

        require_date_range(period_start, period_end)
        deductions = _amount(deductions, "deductions")
        staff = self._require_staff(tenant_id, staff_id)

        rows = self._attendance.list_range(
            tenant_id=tenant_id,
            start_date=period_start,
            end_date=period_end,
            staff_id=staff.staff_id,
            completed_only=True,
        )
        entries = [
            PayrollEntry(work_date=r.work_date, shift_id=r.shift_id, hours=r.total_hours or Decimal("0.00"), status=r.status)
            for r in rows
        ]
        total_hours = money(sum((e.hours for e in entries), Decimal("0")))

        gross = self._calculator_for(staff.compensation_model).gross_pay(staff, total_hours)
        return PayrollCalculation(
            staff_id=staff.staff_id,
            compensation_model=staff.compensation_model,
            period_start=period_start,
            period_end=period_end,
            days_worked=len(entries),
            total_hours=total_hours,
            gross_pay=gross,
            deductions=deductions,
            net_pay=money(gross - deductions),
            entries=entries,
        )

    def create_run(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        period_start: date,
        period_end: date,
        hours_worked,
        gross_pay,
        deductions,
        net_pay,
        notes: Optional[str] = None,
    ) -> PayrollRun:
        require_date_range(period_start, period_end)
        if gross_pay is None or net_pay is None:
            raise ValidationError("gross_pay and net_pay are required")
        staff = self._require_staff(tenant_id, staff_id)

        hours = _amount(hours_worked, "hours_worked")
        gross = _amount(gross_pay, "gross_pay")
        deducted = _amount(deductions, "deductions")
        # Net pay may legitimately go below zero when deductions exceed gross.
        try:
            net = money(net_pay)
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError("net_pay must be a number")
        notes = optional_text(notes)
        created_at = self._clock()

        run_id = self._runs.create(
            tenant_id=tenant_id,
            staff_id=staff.staff_id,
            period_start=period_start,
            period_end=period_end,
            hours_worked=hours,
            gross_pay=gross,
            deductions=deducted,
            net_pay=net,
            notes=notes,
            created_at=created_at,
        )
        logger.info("Created payroll run %s for staff %s (%s..%s)", run_id, staff_id, period_start, period_end)
        return PayrollRun(
            run_id=run_id,
            tenant_id=int(tenant_id),
            staff_id=staff.staff_id,
            period_start=period_start,
            period_end=period_end,
            hours_worked=hours,
            gross_pay=gross,
            deductions=deducted,
            net_pay=net,
            status=PayrollStatus.PENDING,
            created_at=created_at,
            notes=notes,
        )

    def get_run(self, *, tenant_id: int, run_id: int) -> PayrollRun:
        run = self._runs.get_by_id(tenant_id=tenant_id, run_id=int(run_id))
        if not run:
            raise NotFoundError("Payroll run not found")
        return run

    def update_run_status(
        self,
        *,
        tenant_id: int,
        run_id: int,
        status: PayrollStatus | str,
        paid_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> PayrollRun:
        """The only legal transition is PENDING -> PAID; a PAID run never changes again."""

        target = _coerce_status(status)
        notes = optional_text(notes)

        with self._transactions.transaction() as tx:
            run = self._runs.get_by_id(tenant_id=tenant_id, run_id=int(run_id), tx=tx, for_update=True)
            if not run:
                raise NotFoundError("Payroll run not found")
            if run.is_paid or target != PayrollStatus.PAID:
                logger.warning("Rejected payroll run %s transition %s -> %s", run_id, run.status.value, target.value)
                raise InvalidStateError(f"Cannot move a {run.status.value} payroll run to {target.value}")

            paid_at = paid_at or self._clock()
            if not self._runs.mark_paid(run_id=run.run_id, paid_at=paid_at, notes=notes, tx=tx):
                raise InvalidStateError("Payroll run is no longer pending")

        logger.info("Payroll run %s marked PAID", run_id)
        return PayrollRun(
            run_id=run.run_id,
            tenant_id=run.tenant_id,
            staff_id=run.staff_id,
            period_start=run.period_start,
            period_end=run.period_end,
            hours_worked=run.hours_worked,
            gross_pay=run.gross_pay,
            deductions=run.deductions,
            net_pay=run.net_pay,
            status=PayrollStatus.PAID,
            created_at=run.created_at,
            paid_at=paid_at,
            notes=notes if notes is not None else run.notes,
        )

    def delete_run(self, *, tenant_id: int, run_id: int) -> None:
        with self._transactions.transaction() as tx:
            run = self._runs.get_by_id(tenant_id=tenant_id, run_id=int(run_id), tx=tx, for_update=True)
            if not run:
                raise NotFoundError("Payroll run not found")
            if run.is_paid:
                logger.warning("Rejected delete of paid payroll run %s", run_id)
                raise InvalidStateError("Cannot delete a paid payroll run")
            if not self._runs.delete_pending(tenant_id=tenant_id, run_id=run.run_id, tx=tx):
                raise InvalidStateError("Payroll run is no longer pending")

        logger.info("Deleted payroll run %s (tenant %s)", run_id, tenant_id)

    def list_runs(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: PayrollStatus | str | None = None,
    ) -> list[PayrollRun]:
        status = _coerce_status(status) if status is not None else None
        return list(self._runs.list(tenant_id=tenant_id, staff_id=staff_id, status=status))
