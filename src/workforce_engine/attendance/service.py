from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import hours_between, iter_dates, now_local
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_GRACE_MINUTES
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import TransactionManager
from ..shifts.resolver import resolve_shifts
from ..shifts.service import ShiftCatalog
from .factory import AttendanceStrategyFactory
from .model import (
    AttendanceRecord,
    AttendanceReport,
    AttendanceSummary,
    DailyView,
    LiveRosterEntry,
    StaffStatus,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Check-in/check-out capture and the read views built on top of it.

    Per (shift, date) the status moves ``none -> ON_TIME|LATE`` on check-in and
    ``ON_TIME -> EARLY_DEPARTURE`` on an early check-out. LATE is never
    downgraded. ABSENT is never written; views derive it from the shift catalog.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        catalog: ShiftCatalog,
        transactions: TransactionManager,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        grace_minutes: int = DEFAULT_GRACE_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._catalog = catalog
        self._transactions = transactions
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace_minutes = int(grace_minutes)
        self._clock = clock

    def check_in(self, *, tenant_id: int, staff_id: int, shift_id: int, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        shift = self._catalog.get_shift(tenant_id=tenant_id, shift_id=shift_id)
        if shift.staff_id != int(staff_id):
            raise NotFoundError("Shift not found")

        scheduled_start = shift.scheduled_start_on(today)
        scheduled_end = shift.scheduled_end_on(today)
        strategy = self._factory.for_checkin(now=now, scheduled_start=scheduled_start, grace_minutes=self._grace_minutes)
        decision = strategy.decide_checkin(now=now, scheduled_start=scheduled_start, grace_minutes=self._grace_minutes)

        try:
            with self._transactions.transaction() as tx:
                existing = self._attendance.get_for_shift_and_date(
                    tenant_id=tenant_id, shift_id=shift.shift_id, work_date=today, tx=tx, for_update=True
                )
                if existing and existing.actual_check_in is not None:
                    raise ConflictError("Already checked in for this shift today")

                if existing:
                    # Row created ahead of time (e.g. by leave approval) without a check-in.
                    if not self._attendance.record_check_in(
                        attendance_id=existing.attendance_id,
                        check_in_time=now,
                        status=decision.status,
                        minutes_late=decision.minutes_late,
                        scheduled_start=scheduled_start,
                        scheduled_end=scheduled_end,
                        tx=tx,
                    ):
                        raise ConflictError("Already checked in for this shift today")
                    attendance_id = existing.attendance_id
                else:
                    attendance_id = self._attendance.create(
                        tenant_id=tenant_id,
                        staff_id=shift.staff_id,
                        shift_id=shift.shift_id,
                        work_date=today,
                        scheduled_start=scheduled_start,
                        scheduled_end=scheduled_end,
                        status=decision.status,
                        actual_check_in=now,
                        minutes_late=decision.minutes_late,
                        tx=tx,
                    )
        except ConflictError:
            logger.warning("Duplicate check-in for shift %s on %s (tenant %s)", shift_id, today, tenant_id)
            raise

        logger.info("Staff %s checked in to shift %s: %s", staff_id, shift_id, decision.status.value)
        return AttendanceRecord(
            attendance_id=attendance_id,
            tenant_id=int(tenant_id),
            staff_id=shift.staff_id,
            shift_id=shift.shift_id,
            work_date=today,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            status=decision.status,
            actual_check_in=now,
            minutes_late=decision.minutes_late,
        )

    def check_out(self, *, tenant_id: int, staff_id: int, shift_id: int, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        with self._transactions.transaction() as tx:
            record = self._attendance.get_for_shift_and_date(
                tenant_id=tenant_id, shift_id=shift_id, work_date=today, tx=tx, for_update=True
            )
            if not record or record.staff_id != int(staff_id) or record.actual_check_in is None:
                raise NotFoundError("No check-in found for this shift today")
            if record.actual_check_out is not None:
                logger.warning("Duplicate check-out for shift %s on %s (tenant %s)", shift_id, today, tenant_id)
                raise ConflictError("Already checked out")

            total_hours = hours_between(record.actual_check_in, now)
            strategy = self._factory.for_checkout(now=now, scheduled_end=record.scheduled_end, current_status=record.status)
            decision = strategy.decide_checkout(now=now, scheduled_end=record.scheduled_end, current=record.status)

            if not self._attendance.record_check_out(
                attendance_id=record.attendance_id,
                check_out_time=now,
                total_hours=total_hours,
                status=decision.status,
                tx=tx,
            ):
                raise ConflictError("Already checked out")

        logger.info("Staff %s checked out of shift %s after %s h: %s", staff_id, shift_id, total_hours, decision.status.value)
        return AttendanceRecord(
            attendance_id=record.attendance_id,
            tenant_id=record.tenant_id,
            staff_id=record.staff_id,
            shift_id=record.shift_id,
            work_date=record.work_date,
            scheduled_start=record.scheduled_start,
            scheduled_end=record.scheduled_end,
            status=decision.status,
            actual_check_in=record.actual_check_in,
            actual_check_out=now,
            minutes_late=record.minutes_late,
            total_hours=total_hours,
        )

    def live_roster(self, *, tenant_id: int, now: datetime | None = None) -> list[LiveRosterEntry]:
        """Who is on the clock right now; hours so far are computed on read."""

        now = now or self._clock()
        rows = self._attendance.list_open(tenant_id=tenant_id, work_date=now.date())
        return [LiveRosterEntry(record=r, hours_worked_so_far=hours_between(r.actual_check_in, now)) for r in rows]

    def daily_view(self, *, tenant_id: int, work_date: date) -> DailyView:
        attendance = list(self._attendance.list_range(tenant_id=tenant_id, start_date=work_date, end_date=work_date))
        scheduled = self._catalog.resolve_shifts_for_date(tenant_id=tenant_id, work_date=work_date)

        recorded = {r.shift_id for r in attendance}
        absences = [s for s in scheduled if s.shift_id not in recorded]
        return DailyView(work_date=work_date, attendance=attendance, scheduled_shifts=scheduled, absences=absences)

    def report(
        self,
        *,
        tenant_id: int,
        start_date: date,
        end_date: date,
        staff_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> AttendanceReport:
        require_date_range(start_date, end_date)
        today = today or self._clock().date()

        rows = list(
            self._attendance.list_range(tenant_id=tenant_id, start_date=start_date, end_date=end_date, staff_id=staff_id)
        )

        by_staff: dict[int, AttendanceSummary] = {}
        totals = AttendanceSummary(staff_id=None)
        for r in rows:
            by_staff.setdefault(r.staff_id, AttendanceSummary(staff_id=r.staff_id)).add(r)
            totals.add(r)

        # Absences: scheduled occurrences (up to today) with no row at all.
        recorded = {(r.shift_id, r.work_date) for r in rows}
        candidates = self._catalog.candidates_for_range(
            tenant_id=tenant_id, start=start_date, end=end_date, staff_id=staff_id
        )
        for day in iter_dates(start_date, min(end_date, today)):
            for shift in resolve_shifts(candidates, day):
                if (shift.shift_id, day) in recorded:
                    continue
                by_staff.setdefault(shift.staff_id, AttendanceSummary(staff_id=shift.staff_id)).absent += 1
                totals.absent += 1

        summary = [by_staff[k] for k in sorted(by_staff)]
        return AttendanceReport(start_date=start_date, end_date=end_date, rows=rows, summary=summary, totals=totals)

    def staff_status(self, *, tenant_id: int, staff_id: int, now: datetime | None = None) -> StaffStatus:
        now = now or self._clock()
        today = now.date()
        records = self._attendance.list_range(tenant_id=tenant_id, start_date=today, end_date=today, staff_id=staff_id)
        upcoming = self._catalog.upcoming_shifts(tenant_id=tenant_id, staff_id=staff_id, today=today)
        return StaffStatus(today=list(records), upcoming_shifts=upcoming)
