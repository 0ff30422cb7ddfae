"""In-memory stand-ins for the MySQL repositories and the transaction port."""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

from workforce_engine.attendance.model import AttendanceRecord
from workforce_engine.attendance.service import AttendanceLedger
from workforce_engine.core.enums import AttendanceStatus, CompensationModel, PayrollStatus, PTOStatus, Recurrence
from workforce_engine.core.exceptions import ConflictError
from workforce_engine.database.connection import Transaction
from workforce_engine.leave.model import PTORequest
from workforce_engine.leave.service import LeaveLedger
from workforce_engine.payroll.model import PayrollRun
from workforce_engine.payroll.service import PayrollAggregator
from workforce_engine.shifts.model import Shift
from workforce_engine.shifts.service import ShiftCatalog
from workforce_engine.staff.model import Staff

TENANT = 1


class FakeTransactions:
    """Snapshots the registered stores on enter, restores them if the block raises."""

    def __init__(self, *stores):
        self._stores = list(stores)
        self.committed = 0
        self.rolled_back = 0

    @contextmanager
    def transaction(self):
        snapshots = [copy.deepcopy(s.__dict__) for s in self._stores]
        try:
            yield Transaction(conn=None, cur=None)
        except Exception:
            for store, snap in zip(self._stores, snapshots):
                store.__dict__.clear()
                store.__dict__.update(snap)
            self.rolled_back += 1
            raise
        self.committed += 1


class InMemoryStaff:
    def __init__(self):
        self._by_id: dict[int, Staff] = {}

    def add(
        self,
        staff_id: int,
        *,
        tenant_id: int = TENANT,
        model: CompensationModel = CompensationModel.HOURLY,
        hourly_rate: Optional[str] = "10.00",
        fixed_salary: Optional[str] = None,
        leave_total: int = 10,
        leave_used: int = 0,
    ) -> Staff:
        staff = Staff(
            staff_id=staff_id,
            tenant_id=tenant_id,
            full_name=f"Staff {staff_id}",
            compensation_model=model,
            hourly_rate=Decimal(hourly_rate) if hourly_rate is not None else None,
            fixed_salary=Decimal(fixed_salary) if fixed_salary is not None else None,
            leave_days_total=leave_total,
            leave_days_used=leave_used,
        )
        self._by_id[staff_id] = staff
        return staff

    def get_by_id(self, *, tenant_id, staff_id, tx=None, for_update=False) -> Optional[Staff]:
        staff = self._by_id.get(int(staff_id))
        if not staff or staff.tenant_id != int(tenant_id):
            return None
        return staff

    def add_leave_days_used(self, *, tenant_id, staff_id, days, tx) -> bool:
        staff = self.get_by_id(tenant_id=tenant_id, staff_id=staff_id)
        if not staff or staff.leave_days_used + days > staff.leave_days_total:
            return False
        self._by_id[staff.staff_id] = replace(staff, leave_days_used=staff.leave_days_used + days)
        return True


class InMemoryShifts:
    def __init__(self):
        self._by_id: dict[int, Shift] = {}
        self._next_id = 1

    def create(self, *, tenant_id, staff_id, shift_name, start_time, end_time, recurrence, day_of_week, specific_date, tx=None) -> int:
        shift_id = self._next_id
        self._next_id += 1
        self._by_id[shift_id] = Shift(
            shift_id=shift_id,
            tenant_id=tenant_id,
            staff_id=staff_id,
            shift_name=shift_name,
            start_time=start_time,
            end_time=end_time,
            recurrence=Recurrence(recurrence),
            day_of_week=day_of_week,
            specific_date=specific_date,
        )
        return shift_id

    def get_by_id(self, *, tenant_id, shift_id, tx=None) -> Optional[Shift]:
        shift = self._by_id.get(int(shift_id))
        if not shift or shift.tenant_id != int(tenant_id):
            return None
        return shift

    def update(self, shift: Shift, *, tx=None) -> None:
        self._by_id[shift.shift_id] = shift

    def delete(self, *, tenant_id, shift_id, tx) -> bool:
        if not self.get_by_id(tenant_id=tenant_id, shift_id=shift_id):
            return False
        del self._by_id[int(shift_id)]
        return True

    def list_all(self, *, tenant_id, staff_id=None):
        return [
            s
            for s in self._by_id.values()
            if s.tenant_id == tenant_id and (staff_id is None or s.staff_id == staff_id)
        ]

    def list_candidates(self, *, tenant_id, start, end, staff_id=None, tx=None):
        return [
            s
            for s in self.list_all(tenant_id=tenant_id, staff_id=staff_id)
            if s.is_recurring or (s.specific_date is not None and start <= s.specific_date <= end)
        ]


class InMemoryAttendance:
    def __init__(self):
        self._by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 1

    def get_for_shift_and_date(self, *, tenant_id, shift_id, work_date, tx=None, for_update=False):
        rec = self._by_key.get((int(shift_id), work_date))
        if not rec or rec.tenant_id != int(tenant_id):
            return None
        return rec

    def create(
        self,
        *,
        tenant_id,
        staff_id,
        shift_id,
        work_date,
        scheduled_start,
        scheduled_end,
        status,
        actual_check_in=None,
        minutes_late=None,
        tx,
    ) -> int:
        if (shift_id, work_date) in self._by_key:
            raise ConflictError("Record already exists")
        attendance_id = self._next_id
        self._next_id += 1
        self._by_key[(shift_id, work_date)] = AttendanceRecord(
            attendance_id=attendance_id,
            tenant_id=tenant_id,
            staff_id=staff_id,
            shift_id=shift_id,
            work_date=work_date,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            status=status,
            actual_check_in=actual_check_in,
            minutes_late=minutes_late,
        )
        return attendance_id

    def _find(self, attendance_id: int):
        for key, rec in self._by_key.items():
            if rec.attendance_id == attendance_id:
                return key, rec
        return None, None

    def record_check_in(self, *, attendance_id, check_in_time, status, minutes_late, scheduled_start, scheduled_end, tx) -> bool:
        key, rec = self._find(attendance_id)
        if not rec or rec.actual_check_in is not None:
            return False
        self._by_key[key] = replace(
            rec,
            actual_check_in=check_in_time,
            status=status,
            minutes_late=minutes_late,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
        )
        return True

    def record_check_out(self, *, attendance_id, check_out_time, total_hours, status, tx) -> bool:
        key, rec = self._find(attendance_id)
        if not rec or rec.actual_check_in is None or rec.actual_check_out is not None:
            return False
        self._by_key[key] = replace(rec, actual_check_out=check_out_time, total_hours=total_hours, status=status)
        return True

    def mark_approved_pto(self, *, tenant_id, staff_id, shift_id, work_date, scheduled_start, scheduled_end, tx) -> None:
        rec = self._by_key.get((shift_id, work_date))
        if rec:
            self._by_key[(shift_id, work_date)] = replace(rec, status=AttendanceStatus.APPROVED_PTO)
            return
        self.create(
            tenant_id=tenant_id,
            staff_id=staff_id,
            shift_id=shift_id,
            work_date=work_date,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            status=AttendanceStatus.APPROVED_PTO,
            tx=tx,
        )

    def delete_for_shift(self, *, tenant_id, shift_id, tx) -> int:
        keys = [k for k, r in self._by_key.items() if r.shift_id == shift_id and r.tenant_id == tenant_id]
        for k in keys:
            del self._by_key[k]
        return len(keys)

    def list_range(self, *, tenant_id, start_date, end_date, staff_id=None, completed_only=False):
        rows = [
            r
            for r in self._by_key.values()
            if r.tenant_id == tenant_id
            and start_date <= r.work_date <= end_date
            and (staff_id is None or r.staff_id == staff_id)
            and (not completed_only or r.actual_check_out is not None)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.scheduled_start, r.attendance_id))

    def list_open(self, *, tenant_id, work_date):
        rows = [r for r in self._by_key.values() if r.tenant_id == tenant_id and r.work_date == work_date and r.is_open]
        return sorted(rows, key=lambda r: r.actual_check_in)

    def all(self) -> list[AttendanceRecord]:
        return sorted(self._by_key.values(), key=lambda r: (r.work_date, r.shift_id))


class InMemoryLeave:
    def __init__(self):
        self._by_id: dict[int, PTORequest] = {}
        self._next_id = 1

    def create(self, *, tenant_id, staff_id, start_date, end_date, days_requested, reason, created_at) -> int:
        request_id = self._next_id
        self._next_id += 1
        self._by_id[request_id] = PTORequest(
            request_id=request_id,
            tenant_id=tenant_id,
            staff_id=staff_id,
            start_date=start_date,
            end_date=end_date,
            days_requested=days_requested,
            status=PTOStatus.PENDING,
            created_at=created_at,
            reason=reason,
        )
        return request_id

    def get_by_id(self, *, tenant_id, request_id, tx=None, for_update=False):
        req = self._by_id.get(int(request_id))
        if not req or req.tenant_id != int(tenant_id):
            return None
        return req

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, review_note, tx) -> bool:
        req = self._by_id.get(int(request_id))
        if not req or req.status != PTOStatus.PENDING:
            return False
        self._by_id[req.request_id] = replace(
            req, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at, review_note=review_note
        )
        return True

    def list(self, *, tenant_id, staff_id=None, status=None, limit=200):
        rows = [
            r
            for r in self._by_id.values()
            if r.tenant_id == tenant_id
            and (staff_id is None or r.staff_id == staff_id)
            and (status is None or r.status == status)
        ]
        return sorted(rows, key=lambda r: r.request_id, reverse=True)[:limit]


class InMemoryPayroll:
    def __init__(self):
        self._by_id: dict[int, PayrollRun] = {}
        self._next_id = 1

    def create(self, *, tenant_id, staff_id, period_start, period_end, hours_worked, gross_pay, deductions, net_pay, notes, created_at) -> int:
        run_id = self._next_id
        self._next_id += 1
        self._by_id[run_id] = PayrollRun(
            run_id=run_id,
            tenant_id=tenant_id,
            staff_id=staff_id,
            period_start=period_start,
            period_end=period_end,
            hours_worked=hours_worked,
            gross_pay=gross_pay,
            deductions=deductions,
            net_pay=net_pay,
            status=PayrollStatus.PENDING,
            created_at=created_at,
            notes=notes,
        )
        return run_id

    def get_by_id(self, *, tenant_id, run_id, tx=None, for_update=False):
        run = self._by_id.get(int(run_id))
        if not run or run.tenant_id != int(tenant_id):
            return None
        return run

    def mark_paid(self, *, run_id, paid_at, notes, tx) -> bool:
        run = self._by_id.get(int(run_id))
        if not run or run.status != PayrollStatus.PENDING:
            return False
        self._by_id[run.run_id] = replace(
            run, status=PayrollStatus.PAID, paid_at=paid_at, notes=notes if notes is not None else run.notes
        )
        return True

    def delete_pending(self, *, tenant_id, run_id, tx) -> bool:
        run = self.get_by_id(tenant_id=tenant_id, run_id=run_id)
        if not run or run.status != PayrollStatus.PENDING:
            return False
        del self._by_id[run.run_id]
        return True

    def list(self, *, tenant_id, staff_id=None, status=None, limit=200):
        rows = [
            r
            for r in self._by_id.values()
            if r.tenant_id == tenant_id
            and (staff_id is None or r.staff_id == staff_id)
            and (status is None or r.status == status)
        ]
        return sorted(rows, key=lambda r: (r.period_end, r.run_id), reverse=True)[:limit]


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_world(now: datetime = datetime(2026, 2, 2, 8, 0, 0), grace_minutes: int = 15) -> SimpleNamespace:
    """Wire every service against fresh in-memory stores."""

    staff = InMemoryStaff()
    shifts = InMemoryShifts()
    attendance = InMemoryAttendance()
    leave = InMemoryLeave()
    payroll = InMemoryPayroll()
    tx = FakeTransactions(staff, shifts, attendance, leave, payroll)
    clock = FixedClock(now)

    catalog = ShiftCatalog(shifts, staff, attendance, tx)
    return SimpleNamespace(
        staff=staff,
        shifts=shifts,
        attendance=attendance,
        leave=leave,
        payroll=payroll,
        tx=tx,
        clock=clock,
        catalog=catalog,
        ledger=AttendanceLedger(attendance, catalog, tx, grace_minutes=grace_minutes, clock=clock),
        leave_ledger=LeaveLedger(leave, staff, attendance, catalog, tx, clock=clock),
        payroll_aggregator=PayrollAggregator(payroll, staff, attendance, tx, clock=clock),
    )


def recurring_shift(world, *, staff_id: int, day_of_week: int, start=time(9, 0), end=time(17, 0), name="Day") -> Shift:
    return world.catalog.create_shift(
        tenant_id=TENANT,
        staff_id=staff_id,
        shift_name=name,
        start_time=start,
        end_time=end,
        recurrence=Recurrence.RECURRING,
        day_of_week=day_of_week,
    )


def one_time_shift(world, *, staff_id: int, on: date, start=time(9, 0), end=time(17, 0), name="Cover") -> Shift:
    return world.catalog.create_shift(
        tenant_id=TENANT,
        staff_id=staff_id,
        shift_name=name,
        start_time=start,
        end_time=end,
        recurrence=Recurrence.ONE_TIME,
        specific_date=on,
    )
