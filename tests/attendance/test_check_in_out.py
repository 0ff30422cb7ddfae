from datetime import date, datetime, time
from decimal import Decimal

import pytest

from workforce_engine.core.enums import AttendanceStatus
from workforce_engine.core.exceptions import ConflictError, NotFoundError

from tests.fakes import TENANT, make_world, one_time_shift, recurring_shift

MONDAY = date(2026, 2, 2)


@pytest.fixture
def world():
    w = make_world()
    w.staff.add(1)
    w.staff.add(2)
    w.shift = recurring_shift(w, staff_id=1, day_of_week=1, start=time(9, 0), end=time(17, 0))
    return w


def _at(hour, minute=0, second=0):
    return datetime(2026, 2, 2, hour, minute, second)


def test_check_in_after_grace_is_late(world):
    rec = world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 20))

    assert rec.status == AttendanceStatus.LATE
    assert rec.minutes_late == 5
    assert rec.scheduled_start == _at(9, 0)
    assert rec.scheduled_end == _at(17, 0)


def test_check_in_within_grace_is_on_time(world):
    rec = world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 14))

    assert rec.status == AttendanceStatus.ON_TIME
    assert rec.minutes_late is None


def test_check_in_uses_ledger_clock_by_default(world):
    world.clock.now = _at(8, 55)
    rec = world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id)

    assert rec.actual_check_in == _at(8, 55)
    assert rec.work_date == MONDAY


def test_second_check_in_conflicts_and_keeps_first_row(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 0))

    with pytest.raises(ConflictError):
        world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 30))

    rows = world.attendance.all()
    assert len(rows) == 1
    assert rows[0].actual_check_in == _at(9, 0)


def test_check_in_on_someone_elses_shift_is_not_found(world):
    with pytest.raises(NotFoundError):
        world.ledger.check_in(tenant_id=TENANT, staff_id=2, shift_id=world.shift.shift_id, now=_at(9, 0))


def test_check_in_unknown_shift_is_not_found(world):
    with pytest.raises(NotFoundError):
        world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=999, now=_at(9, 0))


def test_full_day_records_hours(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 0))
    rec = world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(17, 0))

    assert rec.total_hours == Decimal("8.00")
    assert rec.status == AttendanceStatus.ON_TIME
    assert world.attendance.all()[0].actual_check_out == _at(17, 0)


def test_early_check_out_after_on_time_arrival(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 0))
    rec = world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(15, 30))

    assert rec.status == AttendanceStatus.EARLY_DEPARTURE
    assert rec.total_hours == Decimal("6.50")


def test_late_arrival_stays_late_on_early_check_out(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 40))
    rec = world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(16, 0))

    assert rec.status == AttendanceStatus.LATE
    assert rec.minutes_late == 25


def test_check_out_without_check_in_is_not_found(world):
    with pytest.raises(NotFoundError):
        world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(17, 0))


def test_double_check_out_conflicts(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 0))
    world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(17, 0))

    with pytest.raises(ConflictError):
        world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(17, 5))


def test_check_out_by_other_staff_is_not_found(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 0))

    with pytest.raises(NotFoundError):
        world.ledger.check_out(tenant_id=TENANT, staff_id=2, shift_id=world.shift.shift_id, now=_at(17, 0))


def test_check_in_over_approved_pto_row_replaces_it(world):
    req = world.leave_ledger.submit_request(tenant_id=TENANT, staff_id=1, start_date=MONDAY, end_date=MONDAY)
    world.leave_ledger.approve(tenant_id=TENANT, request_id=req.request_id, approver_id=2)

    rec = world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.shift.shift_id, now=_at(9, 5))

    rows = world.attendance.all()
    assert len(rows) == 1
    assert rows[0].status == AttendanceStatus.ON_TIME
    assert rec.attendance_id == rows[0].attendance_id


def test_one_time_shift_anchors_to_its_own_date(world):
    cover = one_time_shift(world, staff_id=1, on=MONDAY, start=time(18, 0), end=time(22, 0))

    rec = world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=cover.shift_id, now=_at(18, 30))

    assert rec.status == AttendanceStatus.LATE
    assert rec.minutes_late == 15
