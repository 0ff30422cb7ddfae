from datetime import date, datetime, time
from decimal import Decimal

import pytest

from workforce_engine.attendance.projections import manager_view, staff_view, view_for
from workforce_engine.core.enums import AttendanceStatus, Role
from workforce_engine.core.exceptions import ValidationError

from tests.fakes import TENANT, make_world, one_time_shift, recurring_shift

MONDAY = date(2026, 2, 2)
TUESDAY = date(2026, 2, 3)


@pytest.fixture
def world():
    w = make_world(now=datetime(2026, 2, 3, 12, 0))
    w.staff.add(1)
    w.staff.add(2)
    w.s1 = recurring_shift(w, staff_id=1, day_of_week=1)
    w.s2 = recurring_shift(w, staff_id=2, day_of_week=1, start=time(10, 0), end=time(18, 0))
    return w


def test_daily_view_derives_absences(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.s1.shift_id, now=datetime(2026, 2, 2, 9, 30))

    view = world.ledger.daily_view(tenant_id=TENANT, work_date=MONDAY)

    assert [r.shift_id for r in view.attendance] == [world.s1.shift_id]
    assert view.scheduled_shifts == [world.s1, world.s2]
    assert view.absences == [world.s2]
    assert view.summary["late"] == 1
    assert view.summary["absent"] == 1


def test_absent_is_never_stored(world):
    world.ledger.daily_view(tenant_id=TENANT, work_date=MONDAY)

    assert world.attendance.all() == []


def test_live_roster_lists_open_rows_with_hours_so_far(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.s1.shift_id, now=datetime(2026, 2, 2, 9, 0))
    world.ledger.check_in(tenant_id=TENANT, staff_id=2, shift_id=world.s2.shift_id, now=datetime(2026, 2, 2, 10, 0))
    world.ledger.check_out(tenant_id=TENANT, staff_id=2, shift_id=world.s2.shift_id, now=datetime(2026, 2, 2, 11, 0))

    roster = world.ledger.live_roster(tenant_id=TENANT, now=datetime(2026, 2, 2, 11, 30))

    assert [e.record.staff_id for e in roster] == [1]
    assert roster[0].hours_worked_so_far == Decimal("2.50")


def test_report_summarises_per_staff_and_counts_past_absences(world):
    world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.s1.shift_id, now=datetime(2026, 2, 2, 9, 0))
    world.ledger.check_out(tenant_id=TENANT, staff_id=1, shift_id=world.s1.shift_id, now=datetime(2026, 2, 2, 17, 0))

    report = world.ledger.report(tenant_id=TENANT, start_date=date(2026, 2, 1), end_date=date(2026, 2, 14))

    by_staff = {s.staff_id: s for s in report.summary}
    assert by_staff[1].days_present == 1
    assert by_staff[1].total_hours == Decimal("8.00")
    assert by_staff[1].absent == 0
    # Monday 2 Feb missed; Monday 9 Feb is after today so not yet absent.
    assert by_staff[2].absent == 1
    assert report.totals.on_time == 1
    assert report.totals.absent == 1


def test_report_for_one_staff_member(world):
    report = world.ledger.report(tenant_id=TENANT, start_date=MONDAY, end_date=TUESDAY, staff_id=1)

    assert [s.staff_id for s in report.summary] == [1]
    assert report.summary[0].absent == 1


def test_report_rejects_inverted_range(world):
    with pytest.raises(ValidationError):
        world.ledger.report(tenant_id=TENANT, start_date=TUESDAY, end_date=MONDAY)


def test_staff_status_shows_today_and_week_ahead(world):
    cover = one_time_shift(world, staff_id=1, on=date(2026, 2, 5))
    one_time_shift(world, staff_id=1, on=date(2026, 3, 5))

    status = world.ledger.staff_status(tenant_id=TENANT, staff_id=1)

    assert status.today == []
    assert status.upcoming_shifts == [world.s1, cover]


def test_projections_hide_classification_from_staff(world):
    rec = world.ledger.check_in(tenant_id=TENANT, staff_id=1, shift_id=world.s1.shift_id, now=datetime(2026, 2, 2, 9, 30))

    mine = staff_view(rec)
    full = manager_view(rec)

    assert "status" not in mine
    assert "minutes_late" not in mine
    assert full["status"] == AttendanceStatus.LATE.value
    assert full["minutes_late"] == 15
    assert view_for(Role.STAFF, rec) == mine
    assert view_for(Role.ADMIN, rec) == full
