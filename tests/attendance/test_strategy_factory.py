from datetime import datetime

from workforce_engine.attendance.factory import AttendanceStrategyFactory
from workforce_engine.attendance.strategies.early_departure_strategy import EarlyDepartureStrategy
from workforce_engine.attendance.strategies.late_strategy import LateStrategy
from workforce_engine.attendance.strategies.normal_strategy import NormalStrategy
from workforce_engine.core.enums import AttendanceStatus

START = datetime(2026, 2, 2, 9, 0, 0)
END = datetime(2026, 2, 2, 17, 0, 0)


def test_factory_checkin_on_time_within_grace():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=datetime(2026, 2, 2, 9, 14, 59), scheduled_start=START, grace_minutes=15)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_exactly_at_grace_boundary_is_on_time():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=datetime(2026, 2, 2, 9, 15, 0), scheduled_start=START, grace_minutes=15)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_after_grace():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=datetime(2026, 2, 2, 9, 15, 1), scheduled_start=START, grace_minutes=15)

    assert isinstance(strategy, LateStrategy)


def test_late_strategy_counts_minutes_past_grace():
    now = datetime(2026, 2, 2, 9, 20, 0)
    decision = LateStrategy().decide_checkin(now=now, scheduled_start=START, grace_minutes=15)

    assert decision.status == AttendanceStatus.LATE
    assert decision.minutes_late == 5


def test_late_strategy_reports_at_least_one_minute():
    now = datetime(2026, 2, 2, 9, 15, 30)
    decision = LateStrategy().decide_checkin(now=now, scheduled_start=START, grace_minutes=15)

    assert decision.minutes_late == 1


def test_factory_checkout_early_only_when_on_time():
    factory = AttendanceStrategyFactory()
    early = datetime(2026, 2, 2, 16, 0, 0)

    assert isinstance(
        factory.for_checkout(now=early, scheduled_end=END, current_status=AttendanceStatus.ON_TIME),
        EarlyDepartureStrategy,
    )
    assert isinstance(
        factory.for_checkout(now=early, scheduled_end=END, current_status=AttendanceStatus.LATE),
        NormalStrategy,
    )


def test_factory_checkout_at_or_after_end_keeps_status():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkout(now=END, scheduled_end=END, current_status=AttendanceStatus.ON_TIME)

    decision = strategy.decide_checkout(now=END, scheduled_end=END, current=AttendanceStatus.ON_TIME)
    assert decision.status == AttendanceStatus.ON_TIME


def test_early_departure_strategy_is_neutral_on_checkin():
    decision = EarlyDepartureStrategy().decide_checkin(now=START, scheduled_start=START, grace_minutes=15)

    assert decision.status == AttendanceStatus.ON_TIME
    assert decision.minutes_late is None
