from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceLedger
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveLedger
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollAggregator
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.service import ShiftCatalog
from .staff.mysql_staff_repository import MySQLStaffRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: Callable[[], datetime]

    staff_repo: MySQLStaffRepository
    shifts_repo: MySQLShiftRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRepository
    payroll_repo: MySQLPayrollRepository

    shift_catalog: ShiftCatalog
    attendance_ledger: AttendanceLedger
    leave_ledger: LeaveLedger
    payroll_aggregator: PayrollAggregator


def build_container(
    *,
    db_config: dict,
    grace_minutes: int = DEFAULT_GRACE_MINUTES,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    staff_repo = MySQLStaffRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    shift_catalog = ShiftCatalog(shifts_repo, staff_repo, attendance_repo, conn)
    attendance_ledger = AttendanceLedger(
        attendance_repo,
        shift_catalog,
        conn,
        strategy_factory=AttendanceStrategyFactory(),
        grace_minutes=grace_minutes,
        clock=clock,
    )
    leave_ledger = LeaveLedger(leave_repo, staff_repo, attendance_repo, shift_catalog, conn, clock=clock)
    payroll_aggregator = PayrollAggregator(payroll_repo, staff_repo, attendance_repo, conn, clock=clock)

    return Container(
        conn=conn,
        clock=clock,
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payroll_repo=payroll_repo,
        shift_catalog=shift_catalog,
        attendance_ledger=attendance_ledger,
        leave_ledger=leave_ledger,
        payroll_aggregator=payroll_aggregator,
    )
