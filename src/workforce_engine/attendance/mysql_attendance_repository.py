from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection, Transaction
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, tenant_id, staff_id, shift_id, work_date,
    scheduled_start, scheduled_end, actual_check_in, actual_check_out,
    status, minutes_late, total_hours
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        tenant_id=int(r["tenant_id"]),
        staff_id=int(r["staff_id"]),
        shift_id=int(r["shift_id"]),
        work_date=r["work_date"],
        scheduled_start=r["scheduled_start"],
        scheduled_end=r["scheduled_end"],
        status=AttendanceStatus(r["status"]),
        actual_check_in=r.get("actual_check_in"),
        actual_check_out=r.get("actual_check_out"),
        minutes_late=int(r["minutes_late"]) if r.get("minutes_late") is not None else None,
        total_hours=Decimal(str(r["total_hours"])) if r.get("total_hours") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_shift_and_date(
        self,
        *,
        tenant_id: int,
        shift_id: int,
        work_date: date,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE tenant_id=%s AND shift_id=%s AND work_date=%s
                """
                + lock_clause(for_update),
                (int(tenant_id), int(shift_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

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
        # A concurrent insert for the same (shift_id, work_date) trips the
        # unique index; translate_errors turns that into ConflictError.
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    tenant_id, staff_id, shift_id, work_date,
                    scheduled_start, scheduled_end, actual_check_in, status, minutes_late
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(staff_id),
                    int(shift_id),
                    work_date,
                    scheduled_start,
                    scheduled_end,
                    actual_check_in,
                    status.value,
                    minutes_late,
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET actual_check_in=%s, status=%s, minutes_late=%s,
                    scheduled_start=%s, scheduled_end=%s
                WHERE attendance_id=%s AND actual_check_in IS NULL
                """,
                (check_in_time, status.value, minutes_late, scheduled_start, scheduled_end, int(attendance_id)),
            )
            return cur.rowcount > 0

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        total_hours: Decimal,
        status: AttendanceStatus,
        tx: Transaction,
    ) -> bool:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET actual_check_out=%s, total_hours=%s, status=%s
                WHERE attendance_id=%s
                  AND actual_check_in IS NOT NULL
                  AND actual_check_out IS NULL
                """,
                (check_out_time, total_hours, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    tenant_id, staff_id, shift_id, work_date,
                    scheduled_start, scheduled_end, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (
                    int(tenant_id),
                    int(staff_id),
                    int(shift_id),
                    work_date,
                    scheduled_start,
                    scheduled_end,
                    AttendanceStatus.APPROVED_PTO.value,
                ),
            )

    def delete_for_shift(self, *, tenant_id: int, shift_id: int, tx: Transaction) -> int:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                "DELETE FROM attendance WHERE tenant_id=%s AND shift_id=%s",
                (int(tenant_id), int(shift_id)),
            )
            return int(cur.rowcount)

    def list_range(
        self,
        *,
        tenant_id: int,
        start_date: date,
        end_date: date,
        staff_id: Optional[int] = None,
        completed_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["tenant_id=%s", "work_date BETWEEN %s AND %s"]
        params: list[object] = [int(tenant_id), start_date, end_date]

        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if completed_only:
            clauses.append("actual_check_out IS NOT NULL")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {where}
                ORDER BY work_date ASC, scheduled_start ASC, attendance_id ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_open(self, *, tenant_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE tenant_id=%s AND work_date=%s
                  AND actual_check_in IS NOT NULL
                  AND actual_check_out IS NULL
                ORDER BY actual_check_in ASC
                """,
                (int(tenant_id), work_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
