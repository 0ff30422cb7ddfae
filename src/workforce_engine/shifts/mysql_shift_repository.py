from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import Recurrence
from ..database.connection import DatabaseConnection, Transaction
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = """
    shift_id, tenant_id, staff_id, shift_name, start_time, end_time,
    recurrence, day_of_week, specific_date
"""


def _row_to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        tenant_id=int(r["tenant_id"]),
        staff_id=int(r["staff_id"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        recurrence=Recurrence(r["recurrence"]),
        day_of_week=int(r["day_of_week"]) if r.get("day_of_week") is not None else None,
        specific_date=r.get("specific_date"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        shift_name: str,
        start_time: time,
        end_time: time,
        recurrence: Recurrence,
        day_of_week: Optional[int],
        specific_date: Optional[date],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shifts(
                    tenant_id, staff_id, shift_name, start_time, end_time,
                    recurrence, day_of_week, specific_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(staff_id),
                    shift_name,
                    start_time,
                    end_time,
                    recurrence.value,
                    day_of_week,
                    specific_date,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, tenant_id: int, shift_id: int, tx: Optional[Transaction] = None) -> Optional[Shift]:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE tenant_id=%s AND shift_id=%s",
                (int(tenant_id), int(shift_id)),
            )
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def update(self, shift: Shift) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts
                SET staff_id=%s, shift_name=%s, start_time=%s, end_time=%s,
                    recurrence=%s, day_of_week=%s, specific_date=%s
                WHERE tenant_id=%s AND shift_id=%s
                """,
                (
                    shift.staff_id,
                    shift.shift_name,
                    shift.start_time,
                    shift.end_time,
                    shift.recurrence.value,
                    shift.day_of_week,
                    shift.specific_date,
                    shift.tenant_id,
                    shift.shift_id,
                ),
            )

    def delete(self, *, tenant_id: int, shift_id: int, tx: Transaction) -> bool:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute("DELETE FROM shifts WHERE tenant_id=%s AND shift_id=%s", (int(tenant_id), int(shift_id)))
            return cur.rowcount > 0

    def list_all(self, *, tenant_id: int, staff_id: Optional[int] = None) -> Sequence[Shift]:
        clauses = ["tenant_id=%s"]
        params: list[object] = [int(tenant_id)]
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE {' AND '.join(clauses)} ORDER BY shift_id",
                tuple(params),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def list_candidates(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        staff_id: Optional[int] = None,
        tx: Optional[Transaction] = None,
    ) -> Sequence[Shift]:
        clauses = [
            "tenant_id=%s",
            "(recurrence=%s OR (recurrence=%s AND specific_date BETWEEN %s AND %s))",
        ]
        params: list[object] = [
            int(tenant_id),
            Recurrence.RECURRING.value,
            Recurrence.ONE_TIME.value,
            start,
            end,
        ]
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))

        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE {' AND '.join(clauses)} ORDER BY shift_id",
                tuple(params),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]
