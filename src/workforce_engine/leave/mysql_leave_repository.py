from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PTOStatus
from ..database.connection import DatabaseConnection, Transaction
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause
from .model import PTORequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, tenant_id, staff_id, start_date, end_date, days_requested,
    reason, status, created_at, reviewed_by, reviewed_at, review_note
"""


def _row_to_request(r: dict) -> PTORequest:
    return PTORequest(
        request_id=int(r["request_id"]),
        tenant_id=int(r["tenant_id"]),
        staff_id=int(r["staff_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days_requested=int(r["days_requested"]),
        status=PTOStatus(r["status"]),
        created_at=r["created_at"],
        reason=r.get("reason"),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        reviewed_at=r.get("reviewed_at"),
        review_note=r.get("review_note"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        start_date: date,
        end_date: date,
        days_requested: int,
        reason: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pto_requests(
                    tenant_id, staff_id, start_date, end_date, days_requested, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(staff_id),
                    start_date,
                    end_date,
                    int(days_requested),
                    reason,
                    PTOStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(
        self,
        *,
        tenant_id: int,
        request_id: int,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[PTORequest]:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM pto_requests
                WHERE tenant_id=%s AND request_id=%s
                """
                + lock_clause(for_update),
                (int(tenant_id), int(request_id)),
            )
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def decide(
        self,
        *,
        request_id: int,
        status: PTOStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_note: Optional[str],
        tx: Transaction,
    ) -> bool:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                UPDATE pto_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    review_note,
                    int(request_id),
                    PTOStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: Optional[PTOStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[PTORequest]:
        clauses = ["tenant_id=%s"]
        params: list[object] = [int(tenant_id)]

        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM pto_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]
