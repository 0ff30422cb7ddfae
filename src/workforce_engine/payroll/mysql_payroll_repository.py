from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection, Transaction
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_clause
from .model import PayrollRun
from .repository import PayrollRepository

_COLUMNS = """
    run_id, tenant_id, staff_id, period_start, period_end, hours_worked,
    gross_pay, deductions, net_pay, status, created_at, paid_at, notes
"""


def _dec(value) -> Decimal:
    return Decimal(str(value if value is not None else 0))


def _row_to_run(r: dict) -> PayrollRun:
    return PayrollRun(
        run_id=int(r["run_id"]),
        tenant_id=int(r["tenant_id"]),
        staff_id=int(r["staff_id"]),
        period_start=r["period_start"],
        period_end=r["period_end"],
        hours_worked=_dec(r["hours_worked"]),
        gross_pay=_dec(r["gross_pay"]),
        deductions=_dec(r["deductions"]),
        net_pay=_dec(r["net_pay"]),
        status=PayrollStatus(r["status"]),
        created_at=r["created_at"],
        paid_at=r.get("paid_at"),
        notes=r.get("notes"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        period_start: date,
        period_end: date,
        hours_worked: Decimal,
        gross_pay: Decimal,
        deductions: Decimal,
        net_pay: Decimal,
        notes: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_runs(
                    tenant_id, staff_id, period_start, period_end, hours_worked,
                    gross_pay, deductions, net_pay, status, notes, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(tenant_id),
                    int(staff_id),
                    period_start,
                    period_end,
                    hours_worked,
                    gross_pay,
                    deductions,
                    net_pay,
                    PayrollStatus.PENDING.value,
                    notes,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(
        self,
        *,
        tenant_id: int,
        run_id: int,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[PayrollRun]:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_runs
                WHERE tenant_id=%s AND run_id=%s
                """
                + lock_clause(for_update),
                (int(tenant_id), int(run_id)),
            )
            r = fetchone(cur)
            return _row_to_run(r) if r else None

    def mark_paid(self, *, run_id: int, paid_at: datetime, notes: Optional[str], tx: Transaction) -> bool:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_runs
                SET status=%s, paid_at=%s, notes=COALESCE(%s, notes)
                WHERE run_id=%s AND status=%s
                """,
                (PayrollStatus.PAID.value, paid_at, notes, int(run_id), PayrollStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_pending(self, *, tenant_id: int, run_id: int, tx: Transaction) -> bool:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                "DELETE FROM payroll_runs WHERE tenant_id=%s AND run_id=%s AND status=%s",
                (int(tenant_id), int(run_id), PayrollStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[PayrollRun]:
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
                FROM payroll_runs
                WHERE {where}
                ORDER BY period_end DESC, run_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_run(r) for r in fetchall(cur)]
