from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.enums import CompensationModel
from ..database.connection import DatabaseConnection, Transaction
from ..database.mysql_base import db_cursor, fetchone, lock_clause
from .model import Staff
from .repository import StaffRepository


def _to_decimal(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        tx: Optional[Transaction] = None,
        for_update: bool = False,
    ) -> Optional[Staff]:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, tenant_id, full_name, compensation_model,
                       hourly_rate, fixed_salary, leave_days_total, leave_days_used
                FROM staff
                WHERE tenant_id=%s AND staff_id=%s
                """
                + lock_clause(for_update),
                (int(tenant_id), int(staff_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Staff(
                staff_id=int(r["staff_id"]),
                tenant_id=int(r["tenant_id"]),
                full_name=r["full_name"],
                compensation_model=CompensationModel(r["compensation_model"]),
                hourly_rate=_to_decimal(r.get("hourly_rate")),
                fixed_salary=_to_decimal(r.get("fixed_salary")),
                leave_days_total=int(r["leave_days_total"]),
                leave_days_used=int(r["leave_days_used"]),
            )

    def add_leave_days_used(self, *, tenant_id: int, staff_id: int, days: int, tx: Transaction) -> bool:
        with db_cursor(self._conn_factory, tx=tx) as (_, cur):
            cur.execute(
                """
                UPDATE staff
                SET leave_days_used = leave_days_used + %s
                WHERE tenant_id=%s AND staff_id=%s
                  AND leave_days_used + %s <= leave_days_total
                """,
                (int(days), int(tenant_id), int(staff_id), int(days)),
            )
            return cur.rowcount > 0
