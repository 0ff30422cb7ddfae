from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import inclusive_days, iter_dates, now_local
from ..common.validators import optional_text, require_date_range
from ..core.enums import PTOStatus
from ..core.exceptions import InsufficientBalanceError, InvalidStateError, NotFoundError, ValidationError
from ..database.connection import Transaction, TransactionManager
from ..shifts.resolver import resolve_shifts
from ..shifts.service import ShiftCatalog
from ..staff.model import LeaveBalance, Staff
from ..staff.repository import StaffRepository
from .model import PTORequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveLedger:
    """PTO requests, their review, and the leave balance they draw from.

    Approval is one unit of work: the request decision, the balance debit and
    the APPROVED_PTO attendance rows commit or roll back together.
    """

    def __init__(
        self,
        requests: LeaveRepository,
        staff: StaffRepository,
        attendance: AttendanceRepository,
        catalog: ShiftCatalog,
        transactions: TransactionManager,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._staff = staff
        self._attendance = attendance
        self._catalog = catalog
        self._transactions = transactions
        self._clock = clock

    def _require_staff(self, tenant_id: int, staff_id: int, *, tx: Optional[Transaction] = None) -> Staff:
        staff = self._staff.get_by_id(tenant_id=tenant_id, staff_id=int(staff_id), tx=tx, for_update=tx is not None)
        if not staff:
            raise NotFoundError("Staff member not found")
        return staff

    def submit_request(
        self,
        *,
        tenant_id: int,
        staff_id: int,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> PTORequest:
        require_date_range(start_date, end_date)
        staff = self._require_staff(tenant_id, staff_id)

        days = inclusive_days(start_date, end_date)
        if days > staff.leave_days_remaining:
            logger.warning(
                "PTO request for %s days rejected: staff %s has %s remaining", days, staff_id, staff.leave_days_remaining
            )
            raise InsufficientBalanceError(
                f"Requested {days} days but only {staff.leave_days_remaining} remaining"
            )

        created_at = self._clock()
        reason = optional_text(reason)
        request_id = self._requests.create(
            tenant_id=tenant_id,
            staff_id=staff.staff_id,
            start_date=start_date,
            end_date=end_date,
            days_requested=days,
            reason=reason,
            created_at=created_at,
        )
        logger.info("Staff %s requested %s PTO days (%s..%s)", staff_id, days, start_date, end_date)
        return PTORequest(
            request_id=request_id,
            tenant_id=int(tenant_id),
            staff_id=staff.staff_id,
            start_date=start_date,
            end_date=end_date,
            days_requested=days,
            status=PTOStatus.PENDING,
            created_at=created_at,
            reason=reason,
        )

    def _load_pending(self, tenant_id: int, request_id: int, tx: Transaction) -> PTORequest:
        req = self._requests.get_by_id(tenant_id=tenant_id, request_id=int(request_id), tx=tx, for_update=True)
        if not req:
            raise NotFoundError("PTO request not found")
        if not req.is_pending:
            logger.warning("PTO request %s already %s", request_id, req.status.value)
            raise InvalidStateError(f"PTO request already {req.status.value}")
        return req

    def approve(self, *, tenant_id: int, request_id: int, approver_id: int, now: datetime | None = None) -> PTORequest:
        now = now or self._clock()

        with self._transactions.transaction() as tx:
            req = self._load_pending(tenant_id, request_id, tx)
            staff = self._require_staff(tenant_id, req.staff_id, tx=tx)
            if req.days_requested > staff.leave_days_remaining:
                logger.warning(
                    "Approval of PTO request %s rejected: %s days requested, %s remaining",
                    request_id,
                    req.days_requested,
                    staff.leave_days_remaining,
                )
                raise InsufficientBalanceError(
                    f"Requested {req.days_requested} days but only {staff.leave_days_remaining} remaining"
                )

            if not self._requests.decide(
                request_id=req.request_id,
                status=PTOStatus.APPROVED,
                reviewed_by=int(approver_id),
                reviewed_at=now,
                review_note=None,
                tx=tx,
            ):
                raise InvalidStateError("PTO request is no longer pending")

            if not self._staff.add_leave_days_used(
                tenant_id=tenant_id, staff_id=staff.staff_id, days=req.days_requested, tx=tx
            ):
                raise InsufficientBalanceError("Leave balance changed during approval")

            candidates = self._catalog.candidates_for_range(
                tenant_id=tenant_id, start=req.start_date, end=req.end_date, staff_id=staff.staff_id, tx=tx
            )
            marked = 0
            for day in iter_dates(req.start_date, req.end_date):
                for shift in resolve_shifts(candidates, day):
                    self._attendance.mark_approved_pto(
                        tenant_id=tenant_id,
                        staff_id=staff.staff_id,
                        shift_id=shift.shift_id,
                        work_date=day,
                        scheduled_start=shift.scheduled_start_on(day),
                        scheduled_end=shift.scheduled_end_on(day),
                        tx=tx,
                    )
                    marked += 1

        logger.info(
            "PTO request %s approved by %s: %s days, %s shifts marked", request_id, approver_id, req.days_requested, marked
        )
        return PTORequest(
            request_id=req.request_id,
            tenant_id=req.tenant_id,
            staff_id=req.staff_id,
            start_date=req.start_date,
            end_date=req.end_date,
            days_requested=req.days_requested,
            status=PTOStatus.APPROVED,
            created_at=req.created_at,
            reason=req.reason,
            reviewed_by=int(approver_id),
            reviewed_at=now,
        )

    def deny(
        self,
        *,
        tenant_id: int,
        request_id: int,
        reviewer_id: int,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> PTORequest:
        now = now or self._clock()
        note = optional_text(reason)

        with self._transactions.transaction() as tx:
            req = self._load_pending(tenant_id, request_id, tx)
            if not self._requests.decide(
                request_id=req.request_id,
                status=PTOStatus.DENIED,
                reviewed_by=int(reviewer_id),
                reviewed_at=now,
                review_note=note,
                tx=tx,
            ):
                raise InvalidStateError("PTO request is no longer pending")

        logger.info("PTO request %s denied by %s", request_id, reviewer_id)
        return PTORequest(
            request_id=req.request_id,
            tenant_id=req.tenant_id,
            staff_id=req.staff_id,
            start_date=req.start_date,
            end_date=req.end_date,
            days_requested=req.days_requested,
            status=PTOStatus.DENIED,
            created_at=req.created_at,
            reason=req.reason,
            reviewed_by=int(reviewer_id),
            reviewed_at=now,
            review_note=note,
        )

    def get_request(self, *, tenant_id: int, request_id: int) -> PTORequest:
        req = self._requests.get_by_id(tenant_id=tenant_id, request_id=int(request_id))
        if not req:
            raise NotFoundError("PTO request not found")
        return req

    def list_requests(
        self,
        *,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: PTOStatus | str | None = None,
    ) -> list[PTORequest]:
        if status is not None:
            try:
                status = PTOStatus(status)
            except ValueError:
                raise ValidationError("status must be PENDING, APPROVED or DENIED")
        return list(self._requests.list(tenant_id=tenant_id, staff_id=staff_id, status=status))

    def leave_balance(self, *, tenant_id: int, staff_id: int) -> LeaveBalance:
        staff = self._require_staff(tenant_id, staff_id)
        return LeaveBalance(
            staff_id=staff.staff_id,
            total=staff.leave_days_total,
            used=staff.leave_days_used,
            remaining=staff.leave_days_remaining,
        )
