from __future__ import annotations

from decimal import Decimal

from ...common.datetime_utils import money
from ...staff.model import Staff
from .base import PayrollCalculator


class HourlyPayrollCalculator(PayrollCalculator):
    """Hours worked times the hourly rate (a missing rate counts as 0)."""

    def gross_pay(self, staff: Staff, total_hours: Decimal) -> Decimal:
        return money(Decimal(total_hours) * money(staff.hourly_rate))
