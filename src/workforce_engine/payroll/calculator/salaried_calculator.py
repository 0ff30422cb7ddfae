from __future__ import annotations

from decimal import Decimal

from ...common.datetime_utils import money
from ...staff.model import Staff
from .base import PayrollCalculator


class SalariedPayrollCalculator(PayrollCalculator):
    """Fixed salary for the period, whatever the hours."""

    def gross_pay(self, staff: Staff, total_hours: Decimal) -> Decimal:
        return money(staff.fixed_salary)
