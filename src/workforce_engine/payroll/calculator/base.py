from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...staff.model import Staff


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def gross_pay(self, staff: Staff, total_hours: Decimal) -> Decimal:
        raise NotImplementedError
