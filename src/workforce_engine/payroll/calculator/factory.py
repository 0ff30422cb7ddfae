from __future__ import annotations

from ...core.enums import CompensationModel
from .base import PayrollCalculator
from .hourly_calculator import HourlyPayrollCalculator
from .salaried_calculator import SalariedPayrollCalculator


def calculator_for(model: CompensationModel) -> PayrollCalculator:
    if model == CompensationModel.SALARIED:
        return SalariedPayrollCalculator()
    return HourlyPayrollCalculator()
