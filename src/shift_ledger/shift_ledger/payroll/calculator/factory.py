from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import PayType
from .base import PayrollCalculator
from .hourly_calculator import HourlyPayrollCalculator
from .per_shift_calculator import PerShiftPayrollCalculator


@dataclass
class PayrollCalculatorFactory:
    """Factory Pattern: choose the calculator for a pay type."""

    def for_pay_type(self, pay_type: PayType) -> PayrollCalculator:
        if pay_type == PayType.PER_SHIFT:
            return PerShiftPayrollCalculator()
        if pay_type == PayType.HOURLY:
            return HourlyPayrollCalculator()
        raise ValueError(f"Unsupported pay type: {pay_type!r}")
