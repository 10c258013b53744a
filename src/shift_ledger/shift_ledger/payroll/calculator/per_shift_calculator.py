from __future__ import annotations

from .base import PayrollCalculator


class PerShiftPayrollCalculator(PayrollCalculator):
    """Flat day rate: paid in full for any positive worked time, never prorated."""

    def base_earnings(self, *, minutes: int, rate: float) -> float:
        return float(rate) if minutes > 0 else 0.0
