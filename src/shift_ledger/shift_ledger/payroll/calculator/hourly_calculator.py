from __future__ import annotations

from .base import PayrollCalculator


class HourlyPayrollCalculator(PayrollCalculator):
    """Hourly rule: minutes / 60 * rate."""

    def base_earnings(self, *, minutes: int, rate: float) -> float:
        return (max(int(minutes), 0) / 60) * float(rate)
