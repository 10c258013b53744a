from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PayType


@dataclass(frozen=True)
class PayrollPolicy:
    """Compensation rule: hourly rate or flat per-shift (per worked day) rate."""

    pay_type: PayType
    rate: float
    night_shift_bonus: float = 0.0


@dataclass(frozen=True)
class DailyEarnings:
    work_date: str
    worked_minutes: int
    base: float
    night_bonus: float

    @property
    def total(self) -> float:
        return self.base + self.night_bonus


@dataclass(frozen=True)
class MonthlyPayroll:
    employee_id: str
    full_name: str
    policy: Optional[PayrollPolicy]
    worked_minutes: int
    night_days: int
    total: float

    @property
    def worked_hours(self) -> float:
        return round(self.worked_minutes / 60, 2)
