from __future__ import annotations

from abc import ABC, abstractmethod


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def base_earnings(self, *, minutes: int, rate: float) -> float:
        raise NotImplementedError
