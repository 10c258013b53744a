from __future__ import annotations

from typing import Iterable, Protocol

from ..logs.model import WorkLogEntry
from .model import ShiftState


class ActiveShiftRepository(Protocol):
    def get_state(self, employee_id: str) -> ShiftState:
        """Current slot map; an employee with no record gets an empty state."""

        raise NotImplementedError

    def save_state(self, state: ShiftState, *, logs: Iterable[WorkLogEntry] = ()) -> None:
        """Write `logs` and the slot map in one transaction: both land or neither does."""

        raise NotImplementedError
