from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from ..logs.model import WorkLogEntry


@dataclass(frozen=True)
class ShiftState:
    """Active shift map of one employee plus the global night-mode toggle.

    Owned by the caller; registry functions return a new state and never
    mutate the one they were given.
    """

    employee_id: str
    slots: Mapping[int, WorkLogEntry] = field(default_factory=dict)
    night_mode: bool = False

    def active(self, slot: int) -> Optional[WorkLogEntry]:
        return self.slots.get(int(slot))

    def is_occupied(self, slot: int) -> bool:
        return self.active(slot) is not None

    @property
    def active_count(self) -> int:
        return len(self.slots)

    @property
    def any_night_active(self) -> bool:
        return any(entry.night_shift for entry in self.slots.values())

    def slot_of(self, log_id: str) -> Optional[int]:
        return next((s for s, e in self.slots.items() if e.log_id == log_id), None)

    def with_slot(self, slot: int, entry: Optional[WorkLogEntry]) -> "ShiftState":
        nxt = dict(self.slots)
        if entry is None:
            nxt.pop(int(slot), None)
        else:
            nxt[int(slot)] = entry
        return replace(self, slots=nxt)

    def with_night_mode(self, enabled: bool) -> "ShiftState":
        return replace(self, night_mode=bool(enabled))


@dataclass(frozen=True)
class ShiftTransition:
    """Result of a start/stop: the next state and the entry to persist."""

    state: ShiftState
    entry: WorkLogEntry
    photo_required: bool = False
