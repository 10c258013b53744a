from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Equipment:
    """Thực thể miền (domain): Thiết bị / máy móc."""

    equipment_id: str
    name: str
    organization_id: str = ""


class Availability(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    SELECTED_IN_OTHER_SLOT = "selected_in_other_slot"


@dataclass(frozen=True)
class EquipmentCandidate:
    equipment: Equipment
    availability: Availability

    @property
    def selectable(self) -> bool:
        return self.availability == Availability.AVAILABLE
