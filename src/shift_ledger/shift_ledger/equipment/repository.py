from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Equipment


class EquipmentRepository(Protocol):
    def list_for_organization(self, organization_id: str) -> Sequence[Equipment]:
        raise NotImplementedError

    def get_by_id(self, equipment_id: str) -> Optional[Equipment]:
        raise NotImplementedError
