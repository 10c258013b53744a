from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, PositionConfig


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: str) -> Sequence[Employee]:
        raise NotImplementedError

    def list_positions(self, organization_id: str) -> Sequence[PositionConfig]:
        raise NotImplementedError
