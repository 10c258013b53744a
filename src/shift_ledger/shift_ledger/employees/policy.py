from __future__ import annotations

from typing import Iterable, Optional

from ..payroll.model import PayrollPolicy
from .model import DEFAULT_PERMISSIONS, Employee, PositionConfig, PositionPermissions


def find_position(name: str, positions: Iterable[PositionConfig]) -> Optional[PositionConfig]:
    return next((p for p in positions if p.name == name), None)


def resolve_permissions(employee: Employee, positions: Iterable[PositionConfig]) -> PositionPermissions:
    config = find_position(employee.position, positions)
    return config.permissions if config else DEFAULT_PERMISSIONS


def resolve_payroll_policy(employee: Employee, positions: Iterable[PositionConfig]) -> Optional[PayrollPolicy]:
    """Employee override wins over the position's policy; None when neither is set."""

    if employee.payroll is not None:
        return employee.payroll
    config = find_position(employee.position, positions)
    return config.payroll if config else None


def requires_photo(employee: Employee, permissions: PositionPermissions) -> bool:
    return bool(employee.require_photo or permissions.default_require_photo)
