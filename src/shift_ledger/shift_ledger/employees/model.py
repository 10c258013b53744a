from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import SINGLE_SLOT, SLOTS
from ..payroll.model import PayrollPolicy


@dataclass(frozen=True)
class PositionPermissions:
    """Capability flags of a position (chức vụ)."""

    multi_slot: bool = False
    use_machines: bool = False
    can_use_night_shift: bool = False
    max_shift_duration_minutes: Optional[int] = None
    mark_absences: bool = True
    default_require_photo: bool = False

    @property
    def slots(self) -> tuple[int, ...]:
        return SLOTS if self.multi_slot else SINGLE_SLOT


DEFAULT_PERMISSIONS = PositionPermissions()


@dataclass(frozen=True)
class PositionConfig:
    name: str
    permissions: PositionPermissions = DEFAULT_PERMISSIONS
    payroll: Optional[PayrollPolicy] = None


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    employee_id: str
    full_name: str
    organization_id: str
    position: str
    require_photo: bool = False
    payroll: Optional[PayrollPolicy] = None
    is_active: bool = True
