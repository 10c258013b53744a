from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_NIGHT_SHIFT_BONUS_MINUTES
from ..core.enums import PlanType


@dataclass(frozen=True)
class PlanFeatures:
    photo_capture: bool = False
    night_shift: bool = False
    advanced_analytics: bool = False
    payroll: bool = False


@dataclass(frozen=True)
class NotificationSettings:
    """Employer toggles for push notices; all off until enabled."""

    on_shift_start: bool = False
    on_shift_end: bool = False
    on_overtime: bool = False


PLAN_FEATURES: dict[PlanType, PlanFeatures] = {
    PlanType.FREE: PlanFeatures(),
    PlanType.PRO: PlanFeatures(photo_capture=True, night_shift=True, advanced_analytics=True, payroll=True),
    PlanType.BUSINESS: PlanFeatures(photo_capture=True, night_shift=True, advanced_analytics=True, payroll=True),
}


@dataclass(frozen=True)
class Organization:
    """Thực thể miền (domain): Tổ chức sở hữu nhân viên và thiết bị."""

    organization_id: str
    name: str
    plan: PlanType = PlanType.FREE
    night_shift_bonus_minutes: int = DEFAULT_NIGHT_SHIFT_BONUS_MINUTES
    notifications: NotificationSettings = NotificationSettings()

    @property
    def features(self) -> PlanFeatures:
        return PLAN_FEATURES.get(self.plan, PLAN_FEATURES[PlanType.FREE])
