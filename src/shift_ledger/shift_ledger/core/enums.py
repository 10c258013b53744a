from __future__ import annotations

from enum import Enum


class EntryType(str, Enum):
    """Loại bản ghi trong nhật ký công."""

    WORK = "WORK"
    DAY_OFF = "DAY_OFF"
    SICK = "SICK"
    VACATION = "VACATION"

    @property
    def is_absence(self) -> bool:
        return self is not EntryType.WORK


class PayType(str, Enum):
    HOURLY = "hourly"
    PER_SHIFT = "perShift"


class PlanType(str, Enum):
    """Gói dịch vụ của tổ chức (quyết định các tính năng được bật)."""

    FREE = "FREE"
    PRO = "PRO"
    BUSINESS = "BUSINESS"


class ShiftAction(str, Enum):
    START = "start"
    STOP = "stop"


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    EMPLOYEE = "employee"
    EMPLOYER = "employer"
