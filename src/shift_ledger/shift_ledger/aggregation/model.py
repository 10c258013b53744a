from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EntryType


@dataclass(frozen=True)
class PeriodStats:
    """Attendance statistics of one employee over a date range."""

    work_days: int
    work_minutes: int
    sick: int
    vacation: int
    explicit_day_off: int
    implicit_day_off: int

    @property
    def day_off(self) -> int:
        return self.explicit_day_off + self.implicit_day_off


ABSENCE_CODES = {
    EntryType.SICK: "Б",
    EntryType.VACATION: "О",
    EntryType.DAY_OFF: "В",
}


@dataclass(frozen=True)
class DayCell:
    """One cell of the monthly timesheet matrix."""

    work_date: str
    is_future: bool = False
    absence: Optional[EntryType] = None
    minutes: int = 0
    has_work: bool = False
    pending: bool = False
    corrected: bool = False
    night: bool = False

    @property
    def code(self) -> str:
        if self.is_future:
            return ""
        if self.absence is not None:
            return ABSENCE_CODES[self.absence]
        if not self.has_work:
            return ABSENCE_CODES[EntryType.DAY_OFF]
        return ""


@dataclass(frozen=True)
class AbsenceLeader:
    employee_id: str
    full_name: str
    count: int
