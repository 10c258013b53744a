from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import EntryType


@dataclass(frozen=True)
class WorkLogEntry:
    """Thực thể miền (domain): Bản ghi nhật ký công.

    A WORK entry is in progress while `check_out` is None; `check_out` and
    `duration_minutes` are set together at checkout. Absence entries are
    created complete.
    """

    log_id: str
    employee_id: str
    organization_id: str
    work_date: date
    entry_type: EntryType
    equipment_id: Optional[str] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    duration_minutes: int = 0
    night_shift: bool = False
    photo_in: Optional[str] = None
    photo_out: Optional[str] = None
    is_corrected: bool = False
    correction_note: Optional[str] = None
    correction_timestamp: Optional[datetime] = None

    @property
    def is_work(self) -> bool:
        return self.entry_type == EntryType.WORK

    @property
    def in_progress(self) -> bool:
        return self.is_work and self.check_out is None

    @property
    def completed_work(self) -> bool:
        return self.is_work and self.check_out is not None

    def completed(self, *, check_out: datetime, duration_minutes: int, photo_out: Optional[str] = None) -> "WorkLogEntry":
        return replace(self, check_out=check_out, duration_minutes=max(int(duration_minutes), 0), photo_out=photo_out)

    def corrected(self, *, note: str, at: datetime, **changes) -> "WorkLogEntry":
        return replace(self, is_corrected=True, correction_note=note, correction_timestamp=at, **changes)


def new_work_entry(
    *,
    employee_id: str,
    organization_id: str,
    slot: int,
    now: datetime,
    equipment_id: Optional[str],
    night_shift: bool,
    photo_in: Optional[str] = None,
) -> WorkLogEntry:
    stamp = int(now.timestamp() * 1000)
    return WorkLogEntry(
        log_id=f"shift-{employee_id}-{stamp}-{slot}",
        employee_id=employee_id,
        organization_id=organization_id,
        work_date=now.date(),
        entry_type=EntryType.WORK,
        equipment_id=equipment_id or None,
        check_in=now,
        check_out=None,
        duration_minutes=0,
        night_shift=bool(night_shift),
        photo_in=photo_in,
    )


def new_absence_entry(*, employee_id: str, organization_id: str, entry_type: EntryType, work_date: date, now: datetime) -> WorkLogEntry:
    stamp = int(now.timestamp() * 1000)
    return WorkLogEntry(
        log_id=f"abs-{employee_id}-{stamp}",
        employee_id=employee_id,
        organization_id=organization_id,
        work_date=work_date,
        entry_type=entry_type,
        duration_minutes=0,
    )
