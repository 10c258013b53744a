"""Day-level exclusivity between work and absence entries."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from ..core.enums import EntryType
from ..core.exceptions import PreconditionViolation, ValidationError
from ..logs.model import WorkLogEntry
from ..shifts.model import ShiftState


def is_absent(day_logs: Iterable[WorkLogEntry], *, employee_id: str, work_date: date) -> bool:
    return any(
        log.employee_id == employee_id and log.work_date == work_date and log.entry_type.is_absence for log in day_logs
    )


def check_mark_absence(
    entry_type: EntryType,
    *,
    employee_id: str,
    work_date: date,
    day_logs: Iterable[WorkLogEntry],
    running: Iterable[WorkLogEntry],
    state: ShiftState,
) -> None:
    if not entry_type.is_absence:
        raise ValidationError("Only absence types can be marked")

    if any(log.employee_id == employee_id and log.work_date == work_date for log in day_logs):
        raise PreconditionViolation("There are already entries for this day")

    if state.active_count or any(log.employee_id == employee_id and log.in_progress for log in running):
        raise PreconditionViolation("Finish all active work sessions first")
