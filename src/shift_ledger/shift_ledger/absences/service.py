from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock
from ..core.enums import EntryType
from ..core.exceptions import AuthorizationError, PreconditionViolation
from ..employees.service import EmployeeDirectory
from ..logs.model import WorkLogEntry, new_absence_entry
from ..logs.repository import WorkLogRepository
from ..shifts.repository import ActiveShiftRepository
from .rules import check_mark_absence, is_absent

logger = logging.getLogger(__name__)


class AbsenceService:
    """Use case: mark a day as day-off / sick / vacation.

    Marking is one-way for the employee: there is no retraction command.
    """

    def __init__(
        self,
        logs: WorkLogRepository,
        active: ActiveShiftRepository,
        directory: EmployeeDirectory,
        *,
        clock: Optional[Clock] = None,
    ):
        self._logs = logs
        self._active = active
        self._directory = directory
        self._clock = clock or SystemClock()

    def is_absent(self, employee_id: str, work_date: Optional[date] = None) -> bool:
        work_date = work_date or self._clock.now().date()
        logs = self._logs.list_for_employee(str(employee_id), start_date=work_date, end_date=work_date)
        return is_absent(logs, employee_id=str(employee_id), work_date=work_date)

    def mark_absence(self, employee_id: str, entry_type: EntryType, *, work_date: Optional[date] = None) -> WorkLogEntry:
        ctx = self._directory.context_for(employee_id)
        if not ctx.permissions.mark_absences:
            raise AuthorizationError("This position cannot mark absences")

        now = self._clock.now()
        work_date = work_date or now.date()
        employee = ctx.employee

        try:
            check_mark_absence(
                entry_type,
                employee_id=employee.employee_id,
                work_date=work_date,
                day_logs=self._logs.list_for_employee(employee.employee_id, start_date=work_date, end_date=work_date),
                running=self._logs.list_in_progress(employee.organization_id),
                state=self._active.get_state(employee.employee_id),
            )
        except PreconditionViolation as e:
            logger.info("absence rejected employee=%s date=%s reason=%s", employee.employee_id, work_date, e)
            raise

        entry = new_absence_entry(
            employee_id=employee.employee_id,
            organization_id=employee.organization_id,
            entry_type=entry_type,
            work_date=work_date,
            now=now,
        )
        self._logs.upsert_logs([entry])
        logger.info("absence marked employee=%s date=%s type=%s", employee.employee_id, work_date, entry_type.value)
        return entry
