from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..common.datetime_utils import Clock, SystemClock
from ..employees.service import EmployeeDirectory
from ..shifts.repository import ActiveShiftRepository
from .notifier import Notifier
from .overtime import OvertimeEvaluation, OvertimeMonitor, Ticker

logger = logging.getLogger(__name__)


class OvertimeService:
    """Runs the monitor for one employee on the ticker cadence or on demand."""

    def __init__(
        self,
        directory: EmployeeDirectory,
        active: ActiveShiftRepository,
        monitor: OvertimeMonitor,
        *,
        clock: Optional[Clock] = None,
    ):
        self._directory = directory
        self._active = active
        self._monitor = monitor
        self._clock = clock or SystemClock()

    def tick(
        self,
        employee_id: str,
        alerts: Mapping[int, bool],
        *,
        ticker: Optional[Ticker] = None,
        force: bool = False,
    ) -> OvertimeEvaluation:
        """`force=True` is used right after start/stop; otherwise the ticker gates."""

        now = self._clock.now()
        if ticker is not None and not force and not ticker.due(now):
            return OvertimeEvaluation(alerts={int(s): bool(v) for s, v in alerts.items()})

        ctx = self._directory.context_for(employee_id)
        state = self._active.get_state(ctx.employee.employee_id)
        result = self._monitor.check(
            state,
            alerts,
            now=now,
            max_shift_minutes=ctx.permissions.max_shift_duration_minutes,
            enabled=ctx.features.advanced_analytics,
        )
        if ticker is not None:
            ticker.mark(now)
        return result


class EmployerOvertimeAlert:
    """Overtime callback that tells the employer, when the organization asked for it."""

    def __init__(self, directory: EmployeeDirectory, notifier: Notifier):
        self._directory = directory
        self._notifier = notifier

    def __call__(self, employee_id: str, slot: int) -> None:
        ctx = self._directory.context_for(employee_id)
        if not ctx.organization.notifications.on_overtime:
            return
        try:
            self._notifier.notify("Overtime", f"{ctx.employee.full_name} is over the shift limit (slot {slot}).")
        except Exception:
            logger.exception("employer overtime notification failed employee=%s slot=%s", employee_id, slot)
