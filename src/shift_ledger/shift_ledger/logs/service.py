from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_non_negative
from ..core.exceptions import PreconditionViolation, ValidationError
from .model import WorkLogEntry
from .repository import WorkLogRepository

logger = logging.getLogger(__name__)


class LogCorrectionService:
    """Employer-side edits of finished entries."""

    def __init__(self, logs: WorkLogRepository, *, clock: Optional[Clock] = None):
        self._logs = logs
        self._clock = clock or SystemClock()

    def correct_duration(self, log_id: str, *, organization_id: str, duration_minutes: int, note: str = "") -> WorkLogEntry:
        entry = self._logs.get_by_id(str(log_id))
        if entry is None or entry.organization_id != str(organization_id):
            raise ValidationError("Log entry not found")
        if not entry.completed_work:
            raise PreconditionViolation("Only finished work entries can be corrected")

        minutes = require_non_negative(duration_minutes, "Duration")
        corrected = entry.corrected(
            note=(note or "").strip() or entry.correction_note or "",
            at=self._clock.now(),
            duration_minutes=minutes,
        )
        self._logs.upsert_logs([corrected])
        logger.info("log corrected log=%s minutes=%s->%s", entry.log_id, entry.duration_minutes, minutes)
        return corrected
