"""Overtime monitor.

Edge-triggered: a slot's alert fires once when elapsed time first exceeds the
position limit plus a fixed buffer, and clears when it falls back at or under
it. Evaluation is a pure function of (state, previous alerts, now); the
`Ticker` decides when a periodic evaluation is due.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Mapping, Optional

from ..common.datetime_utils import elapsed_minutes
from ..core.constants import OVERTIME_BUFFER_MINUTES, OVERTIME_TICK_SECONDS
from ..shifts.model import ShiftState
from .notifier import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OvertimeEvaluation:
    alerts: dict[int, bool]
    fired: tuple[int, ...] = ()
    cleared: tuple[int, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.fired or self.cleared)


def overtime_threshold(max_shift_minutes: Optional[int]) -> Optional[int]:
    if not max_shift_minutes:
        return None
    return int(max_shift_minutes) + OVERTIME_BUFFER_MINUTES


def evaluate_overtime(
    state: ShiftState,
    alerts: Mapping[int, bool],
    *,
    now: datetime,
    max_shift_minutes: Optional[int],
    enabled: bool = True,
) -> OvertimeEvaluation:
    current = {int(s): bool(v) for s, v in alerts.items()}
    threshold = overtime_threshold(max_shift_minutes)
    if not enabled or threshold is None:
        return OvertimeEvaluation(alerts=current)

    nxt: dict[int, bool] = {}
    fired: list[int] = []
    cleared: list[int] = []
    for slot, entry in sorted(state.slots.items()):
        was = current.get(slot, False)
        if entry.check_in is None:
            nxt[slot] = was
            continue
        over = elapsed_minutes(entry.check_in, now) > threshold
        if over and not was:
            fired.append(slot)
        elif not over and was:
            cleared.append(slot)
        nxt[slot] = over

    # Alerts of closed slots are dropped silently.
    return OvertimeEvaluation(alerts=nxt, fired=tuple(fired), cleared=tuple(cleared))


@dataclass
class Ticker:
    """Fixed cadence for periodic evaluation, driven by explicit `now` values."""

    interval: timedelta = timedelta(seconds=OVERTIME_TICK_SECONDS)
    last: Optional[datetime] = None

    def due(self, now: datetime) -> bool:
        return self.last is None or now - self.last >= self.interval

    def mark(self, now: datetime) -> None:
        self.last = now


OvertimeCallback = Callable[[str, int], None]


@dataclass
class OvertimeMonitor:
    notifier: Notifier = field(default_factory=LoggingNotifier)
    on_overtime: Optional[OvertimeCallback] = None

    def check(
        self,
        state: ShiftState,
        alerts: Mapping[int, bool],
        *,
        now: datetime,
        max_shift_minutes: Optional[int],
        enabled: bool,
    ) -> OvertimeEvaluation:
        result = evaluate_overtime(state, alerts, now=now, max_shift_minutes=max_shift_minutes, enabled=enabled)
        threshold = overtime_threshold(max_shift_minutes)
        for slot in result.fired:
            logger.warning("overtime employee=%s slot=%s threshold=%s", state.employee_id, slot, threshold)
            if self.on_overtime:
                self.on_overtime(state.employee_id, slot)
            self.notifier.notify(
                "Shift not finished",
                f"You have been working for more than {threshold // 60} hours. Don't forget to finish your shift!",
            )
        return result
