"""Active shift registry: pure start/stop transitions over a `ShiftState`.

Every check runs before anything is built, so a rejected command leaves the
caller's state untouched. `start_shift` re-validates equipment against the
busy set it is handed; callers pass a freshly computed set at commit time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import elapsed_minutes
from ..core.enums import ShiftAction
from ..core.exceptions import AuthorizationError, PreconditionViolation, ResourceConflict
from ..employees.model import Employee, PositionPermissions
from ..logs.model import WorkLogEntry, new_work_entry
from .model import ShiftState, ShiftTransition


def photo_required(action: ShiftAction, state: ShiftState, *, photo_policy: bool) -> bool:
    """Photo brackets a session: first start (0 -> 1) and last stop (1 -> 0)."""

    if not photo_policy:
        return False
    if action == ShiftAction.START:
        return state.active_count == 0
    return state.active_count == 1


def night_mode_locked(state: ShiftState) -> bool:
    return state.any_night_active


def set_night_mode(state: ShiftState, enabled: bool, *, allowed: bool) -> ShiftState:
    if enabled and not allowed:
        raise AuthorizationError("Night shifts are not available for this position")
    if not enabled and night_mode_locked(state):
        raise PreconditionViolation("Night mode cannot be disabled while a night shift is running")
    return state.with_night_mode(enabled)


def in_progress_elsewhere(state: ShiftState, logs: Iterable[WorkLogEntry]) -> list[WorkLogEntry]:
    """Unfinished WORK entries of the employee, from the slot map and the log history."""

    found = {e.log_id: e for e in state.slots.values()}
    for log in logs:
        if log.employee_id == state.employee_id and log.in_progress:
            found.setdefault(log.log_id, log)
    return list(found.values())


def check_start(
    state: ShiftState,
    *,
    slot: int,
    permissions: PositionPermissions,
    equipment_id: Optional[str],
    busy: frozenset[str],
    employee_logs: Iterable[WorkLogEntry],
    today_logs: Iterable[WorkLogEntry],
) -> None:
    if state.is_occupied(slot):
        raise PreconditionViolation(f"Slot {slot} already has an active shift")

    if any(log.entry_type.is_absence for log in today_logs):
        raise PreconditionViolation("This day is already marked as an absence")

    if not permissions.multi_slot and in_progress_elsewhere(state, employee_logs):
        raise PreconditionViolation("Finish the running shift before starting another one")

    if permissions.use_machines:
        if not equipment_id:
            raise PreconditionViolation("Select equipment before starting the shift")
        if equipment_id in busy:
            raise ResourceConflict("Equipment is already taken", equipment_id=equipment_id)
        taken_here = {e.equipment_id for s, e in state.slots.items() if s != slot and e.equipment_id}
        if equipment_id in taken_here:
            raise ResourceConflict("Equipment is already used in another slot", equipment_id=equipment_id)


def start_shift(
    state: ShiftState,
    *,
    slot: int,
    employee: Employee,
    permissions: PositionPermissions,
    equipment_id: Optional[str],
    night_shift: bool,
    now: datetime,
    busy: frozenset[str],
    employee_logs: Iterable[WorkLogEntry] = (),
    today_logs: Iterable[WorkLogEntry] = (),
    photo_policy: bool = False,
    photo_in: Optional[str] = None,
) -> ShiftTransition:
    employee_logs = list(employee_logs)
    check_start(
        state,
        slot=slot,
        permissions=permissions,
        equipment_id=equipment_id,
        busy=busy,
        employee_logs=employee_logs,
        today_logs=today_logs,
    )

    entry = new_work_entry(
        employee_id=employee.employee_id,
        organization_id=employee.organization_id,
        slot=slot,
        now=now,
        equipment_id=equipment_id if permissions.use_machines else None,
        night_shift=night_shift,
        photo_in=photo_in,
    )
    return ShiftTransition(
        state=state.with_slot(slot, entry),
        entry=entry,
        photo_required=photo_required(ShiftAction.START, state, photo_policy=photo_policy),
    )


def stop_duration(entry: WorkLogEntry, now: datetime, *, night_bonus_minutes: int) -> int:
    if entry.check_in is None:
        return 0
    duration = elapsed_minutes(entry.check_in, now)
    if entry.night_shift:
        duration += int(night_bonus_minutes or 0)
    return max(duration, 0)


def stop_shift(
    state: ShiftState,
    *,
    slot: int,
    now: datetime,
    night_bonus_minutes: int = 0,
    photo_policy: bool = False,
    photo_out: Optional[str] = None,
) -> ShiftTransition:
    current = state.active(slot)
    if current is None:
        raise PreconditionViolation(f"Slot {slot} has no active shift")

    completed = current.completed(
        check_out=now,
        duration_minutes=stop_duration(current, now, night_bonus_minutes=night_bonus_minutes),
        photo_out=photo_out,
    )
    return ShiftTransition(
        state=state.with_slot(slot, None),
        entry=completed,
        photo_required=photo_required(ShiftAction.STOP, state, photo_policy=photo_policy),
    )
