from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..common.datetime_utils import Clock, SystemClock, elapsed_minutes
from ..common.validators import require_slot
from ..core.constants import BUSY_WINDOW_HOURS, DEFAULT_WORK_LABEL
from ..core.enums import ShiftAction
from ..core.exceptions import CaptureCancelled, PreconditionViolation, ResourceConflict, ValidationError
from ..employees.service import EmployeeContext, EmployeeDirectory
from ..equipment.arbitration import busy_equipment, candidates_for_slot, default_selection
from ..equipment.model import EquipmentCandidate
from ..equipment.repository import EquipmentRepository
from ..logs.model import WorkLogEntry
from ..logs.repository import WorkLogRepository
from ..monitoring.notifier import Notifier
from . import registry
from .model import ShiftState
from .photo import PhotoCapture
from .repository import ActiveShiftRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftBoard:
    """Read-model for the shift control panel."""

    state: ShiftState
    slots: tuple[int, ...]
    night_mode_allowed: bool
    night_mode_locked: bool
    absent_today: bool
    blocked_by_other_shift: bool


class ShiftService:
    """Use case: start/stop shifts with photo capture and persistence.

    A command validates, then (optionally) awaits photo capture, then
    re-validates against fresh data and commits the log entry together with
    the slot map in one transaction. Nothing is written when any step raises.
    """

    def __init__(
        self,
        logs: WorkLogRepository,
        active: ActiveShiftRepository,
        directory: EmployeeDirectory,
        equipment: EquipmentRepository,
        *,
        clock: Optional[Clock] = None,
        busy_window_hours: int = BUSY_WINDOW_HOURS,
        notifier: Optional[Notifier] = None,
    ):
        self._logs = logs
        self._active = active
        self._directory = directory
        self._equipment = equipment
        self._clock = clock or SystemClock()
        self._busy_window = timedelta(hours=int(busy_window_hours))
        self._notifier = notifier

    # ----- queries -----

    def get_state(self, employee_id: str) -> ShiftState:
        return self._active.get_state(str(employee_id))

    def busy_equipment(self, organization_id: str, *, now: Optional[datetime] = None) -> frozenset[str]:
        now = now or self._clock.now()
        return busy_equipment(self._logs.list_in_progress(organization_id), now=now, window=self._busy_window)

    def board(self, employee_id: str) -> ShiftBoard:
        ctx = self._directory.context_for(employee_id)
        state = self.get_state(ctx.employee.employee_id)
        now = self._clock.now()
        today_logs = self._today_logs(ctx, now)
        blocked = False
        if not ctx.permissions.multi_slot:
            running = self._logs.list_in_progress(ctx.employee.organization_id)
            blocked = bool(registry.in_progress_elsewhere(state, running))
        return ShiftBoard(
            state=state,
            slots=ctx.permissions.slots,
            night_mode_allowed=ctx.night_mode_allowed,
            night_mode_locked=registry.night_mode_locked(state),
            absent_today=any(log.entry_type.is_absence for log in today_logs),
            blocked_by_other_shift=blocked,
        )

    def candidates(
        self,
        employee_id: str,
        slot: int,
        *,
        selection: Optional[Mapping[int, Optional[str]]] = None,
    ) -> list[EquipmentCandidate]:
        ctx = self._directory.context_for(employee_id)
        slot = require_slot(slot, ctx.permissions.slots)
        units = self._equipment.list_for_organization(ctx.employee.organization_id)
        busy = self.busy_equipment(ctx.employee.organization_id)
        return candidates_for_slot(units, slot=slot, busy=busy, selection=selection or {})

    def default_selection(
        self,
        employee_id: str,
        *,
        selection: Optional[Mapping[int, Optional[str]]] = None,
    ) -> dict[int, Optional[str]]:
        ctx = self._directory.context_for(employee_id)
        units = self._equipment.list_for_organization(ctx.employee.organization_id)
        busy = self.busy_equipment(ctx.employee.organization_id)
        return default_selection(units, slots=ctx.permissions.slots, busy=busy, selection=selection or {})

    # ----- commands -----

    def set_night_mode(self, employee_id: str, enabled: bool) -> ShiftState:
        ctx = self._directory.context_for(employee_id)
        state = self.get_state(ctx.employee.employee_id)
        nxt = registry.set_night_mode(state, enabled, allowed=ctx.night_mode_allowed)
        if nxt != state:
            self._active.save_state(nxt)
        return nxt

    async def start_shift(
        self,
        employee_id: str,
        slot: int,
        *,
        equipment_id: Optional[str] = None,
        photo: Optional[PhotoCapture] = None,
    ) -> WorkLogEntry:
        ctx = self._directory.context_for(employee_id)
        slot = require_slot(slot, ctx.permissions.slots)

        # Selection-time check: reject before asking for a photo.
        state = self.get_state(ctx.employee.employee_id)
        transition = self._plan_start(ctx, state, slot=slot, equipment_id=equipment_id)

        photo_in = None
        if transition.photo_required:
            photo_in = await self._capture(photo, ctx, slot=slot, action=ShiftAction.START)

        # Commit-time check: equipment may have been taken meanwhile.
        state = self.get_state(ctx.employee.employee_id)
        transition = self._plan_start(ctx, state, slot=slot, equipment_id=equipment_id, photo_in=photo_in)

        self._commit(transition.entry, transition.state)
        logger.info(
            "shift started employee=%s slot=%s equipment=%s night=%s log=%s",
            ctx.employee.employee_id,
            slot,
            transition.entry.equipment_id,
            transition.entry.night_shift,
            transition.entry.log_id,
        )
        self._notify_employer(
            ctx.organization.notifications.on_shift_start,
            "Shift started",
            f"{ctx.employee.full_name} started work.",
        )
        return transition.entry

    async def stop_shift(self, employee_id: str, slot: int, *, photo: Optional[PhotoCapture] = None) -> WorkLogEntry:
        ctx = self._directory.context_for(employee_id)
        slot = require_slot(slot, ctx.permissions.slots)

        state = self.get_state(ctx.employee.employee_id)
        if not state.is_occupied(slot):
            raise PreconditionViolation(f"Slot {slot} has no active shift")

        photo_out = None
        if registry.photo_required(ShiftAction.STOP, state, photo_policy=ctx.photo_policy):
            photo_out = await self._capture(photo, ctx, slot=slot, action=ShiftAction.STOP)

        state = self.get_state(ctx.employee.employee_id)
        transition = registry.stop_shift(
            state,
            slot=slot,
            now=self._clock.now(),
            night_bonus_minutes=ctx.organization.night_shift_bonus_minutes,
            photo_policy=ctx.photo_policy,
            photo_out=photo_out,
        )

        self._commit(transition.entry, transition.state)
        logger.info(
            "shift stopped employee=%s slot=%s minutes=%s log=%s",
            ctx.employee.employee_id,
            slot,
            transition.entry.duration_minutes,
            transition.entry.log_id,
        )
        self._notify_employer(
            ctx.organization.notifications.on_shift_end,
            "Shift finished",
            f"{ctx.employee.full_name} finished work.",
        )
        return transition.entry

    def force_finish(self, log_id: str, *, organization_id: str) -> WorkLogEntry:
        """Employer action: close someone's running shift and free its equipment.

        Duration is plain elapsed time (no night bonus); the entry is marked
        corrected with a note naming the equipment. Entries of other
        organizations are reported as missing.
        """

        entry = self._logs.get_by_id(str(log_id))
        if entry is None or entry.organization_id != str(organization_id):
            raise ValidationError("Log entry not found")
        if not entry.in_progress:
            raise PreconditionViolation("Shift is not running")

        now = self._clock.now()
        label = DEFAULT_WORK_LABEL
        if entry.equipment_id:
            unit = self._equipment.get_by_id(entry.equipment_id)
            label = unit.name if unit else label

        duration = elapsed_minutes(entry.check_in, now) if entry.check_in else 0
        completed = entry.corrected(
            note=f"Shift ({label}) force-finished by employer",
            at=now,
            check_out=now,
            duration_minutes=max(duration, 0),
        )

        state = self.get_state(entry.employee_id)
        slot = state.slot_of(entry.log_id)
        self._commit(completed, state.with_slot(slot, None) if slot is not None else None)
        logger.info("shift force-finished log=%s employee=%s minutes=%s", entry.log_id, entry.employee_id, completed.duration_minutes)
        return completed

    # ----- helpers -----

    def _today_logs(self, ctx: EmployeeContext, now: datetime) -> list[WorkLogEntry]:
        today = now.date()
        return list(self._logs.list_for_employee(ctx.employee.employee_id, start_date=today, end_date=today))

    def _plan_start(self, ctx: EmployeeContext, state: ShiftState, *, slot: int, equipment_id: Optional[str], photo_in: Optional[str] = None):
        now = self._clock.now()
        running = self._logs.list_in_progress(ctx.employee.organization_id)
        night = state.night_mode and ctx.night_mode_allowed
        try:
            return registry.start_shift(
                state,
                slot=slot,
                employee=ctx.employee,
                permissions=ctx.permissions,
                equipment_id=equipment_id,
                night_shift=night,
                now=now,
                busy=busy_equipment(running, now=now, window=self._busy_window),
                employee_logs=running,
                today_logs=self._today_logs(ctx, now),
                photo_policy=ctx.photo_policy,
                photo_in=photo_in,
            )
        except (PreconditionViolation, ResourceConflict) as e:
            logger.info("start rejected employee=%s slot=%s reason=%s", ctx.employee.employee_id, slot, e)
            raise

    async def _capture(self, photo: Optional[PhotoCapture], ctx: EmployeeContext, *, slot: int, action: ShiftAction) -> str:
        if photo is None:
            raise CaptureCancelled("A photo is required for this action")
        ref = await photo.capture(employee_id=ctx.employee.employee_id, slot=slot, action=action)
        if not ref:
            logger.info("photo capture cancelled employee=%s slot=%s action=%s", ctx.employee.employee_id, slot, action.value)
            raise CaptureCancelled("Photo capture was cancelled")
        return ref

    def _commit(self, entry: WorkLogEntry, state: Optional[ShiftState]) -> None:
        try:
            if state is None:
                self._logs.upsert_logs([entry])
            else:
                self._active.save_state(state, logs=[entry])
        except Exception:
            logger.exception("failed to persist shift log=%s", entry.log_id)
            raise

    def _notify_employer(self, enabled: bool, title: str, body: str) -> None:
        # Runs after commit: a delivery failure must not undo the command.
        if not enabled or self._notifier is None:
            return
        try:
            self._notifier.notify(title, body)
        except Exception:
            logger.exception("employer notification failed title=%s", title)
