from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from src.shift_ledger.shift_ledger.core.enums import PlanType
from src.shift_ledger.shift_ledger.core.exceptions import (
    AuthorizationError,
    CaptureCancelled,
    PreconditionViolation,
    ResourceConflict,
    ValidationError,
)
from src.shift_ledger.shift_ledger.equipment.model import Availability
from src.shift_ledger.shift_ledger.logs.model import new_work_entry
from src.shift_ledger.shift_ledger.organizations.model import NotificationSettings
from src.shift_ledger.shift_ledger.shifts.photo import ProvidedPhoto
from src.shift_ledger.shift_ledger.shifts.service import ShiftService

from tests.fakes import ORG, FakeActiveRepo, FakeEquipmentRepo, FakeLogsRepo, clerk, directory, operator


class YieldingCamera:
    """Suspends once before answering so concurrent commands interleave."""

    def __init__(self, ref="photo-1"):
        self.ref = ref
        self.calls = []

    async def capture(self, *, employee_id, slot, action):
        self.calls.append((employee_id, slot, action))
        await asyncio.sleep(0)
        return self.ref


def make_service(clock, *, employees=None, plan=PlanType.PRO, logs=None, active=None, notifications=NotificationSettings(), notifier=None):
    logs = logs or FakeLogsRepo()
    active = active or FakeActiveRepo(logs)
    service = ShiftService(
        logs,
        active,
        directory(employees or [operator(), operator("emp-2", "Vlad"), clerk()], plan=plan, notifications=notifications),
        FakeEquipmentRepo(),
        clock=clock,
        notifier=notifier,
    )
    return service, logs, active


def test_start_and_stop_with_photos(clock):
    service, logs, active = make_service(clock)
    camera = YieldingCamera()

    entry = asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1", photo=camera))
    assert entry.photo_in == "photo-1"
    assert active.get_state("emp-1").is_occupied(1)
    assert logs.get_by_id(entry.log_id).in_progress

    clock.advance(minutes=90)
    done = asyncio.run(service.stop_shift("emp-1", 1, photo=camera))
    assert done.duration_minutes == 90
    assert done.photo_out == "photo-1"
    assert active.get_state("emp-1").active_count == 0
    assert len(camera.calls) == 2


def test_cancelled_capture_commits_nothing(clock):
    service, logs, active = make_service(clock)

    with pytest.raises(CaptureCancelled):
        asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1", photo=ProvidedPhoto(None)))

    assert logs.entries == {}
    assert active.get_state("emp-1").active_count == 0


def test_missing_camera_when_photo_required(clock):
    service, logs, _ = make_service(clock)
    with pytest.raises(CaptureCancelled):
        asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1"))
    assert logs.upserts == 0


def test_free_plan_skips_photo(clock):
    service, _, _ = make_service(clock, plan=PlanType.FREE)
    entry = asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1"))
    assert entry.photo_in is None


def test_concurrent_starts_on_same_equipment(clock):
    service, logs, active = make_service(clock)

    async def race():
        return await asyncio.gather(
            service.start_shift("emp-1", 1, equipment_id="eq-1", photo=YieldingCamera()),
            service.start_shift("emp-2", 1, equipment_id="eq-1", photo=YieldingCamera()),
            return_exceptions=True,
        )

    first, second = asyncio.run(race())

    assert first.equipment_id == "eq-1"
    assert isinstance(second, ResourceConflict)
    assert second.equipment_id == "eq-1"
    assert [e.employee_id for e in logs.entries.values()] == ["emp-1"]
    assert active.get_state("emp-2").active_count == 0


def test_stale_unfinished_entry_does_not_block_equipment(clock):
    stale = new_work_entry(
        employee_id="emp-2",
        organization_id=ORG,
        slot=1,
        now=clock.now() - timedelta(hours=25),
        equipment_id="eq-1",
        night_shift=False,
    )
    service, _, _ = make_service(clock, logs=FakeLogsRepo([stale]), plan=PlanType.FREE)

    assert service.busy_equipment(ORG) == frozenset()
    entry = asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1"))
    assert entry.equipment_id == "eq-1"


def test_candidates_mark_busy_and_selected_units(clock):
    service, _, _ = make_service(clock, plan=PlanType.FREE)
    asyncio.run(service.start_shift("emp-2", 1, equipment_id="eq-1"))

    items = service.candidates("emp-1", 1, selection={2: "eq-2"})
    availability = {c.equipment.equipment_id: c.availability for c in items}

    assert availability == {
        "eq-1": Availability.BUSY,
        "eq-2": Availability.SELECTED_IN_OTHER_SLOT,
        "eq-3": Availability.AVAILABLE,
    }
    assert service.default_selection("emp-1") == {1: "eq-2", 2: "eq-3", 3: None}


def test_night_mode_flags_new_shift_and_adds_bonus(clock):
    service, _, _ = make_service(clock, plan=PlanType.FREE)
    with pytest.raises(AuthorizationError):
        service.set_night_mode("emp-1", True)

    service, _, active = make_service(clock)
    service.set_night_mode("emp-1", True)
    camera = YieldingCamera()

    entry = asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1", photo=camera))
    assert entry.night_shift is True
    assert service.board("emp-1").night_mode_locked

    with pytest.raises(PreconditionViolation):
        service.set_night_mode("emp-1", False)

    clock.advance(minutes=60)
    done = asyncio.run(service.stop_shift("emp-1", 1, photo=camera))
    assert done.duration_minutes == 180
    assert active.get_state("emp-1").night_mode is True


def test_single_slot_position_rejects_other_slots(clock):
    service, _, _ = make_service(clock, plan=PlanType.FREE)
    with pytest.raises(ValidationError):
        asyncio.run(service.start_shift("emp-9", 2))


def test_board_reports_blocking_shift(clock):
    orphan = new_work_entry(
        employee_id="emp-9",
        organization_id=ORG,
        slot=1,
        now=clock.now() - timedelta(days=3),
        equipment_id=None,
        night_shift=False,
    )
    service, _, _ = make_service(clock, logs=FakeLogsRepo([orphan]), plan=PlanType.FREE)

    board = service.board("emp-9")
    assert board.slots == (1,)
    assert board.blocked_by_other_shift is True
    with pytest.raises(PreconditionViolation):
        asyncio.run(service.start_shift("emp-9", 1))


def test_force_finish_frees_slot_and_equipment(clock):
    service, logs, active = make_service(clock, plan=PlanType.FREE)
    entry = asyncio.run(service.start_shift("emp-1", 2, equipment_id="eq-1"))

    clock.advance(minutes=30)
    done = service.force_finish(entry.log_id, organization_id=ORG)

    assert done.duration_minutes == 30
    assert done.is_corrected is True
    assert done.correction_note == "Shift (Lathe) force-finished by employer"
    assert done.correction_timestamp == clock.now()
    assert active.get_state("emp-1").active_count == 0
    assert service.busy_equipment(ORG) == frozenset()

    with pytest.raises(PreconditionViolation):
        service.force_finish(entry.log_id, organization_id=ORG)


def test_force_finish_rejects_other_organization(clock):
    service, logs, active = make_service(clock, plan=PlanType.FREE)
    entry = asyncio.run(service.start_shift("emp-1", 1, equipment_id="eq-1"))

    with pytest.raises(ValidationError):
        service.force_finish(entry.log_id, organization_id="org-2")

    assert logs.get_by_id(entry.log_id).in_progress
    assert active.get_state("emp-1").is_occupied(1)


class BrokenActiveRepo(FakeActiveRepo):
    def __init__(self, logs):
        super().__init__(logs)
        self.fail = True

    def save_state(self, state, *, logs=()):
        if self.fail:
            raise RuntimeError("database went away")
        super().save_state(state, logs=logs)


def test_failed_slot_write_leaves_no_orphan_log(clock):
    logs = FakeLogsRepo()
    active = BrokenActiveRepo(logs)
    service, _, _ = make_service(clock, plan=PlanType.FREE, logs=logs, active=active)

    with pytest.raises(RuntimeError):
        asyncio.run(service.start_shift("emp-9", 1))

    assert logs.entries == {}
    assert service.board("emp-9").blocked_by_other_shift is False

    active.fail = False
    entry = asyncio.run(service.start_shift("emp-9", 1))
    assert logs.get_by_id(entry.log_id).in_progress
    assert active.get_state("emp-9").is_occupied(1)


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, title, body):
        self.sent.append((title, body))


def test_employer_notified_on_start_and_stop_when_enabled(clock):
    notifier = RecordingNotifier()
    service, _, _ = make_service(
        clock,
        plan=PlanType.FREE,
        notifier=notifier,
        notifications=NotificationSettings(on_shift_start=True, on_shift_end=True),
    )

    asyncio.run(service.start_shift("emp-9", 1))
    clock.advance(minutes=5)
    asyncio.run(service.stop_shift("emp-9", 1))

    assert notifier.sent == [
        ("Shift started", "Boris started work."),
        ("Shift finished", "Boris finished work."),
    ]


def test_employer_not_notified_by_default(clock):
    notifier = RecordingNotifier()
    service, _, _ = make_service(clock, plan=PlanType.FREE, notifier=notifier)

    asyncio.run(service.start_shift("emp-9", 1))
    asyncio.run(service.stop_shift("emp-9", 1))

    assert notifier.sent == []


def test_only_stop_notice_when_only_end_enabled(clock):
    notifier = RecordingNotifier()
    service, _, _ = make_service(
        clock, plan=PlanType.FREE, notifier=notifier, notifications=NotificationSettings(on_shift_end=True)
    )

    asyncio.run(service.start_shift("emp-9", 1))
    asyncio.run(service.stop_shift("emp-9", 1))

    assert [title for title, _ in notifier.sent] == ["Shift finished"]


def test_notifier_failure_keeps_committed_shift(clock):
    class BrokenNotifier:
        def notify(self, title, body):
            raise RuntimeError("push gateway down")

    service, logs, active = make_service(
        clock, plan=PlanType.FREE, notifier=BrokenNotifier(), notifications=NotificationSettings(on_shift_start=True)
    )

    entry = asyncio.run(service.start_shift("emp-9", 1))

    assert logs.get_by_id(entry.log_id).in_progress
    assert active.get_state("emp-9").is_occupied(1)
