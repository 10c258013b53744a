"""Equipment arbitration.

Decides which units are attached to unfinished WORK entries and which units a
slot may still pick. Everything here is a pure function over the log history
and the caller's pending selection.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from ..core.constants import BUSY_WINDOW_HOURS
from ..logs.model import WorkLogEntry
from .model import Availability, Equipment, EquipmentCandidate


def busy_equipment(
    logs: Iterable[WorkLogEntry],
    *,
    now: datetime,
    window: timedelta = timedelta(hours=BUSY_WINDOW_HOURS),
) -> frozenset[str]:
    """Units attached to an in-progress WORK entry that started inside the window.

    Older unfinished entries are treated as orphaned and do not block a unit.
    """

    since = now - window
    return frozenset(
        log.equipment_id
        for log in logs
        if log.in_progress and log.equipment_id and log.check_in is not None and log.check_in > since
    )


def selected_in_other_slots(selection: Mapping[int, Optional[str]], slot: int) -> frozenset[str]:
    return frozenset(eid for s, eid in selection.items() if int(s) != int(slot) and eid)


def candidates_for_slot(
    equipment: Sequence[Equipment],
    *,
    slot: int,
    busy: frozenset[str],
    selection: Mapping[int, Optional[str]],
) -> list[EquipmentCandidate]:
    others = selected_in_other_slots(selection, slot)
    out: list[EquipmentCandidate] = []
    for unit in equipment:
        if unit.equipment_id in busy:
            availability = Availability.BUSY
        elif unit.equipment_id in others:
            availability = Availability.SELECTED_IN_OTHER_SLOT
        else:
            availability = Availability.AVAILABLE
        out.append(EquipmentCandidate(equipment=unit, availability=availability))
    return out


def default_selection(
    equipment: Sequence[Equipment],
    *,
    slots: Sequence[int],
    busy: frozenset[str],
    selection: Mapping[int, Optional[str]],
) -> dict[int, Optional[str]]:
    """Fill empty (or stale) slot selections with the first free unit."""

    known = {unit.equipment_id for unit in equipment}
    nxt: dict[int, Optional[str]] = {int(s): selection.get(s) for s in slots}
    for slot in slots:
        current = nxt.get(slot)
        if current and current in known:
            continue
        taken = selected_in_other_slots(nxt, slot)
        nxt[slot] = next(
            (u.equipment_id for u in equipment if u.equipment_id not in taken and u.equipment_id not in busy),
            None,
        )
    return nxt


def is_available(equipment_id: str, *, busy: frozenset[str]) -> bool:
    return equipment_id not in busy
