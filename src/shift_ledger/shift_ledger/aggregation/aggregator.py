"""Log aggregation.

Worked time for a day is the largest per-equipment total, not the sum: parallel
entries on different units describe one person tending several machines at
once. Entries without equipment share one bucket.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import days_between, minutes_since
from ..core.constants import ABSENCE_LEADERS_LIMIT, DEFAULT_REPORT_DAYS, UNKNOWN_EQUIPMENT
from ..core.enums import EntryType
from ..logs.model import WorkLogEntry
from .model import AbsenceLeader, DayCell, PeriodStats

MinutesOf = Callable[[WorkLogEntry], int]


def stored_minutes(entry: WorkLogEntry) -> int:
    return int(entry.duration_minutes)


def live_minutes(now: datetime) -> MinutesOf:
    """Stored duration for completed entries, elapsed-so-far for running ones."""

    def minutes_of(entry: WorkLogEntry) -> int:
        if entry.in_progress:
            return max(minutes_since(entry.check_in, now), 0)
        return int(entry.duration_minutes)

    return minutes_of


def equipment_totals(entries: Iterable[WorkLogEntry], *, minutes_of: MinutesOf = stored_minutes) -> dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for entry in entries:
        totals[entry.equipment_id or UNKNOWN_EQUIPMENT] += minutes_of(entry)
    return dict(totals)


def day_worked_minutes(entries: Iterable[WorkLogEntry], *, minutes_of: MinutesOf = stored_minutes) -> int:
    """Max-across-equipment total for entries of a single day."""

    totals = equipment_totals(entries, minutes_of=minutes_of)
    return max(totals.values(), default=0)


def completed_work(entries: Iterable[WorkLogEntry]) -> list[WorkLogEntry]:
    return [e for e in entries if e.completed_work]


def group_by_date(entries: Iterable[WorkLogEntry]) -> dict[date, list[WorkLogEntry]]:
    grouped: dict[date, list[WorkLogEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.work_date].append(entry)
    return dict(grouped)


def worked_minutes_by_day(entries: Iterable[WorkLogEntry]) -> dict[date, int]:
    return {d: day_worked_minutes(day) for d, day in group_by_date(completed_work(entries)).items()}


def total_worked_minutes(entries: Iterable[WorkLogEntry]) -> int:
    return sum(worked_minutes_by_day(entries).values())


def period_stats(entries: Sequence[WorkLogEntry], *, start: date, end: date, today: date) -> PeriodStats:
    """Stats for one employee's entries restricted to [start, end].

    Days up to `today` with no entry of any type count as implicit days off.
    """

    in_range = [e for e in entries if start <= e.work_date <= end]
    per_day = worked_minutes_by_day(in_range)

    counts = {t: 0 for t in EntryType}
    for entry in in_range:
        counts[entry.entry_type] += 1

    logged_dates = {e.work_date for e in in_range}
    past_days = days_between(start, min(end, today))
    implicit = sum(1 for d in past_days if d not in logged_dates)

    return PeriodStats(
        work_days=len(per_day),
        work_minutes=sum(per_day.values()),
        sick=counts[EntryType.SICK],
        vacation=counts[EntryType.VACATION],
        explicit_day_off=counts[EntryType.DAY_OFF],
        implicit_day_off=implicit,
    )


def day_cell(
    day_entries: Sequence[WorkLogEntry],
    *,
    work_date: date,
    today: date,
    equipment_id: Optional[str] = None,
) -> DayCell:
    """Matrix cell; with `equipment_id` only that unit's entries are summed."""

    if work_date > today:
        return DayCell(work_date=work_date.isoformat(), is_future=True)

    work = [e for e in day_entries if e.is_work and (equipment_id is None or e.equipment_id == equipment_id)]
    if equipment_id is None:
        minutes = day_worked_minutes(work)
    else:
        minutes = sum(e.duration_minutes for e in work)

    absence = next((e.entry_type for e in day_entries if e.entry_type.is_absence), None)
    return DayCell(
        work_date=work_date.isoformat(),
        absence=absence,
        minutes=minutes,
        has_work=bool(work),
        pending=any(e.in_progress for e in work),
        corrected=any(e.is_corrected for e in day_entries),
        night=any(e.night_shift for e in day_entries),
    )


def month_matrix(
    entries: Sequence[WorkLogEntry],
    *,
    days: Sequence[date],
    today: date,
    equipment_id: Optional[str] = None,
) -> list[DayCell]:
    by_date = group_by_date(entries)
    return [day_cell(by_date.get(d, []), work_date=d, today=today, equipment_id=equipment_id) for d in days]


def average_weekly_hours(entries: Iterable[WorkLogEntry], *, today: date, days: int = DEFAULT_REPORT_DAYS) -> float:
    """WORK minutes over the trailing `days` (today included) as hours per day."""

    window = {today - timedelta(days=i) for i in range(days)}
    minutes = sum(e.duration_minutes for e in entries if e.is_work and e.work_date in window)
    return (minutes / 60) / days


def absence_leaders(
    entries: Iterable[WorkLogEntry],
    names: dict[str, str],
    *,
    limit: int = ABSENCE_LEADERS_LIMIT,
) -> list[AbsenceLeader]:
    """Employees with the most sick/vacation entries, most first, zero counts dropped."""

    counts: dict[str, int] = defaultdict(int)
    for entry in entries:
        if entry.entry_type in (EntryType.SICK, EntryType.VACATION):
            counts[entry.employee_id] += 1

    leaders = [
        AbsenceLeader(employee_id=eid, full_name=names.get(eid, eid), count=count)
        for eid, count in counts.items()
        if count > 0
    ]
    leaders.sort(key=lambda a: a.count, reverse=True)
    return leaders[:limit]
