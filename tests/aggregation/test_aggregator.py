from __future__ import annotations

from datetime import date, datetime

from src.shift_ledger.shift_ledger.aggregation import aggregator
from src.shift_ledger.shift_ledger.aggregation.model import ABSENCE_CODES
from src.shift_ledger.shift_ledger.core.enums import EntryType
from src.shift_ledger.shift_ledger.logs.model import WorkLogEntry

_seq = iter(range(10_000))


def work(day, minutes, equipment_id=None, *, employee_id="emp-1", running=False, night=False, corrected=False):
    check_in = datetime(day.year, day.month, day.day, 8, 0)
    return WorkLogEntry(
        log_id=f"log-{next(_seq)}",
        employee_id=employee_id,
        organization_id="org-1",
        work_date=day,
        entry_type=EntryType.WORK,
        equipment_id=equipment_id,
        check_in=check_in,
        check_out=None if running else check_in,
        duration_minutes=0 if running else minutes,
        night_shift=night,
        is_corrected=corrected,
    )


def absence(day, entry_type, *, employee_id="emp-1"):
    return WorkLogEntry(
        log_id=f"abs-{next(_seq)}",
        employee_id=employee_id,
        organization_id="org-1",
        work_date=day,
        entry_type=entry_type,
    )


D1 = date(2024, 3, 1)
D2 = date(2024, 3, 2)


def test_parallel_equipment_counts_the_longest():
    entries = [work(D1, 30, "a"), work(D1, 50, "b")]
    assert aggregator.day_worked_minutes(entries) == 50


def test_entries_without_equipment_share_one_bucket():
    entries = [work(D1, 30), work(D1, 40), work(D1, 60, "a")]
    assert aggregator.equipment_totals(entries) == {"unknown": 70, "a": 60}
    assert aggregator.day_worked_minutes(entries) == 70


def test_running_entries_are_ignored_for_totals():
    entries = [work(D1, 30, "a"), work(D1, 0, "b", running=True)]
    assert aggregator.total_worked_minutes(entries) == 30


def test_live_minutes_counts_running_entries():
    entries = [work(D1, 30, "a"), work(D1, 0, "b", running=True)]
    now = datetime(2024, 3, 1, 9, 15)
    assert aggregator.day_worked_minutes(entries, minutes_of=aggregator.live_minutes(now)) == 75


def test_period_stats_with_implicit_days_off():
    entries = [
        work(D1, 120, "a"),
        work(D1, 60, "b"),
        absence(D2, EntryType.SICK),
        absence(date(2024, 3, 3), EntryType.DAY_OFF),
        absence(date(2024, 3, 4), EntryType.VACATION),
        work(date(2024, 3, 5), 45),
    ]
    stats = aggregator.period_stats(entries, start=D1, end=date(2024, 3, 31), today=date(2024, 3, 7))

    assert stats.work_days == 2
    assert stats.work_minutes == 165
    assert (stats.sick, stats.vacation, stats.explicit_day_off) == (1, 1, 1)
    # 6th and 7th have no entries; days after today are not counted
    assert stats.implicit_day_off == 2
    assert stats.day_off == 3


def test_day_cell_codes():
    today = date(2024, 3, 10)
    assert aggregator.day_cell([], work_date=date(2024, 3, 11), today=today).code == ""
    assert aggregator.day_cell([], work_date=D1, today=today).code == "В"
    assert aggregator.day_cell([absence(D1, EntryType.SICK)], work_date=D1, today=today).code == "Б"
    assert aggregator.day_cell([absence(D1, EntryType.VACATION)], work_date=D1, today=today).code == "О"

    cell = aggregator.day_cell([work(D1, 30, "a"), work(D1, 50, "b", night=True, corrected=True)], work_date=D1, today=today)
    assert (cell.code, cell.minutes, cell.night, cell.corrected) == ("", 50, True, True)


def test_per_equipment_row_sums_that_unit():
    entries = [work(D1, 30, "a"), work(D1, 20, "a"), work(D1, 90, "b"), work(D1, 0, "a", running=True)]
    cell = aggregator.day_cell(entries, work_date=D1, today=D2, equipment_id="a")
    assert cell.minutes == 50
    assert cell.pending is True


def test_month_matrix_has_one_cell_per_day():
    days = [date(2024, 2, d) for d in range(1, 30)]
    cells = aggregator.month_matrix([work(date(2024, 2, 3), 60)], days=days, today=date(2024, 2, 10))
    assert len(cells) == 29
    assert cells[2].minutes == 60
    assert cells[20].is_future


def test_average_weekly_hours_and_absence_leaders():
    today = date(2024, 3, 7)
    entries = [work(today, 420), work(date(2024, 3, 1), 420), work(date(2024, 2, 29), 600)]
    assert aggregator.average_weekly_hours(entries, today=today) == 2.0

    month = [
        absence(D1, EntryType.SICK, employee_id="a"),
        absence(D2, EntryType.SICK, employee_id="a"),
        absence(D1, EntryType.VACATION, employee_id="b"),
        absence(D1, EntryType.DAY_OFF, employee_id="c"),
        absence(D1, EntryType.SICK, employee_id="d"),
        absence(D2, EntryType.SICK, employee_id="d"),
        absence(date(2024, 3, 3), EntryType.SICK, employee_id="d"),
        absence(D1, EntryType.SICK, employee_id="e"),
    ]
    leaders = aggregator.absence_leaders(month, {"a": "Anna", "d": "Dmitri"})
    assert [(l.employee_id, l.count) for l in leaders] == [("d", 3), ("a", 2), ("b", 1)]
    assert leaders[0].full_name == "Dmitri"


def test_every_absence_type_has_a_matrix_code():
    assert set(ABSENCE_CODES) == {t for t in EntryType if t.is_absence}
