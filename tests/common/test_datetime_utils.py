from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.shift_ledger.shift_ledger.common.datetime_utils import (
    FixedClock,
    days_between,
    days_in_month,
    elapsed_minutes,
    format_duration,
    format_duration_short,
    format_hours,
    format_time,
    minutes_since,
)
from src.shift_ledger.shift_ledger.common.validators import require_slot
from src.shift_ledger.shift_ledger.core.exceptions import ValidationError


def test_elapsed_minutes_truncates():
    start = datetime(2024, 3, 14, 8, 0)
    assert elapsed_minutes(start, start + timedelta(minutes=5, seconds=59)) == 5
    assert minutes_since(None, start) == 0


def test_formatting():
    assert format_duration(125) == "2h 5m"
    assert format_duration_short(0) == ""
    assert format_duration_short(65) == "1:05"
    assert format_hours(45) == "0.75"
    assert format_time(None) == "--:--"
    assert format_time(datetime(2024, 1, 1, 7, 3)) == "07:03"


def test_calendar_helpers():
    assert len(days_in_month("2024-02")) == 29
    assert days_in_month("2023-02")[-1] == date(2023, 2, 28)
    assert days_between(date(2024, 3, 2), date(2024, 3, 1)) == []
    assert len(days_between(date(2024, 3, 1), date(2024, 3, 3))) == 3


def test_fixed_clock_advances():
    clock = FixedClock(datetime(2024, 3, 14, 10, 0))
    assert clock.advance(minutes=90) == datetime(2024, 3, 14, 11, 30)
    assert clock.now() == datetime(2024, 3, 14, 11, 30)


def test_require_slot():
    assert require_slot("2", (1, 2, 3)) == 2
    with pytest.raises(ValidationError):
        require_slot(2, (1,))
    with pytest.raises(ValidationError):
        require_slot("x", (1,))
