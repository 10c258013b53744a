from __future__ import annotations

from datetime import datetime

import pytest

from src.shift_ledger.shift_ledger.common.datetime_utils import FixedClock


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 14, 10, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)
