from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Reads local wall time. The engine only ever sees it through `Clock`."""

    def now(self) -> datetime:
        return now_local()


@dataclass
class FixedClock:
    """Clock pinned to a moment; `advance` moves it forward."""

    current: datetime

    def now(self) -> datetime:
        return self.current

    def advance(self, *, minutes: int = 0, seconds: int = 0) -> datetime:
        self.current = self.current + timedelta(minutes=minutes, seconds=seconds)
        return self.current


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps, truncated toward zero."""
    seconds = (end - start).total_seconds()
    return int(seconds / 60)


def minutes_since(start: Optional[datetime], now: datetime) -> int:
    if start is None:
        return 0
    return elapsed_minutes(start, now)


def format_duration(minutes: int) -> str:
    h, m = divmod(int(minutes), 60)
    return f"{h}h {m}m"


def format_duration_short(minutes: int) -> str:
    if minutes == 0:
        return ""
    h, m = divmod(int(minutes), 60)
    return f"{h}:{m:02d}"


def format_hours(minutes: int) -> str:
    return f"{minutes / 60:.2f}"


def format_time(value: Optional[datetime]) -> str:
    if value is None:
        return "--:--"
    return value.strftime("%H:%M")


def days_in_month(month: str) -> list[date]:
    year, mon = parse_month(month)
    last = calendar.monthrange(year, mon)[1]
    return [date(year, mon, d) for d in range(1, last + 1)]


def days_between(start: date, end: date) -> list[date]:
    """Inclusive list of calendar days from start to end."""
    if end < start:
        return []
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
