from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock, days_in_month
from ..core.constants import DEFAULT_REPORT_DAYS
from ..employees.service import EmployeeDirectory
from ..logs.repository import WorkLogRepository
from . import aggregator
from .model import AbsenceLeader, DayCell, PeriodStats


@dataclass(frozen=True)
class MatrixRow:
    label: str
    equipment_id: Optional[str]
    cells: list[DayCell]


@dataclass(frozen=True)
class OrganizationOverview:
    average_weekly_hours: float
    absence_leaders: list[AbsenceLeader]


class StatsService:
    def __init__(self, logs: WorkLogRepository, directory: EmployeeDirectory, *, clock: Optional[Clock] = None):
        self._logs = logs
        self._directory = directory
        self._clock = clock or SystemClock()

    def _month_logs(self, employee_id: str, month: str):
        days = days_in_month(month)
        return days, self._logs.list_for_employee(employee_id, start_date=days[0], end_date=days[-1])

    def month_stats(self, employee_id: str, month: str) -> PeriodStats:
        days, logs = self._month_logs(employee_id, month)
        today = self._clock.now().date()
        return aggregator.period_stats(logs, start=days[0], end=days[-1], today=today)

    def month_matrix(self, employee_id: str, month: str, *, equipment_names: Optional[dict[str, str]] = None) -> list[MatrixRow]:
        """Total row (max-across-equipment) followed by one row per used unit."""

        days, logs = self._month_logs(employee_id, month)
        today = self._clock.now().date()
        names = equipment_names or {}

        rows = [MatrixRow(label="Worked", equipment_id=None, cells=aggregator.month_matrix(logs, days=days, today=today))]
        used = sorted({e.equipment_id for e in logs if e.equipment_id})
        for eid in used:
            rows.append(
                MatrixRow(
                    label=names.get(eid, eid),
                    equipment_id=eid,
                    cells=aggregator.month_matrix(logs, days=days, today=today, equipment_id=eid),
                )
            )
        return rows

    def organization_overview(self, organization_id: str, month: str) -> OrganizationOverview:
        today = self._clock.now().date()
        week = self._logs.list_for_organization(
            organization_id,
            start_date=today - timedelta(days=DEFAULT_REPORT_DAYS - 1),
            end_date=today,
        )

        days = days_in_month(month)
        month_logs = self._logs.list_for_organization(organization_id, start_date=days[0], end_date=days[-1])
        names = {e.employee_id: e.full_name for e in self._directory.list_employees(organization_id)}
        month_logs = [e for e in month_logs if e.employee_id in names]

        return OrganizationOverview(
            average_weekly_hours=aggregator.average_weekly_hours(week, today=today),
            absence_leaders=aggregator.absence_leaders(month_logs, names),
        )
