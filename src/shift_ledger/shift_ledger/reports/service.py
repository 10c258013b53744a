from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..aggregation.aggregator import total_worked_minutes
from ..common.datetime_utils import format_duration, format_hours, format_time
from ..employees.service import EmployeeDirectory
from ..logs.repository import WorkLogRepository

CSV_FIELDS = ["date", "employee", "type", "start", "end", "minutes", "hours"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class TimesheetReportService:
    def __init__(self, logs: WorkLogRepository, directory: EmployeeDirectory):
        self._logs = logs
        self._directory = directory

    def build_timesheet_report(
        self,
        *,
        organization_id: str,
        start: date,
        end: date,
        employee_id: Optional[str] = None,
    ) -> ReportData:
        names = {e.employee_id: e.full_name for e in self._directory.list_employees(organization_id)}
        logs = self._logs.list_for_organization(organization_id, start_date=start, end_date=end)
        if employee_id is not None:
            logs = [e for e in logs if e.employee_id == str(employee_id)]

        rows: list[dict] = []
        per_employee: dict[str, list] = {}
        for e in logs:
            rows.append(
                {
                    "date": e.work_date.strftime("%Y-%m-%d"),
                    "employee": names.get(e.employee_id, "Deleted"),
                    "type": e.entry_type.value,
                    "start": format_time(e.check_in) if e.check_in else "",
                    "end": format_time(e.check_out) if e.check_out else "",
                    "minutes": e.duration_minutes,
                    "hours": format_hours(e.duration_minutes),
                }
            )
            per_employee.setdefault(e.employee_id, []).append(e)

        summary = []
        for eid, entries in per_employee.items():
            minutes = total_worked_minutes(entries)
            summary.append(
                {
                    "employee_id": eid,
                    "employee": names.get(eid, "Deleted"),
                    "total_minutes": minutes,
                    "total_hours": format_duration(minutes),
                }
            )

        summary.sort(key=lambda x: x["total_minutes"], reverse=True)
        return ReportData(rows=rows, summary=summary)


def report_to_csv(data: ReportData) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, delimiter=";", lineterminator="\n")
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
