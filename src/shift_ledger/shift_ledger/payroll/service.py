from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..aggregation.aggregator import day_worked_minutes, group_by_date, live_minutes, stored_minutes
from ..common.datetime_utils import Clock, SystemClock, days_in_month
from ..employees.policy import resolve_payroll_policy
from ..employees.service import EmployeeDirectory
from ..logs.model import WorkLogEntry
from ..logs.repository import WorkLogRepository
from .calculator.factory import PayrollCalculatorFactory
from .model import DailyEarnings, MonthlyPayroll, PayrollPolicy

logger = logging.getLogger(__name__)


def daily_earnings(
    day_entries: Iterable[WorkLogEntry],
    policy: Optional[PayrollPolicy],
    *,
    work_date: date,
    now: Optional[datetime] = None,
    entitled: bool = True,
    factory: Optional[PayrollCalculatorFactory] = None,
) -> DailyEarnings:
    """Earnings of one employee for one day.

    With `now`, running shifts count their elapsed time so the figure moves
    while a shift is open; without it only completed entries count. The night
    bonus is added once per day when any contributing entry is night-flagged.
    """

    if not entitled or policy is None:
        return DailyEarnings(work_date=work_date.isoformat(), worked_minutes=0, base=0.0, night_bonus=0.0)

    if now is not None:
        work = [e for e in day_entries if e.is_work and e.work_date == work_date]
        minutes = day_worked_minutes(work, minutes_of=live_minutes(now))
    else:
        work = [e for e in day_entries if e.completed_work and e.work_date == work_date]
        minutes = day_worked_minutes(work, minutes_of=stored_minutes)

    calculator = (factory or PayrollCalculatorFactory()).for_pay_type(policy.pay_type)
    base = calculator.base_earnings(minutes=minutes, rate=policy.rate)
    bonus = float(policy.night_shift_bonus or 0) if any(e.night_shift for e in work) else 0.0
    return DailyEarnings(work_date=work_date.isoformat(), worked_minutes=minutes, base=base, night_bonus=bonus)


class PayrollService:
    def __init__(
        self,
        logs: WorkLogRepository,
        directory: EmployeeDirectory,
        *,
        clock: Optional[Clock] = None,
        factory: Optional[PayrollCalculatorFactory] = None,
    ):
        self._logs = logs
        self._directory = directory
        self._clock = clock or SystemClock()
        self._factory = factory or PayrollCalculatorFactory()

    def today_earnings(self, employee_id: str) -> DailyEarnings:
        ctx = self._directory.context_for(employee_id)
        now = self._clock.now()
        today = now.date()
        logs = self._logs.list_for_employee(ctx.employee.employee_id, start_date=today, end_date=today)
        return daily_earnings(
            logs,
            ctx.payroll_policy,
            work_date=today,
            now=now,
            entitled=ctx.features.payroll,
            factory=self._factory,
        )

    def monthly_payroll(self, organization_id: str, month: str) -> list[MonthlyPayroll]:
        """Per-employee month totals built from completed entries only."""

        days = days_in_month(month)
        entitled = self._directory.organization(organization_id).features.payroll
        employees = self._directory.list_employees(organization_id)
        positions = self._directory.positions(organization_id)
        logs = self._logs.list_for_organization(organization_id, start_date=days[0], end_date=days[-1])

        by_employee: dict[str, list[WorkLogEntry]] = {}
        for entry in logs:
            by_employee.setdefault(entry.employee_id, []).append(entry)

        out: list[MonthlyPayroll] = []
        for employee in employees:
            policy = resolve_payroll_policy(employee, positions)
            mine: Sequence[WorkLogEntry] = by_employee.get(employee.employee_id, [])
            total = 0.0
            minutes = 0
            night_days = 0
            for work_date, day in sorted(group_by_date(mine).items()):
                earned = daily_earnings(day, policy, work_date=work_date, entitled=entitled, factory=self._factory)
                total += earned.total
                minutes += earned.worked_minutes
                if any(e.completed_work and e.night_shift for e in day):
                    night_days += 1
            out.append(
                MonthlyPayroll(
                    employee_id=employee.employee_id,
                    full_name=employee.full_name,
                    policy=policy,
                    worked_minutes=minutes,
                    night_days=night_days,
                    total=round(total, 2),
                )
            )

        logger.info("monthly payroll organization=%s month=%s employees=%s", organization_id, month, len(out))
        return out
