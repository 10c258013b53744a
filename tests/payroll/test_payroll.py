from __future__ import annotations

from datetime import date, datetime

import pytest

from src.shift_ledger.shift_ledger.core.enums import EntryType, PayType, PlanType
from src.shift_ledger.shift_ledger.employees.model import PositionConfig
from src.shift_ledger.shift_ledger.logs.model import WorkLogEntry
from src.shift_ledger.shift_ledger.payroll.calculator.factory import PayrollCalculatorFactory
from src.shift_ledger.shift_ledger.payroll.calculator.hourly_calculator import HourlyPayrollCalculator
from src.shift_ledger.shift_ledger.payroll.calculator.per_shift_calculator import PerShiftPayrollCalculator
from src.shift_ledger.shift_ledger.payroll.model import PayrollPolicy
from src.shift_ledger.shift_ledger.payroll.service import PayrollService, daily_earnings

from tests.fakes import CLERK, OPERATOR, FakeLogsRepo, clerk, directory, operator

DAY = date(2024, 3, 14)
HOURLY = PayrollPolicy(pay_type=PayType.HOURLY, rate=12.0, night_shift_bonus=25.0)
PER_SHIFT = PayrollPolicy(pay_type=PayType.PER_SHIFT, rate=100.0)


def entry(log_id, minutes, equipment_id=None, *, running=False, night=False, employee_id="emp-1", day=DAY):
    check_in = datetime(day.year, day.month, day.day, 8, 0)
    return WorkLogEntry(
        log_id=log_id,
        employee_id=employee_id,
        organization_id="org-1",
        work_date=day,
        entry_type=EntryType.WORK,
        equipment_id=equipment_id,
        check_in=check_in,
        check_out=None if running else check_in,
        duration_minutes=0 if running else minutes,
        night_shift=night,
    )


def test_calculators():
    assert HourlyPayrollCalculator().base_earnings(minutes=90, rate=10) == 15.0
    assert PerShiftPayrollCalculator().base_earnings(minutes=1, rate=80) == 80.0
    assert PerShiftPayrollCalculator().base_earnings(minutes=0, rate=80) == 0.0
    assert isinstance(PayrollCalculatorFactory().for_pay_type(PayType.PER_SHIFT), PerShiftPayrollCalculator)


def test_hourly_uses_max_across_equipment_and_night_bonus_once():
    day = [entry("a", 120, "eq-1", night=True), entry("b", 60, "eq-2", night=True)]
    earned = daily_earnings(day, HOURLY, work_date=DAY)

    assert earned.worked_minutes == 120
    assert earned.base == 24.0
    assert earned.night_bonus == 25.0
    assert earned.total == 49.0


def test_per_shift_is_not_prorated():
    earned = daily_earnings([entry("a", 5)], PER_SHIFT, work_date=DAY)
    assert earned.total == 100.0
    assert daily_earnings([], PER_SHIFT, work_date=DAY).total == 0.0


def test_not_entitled_or_missing_policy_earns_nothing():
    day = [entry("a", 120)]
    assert daily_earnings(day, HOURLY, work_date=DAY, entitled=False).total == 0.0
    assert daily_earnings(day, None, work_date=DAY).total == 0.0


def test_running_shift_counts_only_with_now():
    day = [entry("a", 0, running=True)]
    assert daily_earnings(day, HOURLY, work_date=DAY).total == 0.0
    live = daily_earnings(day, HOURLY, work_date=DAY, now=datetime(2024, 3, 14, 9, 30))
    assert live.worked_minutes == 90
    assert live.base == 18.0


def test_today_earnings_prefers_employee_override(clock):
    positions = (PositionConfig(name="Operator", permissions=OPERATOR.permissions, payroll=PER_SHIFT), CLERK)
    logs = FakeLogsRepo([entry("a", 60)])

    service = PayrollService(logs, directory([operator(payroll=HOURLY)], positions=positions), clock=clock)
    assert service.today_earnings("emp-1").base == 12.0

    service = PayrollService(logs, directory([operator()], positions=positions), clock=clock)
    assert service.today_earnings("emp-1").base == 100.0

    service = PayrollService(logs, directory([operator()], positions=positions, plan=PlanType.FREE), clock=clock)
    assert service.today_earnings("emp-1").total == 0.0


def test_monthly_payroll(clock):
    logs = FakeLogsRepo(
        [
            entry("a", 60, "eq-1", night=True),
            entry("b", 90, "eq-1", day=date(2024, 3, 15)),
            entry("c", 30, "eq-2", day=date(2024, 3, 15)),
            entry("d", 45, employee_id="emp-9"),
            entry("e", 0, employee_id="emp-9", running=True, day=date(2024, 3, 16)),
            entry("f", 600, day=date(2024, 4, 1)),
        ]
    )
    employees = [operator(payroll=HOURLY), clerk(payroll=PER_SHIFT)]
    service = PayrollService(logs, directory(employees), clock=clock)

    rows = {r.employee_id: r for r in service.monthly_payroll("org-1", "2024-03")}

    assert rows["emp-1"].worked_minutes == 150
    assert rows["emp-1"].night_days == 1
    assert rows["emp-1"].total == pytest.approx(12.0 + 25.0 + 18.0)
    assert rows["emp-1"].worked_hours == 2.5
    assert rows["emp-9"].worked_minutes == 45
    assert rows["emp-9"].total == 100.0
