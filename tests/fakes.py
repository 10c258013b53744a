"""In-memory repositories shared by the service and HTTP tests."""

from __future__ import annotations

from datetime import date

from src.shift_ledger.shift_ledger.core.enums import PlanType
from src.shift_ledger.shift_ledger.employees.model import Employee, PositionConfig, PositionPermissions
from src.shift_ledger.shift_ledger.employees.service import EmployeeDirectory
from src.shift_ledger.shift_ledger.equipment.model import Equipment
from src.shift_ledger.shift_ledger.organizations.model import NotificationSettings, Organization
from src.shift_ledger.shift_ledger.shifts.model import ShiftState

ORG = "org-1"

OPERATOR = PositionConfig(
    name="Operator",
    permissions=PositionPermissions(
        multi_slot=True,
        use_machines=True,
        can_use_night_shift=True,
        max_shift_duration_minutes=480,
        default_require_photo=True,
    ),
)
CLERK = PositionConfig(name="Clerk", permissions=PositionPermissions())


class FakeLogsRepo:
    def __init__(self, entries=()):
        self.entries = {e.log_id: e for e in entries}
        self.upserts = 0

    def upsert_logs(self, entries):
        for e in entries:
            self.entries[e.log_id] = e
            self.upserts += 1

    def get_by_id(self, log_id):
        return self.entries.get(log_id)

    def list_for_employee(self, employee_id, *, start_date: date, end_date: date):
        return [e for e in self.entries.values() if e.employee_id == employee_id and start_date <= e.work_date <= end_date]

    def list_for_organization(self, organization_id, *, start_date: date, end_date: date):
        return [
            e for e in self.entries.values() if e.organization_id == organization_id and start_date <= e.work_date <= end_date
        ]

    def list_in_progress(self, organization_id):
        return [e for e in self.entries.values() if e.organization_id == organization_id and e.in_progress]


class FakeActiveRepo:
    """Slot maps; `save_state` also writes its log entries into `logs` when given."""

    def __init__(self, logs=None):
        self.states: dict[str, ShiftState] = {}
        self._logs = logs

    def get_state(self, employee_id):
        return self.states.get(employee_id, ShiftState(employee_id=employee_id))

    def save_state(self, state, *, logs=()):
        logs = list(logs)
        if logs and self._logs is None:
            raise AssertionError("FakeActiveRepo was built without a logs repo")
        if logs:
            self._logs.upsert_logs(logs)
        self.states[state.employee_id] = state


class FakeEmployeesRepo:
    def __init__(self, employees, positions=(OPERATOR, CLERK)):
        self._employees = {e.employee_id: e for e in employees}
        self._positions = list(positions)

    def get_by_id(self, employee_id):
        return self._employees.get(employee_id)

    def list_for_organization(self, organization_id):
        return [e for e in self._employees.values() if e.organization_id == organization_id]

    def list_positions(self, organization_id):
        return self._positions


class FakeOrganizationsRepo:
    def __init__(self, plan=PlanType.PRO, notifications=NotificationSettings()):
        self._org = Organization(organization_id=ORG, name="Workshop", plan=plan, notifications=notifications)

    def get_by_id(self, organization_id):
        return self._org if organization_id == ORG else None


class FakeEquipmentRepo:
    def __init__(self, units=None):
        self._units = units or [
            Equipment("eq-1", "Lathe", ORG),
            Equipment("eq-2", "Press", ORG),
            Equipment("eq-3", "Mill", ORG),
        ]

    def list_for_organization(self, organization_id):
        return [u for u in self._units if u.organization_id == organization_id]

    def get_by_id(self, equipment_id):
        return next((u for u in self._units if u.equipment_id == equipment_id), None)


def operator(employee_id="emp-1", full_name="Anna", **kwargs) -> Employee:
    return Employee(employee_id=employee_id, full_name=full_name, organization_id=ORG, position="Operator", **kwargs)


def clerk(employee_id="emp-9", full_name="Boris", **kwargs) -> Employee:
    return Employee(employee_id=employee_id, full_name=full_name, organization_id=ORG, position="Clerk", **kwargs)


def directory(
    employees, *, plan=PlanType.PRO, positions=(OPERATOR, CLERK), notifications=NotificationSettings()
) -> EmployeeDirectory:
    return EmployeeDirectory(FakeEmployeesRepo(employees, positions), FakeOrganizationsRepo(plan, notifications))
