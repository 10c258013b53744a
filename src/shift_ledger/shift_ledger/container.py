from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.service import AbsenceService
from .aggregation.service import StatsService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import BUSY_WINDOW_HOURS, DEFAULT_NIGHT_SHIFT_BONUS_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeDirectory
from .equipment.mysql_equipment_repository import MySQLEquipmentRepository
from .equipment.repository import EquipmentRepository
from .logs.mysql_log_repository import MySQLWorkLogRepository
from .logs.repository import WorkLogRepository
from .logs.service import LogCorrectionService
from .monitoring.notifier import LoggingNotifier, Notifier
from .monitoring.overtime import OvertimeMonitor
from .monitoring.service import EmployerOvertimeAlert, OvertimeService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .payroll.service import PayrollService
from .reports.service import TimesheetReportService
from .shifts.mysql_active_shift_repository import MySQLActiveShiftRepository
from .shifts.repository import ActiveShiftRepository
from .shifts.service import ShiftService


@dataclass(frozen=True)
class Container:
    logs_repo: WorkLogRepository
    active_repo: ActiveShiftRepository
    employees_repo: EmployeeRepository
    organizations_repo: OrganizationRepository
    equipment_repo: EquipmentRepository

    directory: EmployeeDirectory
    shift_service: ShiftService
    absence_service: AbsenceService
    stats_service: StatsService
    overtime_service: OvertimeService
    payroll_service: PayrollService
    correction_service: LogCorrectionService
    report_service: TimesheetReportService
    clock: Clock


def wire_services(
    *,
    logs_repo: WorkLogRepository,
    active_repo: ActiveShiftRepository,
    employees_repo: EmployeeRepository,
    organizations_repo: OrganizationRepository,
    equipment_repo: EquipmentRepository,
    clock: Optional[Clock] = None,
    notifier: Optional[Notifier] = None,
    busy_window_hours: int = BUSY_WINDOW_HOURS,
) -> Container:
    clock = clock or SystemClock()
    directory = EmployeeDirectory(employees_repo, organizations_repo)
    notifier = notifier or LoggingNotifier()
    monitor = OvertimeMonitor(notifier=notifier, on_overtime=EmployerOvertimeAlert(directory, notifier))

    return Container(
        logs_repo=logs_repo,
        active_repo=active_repo,
        employees_repo=employees_repo,
        organizations_repo=organizations_repo,
        equipment_repo=equipment_repo,
        directory=directory,
        shift_service=ShiftService(
            logs_repo,
            active_repo,
            directory,
            equipment_repo,
            clock=clock,
            busy_window_hours=busy_window_hours,
            notifier=notifier,
        ),
        absence_service=AbsenceService(logs_repo, active_repo, directory, clock=clock),
        stats_service=StatsService(logs_repo, directory, clock=clock),
        overtime_service=OvertimeService(directory, active_repo, monitor, clock=clock),
        payroll_service=PayrollService(logs_repo, directory, clock=clock),
        correction_service=LogCorrectionService(logs_repo, clock=clock),
        report_service=TimesheetReportService(logs_repo, directory),
        clock=clock,
    )


def build_container(
    *,
    db_config: dict,
    night_shift_bonus_minutes: int = DEFAULT_NIGHT_SHIFT_BONUS_MINUTES,
    busy_window_hours: int = BUSY_WINDOW_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        logs_repo=MySQLWorkLogRepository(conn),
        active_repo=MySQLActiveShiftRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        organizations_repo=MySQLOrganizationRepository(conn, default_night_bonus_minutes=night_shift_bonus_minutes),
        equipment_repo=MySQLEquipmentRepository(conn),
        busy_window_hours=busy_window_hours,
    )
