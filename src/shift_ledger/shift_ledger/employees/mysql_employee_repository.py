from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from ..payroll.model import PayrollPolicy
from .model import Employee, PositionConfig, PositionPermissions
from .repository import EmployeeRepository


def _policy_from_row(r: dict) -> Optional[PayrollPolicy]:
    if not r.get("pay_type"):
        return None
    return PayrollPolicy(
        pay_type=PayType(r["pay_type"]),
        rate=float(r.get("rate") or 0),
        night_shift_bonus=float(r.get("night_shift_bonus") or 0),
    )


def _employee_from_row(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        full_name=r["full_name"],
        organization_id=str(r["organization_id"]),
        position=r["position_name"],
        require_photo=as_bool(r.get("require_photo")),
        payroll=_policy_from_row(r),
        is_active=as_bool(r.get("is_active", 1)),
    )


_EMPLOYEE_COLUMNS = """
    employee_id, full_name, organization_id, position_name, require_photo,
    pay_type, rate, night_shift_bonus, is_active
"""


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _employee_from_row(r) if r else None

    def list_for_organization(self, organization_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE organization_id=%s AND is_active=1 ORDER BY full_name",
                (organization_id,),
            )
            return [_employee_from_row(r) for r in fetchall(cur)]

    def list_positions(self, organization_id: str) -> Sequence[PositionConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT position_name, multi_slot, use_machines, can_use_night_shift,
                       max_shift_duration_minutes, mark_absences, default_require_photo,
                       pay_type, rate, night_shift_bonus
                FROM positions
                WHERE organization_id=%s
                """,
                (organization_id,),
            )
            out = []
            for r in fetchall(cur):
                max_minutes = r.get("max_shift_duration_minutes")
                perms = PositionPermissions(
                    multi_slot=as_bool(r.get("multi_slot")),
                    use_machines=as_bool(r.get("use_machines")),
                    can_use_night_shift=as_bool(r.get("can_use_night_shift")),
                    max_shift_duration_minutes=int(max_minutes) if max_minutes else None,
                    mark_absences=as_bool(r.get("mark_absences")),
                    default_require_photo=as_bool(r.get("default_require_photo")),
                )
                out.append(PositionConfig(name=r["position_name"], permissions=perms, payroll=_policy_from_row(r)))
            return out
