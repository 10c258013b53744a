from __future__ import annotations

from typing import Optional

from ..core.enums import PlanType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchone
from .model import NotificationSettings, Organization
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_night_bonus_minutes: int):
        self._conn_factory = conn_factory
        self._default_night_bonus = int(default_night_bonus_minutes)

    def get_by_id(self, organization_id: str) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, name, plan, night_shift_bonus_minutes,
                       notify_shift_start, notify_shift_end, notify_overtime
                FROM organizations
                WHERE organization_id=%s
                """,
                (organization_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            bonus = r.get("night_shift_bonus_minutes")
            return Organization(
                organization_id=str(r["organization_id"]),
                name=r["name"],
                plan=PlanType(r.get("plan") or PlanType.FREE.value),
                night_shift_bonus_minutes=int(bonus) if bonus is not None else self._default_night_bonus,
                notifications=NotificationSettings(
                    on_shift_start=as_bool(r.get("notify_shift_start")),
                    on_shift_end=as_bool(r.get("notify_shift_end")),
                    on_overtime=as_bool(r.get("notify_overtime")),
                ),
            )
