from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Equipment
from .repository import EquipmentRepository


class MySQLEquipmentRepository(EquipmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_organization(self, organization_id: str) -> Sequence[Equipment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT equipment_id, name, organization_id FROM equipment WHERE organization_id=%s ORDER BY name",
                (organization_id,),
            )
            return [
                Equipment(equipment_id=str(r["equipment_id"]), name=r["name"], organization_id=str(r["organization_id"]))
                for r in fetchall(cur)
            ]

    def get_by_id(self, equipment_id: str) -> Optional[Equipment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT equipment_id, name, organization_id FROM equipment WHERE equipment_id=%s",
                (equipment_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Equipment(equipment_id=str(r["equipment_id"]), name=r["name"], organization_id=str(r["organization_id"]))
