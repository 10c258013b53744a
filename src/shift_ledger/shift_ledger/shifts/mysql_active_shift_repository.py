from __future__ import annotations

from typing import Iterable

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from ..logs.model import WorkLogEntry
from ..logs.mysql_log_repository import LOG_COLUMNS, row_to_entry, upsert_entries
from .model import ShiftState
from .repository import ActiveShiftRepository


class MySQLActiveShiftRepository(ActiveShiftRepository):
    """Slot map stored as (employee_id, slot, log_id) rows joined to work_logs."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_state(self, employee_id: str) -> ShiftState:
        log_columns = ", ".join(f"wl.{c.strip()}" for c in LOG_COLUMNS.split(","))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.slot, {log_columns}
                FROM active_shifts a
                JOIN work_logs wl ON wl.log_id = a.log_id
                WHERE a.employee_id=%s AND wl.check_out IS NULL
                """,
                (employee_id,),
            )
            slots = {int(r["slot"]): row_to_entry(r) for r in fetchall(cur)}

            cur.execute("SELECT night_mode FROM shift_sessions WHERE employee_id=%s", (employee_id,))
            session = fetchone(cur)

        night_mode = as_bool(session["night_mode"]) if session else False
        return ShiftState(employee_id=employee_id, slots=slots, night_mode=night_mode)

    def save_state(self, state: ShiftState, *, logs: Iterable[WorkLogEntry] = ()) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            upsert_entries(cur, logs)
            cur.execute("DELETE FROM active_shifts WHERE employee_id=%s", (state.employee_id,))
            if state.slots:
                cur.executemany(
                    "INSERT INTO active_shifts(employee_id, slot, log_id) VALUES(%s,%s,%s)",
                    [(state.employee_id, int(slot), entry.log_id) for slot, entry in state.slots.items()],
                )
            cur.execute(
                """
                INSERT INTO shift_sessions(employee_id, night_mode) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE night_mode=VALUES(night_mode)
                """,
                (state.employee_id, int(state.night_mode)),
            )
