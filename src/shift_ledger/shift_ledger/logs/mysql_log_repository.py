from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import WorkLogEntry
from .repository import WorkLogRepository

LOG_COLUMNS = """
    log_id, employee_id, organization_id, work_date, entry_type, equipment_id,
    check_in, check_out, duration_minutes, night_shift, photo_in, photo_out,
    is_corrected, correction_note, correction_timestamp
"""


def row_to_entry(r: dict) -> WorkLogEntry:
    return WorkLogEntry(
        log_id=str(r["log_id"]),
        employee_id=str(r["employee_id"]),
        organization_id=str(r["organization_id"]),
        work_date=r["work_date"],
        entry_type=EntryType(r["entry_type"]),
        equipment_id=r.get("equipment_id"),
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        duration_minutes=int(r.get("duration_minutes") or 0),
        night_shift=as_bool(r.get("night_shift")),
        photo_in=r.get("photo_in"),
        photo_out=r.get("photo_out"),
        is_corrected=as_bool(r.get("is_corrected")),
        correction_note=r.get("correction_note"),
        correction_timestamp=r.get("correction_timestamp"),
    )


def upsert_entries(cur, entries: Iterable[WorkLogEntry]) -> None:
    """Upsert on an open cursor so callers can share one transaction."""

    params = [
        (
            e.log_id,
            e.employee_id,
            e.organization_id,
            e.work_date,
            e.entry_type.value,
            e.equipment_id,
            e.check_in,
            e.check_out,
            int(e.duration_minutes),
            int(e.night_shift),
            e.photo_in,
            e.photo_out,
            int(e.is_corrected),
            e.correction_note,
            e.correction_timestamp,
        )
        for e in entries
    ]
    if not params:
        return

    cur.executemany(
        f"""
        INSERT INTO work_logs({LOG_COLUMNS})
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE
            equipment_id=VALUES(equipment_id),
            check_in=VALUES(check_in),
            check_out=VALUES(check_out),
            duration_minutes=VALUES(duration_minutes),
            night_shift=VALUES(night_shift),
            photo_in=VALUES(photo_in),
            photo_out=VALUES(photo_out),
            is_corrected=VALUES(is_corrected),
            correction_note=VALUES(correction_note),
            correction_timestamp=VALUES(correction_timestamp)
        """,
        params,
    )


class MySQLWorkLogRepository(WorkLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_logs(self, entries: Iterable[WorkLogEntry]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            upsert_entries(cur, entries)

    def get_by_id(self, log_id: str) -> Optional[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {LOG_COLUMNS} FROM work_logs WHERE log_id=%s", (log_id,))
            r = fetchone(cur)
            return row_to_entry(r) if r else None

    def list_for_employee(self, employee_id: str, *, start_date: date, end_date: date) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LOG_COLUMNS}
                FROM work_logs
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, check_in ASC
                """,
                (employee_id, start_date, end_date),
            )
            return [row_to_entry(r) for r in fetchall(cur)]

    def list_for_organization(self, organization_id: str, *, start_date: date, end_date: date) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LOG_COLUMNS}
                FROM work_logs
                WHERE organization_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, employee_id ASC, check_in ASC
                """,
                (organization_id, start_date, end_date),
            )
            return [row_to_entry(r) for r in fetchall(cur)]

    def list_in_progress(self, organization_id: str) -> Sequence[WorkLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LOG_COLUMNS}
                FROM work_logs
                WHERE organization_id=%s AND entry_type=%s AND check_out IS NULL
                """,
                (organization_id, EntryType.WORK.value),
            )
            return [row_to_entry(r) for r in fetchall(cur)]
