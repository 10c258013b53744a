from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import WorkLogEntry


class WorkLogRepository(Protocol):
    def upsert_logs(self, entries: Iterable[WorkLogEntry]) -> None:
        """Insert or replace entries by `log_id`. Retrying with the same entries is a no-op."""

        raise NotImplementedError

    def get_by_id(self, log_id: str) -> Optional[WorkLogEntry]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str, *, start_date: date, end_date: date) -> Sequence[WorkLogEntry]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: str, *, start_date: date, end_date: date) -> Sequence[WorkLogEntry]:
        raise NotImplementedError

    def list_in_progress(self, organization_id: str) -> Sequence[WorkLogEntry]:
        """All unfinished WORK entries of the organization, any employee."""

        raise NotImplementedError
