from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..uploads.storage import StoredFile
from .model import DailyWorkFields, DailyWorkLog


class DailyWorkRepository(Protocol):
    def exists_for_date(self, *, user_id: int, work_date: date) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        fields: DailyWorkFields,
        files: Sequence[StoredFile] = (),
    ) -> int:
        """Insert the entry and its attachments. DuplicateRecordError on (user, date)."""
        raise NotImplementedError

    def get(self, entry_id: int) -> Optional[DailyWorkLog]:
        raise NotImplementedError

    def get_owned(self, entry_id: int, *, user_id: int) -> Optional[DailyWorkLog]:
        raise NotImplementedError

    def update(self, entry_id: int, *, fields: DailyWorkFields) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        """Remove attachments, then the entry, in one transaction."""
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> list[DailyWorkLog]:
        raise NotImplementedError

    def list_for_team(self, team_id: int) -> list[DailyWorkLog]:
        raise NotImplementedError

    def stats_for_user(self, user_id: int) -> dict:
        raise NotImplementedError
