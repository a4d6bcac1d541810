from __future__ import annotations

from typing import Optional, Protocol


class TeamOverviewRepository(Protocol):
    """Read models for a manager's view of their team, plus member activation."""

    def members(self, team_id: int) -> list[dict]:
        raise NotImplementedError

    def active_members(self, team_id: int) -> list[dict]:
        raise NotImplementedError

    def totals(self, *, team_id: int, manager_id: int) -> dict:
        raise NotImplementedError

    def recent_tasks(self, *, manager_id: int, limit: int) -> list[dict]:
        raise NotImplementedError

    def recent_work_logs(self, *, team_id: int, limit: int) -> list[dict]:
        raise NotImplementedError

    def performance_rows(self, team_id: int) -> list[dict]:
        raise NotImplementedError

    def is_team_employee(self, *, team_id: int, user_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> None:
        raise NotImplementedError

    def info(self, team_id: int) -> Optional[dict]:
        raise NotImplementedError
