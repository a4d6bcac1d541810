from __future__ import annotations

import logging
from typing import Any

from ..common.validators import parse_bool, require_int
from ..core.constants import RECENT_ACTIVITY_LIMIT, RECENT_ACTIVITY_PER_KIND
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, MemberNotFound, TeamNotFound
from ..users.model import User
from .repository import TeamOverviewRepository

logger = logging.getLogger(__name__)


def completion_rate(completed: int, total: int) -> float:
    """Completed share of tasks as a percentage, 0 when nothing is assigned."""
    if not total:
        return 0.0
    return round(completed * 100.0 / total, 2)


class TeamService:
    def __init__(self, overview: TeamOverviewRepository):
        self._overview = overview

    @staticmethod
    def _team_of(manager: User) -> int:
        if manager.role != Role.MANAGER:
            raise AuthorizationError("Manager access required")
        if manager.team_id is None:
            raise TeamNotFound()
        return manager.team_id

    def members(self, manager: User) -> list[dict]:
        return self._overview.members(self._team_of(manager))

    def team_members_for_assignment(self, manager: User) -> list[dict]:
        return self._overview.active_members(self._team_of(manager))

    def stats(self, manager: User) -> dict:
        team_id = self._team_of(manager)
        totals = self._overview.totals(team_id=team_id, manager_id=manager.id)

        activity = self._overview.recent_tasks(manager_id=manager.id, limit=RECENT_ACTIVITY_PER_KIND)
        activity += self._overview.recent_work_logs(team_id=team_id, limit=RECENT_ACTIVITY_PER_KIND)
        activity.sort(key=lambda a: a.get("activity_date") or "", reverse=True)

        return {"stats": totals, "recent_activity": activity[:RECENT_ACTIVITY_LIMIT]}

    def performance(self, manager: User) -> list[dict]:
        rows = self._overview.performance_rows(self._team_of(manager))
        for row in rows:
            row["completion_rate"] = completion_rate(row["completed_tasks"], row["total_tasks"])
        rows.sort(key=lambda r: (r["completion_rate"], r["completed_tasks"]), reverse=True)
        return rows

    def set_member_status(self, manager: User, member_id: Any, is_active: Any) -> bool:
        team_id = self._team_of(manager)
        member_id = require_int(member_id, "Member id")
        active = parse_bool(is_active, "is_active")

        if not self._overview.is_team_employee(team_id=team_id, user_id=member_id):
            raise MemberNotFound()

        self._overview.set_active(member_id, is_active=active)
        logger.info("member %s %s by manager %s", member_id, "activated" if active else "deactivated", manager.id)
        return active

    def info(self, user: User) -> dict:
        if user.team_id is None:
            raise TeamNotFound()
        info = self._overview.info(user.team_id)
        if not info:
            raise TeamNotFound()
        return info
