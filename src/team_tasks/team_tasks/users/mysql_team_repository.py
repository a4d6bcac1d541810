from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Team
from .repository import TeamRepository


class MySQLTeamRepository(TeamRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get(self, where: str, value: object) -> Optional[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id, team_name, manager_id, manager_code, created_at FROM teams WHERE {where}=%s",
                (value,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Team(
                id=int(r["id"]),
                team_name=r["team_name"],
                manager_id=int(r["manager_id"]),
                manager_code=r["manager_code"],
                created_at=r.get("created_at"),
            )

    def get_by_id(self, team_id: int) -> Optional[Team]:
        return self._get("id", int(team_id))

    def get_by_code(self, manager_code: str) -> Optional[Team]:
        return self._get("manager_code", manager_code)

    def code_exists(self, manager_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM teams WHERE manager_code=%s", (manager_code,))
            return fetchone(cur) is not None
