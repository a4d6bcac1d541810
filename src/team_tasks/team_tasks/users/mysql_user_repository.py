from __future__ import annotations

from typing import Optional

from ..core.constants import UQ_TEAMS_MANAGER_CODE, UQ_USERS_EMAIL
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, translate_duplicates
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "id, name, email, password, role, team_id, is_active, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password"],
        role=Role(row["role"]),
        team_id=int(row["team_id"]) if row.get("team_id") is not None else None,
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def email_exists(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if exclude_user_id is None:
                cur.execute("SELECT id FROM users WHERE email=%s", (email,))
            else:
                cur.execute("SELECT id FROM users WHERE email=%s AND id<>%s", (email, int(exclude_user_id)))
            return fetchone(cur) is not None

    def create_manager_with_team(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        team_name: str,
        manager_code: str,
    ) -> tuple[int, int]:
        with translate_duplicates([UQ_USERS_EMAIL, UQ_TEAMS_MANAGER_CODE]):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, password, role, is_active)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (name, email, password_hash, Role.MANAGER.value),
                )
                user_id = int(cur.lastrowid)

                cur.execute(
                    "INSERT INTO teams(team_name, manager_id, manager_code) VALUES(%s,%s,%s)",
                    (team_name, user_id, manager_code),
                )
                team_id = int(cur.lastrowid)

                cur.execute("UPDATE users SET team_id=%s WHERE id=%s", (team_id, user_id))
                return user_id, team_id

    def create_employee(self, *, name: str, email: str, password_hash: str, team_id: int) -> int:
        with translate_duplicates([UQ_USERS_EMAIL]):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, password, role, team_id, is_active)
                    VALUES(%s,%s,%s,%s,%s,1)
                    """,
                    (name, email, password_hash, Role.EMPLOYEE.value, int(team_id)),
                )
                return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, name: str, email: str) -> bool:
        with translate_duplicates([UQ_USERS_EMAIL]):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("UPDATE users SET name=%s, email=%s WHERE id=%s", (name, email, int(user_id)))
                return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password=%s WHERE id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0
