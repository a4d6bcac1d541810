from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object, no DB access. ``password_hash`` never leaves the
    service layer; use ``to_public()`` for responses.
    """

    id: int
    name: str
    email: str
    password_hash: str
    role: Role
    team_id: Optional[int]
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_public(self, team: Optional["Team"] = None) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "team_id": self.team_id,
            "is_active": self.is_active,
            "created_at": self.created_at,
        }
        if team is not None:
            data["team_name"] = team.team_name
            data["manager_code"] = team.manager_code
        return data


@dataclass(frozen=True)
class Team:
    id: int
    team_name: str
    manager_id: int
    manager_code: str
    created_at: Optional[datetime] = None
