from __future__ import annotations

from typing import Optional, Protocol

from .model import Team, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def email_exists(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def create_manager_with_team(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        team_name: str,
        manager_code: str,
    ) -> tuple[int, int]:
        """Insert the manager, their team and link them in one transaction.

        Returns ``(user_id, team_id)``. Raises DuplicateRecordError on the
        email or manager-code unique keys.
        """
        raise NotImplementedError

    def create_employee(self, *, name: str, email: str, password_hash: str, team_id: int) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, email: str) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError


class TeamRepository(Protocol):
    def get_by_id(self, team_id: int) -> Optional[Team]:
        raise NotImplementedError

    def get_by_code(self, manager_code: str) -> Optional[Team]:
        raise NotImplementedError

    def code_exists(self, manager_code: str) -> bool:
        raise NotImplementedError
