from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..auth.tokens import TokenService
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import (
    MANAGER_CODE_ATTEMPTS,
    MANAGER_CODE_LENGTH,
    MANAGER_CODE_PREFIX,
    MIN_PASSWORD_LENGTH,
    UQ_TEAMS_MANAGER_CODE,
)
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    DuplicateEmail,
    DuplicateRecordError,
    InternalError,
    InvalidCredentials,
    InvalidManagerCode,
    ValidationError,
)
from .model import Team, User
from .repository import TeamRepository, UserRepository

logger = logging.getLogger(__name__)


def _password_matches(pwhash: str, password: str) -> bool:
    try:
        return check_password_hash(pwhash, password)
    except ValueError:
        # e.g. placeholder or corrupted hashes
        return False


_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_manager_code() -> str:
    return MANAGER_CODE_PREFIX + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(MANAGER_CODE_LENGTH))


@dataclass(frozen=True)
class AuthResult:
    """What registration/login hands back to the controller."""

    user: User
    team: Optional[Team]
    token: str

    def to_public(self) -> dict:
        return {"user": self.user.to_public(self.team), "token": self.token}


class AuthService:
    """Use cases: register managers and employees, log in, resolve bearer tokens."""

    def __init__(
        self,
        users: UserRepository,
        teams: TeamRepository,
        tokens: TokenService,
        *,
        code_generator: Callable[[], str] = generate_manager_code,
        max_code_attempts: int = MANAGER_CODE_ATTEMPTS,
    ):
        self._users = users
        self._teams = teams
        self._tokens = tokens
        self._code_generator = code_generator
        self._max_code_attempts = max(1, int(max_code_attempts))

    @staticmethod
    def _validate_signup(name, email, password) -> tuple[str, str, str]:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_non_empty(password, "Password")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        return name, email, password

    def _fresh_manager_code(self) -> str:
        # Cheap pre-check; the unique key on teams.manager_code is the real guard.
        for _ in range(self._max_code_attempts):
            code = self._code_generator()
            if not self._teams.code_exists(code):
                return code
        raise InternalError("Could not allocate a unique manager code")

    def _result_for(self, user_id: int) -> AuthResult:
        user = self._users.get_by_id(user_id)
        if not user:
            raise InternalError()
        team = self._teams.get_by_id(user.team_id) if user.team_id else None
        return AuthResult(user=user, team=team, token=self._tokens.issue(user))

    def register_manager(self, *, name: str, email: str, password: str) -> AuthResult:
        name, email, password = self._validate_signup(name, email, password)

        if self._users.email_exists(email):
            raise DuplicateEmail()

        password_hash = generate_password_hash(password)

        for attempt in range(1, self._max_code_attempts + 1):
            code = self._fresh_manager_code()
            try:
                user_id, team_id = self._users.create_manager_with_team(
                    name=name,
                    email=email,
                    password_hash=password_hash,
                    team_name=f"{name}'s Team",
                    manager_code=code,
                )
            except DuplicateRecordError as e:
                if e.key != UQ_TEAMS_MANAGER_CODE:
                    raise DuplicateEmail()
                logger.warning("manager code %s taken concurrently (attempt %d)", code, attempt)
                continue

            logger.info("manager registered user_id=%s team_id=%s", user_id, team_id)
            return self._result_for(user_id)

        raise InternalError("Could not allocate a unique manager code")

    def register_employee(self, *, name: str, email: str, password: str, manager_code: str) -> AuthResult:
        name, email, password = self._validate_signup(name, email, password)
        code = require_non_empty(manager_code, "Manager code").upper()

        if self._users.email_exists(email):
            raise DuplicateEmail()

        team = self._teams.get_by_code(code)
        if not team:
            raise InvalidManagerCode()

        try:
            user_id = self._users.create_employee(
                name=name,
                email=email,
                password_hash=generate_password_hash(password),
                team_id=team.id,
            )
        except DuplicateRecordError:
            raise DuplicateEmail()

        logger.info("employee registered user_id=%s team_id=%s", user_id, team.id)
        return self._result_for(user_id)

    def login(self, *, email: str, password: str, role: str) -> AuthResult:
        email = require_non_empty(email, "Email").lower()
        require_non_empty(password, "Password")
        role_s = require_non_empty(role, "Role").lower()

        user = self._users.get_by_email(email)
        if not user or not user.is_active or user.role.value != role_s:
            logger.warning("rejected login for %s", email)
            raise InvalidCredentials()

        if not _password_matches(user.password_hash, password):
            logger.warning("rejected login for %s", email)
            raise InvalidCredentials()

        team = self._teams.get_by_id(user.team_id) if user.team_id else None
        return AuthResult(user=user, team=team, token=self._tokens.issue(user))

    def resolve(self, token: str) -> User:
        """Map a bearer token to the current, active user row."""
        user_id = self._tokens.user_id_from(token)
        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid or inactive user")
        return user


class ProfileService:
    """Use cases: a signed-in user reads and edits their own account."""

    def __init__(self, users: UserRepository, teams: TeamRepository):
        self._users = users
        self._teams = teams

    def get_me(self, user: User) -> dict:
        team = self._teams.get_by_id(user.team_id) if user.team_id else None
        return user.to_public(team)

    def update_profile(self, user: User, *, name: str, email: str) -> dict:
        name = require_non_empty(name, "Name")
        email = require_email(email)

        if self._users.email_exists(email, exclude_user_id=user.id):
            raise DuplicateEmail()

        try:
            self._users.update_profile(user.id, name=name, email=email)
        except DuplicateRecordError:
            raise DuplicateEmail()

        updated = self._users.get_by_id(user.id)
        return self.get_me(updated or user)

    def change_password(self, user: User, *, current_password: str, new_password: str) -> None:
        require_non_empty(current_password, "Current password")
        require_min_length(new_password or "", "New password", MIN_PASSWORD_LENGTH)

        if not _password_matches(user.password_hash, current_password):
            raise ValidationError("Incorrect current password")

        self._users.update_password(user.id, password_hash=generate_password_hash(new_password))
        logger.info("password changed user_id=%s", user.id)
