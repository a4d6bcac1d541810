from __future__ import annotations

from datetime import timedelta

from jose import JWTError, jwt

from ..common.datetime_utils import utc_now
from ..core.constants import TOKEN_EXPIRE_DAYS
from ..core.exceptions import InvalidToken
from ..users.model import User


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens (JWT)."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", expire_days: int = TOKEN_EXPIRE_DAYS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expire = timedelta(days=int(expire_days))

    def issue(self, user: User) -> str:
        now = utc_now()
        claims = {
            "sub": str(user.id),
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expire).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def user_id_from(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            raise InvalidToken()

        sub = payload.get("sub")
        try:
            return int(sub)
        except (TypeError, ValueError):
            raise InvalidToken()
