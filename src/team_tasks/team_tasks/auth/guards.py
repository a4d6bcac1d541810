from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.model import User


def bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user() -> User:
    return g.current_user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        if not token:
            raise AuthenticationError("Access token required")

        container = current_app.extensions["team_tasks"]
        g.current_user = container.auth_service.resolve(token)
        return view(*args, **kwargs)

    return wrapper


def _role_required(role: Role):
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if g.current_user.role != role:
                raise AuthorizationError(f"{role.value.capitalize()} access required")
            return view(*args, **kwargs)

        return wrapper

    return decorator


manager_required = _role_required(Role.MANAGER)
employee_required = _role_required(Role.EMPLOYEE)
