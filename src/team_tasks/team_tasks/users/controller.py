from __future__ import annotations

from flask import Blueprint, Flask

from ..auth.guards import current_user, login_required
from ..common.request_body import json_object
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("auth", __name__, url_prefix=f"{container.settings.api_prefix}/auth")

    @bp.post("/register/manager")
    def register_manager():
        data = json_object()
        result = container.auth_service.register_manager(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
        )
        return ok(result.to_public(), message="Manager registered successfully", status=201)

    @bp.post("/register/employee")
    def register_employee():
        data = json_object()
        result = container.auth_service.register_employee(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            manager_code=data.get("managerCode") or data.get("manager_code"),
        )
        return ok(result.to_public(), message="Employee registered successfully", status=201)

    @bp.post("/login")
    def login():
        data = json_object()
        result = container.auth_service.login(
            email=data.get("email"),
            password=data.get("password"),
            role=data.get("role"),
        )
        return ok(result.to_public(), message="Login successful")

    @bp.get("/me")
    @login_required
    def me():
        return ok(container.profile_service.get_me(current_user()))

    @bp.put("/profile")
    @login_required
    def update_profile():
        data = json_object()
        user = container.profile_service.update_profile(
            current_user(), name=data.get("name"), email=data.get("email")
        )
        return ok(user, message="Profile updated successfully")

    @bp.put("/password")
    @login_required
    def change_password():
        data = json_object()
        container.profile_service.change_password(
            current_user(),
            current_password=data.get("currentPassword") or data.get("current_password"),
            new_password=data.get("newPassword") or data.get("new_password"),
        )
        return ok(message="Password changed successfully")

    app.register_blueprint(bp)
