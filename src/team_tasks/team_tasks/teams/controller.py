from __future__ import annotations

from flask import Blueprint, Flask

from ..auth.guards import current_user, login_required, manager_required
from ..common.request_body import json_object
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("team", __name__, url_prefix=f"{container.settings.api_prefix}/team")
    teams = container.team_service

    @bp.get("/members")
    @manager_required
    def members():
        return ok(teams.members(current_user()))

    @bp.get("/stats")
    @manager_required
    def stats():
        return ok(teams.stats(current_user()))

    @bp.get("/performance")
    @manager_required
    def performance():
        return ok(teams.performance(current_user()))

    @bp.patch("/members/<int:member_id>/status")
    @manager_required
    def member_status(member_id: int):
        data = json_object()
        active = teams.set_member_status(current_user(), member_id, data.get("is_active"))
        state = "activated" if active else "deactivated"
        return ok(message=f"Team member {state} successfully")

    @bp.get("/info")
    @login_required
    def info():
        return ok(teams.info(current_user()))

    app.register_blueprint(bp)
