from __future__ import annotations

from flask import Blueprint, Flask, request

from ..auth.guards import current_user, employee_required, manager_required
from ..common.request_body import form_or_json
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("daily_work", __name__, url_prefix=f"{container.settings.api_prefix}/daily-work")
    logs = container.daily_work_service

    @bp.get("/employee")
    @employee_required
    def my_entries():
        return ok(logs.list_mine(current_user()))

    @bp.get("/team")
    @manager_required
    def team_entries():
        return ok(logs.list_team(current_user()))

    @bp.get("/stats")
    @employee_required
    def stats():
        return ok(logs.stats(current_user()))

    @bp.post("")
    @bp.post("/")
    @employee_required
    def create_entry():
        entry = logs.create(current_user(), form_or_json(), files=request.files.getlist("files"))
        return ok(entry, message="Daily work entry created successfully", status=201)

    @bp.put("/<int:entry_id>")
    @employee_required
    def update_entry(entry_id: int):
        logs.update(current_user(), entry_id, form_or_json())
        return ok(message="Daily work entry updated successfully")

    @bp.delete("/<int:entry_id>")
    @employee_required
    def delete_entry(entry_id: int):
        logs.delete(current_user(), entry_id)
        return ok(message="Daily work entry deleted successfully")

    app.register_blueprint(bp)
