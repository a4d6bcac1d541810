from __future__ import annotations

from flask import Blueprint, Flask, request

from ..auth.guards import current_user, employee_required, manager_required
from ..common.request_body import json_object
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("tasks", __name__, url_prefix=f"{container.settings.api_prefix}/tasks")
    tasks = container.task_service

    # -------- Manager --------
    @bp.get("/manager")
    @manager_required
    def manager_tasks():
        return ok(tasks.list_for_manager(current_user()))

    @bp.get("/team-members")
    @manager_required
    def team_members():
        return ok(container.team_service.team_members_for_assignment(current_user()))

    @bp.post("")
    @bp.post("/")
    @manager_required
    def create_task():
        task = tasks.create(current_user(), json_object())
        return ok(task, message="Task created successfully", status=201)

    @bp.put("/<int:task_id>")
    @manager_required
    def update_task(task_id: int):
        tasks.update(current_user(), task_id, json_object())
        return ok(message="Task updated successfully")

    @bp.delete("/<int:task_id>")
    @manager_required
    def delete_task(task_id: int):
        tasks.delete(current_user(), task_id)
        return ok(message="Task deleted successfully")

    @bp.patch("/<int:task_id>/submissions/<int:submission_id>/review")
    @manager_required
    def review_submission(task_id: int, submission_id: int):
        data = json_object()
        submission = tasks.review_submission(
            current_user(),
            task_id,
            submission_id,
            status=data.get("status"),
            feedback=data.get("feedback") or data.get("manager_feedback"),
        )
        return ok(submission, message="Submission reviewed successfully")

    # -------- Employee --------
    @bp.get("/employee")
    @employee_required
    def employee_tasks():
        return ok(tasks.list_for_employee(current_user()))

    @bp.patch("/<int:task_id>/status")
    @employee_required
    def update_status(task_id: int):
        tasks.update_status(current_user(), task_id, json_object().get("status"))
        return ok(message="Task status updated successfully")

    @bp.post("/<int:task_id>/submit")
    @employee_required
    def submit_task(task_id: int):
        text = request.form.get("submission_text")
        if text is None:
            text = json_object().get("submission_text")
        result = tasks.submit(
            current_user(),
            task_id,
            submission_text=text,
            files=request.files.getlist("files"),
        )
        return ok(result, message="Task submitted successfully")

    app.register_blueprint(bp)
