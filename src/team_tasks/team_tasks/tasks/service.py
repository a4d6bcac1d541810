from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.validators import optional_text, parse_enum, require_date, require_int, require_non_empty
from ..core.enums import Role, SubmissionStatus, TaskPriority, TaskStatus
from ..core.exceptions import (
    AuthorizationError,
    InvalidAssignees,
    SubmissionNotFound,
    TaskNotFound,
    ValidationError,
)
from ..uploads.storage import TASK_UPLOADS, FileStore
from ..users.model import User
from .model import Assignee, Submission, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

REVIEW_STATUSES = (SubmissionStatus.APPROVED, SubmissionStatus.NEEDS_REVISION)


def normalize_assignee_ids(value: Any) -> list[int]:
    """Accept one id or a list of ids; drop repeats, keep first-seen order."""
    if value is None or value == "" or value == []:
        return []
    raw = value if isinstance(value, (list, tuple)) else [value]

    seen: set[int] = set()
    ids: list[int] = []
    for item in raw:
        user_id = require_int(item, "assigned_to")
        if user_id not in seen:
            seen.add(user_id)
            ids.append(user_id)
    return ids


def task_view(
    task: Task,
    assignees: Sequence[Assignee],
    *,
    today: date,
    submissions: Sequence[Submission] = (),
) -> dict:
    """Response shape for a task. ``assigned_to`` is the primary (first) assignee."""
    ordered = sorted(assignees, key=lambda a: a.position)
    latest = submissions[0] if submissions else None
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "assigned_by": task.assigned_by,
        "assigned_by_name": task.assigned_by_name,
        "assigned_to": ordered[0].user_id if ordered else None,
        "assigned_to_name": ", ".join(a.name for a in ordered) if ordered else "Unassigned",
        "assignees": [a.to_public() for a in ordered],
        "due_date": task.due_date,
        "priority": task.priority.value,
        "status": task.status.value,
        "is_overdue": task.is_overdue(today),
        "created_at": task.created_at,
        "updated_at": task.updated_at,
        "submission_status": latest.status.value if latest else None,
        "submissions": [s.to_public() for s in submissions],
    }


class TaskService:
    """Task lifecycle and submission recording."""

    def __init__(
        self,
        tasks: TaskRepository,
        files: FileStore,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._tasks = tasks
        self._files = files
        self._today = today

    @staticmethod
    def _require_role(user: User, role: Role) -> None:
        if user.role != role:
            raise AuthorizationError(f"{role.value.capitalize()} access required")

    def _views(self, tasks: Sequence[Task], *, submitted_by: Optional[int] = None) -> list[dict]:
        ids = [t.id for t in tasks]
        assignees = self._tasks.assignees_for(ids)
        submissions = self._tasks.submissions_for(ids, submitted_by=submitted_by)
        today = self._today()
        return [
            task_view(t, assignees.get(t.id, []), today=today, submissions=submissions.get(t.id, []))
            for t in tasks
        ]

    def _validated_assignees(self, manager: User, assigned_to: Any) -> list[int]:
        ids = normalize_assignee_ids(assigned_to)
        if not ids:
            raise ValidationError("At least one assignee is required")
        if manager.team_id is None:
            raise InvalidAssignees()

        valid = self._tasks.valid_assignee_ids(team_id=manager.team_id, user_ids=ids)
        if len(valid) != len(ids):
            raise InvalidAssignees()
        return ids

    def _task_fields(self, payload: dict) -> dict:
        if not payload.get("title") or not payload.get("assigned_to") or not payload.get("due_date"):
            raise ValidationError("Title, assigned_to, and due_date are required")
        return {
            "title": require_non_empty(payload.get("title"), "Title"),
            "description": optional_text(payload.get("description")),
            "due_date": require_date(payload.get("due_date"), "Due date"),
            "priority": parse_enum(TaskPriority, payload.get("priority"), "Priority", default=TaskPriority.MEDIUM),
        }

    # -------- Manager --------
    def list_for_manager(self, manager: User) -> list[dict]:
        self._require_role(manager, Role.MANAGER)
        return self._views(self._tasks.list_by_manager(manager.id))

    def get_for_manager(self, manager: User, task_id: int) -> dict:
        self._require_role(manager, Role.MANAGER)
        task = self._tasks.get_owned(int(task_id), manager_id=manager.id)
        if not task:
            raise TaskNotFound()
        return self._views([task])[0]

    def create(self, manager: User, payload: dict) -> dict:
        self._require_role(manager, Role.MANAGER)
        fields = self._task_fields(payload)
        assignee_ids = self._validated_assignees(manager, payload.get("assigned_to"))

        task_id = self._tasks.create(assigned_by=manager.id, assignee_ids=assignee_ids, **fields)
        logger.info("task %s created by %s for %s", task_id, manager.id, assignee_ids)
        return self.get_for_manager(manager, task_id)

    def update(self, manager: User, task_id: int, payload: dict) -> None:
        self._require_role(manager, Role.MANAGER)
        task = self._tasks.get_owned(int(task_id), manager_id=manager.id)
        if not task:
            raise TaskNotFound()

        fields = self._task_fields(payload)
        assignee_ids = self._validated_assignees(manager, payload.get("assigned_to"))

        self._tasks.update(task_id=task.id, assignee_ids=assignee_ids, **fields)
        logger.info("task %s updated by %s", task.id, manager.id)

    def delete(self, manager: User, task_id: int) -> None:
        self._require_role(manager, Role.MANAGER)
        task = self._tasks.get_owned(int(task_id), manager_id=manager.id)
        if not task:
            raise TaskNotFound()

        self._tasks.delete(task.id)
        logger.info("task %s deleted by %s", task.id, manager.id)

    def review_submission(
        self,
        manager: User,
        task_id: int,
        submission_id: int,
        *,
        status: Any,
        feedback: Any = None,
    ) -> dict:
        self._require_role(manager, Role.MANAGER)
        task = self._tasks.get_owned(int(task_id), manager_id=manager.id)
        if not task:
            raise TaskNotFound()

        submission = self._tasks.get_submission(int(submission_id))
        if not submission or submission.task_id != task.id:
            raise SubmissionNotFound()

        new_status = parse_enum(SubmissionStatus, status, "Status")
        if new_status not in REVIEW_STATUSES:
            raise ValidationError("Status must be one of: approved, needs_revision")

        text = optional_text(feedback) or None
        self._tasks.review_submission(submission_id=submission.id, status=new_status, feedback=text)
        logger.info("submission %s reviewed as %s", submission.id, new_status.value)

        updated = self._tasks.get_submission(submission.id)
        return (updated or submission).to_public()

    # -------- Employee --------
    def list_for_employee(self, employee: User) -> list[dict]:
        self._require_role(employee, Role.EMPLOYEE)
        return self._views(self._tasks.list_by_assignee(employee.id), submitted_by=employee.id)

    def _assigned_task(self, employee: User, task_id: int) -> Task:
        task = self._tasks.get(int(task_id))
        if not task or not self._tasks.is_assignee(task.id, user_id=employee.id):
            raise TaskNotFound("Task not found or not assigned to you")
        return task

    def update_status(self, employee: User, task_id: int, status: Any) -> None:
        self._require_role(employee, Role.EMPLOYEE)
        new_status = parse_enum(TaskStatus, status, "Status")
        task = self._assigned_task(employee, task_id)

        self._tasks.set_status(task.id, new_status)
        logger.info("task %s status -> %s by %s", task.id, new_status.value, employee.id)

    def submit(
        self,
        employee: User,
        task_id: int,
        *,
        submission_text: Any = None,
        files: Iterable[FileStorage] = (),
    ) -> dict:
        self._require_role(employee, Role.EMPLOYEE)
        task = self._assigned_task(employee, task_id)

        stored = self._files.save(list(files), area=TASK_UPLOADS)
        try:
            submission_id = self._tasks.record_submission(
                task_id=task.id,
                user_id=employee.id,
                submission_text=optional_text(submission_text),
                files=stored,
            )
        except Exception:
            self._files.discard(stored)
            raise

        logger.info("task %s submitted by %s (%d files)", task.id, employee.id, len(stored))
        return {"submission_id": submission_id, "files_uploaded": len(stored)}
