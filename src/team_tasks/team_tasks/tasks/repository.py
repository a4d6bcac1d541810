from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import SubmissionStatus, TaskPriority, TaskStatus
from ..uploads.storage import StoredFile
from .model import Assignee, Submission, Task


class TaskRepository(Protocol):
    """Tasks, their assignee sets and submissions.

    Every method that writes more than one row runs in a single transaction.
    """

    def valid_assignee_ids(self, *, team_id: int, user_ids: Sequence[int]) -> set[int]:
        """Subset of ``user_ids`` that are employees of ``team_id``."""
        raise NotImplementedError

    def create(
        self,
        *,
        assigned_by: int,
        title: str,
        description: str,
        due_date: date,
        priority: TaskPriority,
        assignee_ids: Sequence[int],
    ) -> int:
        raise NotImplementedError

    def get(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def get_owned(self, task_id: int, *, manager_id: int) -> Optional[Task]:
        raise NotImplementedError

    def update(
        self,
        *,
        task_id: int,
        title: str,
        description: str,
        due_date: date,
        priority: TaskPriority,
        assignee_ids: Sequence[int],
    ) -> None:
        """Overwrite the task fields and replace the assignee set wholesale."""
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError

    def is_assignee(self, task_id: int, *, user_id: int) -> bool:
        raise NotImplementedError

    def set_status(self, task_id: int, status: TaskStatus) -> bool:
        raise NotImplementedError

    def record_submission(
        self,
        *,
        task_id: int,
        user_id: int,
        submission_text: str,
        files: Sequence[StoredFile],
    ) -> int:
        """Upsert the (task, user) submission, attach files, complete the task."""
        raise NotImplementedError

    def get_submission(self, submission_id: int) -> Optional[Submission]:
        raise NotImplementedError

    def review_submission(self, *, submission_id: int, status: SubmissionStatus, feedback: Optional[str]) -> bool:
        raise NotImplementedError

    def list_by_manager(self, manager_id: int) -> list[Task]:
        raise NotImplementedError

    def list_by_assignee(self, user_id: int) -> list[Task]:
        raise NotImplementedError

    def assignees_for(self, task_ids: Iterable[int]) -> dict[int, list[Assignee]]:
        raise NotImplementedError

    def submissions_for(self, task_ids: Iterable[int], *, submitted_by: Optional[int] = None) -> dict[int, list[Submission]]:
        raise NotImplementedError
