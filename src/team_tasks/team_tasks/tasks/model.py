from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import SubmissionStatus, TaskPriority, TaskStatus


@dataclass(frozen=True)
class Task:
    id: int
    title: str
    description: str
    assigned_by: int
    due_date: date
    priority: TaskPriority
    status: TaskStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    assigned_by_name: Optional[str] = None

    def is_overdue(self, today: date) -> bool:
        return self.status != TaskStatus.COMPLETED and self.due_date < today


@dataclass(frozen=True)
class Assignee:
    user_id: int
    name: str
    email: str
    position: int = 0

    def to_public(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class Attachment:
    id: int
    file_name: str
    file_path: str
    file_type: str
    file_size: int

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "file_name": self.file_name,
            "file_path": self.file_path,
            "file_type": self.file_type,
            "file_size": self.file_size,
        }


@dataclass(frozen=True)
class Submission:
    id: int
    task_id: int
    submitted_by: int
    submission_text: str
    status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    manager_feedback: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    submitted_by_name: Optional[str] = None
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "submitted_by": self.submitted_by,
            "submitted_by_name": self.submitted_by_name,
            "submission_text": self.submission_text,
            "status": self.status.value,
            "manager_feedback": self.manager_feedback,
            "file_path": self.file_path,
            "file_name": self.file_name,
            "submitted_at": self.submitted_at,
            "reviewed_at": self.reviewed_at,
            "attachments": [a.to_public() for a in self.attachments],
        }
