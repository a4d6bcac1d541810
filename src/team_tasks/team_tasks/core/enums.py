from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for route authorisation."""

    MANAGER = "manager"
    EMPLOYEE = "employee"


class TaskStatus(str, Enum):
    """Persisted task states. "Overdue" is derived from due_date at read time."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class SubmissionStatus(str, Enum):
    """Review state of an employee submission."""

    SUBMITTED = "submitted"
    APPROVED = "approved"
    NEEDS_REVISION = "needs_revision"
