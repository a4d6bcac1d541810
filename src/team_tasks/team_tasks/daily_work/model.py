from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..tasks.model import Attachment


@dataclass(frozen=True)
class DailyWorkLog:
    """One employee's record of a working day (at most one per user and date)."""

    id: int
    user_id: int
    work_date: date
    work_description: str
    hours_worked: float = 0.0
    project_name: str = ""
    work_category: str = ""
    mood_rating: str = "neutral"
    challenges_faced: str = ""
    achievements: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)

    def to_public(self) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "work_date": self.work_date,
            "work_description": self.work_description,
            "hours_worked": float(self.hours_worked),
            "project_name": self.project_name,
            "work_category": self.work_category,
            "mood_rating": self.mood_rating,
            "challenges_faced": self.challenges_faced,
            "achievements": self.achievements,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "attachments": [a.to_public() for a in self.attachments],
        }
        if self.employee_name is not None:
            data["employee_name"] = self.employee_name
            data["employee_email"] = self.employee_email
        return data


@dataclass(frozen=True)
class DailyWorkFields:
    """Editable part of a log entry, already validated."""

    work_description: str
    hours_worked: float
    project_name: str
    work_category: str
    mood_rating: str
    challenges_faced: str
    achievements: str
