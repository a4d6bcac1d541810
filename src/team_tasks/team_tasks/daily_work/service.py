from __future__ import annotations

import logging
import math
from typing import Any, Iterable

from werkzeug.datastructures import FileStorage

from ..common.validators import optional_text, require_date, require_non_empty
from ..core.constants import DEFAULT_MOOD_RATING, MAX_HOURS_PER_DAY
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DuplicateEntry, DuplicateRecordError, EntryNotFound, ValidationError
from ..uploads.storage import DAILY_WORK_UPLOADS, FileStore
from ..users.model import User
from .model import DailyWorkFields
from .repository import DailyWorkRepository

logger = logging.getLogger(__name__)


def _parse_hours(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Hours worked must be a number")
    if not math.isfinite(hours):
        raise ValidationError("Hours worked must be a number")
    if hours < 0 or hours > MAX_HOURS_PER_DAY:
        raise ValidationError(f"Hours worked must be between 0 and {MAX_HOURS_PER_DAY}")
    return round(hours, 2)


def parse_fields(payload: dict) -> DailyWorkFields:
    return DailyWorkFields(
        work_description=require_non_empty(payload.get("work_description"), "Work description"),
        hours_worked=_parse_hours(payload.get("hours_worked")),
        project_name=optional_text(payload.get("project_name")),
        work_category=optional_text(payload.get("work_category")),
        mood_rating=optional_text(payload.get("mood_rating")).lower() or DEFAULT_MOOD_RATING,
        challenges_faced=optional_text(payload.get("challenges_faced")),
        achievements=optional_text(payload.get("achievements")),
    )


class DailyWorkService:
    """Daily-log recording: one entry per employee per date."""

    def __init__(self, logs: DailyWorkRepository, files: FileStore):
        self._logs = logs
        self._files = files

    @staticmethod
    def _require_employee(user: User) -> None:
        if user.role != Role.EMPLOYEE:
            raise AuthorizationError("Employee access required")

    def list_mine(self, employee: User) -> list[dict]:
        self._require_employee(employee)
        return [log.to_public() for log in self._logs.list_for_user(employee.id)]

    def list_team(self, manager: User) -> list[dict]:
        if manager.role != Role.MANAGER:
            raise AuthorizationError("Manager access required")
        if manager.team_id is None:
            return []
        return [log.to_public() for log in self._logs.list_for_team(manager.team_id)]

    def stats(self, employee: User) -> dict:
        self._require_employee(employee)
        return self._logs.stats_for_user(employee.id)

    def create(self, employee: User, payload: dict, *, files: Iterable[FileStorage] = ()) -> dict:
        self._require_employee(employee)
        if not payload.get("work_date") or not payload.get("work_description"):
            raise ValidationError("Work date and description are required")

        work_date = require_date(payload.get("work_date"), "Work date")
        fields = parse_fields(payload)

        if self._logs.exists_for_date(user_id=employee.id, work_date=work_date):
            raise DuplicateEntry()

        stored = self._files.save(list(files), area=DAILY_WORK_UPLOADS)
        try:
            entry_id = self._logs.create(user_id=employee.id, work_date=work_date, fields=fields, files=stored)
        except DuplicateRecordError:
            self._files.discard(stored)
            raise DuplicateEntry()
        except Exception:
            self._files.discard(stored)
            raise

        logger.info("daily work %s logged by %s for %s", entry_id, employee.id, work_date)
        entry = self._logs.get(entry_id)
        if entry is None:
            raise EntryNotFound()
        return entry.to_public()

    def update(self, employee: User, entry_id: int, payload: dict) -> None:
        self._require_employee(employee)
        entry = self._logs.get_owned(int(entry_id), user_id=employee.id)
        if not entry:
            raise EntryNotFound()

        self._logs.update(entry.id, fields=parse_fields(payload))

    def delete(self, employee: User, entry_id: int) -> None:
        self._require_employee(employee)
        entry = self._logs.get_owned(int(entry_id), user_id=employee.id)
        if not entry:
            raise EntryNotFound()

        self._logs.delete(entry.id)
        logger.info("daily work %s deleted by %s", entry.id, employee.id)
