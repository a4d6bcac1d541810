from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from src.team_tasks.team_tasks.core.exceptions import (
    AuthorizationError,
    DuplicateEntry,
    EntryNotFound,
    ValidationError,
)


def _entry(**overrides):
    payload = {
        "work_date": "2024-05-10",
        "work_description": "Fixed the importer",
        "hours_worked": "7.5",
        "project_name": "Importer",
        "work_category": "development",
        "mood_rating": "Good",
        "achievements": "Closed 3 bugs",
    }
    payload.update(overrides)
    return payload


def test_create_and_list_own_entries(container, team):
    _, employee = team
    logs = container.daily_work_service

    created = logs.create(employee.user, _entry())

    assert created["hours_worked"] == 7.5
    assert created["mood_rating"] == "good"
    assert created["attachments"] == []
    assert [e["id"] for e in logs.list_mine(employee.user)] == [created["id"]]


def test_defaults_for_optional_fields(container, team):
    _, employee = team
    created = container.daily_work_service.create(
        employee.user, {"work_date": "2024-05-11", "work_description": "Meetings"}
    )
    assert created["hours_worked"] == 0.0
    assert created["mood_rating"] == "neutral"
    assert created["project_name"] == ""


def test_second_entry_for_same_date_is_rejected(container, team, fake_db):
    _, employee = team
    logs = container.daily_work_service
    logs.create(employee.user, _entry())

    with pytest.raises(DuplicateEntry):
        logs.create(employee.user, _entry(work_description="Again"))
    assert len(fake_db.logs) == 1


class RacingLogs:
    """Pre-check says free, insert hits the unique key."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def exists_for_date(self, *, user_id, work_date):
        return False


def test_duplicate_key_race_maps_to_duplicate_entry(container, team, file_store):
    from src.team_tasks.team_tasks.daily_work.service import DailyWorkService

    _, employee = team
    container.daily_work_service.create(employee.user, _entry())
    racing = DailyWorkService(RacingLogs(container.daily_work_repo), file_store)

    with pytest.raises(DuplicateEntry):
        racing.create(employee.user, _entry())


@pytest.mark.parametrize(
    "overrides",
    [
        {"work_date": ""},
        {"work_description": ""},
        {"work_date": "yesterday"},
        {"hours_worked": "25"},
        {"hours_worked": "-1"},
        {"hours_worked": "lots"},
        {"hours_worked": "nan"},
        {"hours_worked": "inf"},
    ],
)
def test_create_validation(container, team, overrides):
    _, employee = team
    with pytest.raises(ValidationError):
        container.daily_work_service.create(employee.user, _entry(**overrides))


def test_create_with_files(container, team, file_store):
    _, employee = team
    upload = FileStorage(stream=io.BytesIO(b"notes"), filename="notes.txt", content_type="text/plain")

    created = container.daily_work_service.create(employee.user, _entry(), files=[upload])

    assert len(created["attachments"]) == 1
    path = created["attachments"][0]["file_path"]
    assert path.startswith("uploads/daily-work/")
    assert file_store.resolve(path).read_bytes() == b"notes"


def test_update_and_delete_are_owner_scoped(container, team):
    manager, employee = team
    carol = container.auth_service.register_employee(
        name="Carol", email="carol@x.com", password="secret3", manager_code=manager.team.manager_code
    )
    logs = container.daily_work_service
    entry = logs.create(employee.user, _entry())

    with pytest.raises(EntryNotFound):
        logs.update(carol.user, entry["id"], _entry(work_description="Not mine"))
    with pytest.raises(EntryNotFound):
        logs.delete(carol.user, entry["id"])

    logs.update(employee.user, entry["id"], _entry(work_description="Refined", hours_worked=6))
    assert logs.list_mine(employee.user)[0]["work_description"] == "Refined"

    logs.delete(employee.user, entry["id"])
    assert logs.list_mine(employee.user) == []


def test_team_view_and_stats(container, team):
    manager, employee = team
    logs = container.daily_work_service
    logs.create(employee.user, _entry())
    logs.create(employee.user, _entry(work_date="2024-05-11", hours_worked="4.5", project_name="Billing"))
    logs.create(employee.user, _entry(work_date="2024-05-12", hours_worked="8", project_name="Billing"))

    team_logs = logs.list_team(manager.user)
    assert [e["work_date"] for e in team_logs] == sorted((e["work_date"] for e in team_logs), reverse=True)
    assert team_logs[0]["employee_name"] == "Bob"

    stats = logs.stats(employee.user)
    assert stats == {"total_entries": 3, "total_hours": 20.0, "avg_hours_per_day": 6.67, "projects_worked": 2}


def test_role_checks(container, team):
    manager, employee = team
    with pytest.raises(AuthorizationError):
        container.daily_work_service.create(manager.user, _entry())
    with pytest.raises(AuthorizationError):
        container.daily_work_service.list_team(employee.user)
