from __future__ import annotations

from datetime import date

import pytest
from mysql.connector import errors as mysql_errors

from src.team_tasks.team_tasks.core.constants import UQ_DAILY_WORK_USER_DATE
from src.team_tasks.team_tasks.core.exceptions import DuplicateRecordError
from src.team_tasks.team_tasks.daily_work.model import DailyWorkFields
from src.team_tasks.team_tasks.daily_work.mysql_daily_work_repository import MySQLDailyWorkRepository
from src.team_tasks.team_tasks.uploads.storage import StoredFile

from tests.support.recording_db import RecordingDB

FIELDS = DailyWorkFields(
    work_description="Wrote tests",
    hours_worked=6.0,
    project_name="",
    work_category="",
    mood_rating="good",
    challenges_faced="",
    achievements="",
)


def test_delete_removes_attachments_first():
    db = RecordingDB()
    assert MySQLDailyWorkRepository(db).delete(9) is True

    assert db.statements() == [
        "DELETE FROM work_attachments WHERE daily_work_id=%s",
        "DELETE FROM daily_work_logs WHERE id=%s",
    ]
    assert db.steps().count("commit") == 1


def test_create_links_attachments_to_new_entry():
    db = RecordingDB()
    files = [StoredFile(original_name="notes.txt", path="uploads/daily-work/n.txt", mime_type="text/plain", size=5)]

    entry_id = MySQLDailyWorkRepository(db).create(user_id=7, work_date=date(2024, 5, 10), fields=FIELDS, files=files)

    log_insert, attachment = db.statements()
    assert log_insert.startswith("INSERT INTO daily_work_logs(")
    assert attachment.startswith("INSERT INTO work_attachments(daily_work_id")
    assert db.log[1][2][0] == entry_id


def test_duplicate_date_is_translated_and_rolled_back():
    db = RecordingDB()
    db.fail(
        "INSERT INTO daily_work_logs",
        1,
        mysql_errors.IntegrityError(msg=f"Duplicate entry for key '{UQ_DAILY_WORK_USER_DATE}'", errno=1062),
    )

    with pytest.raises(DuplicateRecordError) as exc:
        MySQLDailyWorkRepository(db).create(user_id=7, work_date=date(2024, 5, 10), fields=FIELDS)

    assert exc.value.key == UQ_DAILY_WORK_USER_DATE
    assert "commit" not in db.steps()
    assert "rollback" in db.steps()
