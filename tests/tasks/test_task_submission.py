from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from src.team_tasks.team_tasks.core.exceptions import TaskNotFound, UploadError


def _file(name="report.pdf", content=b"%PDF-1.4 data", mime="application/pdf"):
    return FileStorage(stream=io.BytesIO(content), filename=name, content_type=mime)


@pytest.fixture
def task(container, team):
    manager, employee = team
    return container.task_service.create(
        manager.user,
        {"title": "Ship it", "assigned_to": employee.user.id, "due_date": "2024-06-01"},
    )


def test_submit_without_files_completes_task(container, team, task):
    _, employee = team
    result = container.task_service.submit(employee.user, task["id"], submission_text="All done")

    assert result == {"submission_id": 1, "files_uploaded": 0}
    view = container.task_service.list_for_employee(employee.user)[0]
    assert view["status"] == "completed"
    assert view["submissions"][0]["status"] == "submitted"
    assert view["submissions"][0]["submission_text"] == "All done"


def test_submit_with_files_stores_them(container, team, task, file_store):
    _, employee = team
    result = container.task_service.submit(
        employee.user, task["id"], files=[_file(), _file("shot.png", b"png", "image/png")]
    )

    assert result["files_uploaded"] == 2
    sub = container.task_service.list_for_employee(employee.user)[0]["submissions"][0]
    assert sub["file_name"] == "report.pdf"
    assert [a["file_type"] for a in sub["attachments"]] == ["application/pdf", "image/png"]
    for a in sub["attachments"]:
        assert a["file_path"].startswith("uploads/tasks/")
        assert file_store.resolve(a["file_path"]).exists()


def test_resubmission_updates_same_row_and_keeps_feedback(container, team, task):
    manager, employee = team
    svc = container.task_service
    first = svc.submit(employee.user, task["id"], submission_text="v1")
    svc.review_submission(manager.user, task["id"], first["submission_id"], status="needs_revision", feedback="More")

    second = svc.submit(employee.user, task["id"], submission_text="v2")

    assert second["submission_id"] == first["submission_id"]
    subs = svc.list_for_employee(employee.user)[0]["submissions"]
    assert len(subs) == 1
    assert subs[0]["submission_text"] == "v2"
    assert subs[0]["status"] == "submitted"
    assert subs[0]["manager_feedback"] == "More"


def test_upload_rules_are_checked_before_any_write(container, team, task, fake_db, file_store):
    _, employee = team
    svc = container.task_service

    with pytest.raises(UploadError, match="Too many files"):
        svc.submit(employee.user, task["id"], files=[_file(f"f{i}.pdf") for i in range(6)])
    with pytest.raises(UploadError, match="not allowed"):
        svc.submit(employee.user, task["id"], files=[_file("run.exe", b"MZ", "application/x-msdownload")])
    with pytest.raises(UploadError, match="too large"):
        svc.submit(employee.user, task["id"], files=[_file(content=b"x" * 2048)])

    assert fake_db.submissions == {}
    assert fake_db.tasks[task["id"]].status.value == "pending"
    assert not (file_store.root / "tasks").exists() or not any((file_store.root / "tasks").iterdir())


def test_failed_write_discards_stored_files(container, team, task, file_store, monkeypatch):
    _, employee = team

    def boom(**_kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(container.tasks_repo, "record_submission", boom)

    with pytest.raises(RuntimeError):
        container.task_service.submit(employee.user, task["id"], files=[_file()])
    assert not any((file_store.root / "tasks").iterdir())


def test_submit_requires_assignment(container, team, task):
    manager, _ = team
    stranger = container.auth_service.register_employee(
        name="Carol", email="carol@x.com", password="secret3", manager_code=manager.team.manager_code
    )
    with pytest.raises(TaskNotFound):
        container.task_service.submit(stranger.user, task["id"])
