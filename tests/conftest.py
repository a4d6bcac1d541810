from __future__ import annotations

import itertools
import os
from datetime import date

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.team_tasks.team_tasks.container import assemble
from src.team_tasks.team_tasks.core.settings import AppSettings
from src.team_tasks.team_tasks.main import create_app
from src.team_tasks.team_tasks.uploads.storage import FileStore, UploadPolicy

from tests.support.fakes import (
    FakeDailyWorkRepo,
    FakeDB,
    FakeTaskRepo,
    FakeTeamOverviewRepo,
    FakeTeamRepo,
    FakeUserRepo,
)

TODAY = date(2024, 5, 20)


@pytest.fixture
def fake_db():
    return FakeDB()


@pytest.fixture
def settings(tmp_path):
    return AppSettings(jwt_secret="test-jwt-secret", upload_folder=str(tmp_path / "uploads"), log_level="WARNING")


@pytest.fixture
def file_store(settings):
    return FileStore(settings.upload_folder, policy=UploadPolicy(max_files=5, max_file_size=1024))


@pytest.fixture
def container(fake_db, settings, file_store):
    counter = itertools.count(1)
    return assemble(
        settings=settings,
        files=file_store,
        users_repo=FakeUserRepo(fake_db),
        teams_repo=FakeTeamRepo(fake_db),
        tasks_repo=FakeTaskRepo(fake_db),
        daily_work_repo=FakeDailyWorkRepo(fake_db),
        team_overview_repo=FakeTeamOverviewRepo(fake_db),
        code_generator=lambda: f"MGR-TEST{next(counter):04d}",
        today=lambda: TODAY,
    )


@pytest.fixture
def app(container):
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def team(container):
    """A manager with one employee on their team."""
    manager = container.auth_service.register_manager(name="Alice", email="alice@x.com", password="secret1")
    employee = container.auth_service.register_employee(
        name="Bob",
        email="bob@x.com",
        password="secret2",
        manager_code=manager.team.manager_code,
    )
    return manager, employee
