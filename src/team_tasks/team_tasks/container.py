from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.tokens import TokenService
from .core.settings import AppSettings
from .daily_work.mysql_daily_work_repository import MySQLDailyWorkRepository
from .daily_work.repository import DailyWorkRepository
from .daily_work.service import DailyWorkService
from .database.connection import DBConfig, DatabaseConnection
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .teams.mysql_team_overview_repository import MySQLTeamOverviewRepository
from .teams.repository import TeamOverviewRepository
from .teams.service import TeamService
from .uploads.storage import FileStore, UploadPolicy
from .users.mysql_team_repository import MySQLTeamRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import TeamRepository, UserRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    settings: AppSettings
    conn: Optional[DatabaseConnection]
    files: FileStore

    users_repo: UserRepository
    teams_repo: TeamRepository
    tasks_repo: TaskRepository
    daily_work_repo: DailyWorkRepository
    team_overview_repo: TeamOverviewRepository

    auth_service: AuthService
    profile_service: ProfileService
    task_service: TaskService
    daily_work_service: DailyWorkService
    team_service: TeamService


def assemble(
    *,
    settings: AppSettings,
    users_repo: UserRepository,
    teams_repo: TeamRepository,
    tasks_repo: TaskRepository,
    daily_work_repo: DailyWorkRepository,
    team_overview_repo: TeamOverviewRepository,
    files: FileStore,
    conn: Optional[DatabaseConnection] = None,
    **service_options,
) -> Container:
    """Wire services on top of the given repositories.

    ``service_options`` may carry ``code_generator`` (manager codes) and
    ``today`` (overdue calculation).
    """
    tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.token_expire_days,
    )

    auth_kwargs = {"max_code_attempts": settings.manager_code_attempts}
    if "code_generator" in service_options:
        auth_kwargs["code_generator"] = service_options["code_generator"]
    task_kwargs = {"today": service_options["today"]} if "today" in service_options else {}

    return Container(
        settings=settings,
        conn=conn,
        files=files,
        users_repo=users_repo,
        teams_repo=teams_repo,
        tasks_repo=tasks_repo,
        daily_work_repo=daily_work_repo,
        team_overview_repo=team_overview_repo,
        auth_service=AuthService(users_repo, teams_repo, tokens, **auth_kwargs),
        profile_service=ProfileService(users_repo, teams_repo),
        task_service=TaskService(tasks_repo, files, **task_kwargs),
        daily_work_service=DailyWorkService(daily_work_repo, files),
        team_service=TeamService(team_overview_repo),
    )


def file_store_for(settings: AppSettings) -> FileStore:
    return FileStore(
        settings.upload_folder,
        policy=UploadPolicy(
            max_files=settings.max_upload_files,
            max_file_size=settings.max_upload_file_size,
        ),
    )


def build_container(*, db_config: dict, settings: AppSettings) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
    )
    conn = DatabaseConnection(config)

    return assemble(
        settings=settings,
        conn=conn,
        files=file_store_for(settings),
        users_repo=MySQLUserRepository(conn),
        teams_repo=MySQLTeamRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        daily_work_repo=MySQLDailyWorkRepository(conn),
        team_overview_repo=MySQLTeamOverviewRepository(conn),
    )
