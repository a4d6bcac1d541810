from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .common.errors import register_error_handlers
from .common.logging import setup_logging
from .container import Container, build_container
from .core.settings import AppSettings
from .daily_work.controller import register as register_daily_work
from .database.bootstrap import apply_schema, ensure_demo_team, list_tables
from .health.controller import register as register_health
from .tasks.controller import register as register_tasks
from .teams.controller import register as register_team
from .uploads.controller import register as register_uploads
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _prepare_database(settings_module, db_config: dict) -> None:
    if bool(getattr(settings_module, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings_module, "AUTO_SEED_DB", False)):
        ensure_demo_team(db_config)
        logger.info("demo team ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the API app.

    Without ``container`` the active settings module decides the database
    and the MySQL-backed container is built; tests pass their own.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = importlib.import_module(get_settings_module())
    app.secret_key = getattr(settings_module, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings_module, "DEBUG", False))

    if container is None:
        settings = AppSettings.from_module(settings_module)
        setup_logging(settings.log_level)
        db_config = getattr(settings_module, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings_module, db_config)
        container = build_container(db_config=db_config, settings=settings)
    else:
        settings = container.settings
        setup_logging(settings.log_level)

    app.config["MAX_CONTENT_LENGTH"] = container.files.policy.max_request_size
    app.extensions["team_tasks"] = container
    CORS(app, origins=list(settings.cors_origins), supports_credentials=True)

    register_error_handlers(app, max_upload_file_size=settings.max_upload_file_size)
    register_health(app, container)
    register_uploads(app, container)
    register_users(app, container)
    register_tasks(app, container)
    register_daily_work(app, container)
    register_team(app, container)

    return app
