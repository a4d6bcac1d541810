from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Any

from .constants import MANAGER_CODE_ATTEMPTS, MAX_UPLOAD_FILE_SIZE, MAX_UPLOAD_FILES, TOKEN_EXPIRE_DAYS


@dataclass(frozen=True)
class AppSettings:
    """Runtime knobs read from the active ``config.*`` module."""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_days: int = TOKEN_EXPIRE_DAYS
    db_pool_size: int = 10
    db_pool_timeout: float = 5.0
    upload_folder: str = "uploads"
    max_upload_files: int = MAX_UPLOAD_FILES
    max_upload_file_size: int = MAX_UPLOAD_FILE_SIZE
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("http://localhost:3000",))
    api_prefix: str = "/api"
    log_level: str = "INFO"
    manager_code_attempts: int = MANAGER_CODE_ATTEMPTS

    @classmethod
    def from_module(cls, settings: ModuleType | Any) -> "AppSettings":
        origins = getattr(settings, "CORS_ORIGINS", "http://localhost:3000")
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(",") if o.strip()]

        return cls(
            jwt_secret=str(getattr(settings, "JWT_SECRET", None) or getattr(settings, "SECRET_KEY")),
            jwt_algorithm=str(getattr(settings, "JWT_ALGORITHM", "HS256")),
            token_expire_days=int(getattr(settings, "TOKEN_EXPIRE_DAYS", TOKEN_EXPIRE_DAYS)),
            db_pool_size=int(getattr(settings, "DB_POOL_SIZE", 10)),
            db_pool_timeout=float(getattr(settings, "DB_POOL_TIMEOUT", 5.0)),
            upload_folder=str(getattr(settings, "UPLOAD_FOLDER", "uploads")),
            max_upload_files=int(getattr(settings, "MAX_UPLOAD_FILES", MAX_UPLOAD_FILES)),
            max_upload_file_size=int(getattr(settings, "MAX_UPLOAD_FILE_SIZE", MAX_UPLOAD_FILE_SIZE)),
            cors_origins=tuple(origins),
            api_prefix="/" + str(getattr(settings, "API_PREFIX", "/api")).strip("/"),
            log_level=str(getattr(settings, "LOG_LEVEL", "INFO")),
            manager_code_attempts=int(getattr(settings, "MANAGER_CODE_ATTEMPTS", MANAGER_CODE_ATTEMPTS)),
        )
