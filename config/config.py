import os


def env_bool(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Values shared by every environment; the per-env modules override them."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "team-tasks-secret"
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    JWT_ALGORITHM = "HS256"
    TOKEN_EXPIRE_DAYS = int(os.environ.get("TOKEN_EXPIRE_DAYS", "7"))

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "team_tasks_db")
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "10"))
    DB_POOL_TIMEOUT = float(os.environ.get("DB_POOL_TIMEOUT", "5"))

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    MAX_UPLOAD_FILES = int(os.environ.get("MAX_UPLOAD_FILES", "5"))
    MAX_UPLOAD_FILE_SIZE = int(os.environ.get("MAX_UPLOAD_FILE_SIZE", str(10 * 1024 * 1024)))

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
    API_PREFIX = os.environ.get("API_PREFIX", "/api")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    MANAGER_CODE_ATTEMPTS = int(os.environ.get("MANAGER_CODE_ATTEMPTS", "5"))

    AUTO_INIT_DB = env_bool("AUTO_INIT_DB")
    AUTO_SEED_DB = env_bool("AUTO_SEED_DB")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }


def export(target: dict, cfg: type = Config) -> None:
    """Copy the upper-case settings of ``cfg`` into a settings module namespace."""
    for name in dir(cfg):
        if name.isupper():
            target[name] = getattr(cfg, name)
    target["DB_CONFIG"] = cfg.db_config()
