from config.config import Config, export


class TestingConfig(Config):
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-jwt-secret"
    DB_NAME = "team_tasks_test"
    AUTO_INIT_DB = False
    AUTO_SEED_DB = False


export(globals(), TestingConfig)
