from config.config import Config, env_bool, export


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"
    # Create tables on startup (CREATE TABLE IF NOT EXISTS, safe to repeat)
    AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")


export(globals(), DevelopmentConfig)
