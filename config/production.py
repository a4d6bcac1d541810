import os

from config.config import Config, export


class ProductionConfig(Config):
    DEBUG = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "please-set-SECRET_KEY")
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")


export(globals(), ProductionConfig)
