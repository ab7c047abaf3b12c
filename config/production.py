import os

from config.base import BULK_WORKERS, LOG_LEVEL, TIMEZONE, db_config_from_env, env_bool  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_JSON = env_bool("LOG_JSON", "1")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB")
