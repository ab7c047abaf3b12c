from config.base import BULK_WORKERS, LOG_JSON, TIMEZONE, db_config_from_env, env_bool  # noqa: F401

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = env_bool("AUTO_INIT_DB")
