import os


def env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "fingerprint_attendance"),
    }


# Local time zone for punches and calendar days
TIMEZONE = os.getenv("TIMEZONE", "Africa/Cairo")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = env_bool("LOG_JSON")

# Thread pool size for bulk jobs (import, leave batches, monthly reset)
BULK_WORKERS = int(os.getenv("BULK_WORKERS", "4"))
