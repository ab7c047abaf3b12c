from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_BULK_WORKERS, DEFAULT_TIMEZONE
from .core.exceptions import DomainError, EmployeeNotFound, InsufficientLeaveBalance, ValidationError
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (InsufficientLeaveBalance, 409),
    (EmployeeNotFound, 404),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(exc, kind)), 400)
        logger.info("Rejected request: %s: %s", type(exc).__name__, exc)
        return jsonify({"error": type(exc).__name__, "message": str(exc)}), status


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), json=bool(getattr(settings, "LOG_JSON", False)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            bulk_workers=int(getattr(settings, "BULK_WORKERS", DEFAULT_BULK_WORKERS)),
        )

    register_error_handlers(app)
    register_attendance(app, container)
    return app
