"""Logging configuration.

Console logging with a plain or JSON formatter, installed once at startup
(app factory and scripts). Modules log through ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_logging_config(level: str = "INFO", *, json: bool = False) -> Dict[str, Any]:
    formatter = "json" if json else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": PLAIN_FORMAT},
            "json": {"()": jsonlogger.JsonFormatter, "format": JSON_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stderr",
            },
        },
        "root": {"level": level.upper(), "handlers": ["console"]},
    }


def configure_logging(level: str = "INFO", *, json: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(level, json=json))
