"""Start-of-month job: refill late allowances, backfill last month's missing days.

Meant to be run by an external scheduler, e.g. cron ``0 0 1 * *``.
Pass ``--today YYYY-MM-DD`` to run it for another month.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.fingerprint_attendance.fingerprint_attendance.common.datetime_utils import parse_iso_date
from src.fingerprint_attendance.fingerprint_attendance.container import build_container
from src.fingerprint_attendance.fingerprint_attendance.core.constants import DEFAULT_BULK_WORKERS, DEFAULT_TIMEZONE
from src.fingerprint_attendance.fingerprint_attendance.core.logging import configure_logging

logger = logging.getLogger("monthly_reset")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--today", help="Run as if today were this date (YYYY-MM-DD)")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), json=bool(getattr(settings, "LOG_JSON", False)))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
        bulk_workers=int(getattr(settings, "BULK_WORKERS", DEFAULT_BULK_WORKERS)),
    )
    today = parse_iso_date(args.today) if args.today else None
    report = container.monthly_reset_job.run(today)

    for code, error in sorted(report.errors.items()):
        logger.error("Monthly reset failed for %s: %s", code, error)
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
