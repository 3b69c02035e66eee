import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
from datetime import date
from typing import Optional

import structlog

from golocal_spaces.db.engine import engine
from golocal_spaces.db.writers.bookings import complete_finished_bookings
from golocal_spaces.logging_config import setup_logging
from golocal_spaces.utils.datetime import utc_now

setup_logging()
logger = structlog.get_logger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Mark confirmed, paid bookings that have ended as completed.

    Intended to run once a day from cron or a scheduled job.
    """
    parser = argparse.ArgumentParser(description="Complete finished bookings")
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Treat this day (YYYY-MM-DD) as today. Defaults to the current UTC date.",
    )
    args = parser.parse_args(argv)
    as_of = args.as_of or utc_now().date()

    try:
        with engine.begin() as conn:
            completed = complete_finished_bookings(conn, as_of)
    except Exception:
        logger.exception("booking_completion_failed", as_of=as_of.isoformat())
        raise

    logger.info("booking_completion_finished", as_of=as_of.isoformat(), completed=completed)
    return completed


if __name__ == "__main__":
    main()
