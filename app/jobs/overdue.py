"""
Overdue sweep for library loans.

    python -m app.jobs.overdue [--date YYYY-MM-DD]

Meant to be run from cron once a day; running it more often is harmless.
"""
import argparse
import logging
from datetime import date

from app.core.config import settings
from app.db.session import SessionLocal
from app.services.library import mark_overdue

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Mark library loans past their due date as overdue.")
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="treat this day as today")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    db = SessionLocal()
    try:
        updated = mark_overdue(db, args.date)
    finally:
        db.close()
    print(f"{updated} issue(s) marked overdue")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
