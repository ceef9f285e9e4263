"""Purge expired notifications and read notifications past the retention window."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from jobchat.application.use_cases.notifications import NotificationDispatcher
from jobchat.infrastructure.database import SessionLocal, initialize_database
from jobchat.infrastructure.repositories import NotificationRepository


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Delete expired notifications and old read notifications.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Retention window in days for read notifications "
        "(default: NOTIFICATION_RETENTION_DAYS)",
    )
    args = parser.parse_args(argv)
    if args.days is not None and args.days <= 0:
        parser.error("--days must be a positive integer")
    return args


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)

    initialize_database()

    session = SessionLocal()
    try:
        result = NotificationDispatcher(NotificationRepository(session)).sweep_expired(
            retention_days=args.days
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Notification sweep failed: {exc}") from exc
    else:
        print(
            "Notification sweep finished:\n"
            f"  Expired: {result.expired}\n"
            f"  Read and past retention: {result.stale_read}\n"
            f"  Total removed: {result.total}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
