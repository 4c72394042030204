"""Reminder sweep runner.

Schedule this script (cron, a Kubernetes CronJob, ...) to remind registered
students of events starting within the reminder window.

Usage:
    python src/reminders.py                                # window starts now
    python src/reminders.py --as-of 2026-10-20T09:00:00Z   # replay a past run
    python src/reminders.py --purge                        # also purge expired notifications
"""

import argparse
import sys
from datetime import datetime

import structlog

from campus.domain import campus
from campus.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Send reminders for upcoming campus events")
    parser.add_argument("--as-of", type=_parse_timestamp, help="Start of the reminder window (ISO 8601)")
    parser.add_argument("--purge", action="store_true", help="Purge expired read notifications afterwards")
    args = parser.parse_args(argv)

    configure_logging()
    campus.init()

    from campus.notification.management import PurgeExpiredNotifications
    from campus.notification.reminders import SendEventReminders

    with campus.domain_context():
        result = campus.process(SendEventReminders(as_of=args.as_of), asynchronous=False)
        if args.purge:
            campus.process(PurgeExpiredNotifications(as_of=args.as_of), asynchronous=False)

    logger.info("Reminder run finished", **result.to_dict())
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
