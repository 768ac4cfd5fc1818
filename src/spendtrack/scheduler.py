"""
Recurring transaction scheduler - the entry point for recurrence ticks.

Run it from cron (one tick per invocation) or as a long-lived worker:

    python -m spendtrack.scheduler
    python -m spendtrack.scheduler --loop --interval 3600
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime

from spendtrack.config import settings
from spendtrack.core.logging import setup_logging
from spendtrack.db.session import AsyncSessionLocal
from spendtrack.schemas.recurrence import RecurrenceRunResult
from spendtrack.services.recurrence import RecurrenceService

logger = logging.getLogger(__name__)


async def run_once(now: datetime | None = None) -> RecurrenceRunResult:
    """Run a single recurrence tick in its own database session."""
    async with AsyncSessionLocal() as session:
        return await RecurrenceService(session).run_tick(now)


async def run_forever(interval_seconds: int) -> None:
    """Run ticks back to back, sleeping interval_seconds between them.

    A tick that fails as a whole (e.g. the database is down) is logged and
    retried at the next interval.
    """
    while True:
        try:
            await run_once()
        except Exception:
            logger.exception("Recurrence tick failed")
        await asyncio.sleep(interval_seconds)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate due recurring transactions")
    parser.add_argument("--loop", action="store_true", help="Keep running instead of a single tick")
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.scheduler_interval_seconds,
        help="Seconds between ticks when looping",
    )
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, settings.log_json)

    if args.loop:
        asyncio.run(run_forever(args.interval))
        return 0

    try:
        result = asyncio.run(run_once())
    except Exception:
        logger.exception("Recurrence tick failed")
        return 1

    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main())
