"""
Reminder email job.

A periodic caller of the reminder engine for deployments that run a worker
process instead of an external cron hitting /api/cron/reminder-emails. The
engine and its dedup cache are shared with the web app when both run in the
same process.
"""

import asyncio

from interview_notifications.config import settings
from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.services.infrastructure.store_client import close_store_client
from interview_notifications.services.notifications.reminder_service import (
    close_reminder_engine,
    get_reminder_engine,
)

logger = get_logger(__name__)

ERROR_BACKOFF_SECONDS = 60


async def run_reminder_scan_once() -> dict:
    """Run a single reminder scan and return its summary."""
    engine = get_reminder_engine()
    result = await engine.run_once()
    summary = result.to_summary()

    if result.errors:
        logger.warning(
            "Reminder scan found issues",
            error_count=len(result.errors),
            errors=result.errors[:10],
        )
    return summary


async def start_reminder_scheduler() -> None:
    """Scan every REMINDER_INTERVAL_SECONDS until cancelled."""
    interval = settings.REMINDER_INTERVAL_SECONDS
    logger.info("Starting reminder email scheduler", interval_seconds=interval)

    try:
        while True:
            try:
                summary = await run_reminder_scan_once()
                logger.info(
                    "Reminder job cycle completed",
                    **{k: v for k, v in summary.items() if k != "errors"},
                )
                await asyncio.sleep(interval)

            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    "Error in reminder scheduler", error=str(e), error_type=type(e).__name__
                )
                await asyncio.sleep(ERROR_BACKOFF_SECONDS)
    finally:
        await close_reminder_engine()
        await close_store_client()


async def run_reminder_job_once() -> None:
    """Worker entry point for a one-shot scan (e.g. a platform cron container)."""
    try:
        summary = await run_reminder_scan_once()
        logger.info("Reminder job completed", **summary)
    finally:
        await close_reminder_engine()
        await close_store_client()


if __name__ == "__main__":
    asyncio.run(run_reminder_job_once())
