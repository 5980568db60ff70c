"""Optional background sweep that backfills absences for recent meetings.

Statistics reads always backfill on demand; the sweep only keeps stored
records current for meetings nobody has queried yet. It is started only when
``BACKFILL_SWEEP_MINUTES`` is greater than zero.
"""
import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlmodel import Session

from union_meetings.attendance.backfill import backfill_recent_meetings
from union_meetings.attendance.roster import DatabaseRoster
from union_meetings.core.clock import system_clock
from union_meetings.core.config import settings
from union_meetings.core.database import engine

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def sweep_job():
    """Background backfill job."""
    try:
        with Session(engine) as session:
            results = backfill_recent_meetings(
                session,
                DatabaseRoster(session),
                system_clock.now(),
                timedelta(hours=settings.backfill_sweep_lookback_hours),
            )
            inserted = sum(r.inserted for r in results)
            logger.info(f"Backfill sweep completed: {len(results)} meetings, {inserted} absences")
    except Exception as e:
        logger.error(f"Backfill sweep failed: {e}")


def start_scheduler():
    """Start the background scheduler if the sweep is enabled."""
    if settings.backfill_sweep_minutes <= 0:
        logger.info("Backfill sweep disabled")
        return
    scheduler.add_job(
        sweep_job,
        trigger=IntervalTrigger(minutes=settings.backfill_sweep_minutes),
        id="backfill_sweep",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started, sweeping every {settings.backfill_sweep_minutes} minutes")


def shutdown_scheduler():
    """Graceful shutdown."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
