"""
Queued-job worker ticks: every WORKER_POLL_INTERVAL_SECONDS run pending jobs;
every minute hand jobs stuck in processing back to pending.
"""
import logging

from sqlalchemy.orm import sessionmaker

from booking.config import settings
from booking.core.constants import (
    JOB_WORKER_REQUEUE_ID,
    JOB_WORKER_REQUEUE_INTERVAL_SECONDS,
    JOB_WORKER_TICK_ID,
)
from booking.db.session import SessionLocal
from booking.services import job_handlers  # noqa: F401 - fills the handler registry
from booking.services.job_queue import requeue_stale, run_pending_jobs

logger = logging.getLogger(__name__)


def run_job_worker_tick(session_factory: sessionmaker | None = None) -> int:
    try:
        return run_pending_jobs(session_factory or SessionLocal, limit=settings.worker_batch_size)
    except Exception as e:
        logger.exception("Job worker tick failed: %s", e)
        return 0


def run_requeue_stale_job(session_factory: sessionmaker | None = None) -> None:
    db = (session_factory or SessionLocal)()
    try:
        requeue_stale(db, settings.worker_stale_after_seconds)
    except Exception as e:
        logger.exception("Requeue of stale jobs failed: %s", e)
        db.rollback()
    finally:
        db.close()


def add_worker_jobs(scheduler) -> None:
    """Register the worker ticks on an APScheduler scheduler (background or blocking)."""
    scheduler.add_job(
        run_job_worker_tick,
        "interval",
        seconds=settings.worker_poll_interval_seconds,
        id=JOB_WORKER_TICK_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_requeue_stale_job,
        "interval",
        seconds=JOB_WORKER_REQUEUE_INTERVAL_SECONDS,
        id=JOB_WORKER_REQUEUE_ID,
        max_instances=1,
        coalesce=True,
    )
