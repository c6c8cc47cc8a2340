"""
Job worker process: polls queued_jobs and runs their handlers (cancellation mail).

    python -m booking.worker

Runs alongside the API; both share DATABASE_URL. Any number of workers may run,
a job is only ever claimed by one of them.
"""
import logging
from pathlib import Path

from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from booking.config import settings
from booking.scheduler.job_worker import add_worker_jobs, run_job_worker_tick, run_requeue_stale_job

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    scheduler = BlockingScheduler()
    add_worker_jobs(scheduler)
    # One pass on startup so a restart doesn't wait a full interval
    run_requeue_stale_job()
    run_job_worker_tick()
    logger.info(
        "Job worker started: poll every %ss, up to %s jobs per tick",
        settings.worker_poll_interval_seconds,
        settings.worker_batch_size,
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Job worker stopped")


if __name__ == "__main__":
    main()
