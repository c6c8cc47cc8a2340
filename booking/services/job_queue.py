"""
Durable job queue on the queued_jobs table.

enqueue() commits a pending row and returns; the worker (booking.worker, or the
embedded scheduler in main.py) calls run_pending_jobs() on an interval. A job is
claimed with a conditional UPDATE on status='pending', so two workers polling the
same table never run the same job. Failed jobs are not retried here.
"""
import logging
from datetime import timedelta
from typing import Any, Callable

from sqlalchemy.orm import Session, sessionmaker

from booking.core import timeutils
from booking.core.constants import JOB_COMPLETED, JOB_FAILED, JOB_PENDING, JOB_PROCESSING
from booking.models.queued_job import QueuedJob

logger = logging.getLogger(__name__)

JobHandler = Callable[[dict[str, Any]], Any]

_handlers: dict[str, JobHandler] = {}

# Pending rows looked at per claim attempt; losing all of them to other workers just ends the tick
_CLAIM_CANDIDATES = 5


def register_handler(kind: str) -> Callable[[JobHandler], JobHandler]:
    """Decorator: run `fn(payload)` for jobs of this kind."""

    def decorator(fn: JobHandler) -> JobHandler:
        _handlers[kind] = fn
        return fn

    return decorator


def get_handler(kind: str) -> JobHandler | None:
    return _handlers.get(kind)


def enqueue(db: Session, kind: str, payload: dict[str, Any]) -> QueuedJob:
    job = QueuedJob(kind=kind, payload=payload, status=JOB_PENDING, attempts=0, created_at=timeutils.now())
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def claim_next(db: Session) -> QueuedJob | None:
    """Flip the oldest pending job to processing and return it, or None when the queue is empty."""
    candidates = [
        row.id
        for row in db.query(QueuedJob.id)
        .filter(QueuedJob.status == JOB_PENDING)
        .order_by(QueuedJob.created_at.asc(), QueuedJob.id.asc())
        .limit(_CLAIM_CANDIDATES)
        .all()
    ]
    for job_id in candidates:
        updated = (
            db.query(QueuedJob)
            .filter(QueuedJob.id == job_id, QueuedJob.status == JOB_PENDING)
            .update(
                {
                    QueuedJob.status: JOB_PROCESSING,
                    QueuedJob.attempts: QueuedJob.attempts + 1,
                    QueuedJob.started_at: timeutils.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        if updated:
            return db.get(QueuedJob, job_id)
    return None


def run_job(db: Session, job: QueuedJob) -> QueuedJob:
    """Run the handler for a claimed job and record completed/failed."""
    handler = get_handler(job.kind)
    if handler is None:
        logger.error("Job %s: no handler registered for kind %r", job.id, job.kind)
        job.status = JOB_FAILED
        job.last_error = f"No handler registered for kind {job.kind!r}"
    else:
        try:
            handler(dict(job.payload or {}))
        except Exception as e:
            logger.exception("Job %s (%s) failed on attempt %s: %s", job.id, job.kind, job.attempts, e)
            job.status = JOB_FAILED
            job.last_error = str(e) or e.__class__.__name__
        else:
            job.status = JOB_COMPLETED
            job.last_error = None
    job.finished_at = timeutils.now()
    db.commit()
    return job


def run_pending_jobs(session_factory: sessionmaker, limit: int = 10) -> int:
    """One worker tick: claim and run up to `limit` jobs, each in its own session. Returns jobs run."""
    processed = 0
    while processed < limit:
        db = session_factory()
        try:
            job = claim_next(db)
            if job is None:
                break
            run_job(db, job)
            processed += 1
        finally:
            db.close()
    if processed:
        logger.info("Job worker: ran %s queued job(s)", processed)
    return processed


def requeue_stale(db: Session, older_than_seconds: int) -> int:
    """Hand jobs stuck in processing (worker died mid-run) back to pending. Returns rows moved."""
    cutoff = timeutils.now() - timedelta(seconds=older_than_seconds)
    moved = (
        db.query(QueuedJob)
        .filter(QueuedJob.status == JOB_PROCESSING, QueuedJob.started_at < cutoff)
        .update({QueuedJob.status: JOB_PENDING, QueuedJob.started_at: None}, synchronize_session=False)
    )
    db.commit()
    if moved:
        logger.warning("Requeued %s stale job(s) stuck in processing since before %s", moved, cutoff.isoformat())
    return moved


def list_jobs(db: Session, status: str | None = None, kind: str | None = None) -> list[QueuedJob]:
    q = db.query(QueuedJob)
    if status:
        q = q.filter(QueuedJob.status == status)
    if kind:
        q = q.filter(QueuedJob.kind == kind)
    return q.order_by(QueuedJob.created_at.asc(), QueuedJob.id.asc()).all()
