"""Tests for the durable job queue and the worker tick."""
from datetime import timedelta

import pytest

from booking.core import timeutils
from booking.core.constants import CANCELLATION_MAIL_JOB, JOB_COMPLETED, JOB_FAILED, JOB_PENDING, JOB_PROCESSING
from booking.core.errors import MailDeliveryError
from booking.models.appointment import Appointment
from booking.models.queued_job import QueuedJob
from booking.scheduler import job_worker
from booking.services import job_handlers, job_queue
from booking.services.appointment_service import cancel_appointment, create_appointment


@pytest.fixture
def sent(monkeypatch):
    """Capture cancellation mails instead of talking to SMTP."""
    outbox = []

    def fake_send(payload):
        outbox.append(payload)
        return True

    monkeypatch.setattr(job_handlers, "send_cancellation_email", fake_send)
    return outbox


@pytest.fixture
def canceled(db, clock, provider, client_user):
    appt = create_appointment(db, client_user.id, provider.id, "2026-10-19T18:00:00Z")
    return cancel_appointment(db, client_user.id, appt.id)


def test_enqueue_records_a_pending_job(db, clock):
    job = job_queue.enqueue(db, "noop", {"x": 1})
    assert job.id is not None
    assert job.status == JOB_PENDING
    assert job.attempts == 0
    assert job.payload == {"x": 1}


def test_worker_tick_sends_the_cancellation_mail(db, session_factory, canceled, sent):
    assert job_worker.run_job_worker_tick(session_factory) == 1

    assert len(sent) == 1
    assert sent[0]["appointment"]["id"] == canceled.id
    job = job_queue.list_jobs(db, kind=CANCELLATION_MAIL_JOB)[0]
    assert job.status == JOB_COMPLETED
    assert job.attempts == 1
    assert job.finished_at is not None
    assert job.last_error is None


def test_cancellation_is_committed_before_the_worker_runs(db, canceled, sent):
    db.expire_all()
    assert db.get(Appointment, canceled.id).canceled_at is not None
    assert sent == []
    assert [j.status for j in job_queue.list_jobs(db)] == [JOB_PENDING]


def test_mail_failure_marks_job_failed_and_is_not_retried(db, session_factory, canceled, monkeypatch):
    def relay_down(payload):
        raise MailDeliveryError("SMTP delivery failed: connection refused")

    monkeypatch.setattr(job_handlers, "send_cancellation_email", relay_down)
    assert job_worker.run_job_worker_tick(session_factory) == 1
    assert job_worker.run_job_worker_tick(session_factory) == 0

    db.expire_all()
    job = job_queue.list_jobs(db)[0]
    assert job.status == JOB_FAILED
    assert job.attempts == 1
    assert "connection refused" in job.last_error
    assert db.get(Appointment, canceled.id).canceled_at is not None


def test_unknown_kind_fails_without_raising(db, session_factory, clock):
    job_queue.enqueue(db, "does_not_exist", {})
    assert job_queue.run_pending_jobs(session_factory) == 1
    job = job_queue.list_jobs(db)[0]
    assert job.status == JOB_FAILED
    assert "does_not_exist" in job.last_error


def test_jobs_run_oldest_first_and_respect_the_limit(db, session_factory, clock):
    seen = []
    job_queue.register_handler("record")(lambda payload: seen.append(payload["n"]))
    for n in range(3):
        job_queue.enqueue(db, "record", {"n": n})
        clock.advance(seconds=1)

    assert job_queue.run_pending_jobs(session_factory, limit=2) == 2
    assert seen == [0, 1]
    assert job_queue.run_pending_jobs(session_factory, limit=2) == 1
    assert seen == [0, 1, 2]


def test_a_claimed_job_cannot_be_claimed_again(db, session_factory, clock):
    job_queue.enqueue(db, "noop", {})
    first = session_factory()
    second = session_factory()
    try:
        claimed = job_queue.claim_next(first)
        assert claimed is not None
        assert claimed.status == JOB_PROCESSING
        assert claimed.attempts == 1
        assert job_queue.claim_next(second) is None
    finally:
        first.close()
        second.close()


def test_requeue_stale_returns_stuck_jobs_to_pending(db, clock):
    job = job_queue.enqueue(db, "noop", {})
    job.status = JOB_PROCESSING
    job.started_at = timeutils.now() - timedelta(minutes=30)
    fresh = job_queue.enqueue(db, "noop", {})
    fresh.status = JOB_PROCESSING
    fresh.started_at = timeutils.now()
    db.commit()

    assert job_queue.requeue_stale(db, older_than_seconds=600) == 1
    db.expire_all()
    assert db.get(QueuedJob, job.id).status == JOB_PENDING
    assert db.get(QueuedJob, fresh.id).status == JOB_PROCESSING


def test_cancellation_handler_is_registered():
    assert job_queue.get_handler(CANCELLATION_MAIL_JOB) is job_handlers.cancellation_mail
