"""Durable job queue: one row per deferred task, polled by the worker.

status: pending -> processing -> completed | failed. Failed jobs stay failed.
payload: JSON document handed to the handler registered for `kind`.
"""
from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from booking.db.base import Base


class QueuedJob(Base):
    __tablename__ = "queued_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(64), nullable=False)
    payload = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    status = Column(String(16), nullable=False, default="pending", server_default="pending")
    attempts = Column(Integer, nullable=False, default=0, server_default="0")
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_queued_jobs_status_created", "status", "created_at"),)
