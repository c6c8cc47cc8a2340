"""Appointments: one hour-aligned slot per row. Soft-cancel only (canceled_at), never deleted.

The partial unique index is what keeps two concurrent bookings out of the same
(provider, hour): the availability check alone is only a fast path.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from booking.db.base import Base


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(DateTime(timezone=True), nullable=False)  # start of the booked hour, UTC
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    canceled_at = Column(DateTime(timezone=True), nullable=True)  # NULL = active
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client = relationship("User", foreign_keys=[client_id], lazy="joined")
    provider = relationship("User", foreign_keys=[provider_id], lazy="joined")

    __table_args__ = (
        Index(
            "uq_appointments_provider_date_active",
            "provider_id",
            "date",
            unique=True,
            postgresql_where=canceled_at.is_(None),
            sqlite_where=canceled_at.is_(None),
        ),
    )
