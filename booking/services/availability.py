"""Slot availability: is a provider free at an hour-aligned instant?"""
from datetime import datetime

from sqlalchemy.orm import Session

from booking.models.appointment import Appointment


def is_available(db: Session, provider_id: int, date: datetime) -> bool:
    """
    True when no active appointment holds (provider_id, date).
    `date` must already be truncated to the hour; it is compared as-is.
    Fast path only: the unique index on active rows is what settles races.
    """
    taken = (
        db.query(Appointment.id)
        .filter(
            Appointment.provider_id == provider_id,
            Appointment.canceled_at.is_(None),
            Appointment.date == date,
        )
        .first()
    )
    return taken is None
