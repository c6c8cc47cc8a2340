"""
Provider day view: active appointments within one local calendar day.
"""
from sqlalchemy.orm import Session

from booking.core import timeutils
from booking.core.errors import MSG_VALIDATION_FAILS, ValidationError
from booking.models.appointment import Appointment
from booking.services.user_directory import require_provider


def list_schedule(db: Session, provider_id: int, day: str | None = None) -> list[Appointment]:
    """
    Active appointments of the provider between start and end of `day` (inclusive),
    earliest first. `day` is an ISO date or timestamp; defaults to today.
    """
    require_provider(db, provider_id)
    if day:
        try:
            ref = timeutils.parse_iso(day)
        except ValueError:
            raise ValidationError(MSG_VALIDATION_FAILS) from None
    else:
        ref = timeutils.now()
    return (
        db.query(Appointment)
        .filter(
            Appointment.provider_id == provider_id,
            Appointment.canceled_at.is_(None),
            Appointment.date.between(timeutils.start_of_day(ref), timeutils.end_of_day(ref)),
        )
        .order_by(Appointment.date.asc(), Appointment.id.asc())
        .all()
    )


def serialize_schedule_entry(appointment: Appointment) -> dict:
    return {
        "id": appointment.id,
        "date": timeutils.ensure_utc(appointment.date).isoformat(),
        "past": timeutils.is_before(timeutils.ensure_utc(appointment.date)),
        "client": {"id": appointment.client.id, "name": appointment.client.name},
    }
