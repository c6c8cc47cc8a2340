"""
Appointments: book an hour slot, list a client's upcoming bookings, cancel.

Booking notifications are written by notification_service after the booking
commits; cancellation emails go through the job queue. Neither can undo the
booking or the cancellation.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking.core import timeutils
from booking.core.constants import CANCELLATION_MAIL_JOB, CANCELLATION_WINDOW_HOURS, PAGE_SIZE
from booking.core.errors import (
    MSG_APPOINTMENT_NOT_FOUND,
    MSG_CANCEL_FORBIDDEN,
    MSG_SELF_BOOKING,
    MSG_VALIDATION_FAILS,
    AlreadyCanceledError,
    AuthorizationError,
    CancellationWindowError,
    NotFoundError,
    PastDateError,
    ProviderNotFoundError,
    SlotUnavailableError,
    ValidationError,
)
from booking.models.appointment import Appointment
from booking.services import job_queue
from booking.services.availability import is_available
from booking.services.user_directory import get_provider, public_profile, require_user

logger = logging.getLogger(__name__)


def _iso(value) -> str | None:
    return timeutils.ensure_utc(value).isoformat() if value else None


def is_past(appointment: Appointment) -> bool:
    return timeutils.is_before(timeutils.ensure_utc(appointment.date))


def cancellation_deadline(appointment: Appointment):
    return timeutils.sub_hours(timeutils.ensure_utc(appointment.date), CANCELLATION_WINDOW_HOURS)


def is_cancelable(appointment: Appointment) -> bool:
    """Cancelable up to and including exactly CANCELLATION_WINDOW_HOURS before the start."""
    return not timeutils.is_before(cancellation_deadline(appointment))


def serialize_appointment(appointment: Appointment) -> dict:
    return {
        "id": appointment.id,
        "date": _iso(appointment.date),
        "provider_id": appointment.provider_id,
        "client_id": appointment.client_id,
        "canceled_at": _iso(appointment.canceled_at),
        "past": is_past(appointment),
        "cancelable": appointment.canceled_at is None and is_cancelable(appointment),
    }


def serialize_for_client(appointment: Appointment) -> dict:
    """List entry for the booking client: id, date and the provider's public profile."""
    return {
        "id": appointment.id,
        "date": _iso(appointment.date),
        "past": is_past(appointment),
        "cancelable": is_cancelable(appointment),
        "provider": public_profile(appointment.provider),
    }


def cancellation_payload(appointment: Appointment) -> dict:
    """Job payload for the cancellation email: the canceled appointment plus who to tell."""
    return {
        "appointment": {
            "id": appointment.id,
            "date": _iso(appointment.date),
            "canceled_at": _iso(appointment.canceled_at),
            "provider": {
                "id": appointment.provider.id,
                "name": appointment.provider.name,
                "email": appointment.provider.email,
            },
            "client": {"id": appointment.client.id, "name": appointment.client.name},
        }
    }


def create_appointment(db: Session, client_id: int, provider_id: int, requested_date: str) -> Appointment:
    """
    Book provider_id at the hour containing requested_date (ISO-8601).
    Raises AuthorizationError, ProviderNotFoundError, ValidationError, PastDateError or SlotUnavailableError.
    """
    require_user(db, client_id)
    if get_provider(db, provider_id) is None:
        raise ProviderNotFoundError()
    if provider_id == client_id:
        raise ValidationError(MSG_SELF_BOOKING)

    try:
        hour_start = timeutils.start_of_hour(timeutils.parse_iso(requested_date))
    except (TypeError, ValueError):
        raise ValidationError(MSG_VALIDATION_FAILS) from None

    if not timeutils.is_before(timeutils.now(), hour_start):
        raise PastDateError()

    if not is_available(db, provider_id, hour_start):
        raise SlotUnavailableError()

    appointment = Appointment(client_id=client_id, provider_id=provider_id, date=hour_start)
    db.add(appointment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Lost the race for this slot to a concurrent booking
        if not is_available(db, provider_id, hour_start):
            logger.info("Slot %s for provider %s taken concurrently", hour_start.isoformat(), provider_id)
            raise SlotUnavailableError()
        raise
    db.refresh(appointment)
    logger.info(
        "Appointment %s booked: client=%s provider=%s date=%s",
        appointment.id,
        client_id,
        provider_id,
        hour_start.isoformat(),
    )
    return appointment


def list_appointments(db: Session, client_id: int, page: int = 1) -> list[Appointment]:
    """Active appointments of the client, earliest first, PAGE_SIZE per page (1-based)."""
    if page < 1:
        raise ValidationError(MSG_VALIDATION_FAILS)
    require_user(db, client_id)
    return (
        db.query(Appointment)
        .filter(Appointment.client_id == client_id, Appointment.canceled_at.is_(None))
        .order_by(Appointment.date.asc(), Appointment.id.asc())
        .limit(PAGE_SIZE)
        .offset((page - 1) * PAGE_SIZE)
        .all()
    )


def cancel_appointment(db: Session, client_id: int, appointment_id: int) -> Appointment:
    """
    Soft-cancel an appointment owned by client_id and queue the cancellation email.
    The cancellation is committed before the job is enqueued; an enqueue failure is
    logged and does not undo it.
    """
    require_user(db, client_id)
    appointment = db.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFoundError(MSG_APPOINTMENT_NOT_FOUND)
    if appointment.client_id != client_id:
        raise AuthorizationError(MSG_CANCEL_FORBIDDEN)
    if appointment.canceled_at is not None:
        raise AlreadyCanceledError()
    if not is_cancelable(appointment):
        raise CancellationWindowError()

    appointment.canceled_at = timeutils.now()
    db.commit()
    db.refresh(appointment)
    logger.info("Appointment %s canceled by client %s", appointment.id, client_id)

    try:
        job = job_queue.enqueue(db, CANCELLATION_MAIL_JOB, cancellation_payload(appointment))
        logger.info("Cancellation mail queued as job %s for appointment %s", job.id, appointment.id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not queue cancellation mail for appointment %s", appointment.id)
    return appointment
