"""
Provider notifications: booking messages, mailbox listing and read state.

notify_provider_of_booking runs after the booking response (FastAPI background
task) in its own session; a failure there is logged and never reaches the client.
"""
import logging

from sqlalchemy.orm import Session, sessionmaker

from booking.config import settings
from booking.core import timeutils
from booking.core.constants import BOOKING_MESSAGES, NOTIFICATIONS_LIMIT
from booking.core.errors import (
    MSG_NOTIFICATION_FORBIDDEN,
    MSG_NOTIFICATION_NOT_FOUND,
    MSG_NOTIFICATIONS_PROVIDER_ONLY,
    AuthorizationError,
    NotFoundError,
)
from booking.models.appointment import Appointment
from booking.models.notification import Notification
from booking.services.user_directory import require_provider

logger = logging.getLogger(__name__)


def compose_booking_message(client_name: str, date, locale: str | None = None) -> str:
    loc = locale or settings.locale
    template = BOOKING_MESSAGES.get(loc.split("_")[0], BOOKING_MESSAGES["en"])
    return template.format(client_name=client_name, date=timeutils.format_slot(date, loc))


def create_notification(db: Session, recipient_id: int, content: str) -> Notification:
    row = Notification(recipient_id=recipient_id, content=content, read=False, created_at=timeutils.now())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def notify_provider_of_booking(session_factory: sessionmaker, appointment_id: int) -> Notification | None:
    """Write the 'new booking' notification for the appointment's provider. Returns None on failure."""
    db = session_factory()
    try:
        appointment = db.get(Appointment, appointment_id)
        if appointment is None:
            logger.warning("Booking notification: appointment %s not found", appointment_id)
            return None
        content = compose_booking_message(appointment.client.name, appointment.date)
        row = create_notification(db, appointment.provider_id, content)
        logger.info("Notified provider %s of appointment %s", appointment.provider_id, appointment_id)
        return row
    except Exception as e:
        logger.exception("Booking notification for appointment %s failed: %s", appointment_id, e)
        db.rollback()
        return None
    finally:
        db.close()


def serialize_notification(row: Notification) -> dict:
    return {
        "id": row.id,
        "content": row.content,
        "read": bool(row.read),
        "recipient_id": row.recipient_id,
        "created_at": timeutils.ensure_utc(row.created_at).isoformat() if row.created_at else None,
    }


def list_for_provider(db: Session, provider_id: int) -> list[Notification]:
    """Newest first, NOTIFICATIONS_LIMIT at most. Only providers have a mailbox."""
    require_provider(db, provider_id, MSG_NOTIFICATIONS_PROVIDER_ONLY)
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == provider_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(NOTIFICATIONS_LIMIT)
        .all()
    )


def unread_count(db: Session, provider_id: int) -> int:
    require_provider(db, provider_id, MSG_NOTIFICATIONS_PROVIDER_ONLY)
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == provider_id, Notification.read.is_(False))
        .count()
    )


def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
    """Mark one notification read. Only its recipient may do so."""
    row = db.get(Notification, notification_id)
    if row is None:
        raise NotFoundError(MSG_NOTIFICATION_NOT_FOUND)
    if row.recipient_id != user_id:
        raise AuthorizationError(MSG_NOTIFICATION_FORBIDDEN)
    if not row.read:
        row.read = True
        db.commit()
        db.refresh(row)
    return row
