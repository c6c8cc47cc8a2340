"""
Appointments API: list my bookings, book a provider, cancel.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session, sessionmaker

from booking.api.deps import get_current_user_id
from booking.core.constants import MAX_DB_INT
from booking.db.session import get_db, get_session_factory
from booking.services.appointment_service import (
    cancel_appointment,
    create_appointment,
    list_appointments,
    serialize_appointment,
    serialize_for_client,
)
from booking.services.notification_service import notify_provider_of_booking

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateAppointmentBody(BaseModel):
    provider_id: int = Field(..., ge=1, le=MAX_DB_INT, description="Id of a provider")
    date: str = Field(..., min_length=1, description="ISO-8601 timestamp; truncated to the hour")


@router.get("/appointments")
def get_appointments(
    page: int = Query(1, ge=1, le=MAX_DB_INT),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> list[dict]:
    """Active appointments of the caller, earliest first, 20 per page."""
    return [serialize_for_client(a) for a in list_appointments(db, user_id, page)]


@router.post("/appointments")
def post_appointment(
    body: CreateAppointmentBody,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
    user_id: int = Depends(get_current_user_id),
) -> dict:
    """
    Book the hour containing `date` with `provider_id`.
    The provider's notification is written after the response is sent.
    """
    appointment = create_appointment(db, user_id, body.provider_id, body.date)
    background_tasks.add_task(notify_provider_of_booking, session_factory, appointment.id)
    return serialize_appointment(appointment)


@router.delete("/appointments/{appointment_id}")
def delete_appointment(
    appointment_id: int = Path(..., ge=1, le=MAX_DB_INT),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> dict:
    """Cancel (at least 2 hours ahead). The provider is emailed by the job worker."""
    return serialize_appointment(cancel_appointment(db, user_id, appointment_id))
