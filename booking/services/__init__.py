from booking.services.appointment_service import cancel_appointment, create_appointment, list_appointments
from booking.services.notification_service import list_for_provider, mark_read, notify_provider_of_booking
from booking.services.schedule_service import list_schedule

__all__ = [
    "cancel_appointment",
    "create_appointment",
    "list_appointments",
    "list_for_provider",
    "list_schedule",
    "mark_read",
    "notify_provider_of_booking",
]
