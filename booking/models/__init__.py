from booking.models.appointment import Appointment
from booking.models.notification import Notification
from booking.models.queued_job import QueuedJob
from booking.models.user import User

__all__ = [
    "Appointment",
    "Notification",
    "QueuedJob",
    "User",
]
