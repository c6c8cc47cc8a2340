"""Handlers for queued job kinds. Imported by the worker so the registry is filled."""
from typing import Any

from booking.core.constants import CANCELLATION_MAIL_JOB
from booking.services.email_notify import send_cancellation_email
from booking.services.job_queue import register_handler


@register_handler(CANCELLATION_MAIL_JOB)
def cancellation_mail(payload: dict[str, Any]) -> bool:
    return send_cancellation_email(payload)
