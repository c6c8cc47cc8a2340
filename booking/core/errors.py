"""
Centralized error handling for booking/notification failures.
Exception types carry their HTTP status so routes stay thin; main.py registers
one handler that turns any BookingError into {"error": message}.
"""
from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_NOT_FOUND = 404

MSG_VALIDATION_FAILS = "Validation fails"
MSG_PAST_DATE = "Past dates are not permitted"
MSG_SLOT_UNAVAILABLE = "Appointment date is not available"
MSG_NOT_A_PROVIDER_TARGET = "You can only create appointments with providers"
MSG_SELF_BOOKING = "Providers cannot book appointments with themselves"
MSG_CANCEL_WINDOW = "You can only cancel appointments 2 hours in advance"
MSG_ALREADY_CANCELED = "Appointment is already canceled"
MSG_CANCEL_FORBIDDEN = "You don't have permission to cancel this appointment"
MSG_NOT_PROVIDER = "User is not a provider"
MSG_NOTIFICATIONS_PROVIDER_ONLY = "Only providers can load notifications"
MSG_NOTIFICATION_FORBIDDEN = "You don't have permission to update this notification"
MSG_APPOINTMENT_NOT_FOUND = "Appointment not found"
MSG_NOTIFICATION_NOT_FOUND = "Notification not found"
MSG_TOKEN_MISSING = "Token not provided"
MSG_TOKEN_INVALID = "Token invalid"
MSG_USER_NOT_FOUND = "User not found"


class BookingError(Exception):
    status_code = STATUS_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed request shape or values."""


class DomainError(BookingError):
    """A business rule rejected the request."""


class PastDateError(DomainError):
    def __init__(self, message: str = MSG_PAST_DATE):
        super().__init__(message)


class SlotUnavailableError(DomainError):
    def __init__(self, message: str = MSG_SLOT_UNAVAILABLE):
        super().__init__(message)


class CancellationWindowError(DomainError):
    def __init__(self, message: str = MSG_CANCEL_WINDOW):
        super().__init__(message)


class AlreadyCanceledError(DomainError):
    def __init__(self, message: str = MSG_ALREADY_CANCELED):
        super().__init__(message)


class ProviderNotFoundError(DomainError):
    def __init__(self, message: str = MSG_NOT_A_PROVIDER_TARGET):
        super().__init__(message)


class AuthorizationError(BookingError):
    status_code = STATUS_UNAUTHORIZED


class NotFoundError(BookingError):
    status_code = STATUS_NOT_FOUND


class MailDeliveryError(Exception):
    """SMTP relay refused or dropped the message; the job is marked failed."""


def error_body(message: str) -> dict[str, str]:
    return {"error": message}


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.debug("Request validation failed on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=STATUS_BAD_REQUEST, content=error_body(MSG_VALIDATION_FAILS))
