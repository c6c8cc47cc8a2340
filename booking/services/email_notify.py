"""
Send appointment cancellation emails to providers via SMTP (Gmail or other).
Set SMTP_USER, SMTP_PASSWORD (and optionally MAIL_FROM) in .env. With Gmail use an App Password.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Any

from booking.config import settings
from booking.core import timeutils
from booking.core.constants import CANCELLATION_SUBJECTS
from booking.core.errors import MailDeliveryError

logger = logging.getLogger(__name__)

_BODY_LINES = {
    "pt": ["Olá, {provider_name}", "", "Houve um cancelamento:", "", "Cliente: {client_name}", "Data: {date}"],
    "en": ["Hello, {provider_name}", "", "An appointment was canceled:", "", "Client: {client_name}", "Date: {date}"],
}


def _from_address() -> str:
    if settings.mail_from:
        return settings.mail_from
    if settings.smtp_user:
        return f"Booking <{settings.smtp_user}>"
    return "Booking <noreply@localhost>"


def render_cancellation_email(payload: dict[str, Any], locale: str | None = None) -> tuple[str, str]:
    """Return (subject, plain-text body) for a cancellation job payload."""
    loc = locale or settings.locale
    lang = loc.split("_")[0]
    appointment = payload["appointment"]
    date = timeutils.format_slot(timeutils.parse_iso(appointment["date"]), loc)
    lines = _BODY_LINES.get(lang, _BODY_LINES["en"])
    body = "\n".join(lines).format(
        provider_name=appointment["provider"]["name"],
        client_name=appointment["client"]["name"],
        date=date,
    )
    return CANCELLATION_SUBJECTS.get(lang, CANCELLATION_SUBJECTS["en"]), body


def send_cancellation_email(payload: dict[str, Any]) -> bool:
    """
    Email the provider that a client canceled. Returns True if sent, False if SMTP is not configured.
    Raises MailDeliveryError when the relay fails, so the job is recorded as failed.
    """
    provider = payload["appointment"]["provider"]
    to_email = (provider.get("email") or "").strip()
    if not to_email:
        logger.warning("Cancellation for appointment %s: provider has no email", payload["appointment"].get("id"))
        return False
    if not settings.smtp_user or not settings.smtp_password:
        logger.debug("SMTP_USER or SMTP_PASSWORD not set; skipping cancellation email")
        return False
    subject, body = render_cancellation_email(payload)
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = _from_address()
    msg["To"] = f"{provider['name']} <{to_email}>"
    msg.attach(MIMEText(body, "plain"))
    msg.attach(MIMEText(f"<pre style='font-family:sans-serif'>{escape(body)}</pre>", "html"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.smtp_user, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        raise MailDeliveryError(f"SMTP delivery to {to_email} failed: {e}") from e
    logger.info("Cancellation email sent to %s for appointment %s", to_email, payload["appointment"].get("id"))
    return True
