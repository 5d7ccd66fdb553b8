"""Transactional email via the Resend API."""

import logging

import resend

from ..config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The email provider rejected the message or could not be reached."""

    pass


def send_email(to: str, subject: str, html: str) -> str | None:
    """Send one HTML email. Returns the provider message id."""
    if not settings.resend_api_key:
        raise EmailDeliveryError("Email provider not configured")

    resend.api_key = settings.resend_api_key
    params = {
        "from": settings.sender_address,
        "to": [to],
        "subject": subject,
        "html": html,
    }
    try:
        response = resend.Emails.send(params)
    except Exception as e:
        raise EmailDeliveryError(str(e)) from e

    message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
    logger.debug("Resend accepted email to %s (id=%s)", to, message_id)
    return message_id
