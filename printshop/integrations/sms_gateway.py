"""Bulk SMS gateway client (Africa's Talking messaging API)."""

import logging
import re

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


class SmsDeliveryError(Exception):
    """The gateway refused the message or could not be reached."""

    pass


def normalize_phone(phone: str, country_code: str | None = None) -> str:
    """Canonical international form: digits only, country code prefixed, leading '+'.

    Numbers already written internationally ('+' or '00' prefix) keep their
    own country code.

    >>> normalize_phone("076 123 456")
    '+232076123456'
    >>> normalize_phone("+44 7700 900123")
    '+447700900123'
    """
    raw = (phone or "").strip()
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        return ""
    if raw.startswith("+"):
        return f"+{digits}"
    if digits.startswith("00"):
        return f"+{digits[2:]}" if len(digits) > 2 else ""

    code = country_code or settings.sms_country_code
    if not digits.startswith(code):
        digits = code + digits
    return f"+{digits}"


def _parse_recipient(data: dict) -> dict:
    recipients = (data.get("SMSMessageData") or {}).get("Recipients") or []
    if not recipients:
        message = (data.get("SMSMessageData") or {}).get("Message") or "no recipients accepted"
        raise SmsDeliveryError(message)
    return recipients[0]


def send_sms(phone: str, message: str) -> str | None:
    """Send a single SMS. Returns the gateway message id.

    A recipient status other than "Success" counts as a failure.
    """
    if not settings.sms_api_key or not settings.sms_username:
        raise SmsDeliveryError("SMS gateway credentials not configured")

    to = normalize_phone(phone)
    if not to:
        raise SmsDeliveryError("No usable phone number")

    payload = {"username": settings.sms_username, "to": to, "message": message}
    if settings.sms_sender_id:
        payload["from"] = settings.sms_sender_id

    try:
        response = httpx.post(
            settings.sms_api_url,
            data=payload,
            headers={"apiKey": settings.sms_api_key, "Accept": "application/json"},
            timeout=settings.provider_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        raise SmsDeliveryError(f"Gateway returned {e.response.status_code}: {e.response.text}") from e
    except (httpx.HTTPError, ValueError) as e:
        raise SmsDeliveryError(str(e)) from e

    recipient = _parse_recipient(data)
    if recipient.get("status") != "Success":
        raise SmsDeliveryError(f"Recipient status {recipient.get('status')!r} for {recipient.get('number', to)}")

    logger.debug("SMS accepted for %s (id=%s)", to, recipient.get("messageId"))
    return recipient.get("messageId")
