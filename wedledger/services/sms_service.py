"""
SMS delivery through the sms4free HTTP gateway.

The gateway answers a JSON POST with the number of recipients the message
was delivered to, as plain text. Routes receive ``send_sms`` through a
dependency so tests can swap in a fake sender.
"""
from dataclasses import dataclass
from typing import Callable
import logging

import requests

from ..core.config import settings
from .identity import normalize_phone

logger = logging.getLogger(__name__)


@dataclass
class SmsResult:
    success: bool
    recipients: int = 0
    error: str | None = None


SmsSender = Callable[[str, str], SmsResult]


def _missing_settings() -> list[str]:
    required = {
        "SMS_API_URL": settings.SMS_API_URL,
        "SMS_API_KEY": settings.SMS_API_KEY,
        "SMS_PHONE_NUMBER": settings.SMS_PHONE_NUMBER,
        "SMS_PASS": settings.SMS_PASS,
    }
    return [name for name, value in required.items() if not value]


def send_sms(recipient: str, message: str) -> SmsResult:
    missing = _missing_settings()
    if missing:
        error = f"Missing required SMS settings: {', '.join(missing)}"
        logger.error(error)
        return SmsResult(success=False, error=error)

    try:
        response = requests.post(
            settings.SMS_API_URL,
            json={
                "key": settings.SMS_API_KEY,
                "user": settings.SMS_PHONE_NUMBER,
                "sender": settings.SMS_SENDER,
                "pass": settings.SMS_PASS,
                "recipient": normalize_phone(recipient),
                "msg": message,
            },
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"SMS sending error: {str(e)}", exc_info=True)
        return SmsResult(success=False, error=f"SMS API error: {str(e)}")

    body = response.text.strip()
    try:
        recipients = int(body)
    except ValueError:
        logger.error(f"Unexpected SMS API response: {body}")
        return SmsResult(success=False, error=f"Unexpected SMS API response: {body}")
    return SmsResult(success=True, recipients=recipients)


def otp_message(code: str) -> str:
    return f"Your WedLedger verification code is: {code}. This code will expire in 10 minutes."


def invite_message(owner_name: str | None, invite_url: str) -> str:
    return f"Hi! {owner_name or 'Someone'} wants to share their WedLedger with you. Click here to accept: {invite_url}"
