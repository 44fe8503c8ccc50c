"""SMS delivery through Norwegian gateways (Link Mobility, IntelliSMS, ProSMS).

The provider is picked by ``SMS_PROVIDER``; ``mock`` (the default) only logs.
Only Norwegian mobile numbers in ``+47XXXXXXXX`` form are accepted.
"""

from __future__ import annotations

import logging
import re
import time

import httpx

from hmsnova.core.config import settings
from hmsnova.core.exceptions import NotificationError

logger = logging.getLogger(__name__)

_NORWEGIAN_PHONE = re.compile(r"^\+47\d{8}$")
SMS_MAX_LENGTH = 160

LINK_MOBILITY_URL = "https://simple.pswin.com/"
INTELLISMS_URL = "https://www.intellisms.no/sms/send"
PROSMS_URL = "https://app.prosms.no/api/sendsms.php"


def format_phone_number(phone: str) -> str:
    """Normalise local input (``412 34 567``, ``0047…``, ``47…``) to ``+47…``."""
    cleaned = re.sub(r"[\s\-()]", "", phone)
    if cleaned.startswith("00"):
        cleaned = "+" + cleaned[2:]
    if not cleaned.startswith("+"):
        if cleaned.startswith("47") and len(cleaned) == 10:
            cleaned = "+" + cleaned
        elif cleaned.startswith("0"):
            cleaned = "+47" + cleaned[1:]
        else:
            cleaned = "+47" + cleaned
    return cleaned


def is_valid_norwegian_phone(phone: str) -> bool:
    return bool(_NORWEGIAN_PHONE.match(format_phone_number(phone)))


class SmsSender:
    def __init__(self, provider: str | None = None) -> None:
        self.provider = provider or settings.sms_provider
        self.sender_name = settings.sms_sender_name

    async def send(self, *, to: str, message: str) -> str:
        """Send one SMS and return the provider message id."""
        number = format_phone_number(to)
        if not _NORWEGIAN_PHONE.match(number):
            raise NotificationError(f"Invalid Norwegian phone number '{to}' (expected +47XXXXXXXX)")
        if len(message) > SMS_MAX_LENGTH:
            logger.warning("SMS message is %d chars and will be split", len(message))

        dispatch = {
            "link_mobility": self._send_link_mobility,
            "intellisms": self._send_intellisms,
            "prosms": self._send_prosms,
        }.get(self.provider, self._send_mock)

        try:
            return await dispatch(number, message)
        except httpx.HTTPError as exc:
            logger.error("SMS provider %s error: %s", self.provider, exc)
            raise NotificationError(f"SMS to {number} failed: {exc}") from exc

    async def _send_link_mobility(self, number: str, message: str) -> str:
        if not (settings.link_mobility_username and settings.link_mobility_password):
            raise NotificationError("Link Mobility credentials are not configured")
        async with httpx.AsyncClient(timeout=settings.notification_timeout) as client:
            response = await client.post(
                LINK_MOBILITY_URL,
                data={
                    "USER": settings.link_mobility_username,
                    "PW": settings.link_mobility_password,
                    "RCV": number.lstrip("+"),
                    "SND": self.sender_name,
                    "TXT": message,
                },
            )
        text = response.text.strip()
        if not text.startswith("OK"):
            raise NotificationError(f"Link Mobility error: {text}")
        parts = text.split(" ")
        return parts[1] if len(parts) > 1 else f"lm-{int(time.time() * 1000)}"

    async def _send_intellisms(self, number: str, message: str) -> str:
        if not (settings.intellisms_username and settings.intellisms_password):
            raise NotificationError("IntelliSMS credentials are not configured")
        async with httpx.AsyncClient(timeout=settings.notification_timeout) as client:
            response = await client.post(
                INTELLISMS_URL,
                json={
                    "username": settings.intellisms_username,
                    "password": settings.intellisms_password,
                    "to": number.removeprefix("+47"),
                    "from": self.sender_name,
                    "text": message,
                },
            )
        data = response.json()
        if data.get("status") != "ok":
            raise NotificationError(f"IntelliSMS error: {data.get('error') or 'unknown error'}")
        return data.get("messageId") or f"is-{int(time.time() * 1000)}"

    async def _send_prosms(self, number: str, message: str) -> str:
        if not settings.prosms_api_key:
            raise NotificationError("ProSMS API key is not configured")
        async with httpx.AsyncClient(timeout=settings.notification_timeout) as client:
            response = await client.get(
                PROSMS_URL,
                params={
                    "apikey": settings.prosms_api_key,
                    "sender": self.sender_name,
                    "destination": number.removeprefix("+47"),
                    "message": message,
                },
            )
        if "OK" not in response.text:
            raise NotificationError(f"ProSMS error: {response.text.strip()}")
        return f"prosms-{int(time.time() * 1000)}"

    async def _send_mock(self, number: str, message: str) -> str:
        logger.info("MOCK SMS to=%s message=%r", number, message)
        return f"mock-{int(time.time() * 1000)}"


def get_sms_sender() -> SmsSender:
    return SmsSender()
