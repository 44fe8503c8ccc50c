"""Transactional email via the Resend HTTP API.

Without ``RESEND_API_KEY`` messages are logged instead of sent, so local
development and tests never reach the network.
"""

from __future__ import annotations

import logging

import httpx

from hmsnova.core.config import settings
from hmsnova.core.exceptions import NotificationError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class EmailSender:
    def __init__(self, api_key: str | None = None, from_email: str | None = None) -> None:
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.from_email = from_email or settings.resend_from_email

    async def send(self, *, to: str, subject: str, html: str) -> str:
        """Send one email and return the provider message id."""
        if not self.api_key:
            logger.info("Email (not sent, no RESEND_API_KEY) to=%s subject=%r", to, subject)
            return "logged"

        try:
            async with httpx.AsyncClient(timeout=settings.notification_timeout) as client:
                response = await client.post(
                    RESEND_API_URL,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"from": self.from_email, "to": [to], "subject": subject, "html": html},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Resend error for %s: %s", to, exc)
            raise NotificationError(f"Email to {to} failed: {exc}") from exc

        message_id = response.json().get("id", "")
        logger.debug("Email sent to=%s id=%s", to, message_id)
        return message_id


def get_email_sender() -> EmailSender:
    return EmailSender()
