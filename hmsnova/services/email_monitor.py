"""Office 365 mailbox monitoring for incoming safety data sheets (Microsoft Graph).

Uses the client-credentials flow against the tenant's Entra ID app
registration. Only PDF attachments whose file name mentions ``sds`` or
``sikkerhetsdatablad`` are returned.
"""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime
from typing import Any

import httpx

from hmsnova.core.config import settings
from hmsnova.core.exceptions import UpstreamServiceError
from hmsnova.domain.mixins import as_utc
from hmsnova.services.sds_matching import EmailAttachment, EmailMessage

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"

_SUBJECT_TERMS = ("SDS", "Safety Data Sheet", "Sikkerhetsdatablad")
_ATTACHMENT_TERMS = ("sds", "sikkerhetsdatablad")


def is_sds_attachment(name: str, content_type: str) -> bool:
    lowered = name.lower()
    return content_type == "application/pdf" and any(t in lowered for t in _ATTACHMENT_TERMS)


class Office365EmailMonitor:
    def __init__(
        self,
        *,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        mailbox: str,
        timeout: float | None = None,
    ) -> None:
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.mailbox = mailbox
        self.timeout = timeout or settings.graph_timeout
        self._token: str | None = None

    # ── Graph plumbing ────────────────────────────────────────────────────

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        if self._token:
            return self._token
        response = await client.post(
            TOKEN_URL.format(tenant=self.tenant_id),
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": "https://graph.microsoft.com/.default",
                "grant_type": "client_credentials",
            },
        )
        if response.status_code != 200:
            raise UpstreamServiceError(f"Failed to get Graph access token: {response.status_code}")
        self._token = response.json()["access_token"]
        return self._token

    async def _get(self, client: httpx.AsyncClient, path: str, params: dict | None = None) -> Any:
        token = await self._access_token(client)
        response = await client.get(
            f"{GRAPH_BASE_URL}/users/{self.mailbox}{path}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code != 200:
            raise UpstreamServiceError(f"Graph request {path} failed: {response.status_code}")
        return response.json()

    # ── Public API ────────────────────────────────────────────────────────

    async def search_for_sds_emails(self, since: datetime) -> list[EmailMessage]:
        since = as_utc(since)
        subject_filter = " or ".join(f"contains(subject, '{t}')" for t in _SUBJECT_TERMS)
        params = {
            "$filter": f"receivedDateTime ge {since.strftime('%Y-%m-%dT%H:%M:%SZ')} and ({subject_filter})",
            "$select": "id,subject,from,receivedDateTime,hasAttachments",
            "$top": "50",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                data = await self._get(client, "/messages", params)
                messages: list[EmailMessage] = []
                for item in data.get("value", []):
                    if not item.get("hasAttachments"):
                        continue
                    raw = await self._get(client, f"/messages/{item['id']}/attachments")
                    attachments = [
                        EmailAttachment(
                            id=a["id"],
                            name=a.get("name", ""),
                            content_type=a.get("contentType", ""),
                            size=a.get("size", 0),
                        )
                        for a in raw.get("value", [])
                        if is_sds_attachment(a.get("name", ""), a.get("contentType", ""))
                    ]
                    if not attachments:
                        continue
                    messages.append(
                        EmailMessage(
                            id=item["id"],
                            subject=item.get("subject") or "",
                            sender=((item.get("from") or {}).get("emailAddress") or {}).get("address", ""),
                            received_at=datetime.fromisoformat(
                                item["receivedDateTime"].replace("Z", "+00:00")
                            ) if item.get("receivedDateTime") else None,
                            attachments=attachments,
                        )
                    )
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f"Graph mailbox search failed: {exc}") from exc

        logger.info("Found %d email(s) with SDS attachments since %s", len(messages), since.date())
        return messages

    async def download_attachment(self, message_id: str, attachment_id: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                data = await self._get(client, f"/messages/{message_id}/attachments/{attachment_id}")
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f"Attachment download failed: {exc}") from exc

        # Reference (cloud) attachments carry a link instead of inline content
        content = data.get("contentBytes")
        if not content:
            raise UpstreamServiceError(
                f"Attachment {attachment_id} has no inline content ({data.get('@odata.type', 'unknown')})"
            )
        try:
            return base64.b64decode(content, validate=True)
        except binascii.Error as exc:
            raise UpstreamServiceError(f"Attachment {attachment_id} is not valid base64: {exc}") from exc


def get_email_monitor() -> Office365EmailMonitor:
    """Factory using the configured mailbox. Raises when Graph is not configured."""
    if not settings.graph_enabled:
        raise UpstreamServiceError(
            "SDS mailbox is not configured. Set AZURE_AD_TENANT_ID, AZURE_AD_CLIENT_ID, "
            "AZURE_AD_CLIENT_SECRET and SDS_MAILBOX_EMAIL.",
            code="SDS_MAILBOX_NOT_CONFIGURED",
        )
    return Office365EmailMonitor(
        tenant_id=settings.graph_tenant_id,  # type: ignore[arg-type]
        client_id=settings.graph_client_id,  # type: ignore[arg-type]
        client_secret=settings.graph_client_secret,  # type: ignore[arg-type]
        mailbox=settings.sds_mailbox_email,  # type: ignore[arg-type]
    )
