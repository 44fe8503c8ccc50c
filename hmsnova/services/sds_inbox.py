"""SDS inbox processing — match mailbox attachments to the chemical inventory.

``AUTO_APPLY`` matches are downloaded, parsed and written to the chemical
when the parse is confident enough. ``SUGGEST`` matches are returned for a
person to confirm. Everything else is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.config import settings
from hmsnova.core.exceptions import AppException
from hmsnova.domain.mixins import utcnow
from hmsnova.repositories.chemical import ChemicalRepository
from hmsnova.services.chemicals import ChemicalService
from hmsnova.services.sds_matching import EmailMessage, SDSMatch, match_sds_with_chemicals
from hmsnova.services.sds_parser import SDSExtraction, parse_sds_pdf

logger = logging.getLogger(__name__)

SDSParser = Callable[[bytes], Awaitable[SDSExtraction]]


class SDSMailbox(Protocol):
    async def search_for_sds_emails(self, since: datetime) -> list[EmailMessage]: ...

    async def download_attachment(self, message_id: str, attachment_id: str) -> bytes: ...


@dataclass
class SDSSuggestion:
    chemical_id: str
    chemical_name: str
    email_subject: str
    email_from: str
    attachment_name: str
    confidence: float


@dataclass
class InboxResult:
    emails_scanned: int = 0
    processed: int = 0
    suggestions: list[SDSSuggestion] = field(default_factory=list)


class SDSInboxService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._tenant_id = tenant_id
        self._chemicals = ChemicalRepository(session, tenant_id)
        self._inventory = ChemicalService(session, tenant_id)

    async def match(self, emails: list[EmailMessage]) -> list[SDSMatch]:
        """Score emails against this tenant's active chemicals."""
        chemicals = await self._chemicals.list_active()
        return match_sds_with_chemicals(emails, chemicals)

    async def process_sds_from_email(
        self,
        mailbox: SDSMailbox,
        *,
        since: datetime | None = None,
        parser: SDSParser = parse_sds_pdf,
    ) -> InboxResult:
        since = since or utcnow() - timedelta(days=settings.sds_lookback_days)
        emails = await mailbox.search_for_sds_emails(since)
        result = InboxResult(emails_scanned=len(emails))

        for match in await self.match(emails):
            if match.chemical is None:
                continue

            if match.decision == "SUGGEST":
                result.suggestions.append(
                    SDSSuggestion(
                        chemical_id=match.chemical.id,
                        chemical_name=match.chemical.product_name,
                        email_subject=match.email.subject,
                        email_from=match.email.sender,
                        attachment_name=match.attachment.name,
                        confidence=match.confidence,
                    )
                )
                continue

            try:
                contents = await mailbox.download_attachment(match.email.id, match.attachment.id)
                extraction = await parser(contents)
            except AppException as exc:
                logger.error(
                    "SDS attachment %s for chemical %s failed: %s",
                    match.attachment.name, match.chemical.id, exc.message,
                )
                continue
            except Exception:
                logger.exception(
                    "Unexpected error reading SDS attachment %s for chemical %s",
                    match.attachment.name, match.chemical.id,
                )
                continue

            if extraction.confidence <= settings.sds_parse_confidence_threshold:
                logger.warning(
                    "SDS parse confidence %.2f too low for %s; not applied",
                    extraction.confidence, match.attachment.name,
                )
                continue

            await self._inventory.apply_sds(
                match.chemical.id,
                extraction,
                file_name=match.attachment.name,
                source="email",
                received_at=match.email.received_at,
            )
            result.processed += 1

        logger.info(
            "SDS inbox for tenant %s: %d email(s), %d applied, %d suggestion(s)",
            self._tenant_id, result.emails_scanned, result.processed, len(result.suggestions),
        )
        return result
