"""Chemical inventory router, including SDS upload and the SDS inbox endpoints."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.config import settings
from hmsnova.core.deps import get_tenant_id
from hmsnova.core.exceptions import AppException, ValidationError
from hmsnova.core.pagination import PaginationParams
from hmsnova.core.response import DataResponse, ListResponse, paginated
from hmsnova.db.base import get_db
from hmsnova.domain.mixins import utcnow
from hmsnova.schemas.chemical import (
    ChemicalCreate,
    ChemicalOut,
    ChemicalUpdate,
    MatchRequest,
    SDSInboxResult,
    SDSMatchOut,
    SDSSuggestionOut,
)
from hmsnova.services.chemicals import ChemicalService
from hmsnova.services.email_monitor import get_email_monitor
from hmsnova.services.sds_inbox import SDSInboxService, SDSMailbox, SDSParser
from hmsnova.services.sds_matching import EmailAttachment, EmailMessage
from hmsnova.services.sds_parser import parse_sds_pdf

router = APIRouter(prefix="/chemicals", tags=["Chemicals"])


def _svc(session: AsyncSession, tenant_id: str) -> ChemicalService:
    return ChemicalService(session, tenant_id)


def get_sds_mailbox() -> SDSMailbox:
    return get_email_monitor()


def get_sds_parser() -> SDSParser:
    return parse_sds_pdf


# ------------------------------------------------------------------
# SDS inbox
# ------------------------------------------------------------------

@router.post("/sds/match", response_model=DataResponse[list[SDSMatchOut]])
async def match_sds(
    body: MatchRequest,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Score supplied emails against the tenant's active chemicals (no side effects)."""
    emails = [
        EmailMessage(
            id=e.id,
            subject=e.subject,
            sender=e.sender,
            received_at=e.received_at,
            attachments=[
                EmailAttachment(id=a.id, name=a.name, content_type=a.content_type, size=a.size)
                for a in e.attachments
            ],
        )
        for e in body.emails
    ]
    matches = await SDSInboxService(session, tenant_id).match(emails)
    return {
        "data": [
            SDSMatchOut(
                email_id=m.email.id,
                email_subject=m.email.subject,
                email_from=m.email.sender,
                attachment_id=m.attachment.id,
                attachment_name=m.attachment.name,
                chemical_id=m.chemical.id if m.chemical else None,
                chemical_name=m.chemical.product_name if m.chemical else None,
                confidence=m.confidence,
                decision=m.decision,
            )
            for m in matches
        ]
    }


@router.post("/sds/inbox/process", response_model=DataResponse[SDSInboxResult])
async def process_sds_inbox(
    days: int | None = Query(default=None, ge=1, le=90, description="Look-back window in days"),
    mailbox: SDSMailbox = Depends(get_sds_mailbox),
    parser: SDSParser = Depends(get_sds_parser),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Scan the SDS mailbox, apply confident matches and return suggestions."""
    since = None
    if days is not None:
        since = utcnow() - timedelta(days=days)
    result = await SDSInboxService(session, tenant_id).process_sds_from_email(
        mailbox, since=since, parser=parser
    )
    return {
        "data": SDSInboxResult(
            emails_scanned=result.emails_scanned,
            processed=result.processed,
            suggestions=[SDSSuggestionOut.model_validate(s) for s in result.suggestions],
        )
    }


# ------------------------------------------------------------------
# Inventory CRUD
# ------------------------------------------------------------------

@router.get("", response_model=ListResponse[ChemicalOut])
async def list_chemicals(
    filter_status: Optional[str] = Query(default=None, alias="status", description="ACTIVE or ARCHIVED"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_chemicals(pagination, status=filter_status)
    return paginated([ChemicalOut.model_validate(c) for c in items], total, pagination)


@router.post("", response_model=DataResponse[ChemicalOut], status_code=status.HTTP_201_CREATED)
async def create_chemical(
    body: ChemicalCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    chemical = await _svc(session, tenant_id).create_chemical(body)
    return {"data": ChemicalOut.model_validate(chemical)}


@router.get("/{chemical_id}", response_model=DataResponse[ChemicalOut])
async def get_chemical(
    chemical_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    chemical = await _svc(session, tenant_id).get_chemical(chemical_id)
    return {"data": ChemicalOut.model_validate(chemical)}


@router.put("/{chemical_id}", response_model=DataResponse[ChemicalOut])
async def update_chemical(
    chemical_id: str,
    body: ChemicalUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    chemical = await _svc(session, tenant_id).update_chemical(chemical_id, body)
    return {"data": ChemicalOut.model_validate(chemical)}


@router.delete("/{chemical_id}", response_model=DataResponse[ChemicalOut])
async def archive_chemical(
    chemical_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Chemicals are archived, never removed, so SDS history is kept."""
    chemical = await _svc(session, tenant_id).archive_chemical(chemical_id)
    return {"data": ChemicalOut.model_validate(chemical)}


# ------------------------------------------------------------------
# Manual SDS upload
# ------------------------------------------------------------------

async def _read_pdf_upload(file: UploadFile) -> bytes:
    """Validate an uploaded SDS and return its bytes."""
    filename = (file.filename or "").lower()
    if file.content_type != "application/pdf" and not filename.endswith(".pdf"):
        raise AppException(
            f"Unsupported file type '{file.content_type}'. Safety data sheets must be PDF.",
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            code="UNSUPPORTED_MEDIA_TYPE",
        )

    contents = await file.read()
    if len(contents) == 0:
        raise ValidationError("Uploaded file is empty.")
    if len(contents) > settings.max_upload_size_bytes:
        raise AppException(
            f"File size exceeds the {settings.max_upload_size_mb}MB limit.",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code="FILE_TOO_LARGE",
        )
    return contents


@router.post("/{chemical_id}/sds", response_model=DataResponse[ChemicalOut])
async def upload_sds(
    chemical_id: str,
    file: UploadFile = File(...),
    parser: SDSParser = Depends(get_sds_parser),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Parse an uploaded safety data sheet and store its fields on the chemical."""
    svc = _svc(session, tenant_id)
    await svc.get_chemical(chemical_id)
    contents = await _read_pdf_upload(file)
    extraction = await parser(contents)
    chemical = await svc.apply_sds(
        chemical_id, extraction, file_name=file.filename or "sds.pdf", source="upload"
    )
    return {"data": ChemicalOut.model_validate(chemical)}
