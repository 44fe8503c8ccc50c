"""Chemical inventory and SDS inbox schemas."""


from datetime import datetime
from typing import Literal

from pydantic import Field

from hmsnova.schemas.common import CamelModel


class ChemicalCreate(CamelModel):
    product_name: str = Field(min_length=1)
    supplier: str | None = None
    cas_number: str | None = Field(default=None, pattern=r"^\d{2,7}-\d{2}-\d$")
    location: str | None = None
    quantity: float | None = Field(default=None, ge=0)
    unit: str | None = None


class ChemicalUpdate(CamelModel):
    product_name: str | None = None
    supplier: str | None = None
    cas_number: str | None = Field(default=None, pattern=r"^\d{2,7}-\d{2}-\d$")
    location: str | None = None
    quantity: float | None = Field(default=None, ge=0)
    unit: str | None = None
    status: Literal["ACTIVE", "ARCHIVED"] | None = None


class ChemicalOut(CamelModel):
    id: str
    tenant_id: str
    product_name: str
    supplier: str | None = None
    cas_number: str | None = None
    location: str | None = None
    quantity: float | None = None
    unit: str | None = None
    status: str
    sds_file_name: str | None = None
    sds_date: datetime | None = None
    sds_source: str | None = None
    hazard_statements: str | None = None
    signal_word: str | None = None
    warning_pictograms: list[str] | None = None
    required_ppe: list[str] | None = None
    contains_isocyanates: bool
    isocyanate_details: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# SDS inbox matching
# ---------------------------------------------------------------------------

class AttachmentIn(CamelModel):
    id: str
    name: str
    content_type: str = "application/pdf"
    size: int = 0


class EmailIn(CamelModel):
    id: str
    subject: str = ""
    sender: str = Field(alias="from")
    received_at: datetime | None = None
    attachments: list[AttachmentIn] = Field(default_factory=list)


class MatchRequest(CamelModel):
    emails: list[EmailIn]


class SDSMatchOut(CamelModel):
    email_id: str
    email_subject: str
    email_from: str
    attachment_id: str
    attachment_name: str
    chemical_id: str | None = None
    chemical_name: str | None = None
    confidence: float
    decision: Literal["AUTO_APPLY", "SUGGEST", "NO_MATCH"]


class SDSSuggestionOut(CamelModel):
    chemical_id: str
    chemical_name: str
    email_subject: str
    email_from: str
    attachment_name: str
    confidence: float


class SDSInboxResult(CamelModel):
    emails_scanned: int
    processed: int
    suggestions: list[SDSSuggestionOut]
