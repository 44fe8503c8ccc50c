"""Heuristic matching of inbound SDS email attachments to chemical records.

Scores are additive substring hits; the result is advisory only. Pure
functions: callers pass in plain email/attachment objects and the tenant's
active chemicals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Protocol

from hmsnova.core.config import settings

PRODUCT_NAME_WEIGHT = 0.6
CAS_NUMBER_WEIGHT = 0.8
SUPPLIER_IN_SENDER_WEIGHT = 0.5
SUPPLIER_IN_SUBJECT_WEIGHT = 0.3

MatchDecision = Literal["AUTO_APPLY", "SUGGEST", "NO_MATCH"]


class ChemicalLike(Protocol):
    id: str
    product_name: str
    cas_number: str | None
    supplier: str | None


@dataclass
class EmailAttachment:
    id: str
    name: str
    content_type: str = "application/pdf"
    size: int = 0


@dataclass
class EmailMessage:
    id: str
    subject: str
    sender: str
    received_at: datetime | None = None
    attachments: list[EmailAttachment] = field(default_factory=list)


@dataclass
class SDSMatch:
    email: EmailMessage
    attachment: EmailAttachment
    chemical: ChemicalLike | None
    confidence: float
    decision: MatchDecision


def score_attachment(
    attachment_name: str, sender: str, subject: str, chemical: ChemicalLike
) -> float:
    """Confidence that ``attachment_name`` is the SDS for ``chemical``."""
    file_name = attachment_name.lower()
    confidence = 0.0

    product = (chemical.product_name or "").strip().lower()
    if product and product in file_name:
        confidence += PRODUCT_NAME_WEIGHT

    cas = (chemical.cas_number or "").replace("-", "").strip()
    if cas and cas in file_name:
        confidence += CAS_NUMBER_WEIGHT

    supplier = (chemical.supplier or "").strip().lower()
    if supplier:
        if supplier in sender.lower():
            confidence += SUPPLIER_IN_SENDER_WEIGHT
        if supplier in subject.lower():
            confidence += SUPPLIER_IN_SUBJECT_WEIGHT

    return round(confidence, 4)


def classify_confidence(
    confidence: float,
    *,
    auto_apply_above: float | None = None,
    suggest_above: float | None = None,
) -> MatchDecision:
    auto_apply_above = settings.sds_auto_apply_threshold if auto_apply_above is None else auto_apply_above
    suggest_above = settings.sds_suggest_threshold if suggest_above is None else suggest_above
    if confidence > auto_apply_above:
        return "AUTO_APPLY"
    if confidence > suggest_above:
        return "SUGGEST"
    return "NO_MATCH"


def match_sds_with_chemicals(
    emails: list[EmailMessage], chemicals: list[ChemicalLike]
) -> list[SDSMatch]:
    """Best chemical per attachment; the first chemical wins a tie."""
    results: list[SDSMatch] = []
    for email in emails:
        for attachment in email.attachments:
            best: ChemicalLike | None = None
            best_confidence = 0.0
            for chemical in chemicals:
                confidence = score_attachment(attachment.name, email.sender, email.subject, chemical)
                if confidence > best_confidence:
                    best, best_confidence = chemical, confidence

            decision = classify_confidence(best_confidence)
            results.append(
                SDSMatch(
                    email=email,
                    attachment=attachment,
                    chemical=best if decision != "NO_MATCH" else None,
                    confidence=best_confidence,
                    decision=decision,
                )
            )
    return results
