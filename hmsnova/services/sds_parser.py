"""
Safety data sheet (SDS) PDF parser.

Extraction order
----------------
1. **pdfplumber** text dump of the whole PDF.
2. If the PDF has no text layer (scanned sheet), pages are rendered with
   **PyMuPDF** and sent to the OpenAI vision model.
3. Otherwise the text goes to OpenAI for structured JSON extraction.
4. When AI is unavailable, fails, or reports confidence below
   ``AI_MIN_CONFIDENCE``, a regex extractor is used instead
   (``REGEX_CONFIDENCE``).

Isocyanate detection runs on every result regardless of the path taken.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pdfplumber

from hmsnova.core.config import settings
from hmsnova.core.exceptions import SDSExtractionError
from hmsnova.services.openai_service import SDSAIService, get_ai_service

logger = logging.getLogger(__name__)

__all__ = [
    "SDSExtraction",
    "detect_isocyanates",
    "extract_raw_text",
    "extract_sds_data_regex",
    "parse_sds_pdf",
    "suggest_ppe",
]

AI_MIN_CONFIDENCE = 0.5
REGEX_CONFIDENCE = 0.6

_CAS_RE = re.compile(r"\b\d{2,7}-\d{2}-\d\b")
_H_STATEMENT_RE = re.compile(r"H\d{3}[A-Za-z]?[:\s]+[^\n]+")
_P_STATEMENT_RE = re.compile(r"P\d{3}[:\s]+[^\n]+")
_H_CODE_RE = re.compile(r"H\d{3}")

ISOCYANATE_KEYWORDS = (
    "isocyanat",
    "diisocyanat",
    "polyisocyanat",
    "isocyanate",
    "diisocyanate",
)
# Acronyms only count as whole words ("MDI" but not "comdial")
ISOCYANATE_ACRONYMS = re.compile(r"\b(MDI|TDI|HDI|IPDI)\b")

ISOCYANATE_CAS_NUMBERS = {
    "101-68-8": "MDI",
    "584-84-9": "TDI",
    "26471-62-5": "TDI (mixture)",
    "822-06-0": "HDI",
    "4098-71-9": "IPDI",
    "5873-54-1": "NDI",
}

ISOCYANATE_NOTICE = "Krever obligatorisk kurs i henhold til EU-forordning 2020/1149."

PPE_BY_HAZARD = {
    "eye": {"H314", "H318", "H319", "H335"},
    "hand": {"H312", "H314", "H315", "H317", "H334"},
    "respiratory": {"H330", "H331", "H332", "H335", "H336"},
    "skin": {"H310", "H311", "H312", "H314", "H315"},
}


@dataclass
class SDSExtraction:
    """Structured data pulled out of one safety data sheet."""

    product_name: str | None = None
    supplier: str | None = None
    cas_number: str | None = None
    cas_numbers: list[str] = field(default_factory=list)
    hazard_statements: list[str] = field(default_factory=list)
    precautionary_statements: list[str] = field(default_factory=list)
    signal_word: str | None = None
    warning_pictograms: list[str] = field(default_factory=list)
    required_ppe: list[str] = field(default_factory=list)
    sds_date: date | None = None
    contains_isocyanates: bool = False
    isocyanate_details: str | None = None
    confidence: float = 0.0
    source: str = "regex"  # "ai" | "vision" | "regex"


# ---------------------------------------------------------------------------
# Text and image extraction
# ---------------------------------------------------------------------------

def extract_raw_text(pdf_bytes: bytes) -> str:
    """Extract the full raw text from a PDF, one page per line block."""
    pages: list[str] = []
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        for page in pdf.pages:
            text = page.extract_text()
            if text:
                pages.append(text)
    return "\n".join(pages)


def _convert_pdf_to_images(contents: bytes) -> list[bytes]:
    """Render the first ``settings.max_pdf_pages_for_vision`` pages as PNG bytes."""
    import fitz  # PyMuPDF — lazy import to keep startup fast

    try:
        doc = fitz.open(stream=contents, filetype="pdf")
    except Exception as exc:
        raise SDSExtractionError(f"Unable to open PDF: {exc}") from exc

    if doc.is_encrypted:
        doc.close()
        raise SDSExtractionError("Password-protected safety data sheets are not supported.")

    zoom = settings.vision_dpi / 72  # PyMuPDF default is 72 DPI
    images: list[bytes] = []
    try:
        for page_num in range(min(len(doc), settings.max_pdf_pages_for_vision)):
            pix = doc[page_num].get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            images.append(pix.tobytes("png"))
    finally:
        doc.close()

    if not images:
        raise SDSExtractionError("PDF contains no renderable pages.")

    logger.info("Rendered %d SDS page(s) for vision extraction", len(images))
    return images


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------

def extract_sds_data_regex(text: str) -> SDSExtraction:
    """Pattern-based fallback: CAS numbers, H/P statements and signal word."""
    cas_numbers = list(dict.fromkeys(_CAS_RE.findall(text)))

    if "FARE" in text or "DANGER" in text:
        signal_word: str | None = "FARE"
    elif "ADVARSEL" in text or "WARNING" in text:
        signal_word = "ADVARSEL"
    else:
        signal_word = None

    return SDSExtraction(
        cas_number=cas_numbers[0] if cas_numbers else None,
        cas_numbers=cas_numbers,
        hazard_statements=[s.strip() for s in _H_STATEMENT_RE.findall(text)],
        precautionary_statements=[s.strip() for s in _P_STATEMENT_RE.findall(text)],
        signal_word=signal_word,
        confidence=REGEX_CONFIDENCE,
        source="regex",
    )


def detect_isocyanates(
    product_name: str, cas_numbers: list[str], text: str
) -> tuple[bool, str | None]:
    """Return ``(contains_isocyanates, details)``.

    Products with diisocyanates require mandatory training under
    EU regulation 2020/1149, so any hit in the name, CAS list or text counts.
    """
    cas_hits = [cas for cas in cas_numbers if cas in ISOCYANATE_CAS_NUMBERS]

    haystacks = (product_name or "", text or "")
    keyword_hit = any(
        keyword in haystack.lower() for haystack in haystacks for keyword in ISOCYANATE_KEYWORDS
    ) or any(ISOCYANATE_ACRONYMS.search(haystack) for haystack in haystacks)

    if not cas_hits and not keyword_hit:
        return False, None

    details = "Produktet inneholder isocyanater. "
    if cas_hits:
        details += f"CAS-nummer funnet: {', '.join(cas_hits)}. "
    details += ISOCYANATE_NOTICE
    return True, details


def suggest_ppe(hazard_statements: list[str]) -> dict[str, bool]:
    """Map H statements to eye/hand/respiratory/skin protection flags."""
    ppe = {kind: False for kind in PPE_BY_HAZARD}
    for statement in hazard_statements:
        match = _H_CODE_RE.search(statement)
        if not match:
            continue
        for kind, codes in PPE_BY_HAZARD.items():
            if match.group(0) in codes:
                ppe[kind] = True
    return ppe


# ---------------------------------------------------------------------------
# AI result mapping
# ---------------------------------------------------------------------------

def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(v).strip() for v in value if v]


def _parse_date(raw: Any) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        return None


def _from_ai(data: dict[str, Any], source: str) -> SDSExtraction:
    cas_numbers = _as_list(data.get("casNumbers"))
    cas_number = data.get("casNumber") or (cas_numbers[0] if cas_numbers else None)
    if cas_number and cas_number not in cas_numbers:
        cas_numbers.insert(0, cas_number)

    signal_word = data.get("signalWord")
    if signal_word not in ("FARE", "ADVARSEL"):
        signal_word = None

    try:
        confidence = float(data.get("confidence") or 0.0)
    except (TypeError, ValueError):
        confidence = 0.0

    return SDSExtraction(
        product_name=data.get("productName") or None,
        supplier=data.get("supplier") or None,
        cas_number=cas_number,
        cas_numbers=cas_numbers,
        hazard_statements=_as_list(data.get("hazardStatements")),
        precautionary_statements=_as_list(data.get("precautionaryStatements")),
        signal_word=signal_word,
        warning_pictograms=_as_list(data.get("warningPictograms")),
        required_ppe=_as_list(data.get("requiredPPE")),
        sds_date=_parse_date(data.get("sdsDate")),
        contains_isocyanates=bool(data.get("containsIsocyanates")),
        isocyanate_details=data.get("isocyanateDetails") or None,
        confidence=max(0.0, min(confidence, 1.0)),
        source=source,
    )


async def _extract_with_ai(
    contents: bytes, text: str, ai_service: SDSAIService | None
) -> SDSExtraction | None:
    """AI extraction; ``None`` when AI is unavailable or the call fails."""
    try:
        service = ai_service or get_ai_service()
        if text.strip():
            return _from_ai(await service.extract_from_text(text), "ai")
        images = _convert_pdf_to_images(contents)
        return _from_ai(await service.extract_from_images(images), "vision")
    except SDSExtractionError as exc:
        logger.warning("AI extraction of SDS skipped: %s", exc.message)
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def parse_sds_pdf(
    contents: bytes, *, ai_service: SDSAIService | None = None
) -> SDSExtraction:
    """Parse an SDS PDF into :class:`SDSExtraction`.

    Raises :class:`SDSExtractionError` only when the PDF cannot be read at all.
    """
    try:
        text = extract_raw_text(contents)
    except Exception as exc:
        logger.warning("pdfplumber could not read SDS: %s", exc)
        text = ""

    result = await _extract_with_ai(contents, text, ai_service)

    if result is None or result.confidence < AI_MIN_CONFIDENCE:
        if not text.strip():
            raise SDSExtractionError("SDS has no extractable text and AI extraction failed.")
        result = extract_sds_data_regex(text)

    found, details = detect_isocyanates(result.product_name or "", result.cas_numbers, text)
    result.contains_isocyanates = result.contains_isocyanates or found
    result.isocyanate_details = result.isocyanate_details or details

    logger.info(
        "Parsed SDS via %s (confidence=%.2f, isocyanates=%s)",
        result.source, result.confidence, result.contains_isocyanates,
    )
    return result
