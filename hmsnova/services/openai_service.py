"""SDS AI extraction service — OpenAI-powered structured extraction of safety data sheets.

Provides two entry points:
1. **Text extraction** — raw SDS text in, structured JSON out.
2. **Vision extraction** — rendered page images in (scanned PDFs), same JSON out.

The caller decides what to do with low-confidence results; this module only
talks to OpenAI and validates that the answer is JSON.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Dict, List

from openai import AsyncOpenAI, OpenAIError

from hmsnova.core.config import settings
from hmsnova.core.exceptions import SDSExtractionError

logger = logging.getLogger(__name__)

# ── System prompt ─────────────────────────────────────────────────────────

SDS_EXTRACTION_PROMPT = """You are an expert in Safety Data Sheets (SDS / sikkerhetsdatablad) following REACH Annex II and the CLP regulation.

Extract the following from the provided SDS and return ONLY a JSON object:

- productName: trade name from section 1.1
- supplier: company name from section 1.3
- casNumber: CAS number of the main hazardous substance (format 123-45-6) or null
- casNumbers: every CAS number listed in section 3
- hazardStatements: array of H statements, e.g. ["H226 Flammable liquid and vapour", "H315 Causes skin irritation"]
- precautionaryStatements: array of P statements
- signalWord: "FARE" (Danger), "ADVARSEL" (Warning) or null
- warningPictograms: file names for the GHS pictograms present:
    GHS01 → "explosive.webp", GHS02 → "brannfarlig.webp", GHS03 → "oksiderende.webp",
    GHS04 → "gass_under_trykk.webp", GHS05 → "etsende.webp", GHS06 → "giftig.webp",
    GHS07 → "helserisiko.webp", GHS08 → "kronisk_helsefarlig.webp", GHS09 → "miljofare.webp"
- requiredPPE: ISO 7010 file names for the protective equipment in section 8:
    eye protection → "ISO_7010_M004.svg.png", hearing → "ISO_7010_M003.svg.png",
    gloves → "ISO_7010_M009.svg.png", protective clothing → "ISO_7010_M010.svg.png",
    face shield → "ISO_7010_M013.svg.png", helmet → "ISO_7010_M014.svg.png",
    respiratory → "ISO_7010_M017.svg.png", safety footwear → "ISO_7010_M008.svg.png"
- sdsDate: revision date of the sheet (YYYY-MM-DD) or null
- containsIsocyanates: true if the product contains diisocyanates (MDI, TDI, HDI, IPDI, ...)
- isocyanateDetails: which isocyanates, or null
- confidence: float 0.0-1.0, your overall certainty in the extraction

Rules:
1. Output ONLY valid JSON — no markdown, no commentary.
2. Use null for anything that is not in the document and lower the confidence.
3. If the document is not a safety data sheet, return {"confidence": 0.0}."""


class SDSAIService:
    """Thin async wrapper around OpenAI for SDS data extraction."""

    def __init__(self) -> None:
        if not settings.ai_enabled:
            raise SDSExtractionError(
                "OpenAI API key is not configured. Set OPENAI_API_KEY in your .env file."
            )
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
        )
        self.model = settings.openai_model
        self.max_tokens = settings.openai_max_tokens

    # ── Core OpenAI call ──────────────────────────────────────────────────

    async def _call_openai(self, user_content: Any, *, timeout: float | None = None) -> Dict[str, Any]:
        """Send an async request to OpenAI and return parsed JSON."""
        try:
            logger.info("Calling OpenAI model=%s for SDS extraction", self.model)
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SDS_EXTRACTION_PROMPT},
                    {"role": "user", "content": user_content},
                ],
                max_completion_tokens=self.max_tokens,
                temperature=0.1,
                response_format={"type": "json_object"},
                timeout=timeout or settings.openai_timeout,
            )

            content = response.choices[0].message.content
            if not content:
                raise SDSExtractionError("Empty response from OpenAI")

            return json.loads(content)

        except OpenAIError as exc:
            logger.error("OpenAI API error: %s", exc)
            raise SDSExtractionError(f"OpenAI service error: {exc}") from exc
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON from OpenAI: %s", exc)
            raise SDSExtractionError(f"Invalid JSON response: {exc}") from exc

    # ── Public methods ────────────────────────────────────────────────────

    async def extract_from_text(self, raw_text: str) -> Dict[str, Any]:
        excerpt = raw_text[: settings.sds_text_char_limit]
        return await self._call_openai(f"Safety data sheet text:\n{excerpt}")

    async def extract_from_images(
        self, images: List[bytes], mime_type: str = "image/png"
    ) -> Dict[str, Any]:
        """Vision extraction for scanned sheets (one image per rendered page)."""
        content: List[Dict[str, Any]] = [
            {"type": "text", "text": "Extract the safety data sheet shown in these page images."}
        ]
        for image in images:
            encoded = base64.b64encode(image).decode("ascii")
            content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{encoded}", "detail": "high"},
                }
            )
        return await self._call_openai(content, timeout=settings.openai_vision_timeout)


def get_ai_service() -> SDSAIService:
    """Factory that creates an SDSAIService instance.

    Raises ``SDSExtractionError`` when the OpenAI key is not configured.
    """
    return SDSAIService()
