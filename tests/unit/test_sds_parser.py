"""Tests for SDS parsing heuristics and the AI/regex fallback chain."""

from datetime import date

import pytest

from hmsnova.core.config import settings
from hmsnova.core.exceptions import SDSExtractionError
from hmsnova.services import sds_parser
from hmsnova.services.sds_parser import (
    REGEX_CONFIDENCE,
    detect_isocyanates,
    extract_sds_data_regex,
    parse_sds_pdf,
    suggest_ppe,
)

SAMPLE_SDS_TEXT = """SIKKERHETSDATABLAD
Sikaflex-11 FC+
Signalord: FARE
Inneholder: 4,4'-metylendifenyldiisocyanat CAS-nr. 101-68-8
Xylen CAS-nr. 1330-20-7
H317: Kan utløse en allergisk hudreaksjon.
H334 Kan forårsake allergi eller astmasymptomer.
P280: Benytt vernehansker.
P284 Bruk åndedrettsvern.
"""


class FakeAIService:
    def __init__(self, payload: dict):
        self.payload = payload
        self.texts: list[str] = []

    async def extract_from_text(self, raw_text: str) -> dict:
        self.texts.append(raw_text)
        return self.payload

    async def extract_from_images(self, images, mime_type="image/png") -> dict:
        raise SDSExtractionError("vision not available in tests")


@pytest.fixture
def sds_text(monkeypatch):
    def _use(text: str) -> None:
        monkeypatch.setattr(sds_parser, "extract_raw_text", lambda contents: text)
    return _use


class TestRegexExtraction:
    def test_extracts_cas_statements_and_signal_word(self):
        result = extract_sds_data_regex(SAMPLE_SDS_TEXT)

        assert result.cas_numbers == ["101-68-8", "1330-20-7"]
        assert result.cas_number == "101-68-8"
        assert [s[:4] for s in result.hazard_statements] == ["H317", "H334"]
        assert [s[:4] for s in result.precautionary_statements] == ["P280", "P284"]
        assert result.signal_word == "FARE"
        assert result.confidence == REGEX_CONFIDENCE
        assert result.source == "regex"

    def test_warning_signal_word(self):
        assert extract_sds_data_regex("Signal word: WARNING").signal_word == "ADVARSEL"

    def test_no_signal_word(self):
        assert extract_sds_data_regex("Produktinformasjon").signal_word is None


class TestDetectIsocyanates:
    def test_cas_number_hit_lists_the_cas(self):
        found, details = detect_isocyanates("Lim", ["584-84-9"], "")

        assert found is True
        assert "584-84-9" in details
        assert "2020/1149" in details

    def test_keyword_in_text_is_case_insensitive(self):
        found, details = detect_isocyanates("Fugemasse", [], "Inneholder DIISOCYANATER")

        assert found is True
        assert "CAS-nummer" not in details

    def test_acronym_must_be_a_whole_word(self):
        assert detect_isocyanates("PU-skum MDI", [], "")[0] is True
        assert detect_isocyanates("Comdial rens", [], "")[0] is False

    def test_clean_product(self):
        assert detect_isocyanates("Såpe", ["7732-18-5"], "Vann og såpe") == (False, None)


class TestSuggestPpe:
    def test_maps_hazard_codes(self):
        ppe = suggest_ppe(["H315 Irriterer huden", "H319: Gir alvorlig øyeirritasjon"])

        assert ppe == {"eye": True, "hand": True, "respiratory": False, "skin": True}

    def test_no_statements(self):
        assert not any(suggest_ppe([]).values())


class TestParseSdsPdf:
    async def test_confident_ai_result_is_used(self, sds_text):
        sds_text(SAMPLE_SDS_TEXT)
        ai = FakeAIService({
            "productName": "Sikaflex-11 FC+",
            "supplier": "Sika Norge AS",
            "casNumber": "101-68-8",
            "hazardStatements": ["H317 Kan utløse en allergisk hudreaksjon"],
            "signalWord": "FARE",
            "requiredPPE": ["ISO_7010_M009.svg.png"],
            "sdsDate": "2024-05-14",
            "confidence": 0.9,
        })

        result = await parse_sds_pdf(b"%PDF", ai_service=ai)

        assert result.source == "ai"
        assert result.product_name == "Sikaflex-11 FC+"
        assert result.cas_numbers == ["101-68-8"]
        assert result.sds_date == date(2024, 5, 14)
        assert result.contains_isocyanates is True
        assert ai.texts == [SAMPLE_SDS_TEXT]

    async def test_low_ai_confidence_falls_back_to_regex(self, sds_text):
        sds_text(SAMPLE_SDS_TEXT)

        result = await parse_sds_pdf(b"%PDF", ai_service=FakeAIService({"confidence": 0.3}))

        assert result.source == "regex"
        assert result.confidence == REGEX_CONFIDENCE
        assert result.contains_isocyanates is True

    async def test_without_api_key_uses_regex(self, sds_text, monkeypatch):
        sds_text("Produkt X\nH225 Meget brannfarlig væske og damp.\nADVARSEL")
        monkeypatch.setattr(settings, "openai_api_key", None)

        result = await parse_sds_pdf(b"%PDF")

        assert result.source == "regex"
        assert result.signal_word == "ADVARSEL"
        assert result.contains_isocyanates is False

    async def test_no_text_and_no_ai_raises(self, sds_text, monkeypatch):
        sds_text("")
        monkeypatch.setattr(settings, "openai_api_key", None)

        with pytest.raises(SDSExtractionError):
            await parse_sds_pdf(b"%PDF")
