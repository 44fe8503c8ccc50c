"""Tests for the SDS attachment scoring heuristic."""

from dataclasses import dataclass

import pytest

from hmsnova.services.sds_matching import (
    EmailAttachment,
    EmailMessage,
    classify_confidence,
    match_sds_with_chemicals,
    score_attachment,
)


@dataclass
class Chem:
    id: str
    product_name: str
    cas_number: str | None = None
    supplier: str | None = None


SIKAFLEX = Chem(id="c1", product_name="Sikaflex 11FC", cas_number="101-68-8", supplier="Sika")
JOTUN = Chem(id="c2", product_name="Jotun Lady", supplier="Jotun")


def _email(name: str, sender: str = "docs@supplier.example", subject: str = "SDS") -> EmailMessage:
    return EmailMessage(
        id="m1", subject=subject, sender=sender,
        attachments=[EmailAttachment(id="a1", name=name)],
    )


class TestScoreAttachment:
    def test_product_name_and_cas_in_filename(self):
        score = score_attachment("Sikaflex 11FC_101688_SDS.pdf", "docs@supplier.example", "SDS", SIKAFLEX)
        assert score == pytest.approx(1.4)

    def test_supplier_in_sender_and_subject(self):
        score = score_attachment("produktark_sds.pdf", "sds@jotun.com", "Sikkerhetsdatablad fra Jotun", JOTUN)
        assert score == pytest.approx(0.8)

    def test_unrelated_attachment_scores_zero(self):
        assert score_attachment("invoice_sds.pdf", "x@y.z", "Faktura", SIKAFLEX) == 0.0

    def test_empty_fields_never_match(self):
        blank = Chem(id="c3", product_name="", cas_number="", supplier="")
        assert score_attachment("anything_sds.pdf", "someone@anywhere.no", "SDS", blank) == 0.0

    def test_score_is_uncapped(self):
        score = score_attachment("sikaflex 11fc 101688 sds.pdf", "post@sika.no", "SDS fra Sika", SIKAFLEX)
        assert score == pytest.approx(2.2)


class TestClassifyConfidence:
    @pytest.mark.parametrize(
        ("confidence", "decision"),
        [
            (1.4, "AUTO_APPLY"),
            (0.81, "AUTO_APPLY"),
            (0.8, "SUGGEST"),
            (0.6, "SUGGEST"),
            (0.5, "NO_MATCH"),
            (0.0, "NO_MATCH"),
        ],
    )
    def test_bands(self, confidence, decision):
        assert classify_confidence(confidence) == decision


class TestMatchSdsWithChemicals:
    def test_auto_apply_match(self):
        [match] = match_sds_with_chemicals([_email("sikaflex 11fc_101688_sds.pdf")], [JOTUN, SIKAFLEX])

        assert match.chemical is SIKAFLEX
        assert match.confidence == pytest.approx(1.4)
        assert match.decision == "AUTO_APPLY"

    def test_product_name_alone_is_a_suggestion(self):
        [match] = match_sds_with_chemicals([_email("jotun lady sds.pdf")], [SIKAFLEX, JOTUN])

        assert match.chemical is JOTUN
        assert match.decision == "SUGGEST"

    def test_no_match_drops_chemical(self):
        [match] = match_sds_with_chemicals([_email("random_sds.pdf", sender="post@sika.no")], [SIKAFLEX])

        # supplier in sender alone is 0.5, which is not above the suggest threshold
        assert match.confidence == pytest.approx(0.5)
        assert match.decision == "NO_MATCH"
        assert match.chemical is None

    def test_first_chemical_wins_a_tie(self):
        twin = Chem(id="c9", product_name="Sikaflex 11FC")
        [match] = match_sds_with_chemicals([_email("sikaflex 11fc sds.pdf")], [twin, Chem(id="c10", product_name="Sikaflex 11FC")])

        assert match.chemical is twin

    def test_one_result_per_attachment(self):
        email = EmailMessage(
            id="m2", subject="SDS", sender="x@y.z",
            attachments=[EmailAttachment(id="a1", name="one_sds.pdf"), EmailAttachment(id="a2", name="two_sds.pdf")],
        )

        matches = match_sds_with_chemicals([email], [SIKAFLEX])

        assert [m.attachment.id for m in matches] == ["a1", "a2"]

    def test_no_chemicals(self):
        [match] = match_sds_with_chemicals([_email("sikaflex_sds.pdf")], [])
        assert match.decision == "NO_MATCH"
