"""Tests for score-based card pairing."""

import pytest
from pydantic import ValidationError

from card_identity.config import PairingConfig
from card_identity.fingerprint import fingerprint
from card_identity.models.card import RawExtraction
from card_identity.pairing import (
    compute_match_score,
    has_strong_evidence,
    merge_cards,
    pair_cards,
)


def fp(**fields):
    return fingerprint(RawExtraction(**fields))


class TestComputeMatchScore:
    """Test compute_match_score()."""

    def test_no_signals(self):
        """Test unrelated records score zero."""
        result = compute_match_score(fp(text="hello"), fp(text="world"))
        assert result.score == 0.0
        assert result.signals == ()

    def test_identifier_weights(self):
        """Test email, phone, website and logo weights add up."""
        a = fp(
            emails=["j@x.com"],
            phones=["+91 98765 43210"],
            websites=["www.x.com"],
            logos=["X Brand"],
        )
        b = fp(
            emails=["J@X.COM"],
            phones=["9876543210"],
            websites=["WWW.X.COM"],
            logos=["x brand"],
        )

        result = compute_match_score(a, b)

        assert result.score == pytest.approx(3.3)
        assert result.signals == ("email", "phone", "website", "logo")

    def test_address_keywords_capped(self):
        """Test address keywords add 0.1 each, capped at 0.3."""
        a = fp(text="sector-12, phase-2, industrial-area, pune-india")
        b = fp(text="pune/india industrial/area sector/12 phase/2")

        result = compute_match_score(a, b)

        assert result.score == pytest.approx(0.3)
        assert result.signals == ("address(6)",)

    def test_role_and_company(self):
        """Test a role in one text and a company suffix in the other."""
        a = fp(text="Ravi Kumar\nDirector")
        b = fp(text="Acme Foods Pvt Ltd")

        forward = compute_match_score(a, b)
        backward = compute_match_score(b, a)

        assert forward.score == pytest.approx(0.4)
        assert forward.signals == ("role+company",)
        assert backward == forward

    def test_text_overlap(self):
        """Test shared long words add a proportional score."""
        a = fp(text="global shipping logistics")
        b = fp(text="global shipping brokers office tower")

        result = compute_match_score(a, b)

        assert result.score == pytest.approx(0.2)
        assert result.signals == ("textOverlap(2/5)",)

    def test_single_shared_word_ignored(self):
        """Test one shared word is not enough for text overlap."""
        result = compute_match_score(fp(text="global shipping"), fp(text="global freight"))
        assert result.score == 0.0

    def test_custom_weights(self):
        """Test weights come from the config."""
        config = PairingConfig(logo_weight=0.9)
        result = compute_match_score(fp(logos=["acme"]), fp(logos=["acme"]), config)
        assert result.score == pytest.approx(0.9)

    def test_has_signal(self):
        """Test signal lookup ignores the detail suffix."""
        a = fp(text="mg road, pune")
        b = fp(text="pune road")
        result = compute_match_score(a, b)

        assert result.has_signal("address")
        assert not result.has_signal("logo")


class TestHasStrongEvidence:
    """Test has_strong_evidence()."""

    def test_identifiers(self):
        """Test emails, phones and websites are strong evidence."""
        assert has_strong_evidence(fp(emails=["a@x.com"]), fp(emails=["a@x.com"]))
        assert has_strong_evidence(fp(phones=["5550101"]), fp(phones=["555-0101"]))
        assert has_strong_evidence(fp(websites=["x.com"]), fp(websites=["x.com"]))

    def test_logo_is_not_strong(self):
        """Test a logo match alone is not strong evidence."""
        assert not has_strong_evidence(fp(logos=["acme"]), fp(logos=["acme"]))


class TestMergeCards:
    """Test merge_cards()."""

    def test_combines_fields(self):
        """Test arrays are unioned and texts joined with a separator."""
        a = RawExtraction(
            filename="a.jpg", text="Front", emails=["j@x.com"], logos=["Acme"]
        )
        b = RawExtraction(
            filename="b.jpg", text="Back", emails=["J@x.com", "k@x.com"], logos=["acme"]
        )

        entity = merge_cards(a, b)

        assert entity.filenames == ["a.jpg", "b.jpg"]
        assert entity.text == "Front\n---\nBack"
        assert entity.emails == ["j@x.com", "k@x.com"]
        assert entity.logos == ["Acme"]

    def test_empty_text_skipped(self):
        """Test an empty text adds no separator."""
        entity = merge_cards(RawExtraction(text=""), RawExtraction(text="Back"))
        assert entity.text == "Back"

    def test_identical_texts_both_kept(self):
        """Test two sides with the same OCR text are still joined."""
        entity = merge_cards(RawExtraction(text="same"), RawExtraction(text="same"))
        assert entity.text == "same\n---\nsame"


class TestPairCards:
    """Test pair_cards()."""

    def test_empty_batch(self):
        """Test an empty batch yields no entities."""
        assert pair_cards([]) == []

    def test_logo_only_not_merged(self):
        """Test a shared logo alone stays below the merge thresholds."""
        a = RawExtraction(logos=["Acme"], filename="a.jpg")
        b = RawExtraction(logos=["acme"], filename="b.jpg")

        entities = pair_cards([a, b])

        assert [e.filenames for e in entities] == [["a.jpg"], ["b.jpg"]]

    def test_strong_evidence_merges(self):
        """Test a shared email merges the pair."""
        a = RawExtraction(emails=["j@x.com"], text="front", filename="a.jpg")
        b = RawExtraction(emails=["j@x.com"], text="back", filename="b.jpg")

        entities = pair_cards([a, b])

        assert len(entities) == 1
        assert entities[0].filenames == ["a.jpg", "b.jpg"]
        assert entities[0].text == "front\n---\nback"

    def test_logo_with_address_merges(self):
        """Test a logo match plus weak signals reaching 0.7 merges."""
        a = RawExtraction(logos=["Acme"], text="sector 5, mg road, pune", filename="a.jpg")
        b = RawExtraction(logos=["acme"], text="pune road sector", filename="b.jpg")

        entities = pair_cards([a, b])

        assert len(entities) == 1
        assert entities[0].filenames == ["a.jpg", "b.jpg"]

    def test_weak_signals_below_threshold(self):
        """Test weak textual signals alone do not merge."""
        a = RawExtraction(text="Ravi Kumar\nDirector", filename="a.jpg")
        b = RawExtraction(text="Acme Foods Pvt Ltd", filename="b.jpg")

        assert len(pair_cards([a, b])) == 2

    def test_merge_threshold_from_config(self):
        """Test a lower merge threshold lets weak signals merge."""
        a = RawExtraction(text="Ravi Kumar\nDirector", filename="a.jpg")
        b = RawExtraction(text="Acme Foods Pvt Ltd", filename="b.jpg")

        entities = pair_cards([a, b], PairingConfig(merge_threshold=0.4))

        assert len(entities) == 1

    def test_best_candidate_chosen(self):
        """Test a record pairs with its highest-scoring partner."""
        a = RawExtraction(logos=["acme"], emails=["a@x.com"], filename="a.jpg")
        b = RawExtraction(logos=["acme"], filename="b.jpg")
        c = RawExtraction(emails=["a@x.com"], filename="c.jpg")

        entities = pair_cards([a, b, c])

        assert [e.filenames for e in entities] == [["a.jpg", "c.jpg"], ["b.jpg"]]

    def test_tie_keeps_earliest(self):
        """Test equal scores pick the earliest candidate and pairs stay pairs."""
        records = [
            RawExtraction(emails=["a@x.com"], filename=f"{i}.jpg") for i in range(3)
        ]

        entities = pair_cards(records)

        assert [e.filenames for e in entities] == [["0.jpg", "1.jpg"], ["2.jpg"]]

    def test_singular_fields_filled(self):
        """Test merged pairs carry the first non-empty singular fields."""
        a = RawExtraction(emails=["j@x.com"], company="Acme")
        b = RawExtraction(emails=["j@x.com"], full_name="Jane Doe", company="Other")

        entity = pair_cards([a, b])[0]

        assert entity.full_name == "Jane Doe"
        assert entity.company == "Acme"

    def test_identical_texts_joined(self):
        """Test a pair with identical texts keeps both copies."""
        a = RawExtraction(emails=["j@x.com"], text="same", filename="a")
        b = RawExtraction(emails=["j@x.com"], text="same", filename="b")

        entity = pair_cards([a, b])[0]

        assert entity.filenames == ["a", "b"]
        assert entity.text == "same\n---\nsame"


class TestPairingConfig:
    """Test PairingConfig validation."""

    def test_invalid_role_pattern(self):
        """Test a malformed role pattern is rejected when the config is built."""
        with pytest.raises(ValidationError, match="Invalid regular expression"):
            PairingConfig(role_pattern="(director")

    def test_invalid_company_pattern_from_file(self, tmp_path):
        """Test a malformed pattern in a config file raises ValueError."""
        path = tmp_path / "cfg.json"
        path.write_text('{"company_pattern": "[ltd"}', encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid regular expression"):
            PairingConfig.from_file(path)

    def test_address_keywords_lowercased(self):
        """Test configured keywords are lower-cased and stripped."""
        config = PairingConfig(address_keywords=("Pune", " ROAD ", " "))

        assert config.address_keywords == ("pune", "road")

    def test_mixed_case_keywords_score(self):
        """Test mixed-case keywords still match the lower-cased text."""
        config = PairingConfig(address_keywords=("Pune", "Sector"))
        a = fp(text="Sector-5 Pune")
        b = fp(text="PUNE/sector 9")

        result = compute_match_score(a, b, config)

        assert result.score == pytest.approx(0.2)
        assert result.signals == ("address(2)",)
