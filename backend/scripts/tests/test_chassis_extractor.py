import pytest

from app.models.chassis import MatchTier
from app.services.chassis_extractor import (
    ExtractionRules,
    extract_chassis_number,
    normalize_text,
)


def test_normalize_collapses_whitespace():
    assert normalize_text("  CHASSIS\n\tNO:   MA3  \n") == "CHASSIS NO: MA3"


@pytest.mark.parametrize("text", [None, "", "   \n\t  "])
def test_empty_text_not_found(text):
    result = extract_chassis_number(text)
    assert not result.found
    assert result.identifier is None
    assert result.tier is None


def test_strict_vin_found_in_noise():
    result = extract_chassis_number("CHASSIS NO: MA3ERLF1S00123456 DATE 20231015")
    assert result.found
    assert result.identifier == "MA3ERLF1S00123456"
    assert result.tier is MatchTier.STRICT_VIN


def test_strict_vin_is_upper_cased():
    result = extract_chassis_number("vin: 1hgcm82633a004352 (front)")
    assert result.identifier == "1HGCM82633A004352"
    assert result.tier is MatchTier.STRICT_VIN


def test_strict_vin_across_line_breaks():
    text = "TOYOTA MOTOR CORP\n\nVIN\nJTDKB20U093512345\nMADE IN JAPAN"
    assert extract_chassis_number(text).identifier == "JTDKB20U093512345"


def test_vin_with_excluded_letter_is_not_strict():
    result = extract_chassis_number("MA3ERLF1S0O123456")
    assert result.tier is not MatchTier.STRICT_VIN
    assert result.identifier == "MA3ERLF1S0O123456"


def test_segmented_identifier():
    result = extract_chassis_number("AB12-CD34-EF")
    assert result.identifier == "AB12CD34EF"
    assert result.tier is MatchTier.SEGMENTED


def test_segmented_with_spaces():
    result = extract_chassis_number("ME4 JF50 AB 8123")
    assert result.identifier == "ME4JF50AB8123"
    assert result.tier is MatchTier.SEGMENTED


@pytest.mark.parametrize("text, expected", [
    ("AB1-CD2-EF3", "AB1CD2EF3"),
    ("ABC-DEF-12", "ABCDEF12"),
    ("FRAME: ABC-DEF-12", "ABCDEF12"),
])
def test_three_group_identifier(text, expected):
    result = extract_chassis_number(text)
    assert result.identifier == expected
    assert result.tier is MatchTier.SEGMENTED


def test_general_fallback_skips_date():
    text = "ENGINE OIL CHANGE DUE SOON REF 20231015 ZZ1234567"
    result = extract_chassis_number(text)
    assert result.identifier == "ZZ1234567"
    assert result.tier is MatchTier.GENERAL


def test_no_identifier_in_service_note():
    assert not extract_chassis_number("ENGINE OIL CHANGE DUE 20231015").found


@pytest.mark.parametrize("text", [
    "20231015",
    "12345678901234567",
    "1234 5678 9012",
    "0000-1111-2222-33",
    "42",
])
def test_digits_only_never_found(text):
    assert not extract_chassis_number(text).found


def test_same_text_same_result():
    text = "REG 20231015 / frame: ab12-cd34-ef"
    assert extract_chassis_number(text) == extract_chassis_number(text)


def test_found_identifier_shape():
    texts = [
        "CHASSIS NO: MA3ERLF1S00123456 DATE 20231015",
        "AB12-CD34-EF",
        "ENGINE OIL CHANGE DUE SOON REF 20231015 ZZ1234567",
    ]
    for text in texts:
        identifier = extract_chassis_number(text).identifier
        assert identifier.isalnum() and identifier.isupper()
        assert 8 <= len(identifier) <= 17
        assert any(c.isalpha() for c in identifier)


# ==================== Configurable rules ====================

def test_excluded_letters_can_be_relaxed():
    rules = ExtractionRules(excluded_letters="")
    result = extract_chassis_number("MA3ERLF1S0O123456", rules)
    assert result.tier is MatchTier.STRICT_VIN


def test_date_rule_can_be_disabled():
    rules = ExtractionRules(require_letter=False, reject_date_digits=False)
    assert extract_chassis_number("20231015", rules).identifier == "20231015"


def test_date_rule_applies_without_letter_rule():
    rules = ExtractionRules(require_letter=False)
    assert not extract_chassis_number("20231015", rules).found


def test_rules_from_settings(test_settings):
    rules = ExtractionRules.from_settings(test_settings)
    assert rules == ExtractionRules()
