"""
Chassis Extractor - Pulls a chassis/VIN identifier out of raw OCR text.

Single responsibility: text in, ExtractionResult out. No I/O, no state.

The matchers run as an ordered cascade, strictest first, and the first
matcher that yields an acceptable identifier wins:
1. Strict VIN: 17 chars from the VIN alphabet (no I, O, Q)
2. Segmented: groups printed with spaces/hyphens, e.g. "AB12-CD34-EF"
3. General: any 8-17 char alphanumeric run that is not a number or a date
"""
import re
import string
from dataclasses import dataclass
from typing import Callable, Optional

from app.models.chassis import ExtractionResult, MatchTier

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[\s-]")
_SEGMENTED = re.compile(r"(?:[A-Z0-9]{2,4}[\s-]?){2,5}[A-Z0-9]{2,4}", re.IGNORECASE | re.ASCII)


@dataclass(frozen=True)
class ExtractionRules:
    """
    Domain assumptions behind the matchers. The defaults follow VIN
    conventions; other chassis-plate formats may need different values.
    """
    excluded_letters: str = "IOQ"
    vin_length: int = 17
    min_length: int = 8
    max_length: int = 17
    require_letter: bool = True
    reject_date_digits: bool = True
    date_digits_length: int = 8

    @classmethod
    def from_settings(cls, settings) -> "ExtractionRules":
        return cls(
            excluded_letters=settings.CHASSIS_EXCLUDED_LETTERS,
            min_length=settings.CHASSIS_MIN_LENGTH,
            max_length=settings.CHASSIS_MAX_LENGTH,
            require_letter=settings.CHASSIS_REQUIRE_LETTER,
            reject_date_digits=settings.CHASSIS_REJECT_DATE_DIGITS,
            date_digits_length=settings.CHASSIS_DATE_DIGITS_LENGTH,
        )

    @property
    def vin_pattern(self) -> re.Pattern:
        excluded = set(self.excluded_letters.upper())
        letters = "".join(c for c in string.ascii_uppercase if c not in excluded)
        return re.compile(
            rf"\b[{letters}0-9]{{{self.vin_length}}}\b",
            re.IGNORECASE | re.ASCII,
        )

    @property
    def general_pattern(self) -> re.Pattern:
        return re.compile(
            rf"\b[A-Z0-9]{{{self.min_length},{self.max_length}}}\b",
            re.IGNORECASE | re.ASCII,
        )

    def accepts(self, candidate: str) -> bool:
        """Check an upper-cased candidate against the identifier invariants."""
        if not self.min_length <= len(candidate) <= self.max_length:
            return False
        if not candidate.isalnum() or not candidate.isascii():
            return False
        if self.require_letter and not any(c.isalpha() for c in candidate):
            return False
        if (
            self.reject_date_digits
            and len(candidate) == self.date_digits_length
            and candidate.isdigit()
        ):
            return False
        return True


DEFAULT_RULES = ExtractionRules()


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


# ==================== Matchers ====================

def match_strict_vin(text: str, rules: ExtractionRules) -> Optional[str]:
    for match in rules.vin_pattern.finditer(text):
        candidate = match.group(0).upper()
        if rules.accepts(candidate):
            return candidate
    return None


def match_segmented(text: str, rules: ExtractionRules) -> Optional[str]:
    # Only the first segmented run is considered
    match = _SEGMENTED.search(text)
    if not match:
        return None

    compact = _SEPARATORS.sub("", match.group(0)).upper()
    return compact if rules.accepts(compact) else None


def match_general(text: str, rules: ExtractionRules) -> Optional[str]:
    for match in rules.general_pattern.finditer(text):
        candidate = match.group(0).upper()
        if candidate.isdigit():
            continue
        if rules.accepts(candidate):
            return candidate
    return None


MATCHERS: tuple[tuple[MatchTier, Callable[[str, ExtractionRules], Optional[str]]], ...] = (
    (MatchTier.STRICT_VIN, match_strict_vin),
    (MatchTier.SEGMENTED, match_segmented),
    (MatchTier.GENERAL, match_general),
)


def extract_chassis_number(
        text: Optional[str],
        rules: ExtractionRules = DEFAULT_RULES
) -> ExtractionResult:
    """
    Extract a chassis/VIN identifier from OCR text.

    Args:
        text: Raw recognized text (may be empty or None)
        rules: Matching rules (defaults follow VIN conventions)

    Returns:
        ExtractionResult - found with identifier and tier, or not found
    """
    if not text:
        return ExtractionResult.not_found()

    clean = normalize_text(text)
    if not clean:
        return ExtractionResult.not_found()

    for tier, matcher in MATCHERS:
        identifier = matcher(clean, rules)
        if identifier:
            return ExtractionResult(identifier=identifier, tier=tier)

    return ExtractionResult.not_found()
