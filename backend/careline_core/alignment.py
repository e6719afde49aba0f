from __future__ import annotations

import re
from dataclasses import dataclass

from .schemas import LanguageCode, SimplifiedPrescriptionSummary

SCRIPT_PATTERNS = {
    LanguageCode.HI: re.compile(r"[\u0900-\u097F]"),
    LanguageCode.TA: re.compile(r"[\u0B80-\u0BFF]"),
    LanguageCode.BN: re.compile(r"[\u0980-\u09FF]"),
}
_LATIN_RE = re.compile(r"[A-Za-z]")
_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_LATIN_RATIO = 1.2


@dataclass(frozen=True)
class AlignmentCheck:
    aligned: bool
    script_count: int = 0
    latin_count: int = 0
    reason: str | None = None


def narrative_text(summary: SimplifiedPrescriptionSummary) -> str:
    """Free-text fields a patient reads; names, dosages and slots are excluded."""
    parts = [summary.doctor_explanation]
    for medicine in summary.medicines:
        parts.extend(medicine.instructions)
    parts.extend(summary.warnings)
    parts.extend(summary.hydration_tips)
    parts.extend(summary.general_advice)
    return _WHITESPACE_RE.sub(" ", " ".join(parts)).strip()


def check_alignment(
    summary: SimplifiedPrescriptionSummary,
    language: LanguageCode,
    latin_ratio: float = DEFAULT_LATIN_RATIO,
) -> AlignmentCheck:
    """Heuristic script check for non-Latin targets.

    Fails when the narrative has no character of the target script, or when
    Latin letters outnumber script characters by more than ``latin_ratio``.
    English and any language without a script pattern always pass.
    """
    pattern = SCRIPT_PATTERNS.get(LanguageCode(language))
    if pattern is None:
        return AlignmentCheck(True)

    text = narrative_text(summary)
    script_count = len(pattern.findall(text))
    latin_count = len(_LATIN_RE.findall(text))
    if script_count == 0:
        return AlignmentCheck(False, script_count, latin_count, "no_target_script")
    if latin_count > script_count * latin_ratio:
        return AlignmentCheck(False, script_count, latin_count, "latin_dominant")
    return AlignmentCheck(True, script_count, latin_count)
