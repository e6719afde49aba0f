"""Regex/heuristic prescription extraction.

Each rule is a pure function over the sanitized text that returns ``None`` or
an empty list when it finds nothing. ``extract_prescription`` composes them
into a summary whose narrative text comes only from the per-language phrase
tables, so the result is valid and localized without any external model.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .phrases import PHRASES, PhraseTable
from .sanitizer import sanitize_text
from .schemas import (
    LANGUAGE_LABELS,
    LanguageCode,
    SimplifiedMedicine,
    SimplifiedPrescriptionSummary,
    TimingSlot,
)

_MEDICINE_RE = re.compile(
    r"(?:take|tab(?:let)?|capsule|cap|syrup)?\s*"
    r"([A-Za-z][A-Za-z0-9-]*(?:\s+[A-Za-z][A-Za-z0-9-]*){0,3})\s+"
    r"(\d+\s?(?:mg|ml|mcg|g))\b",
    re.IGNORECASE,
)
_LEAD_WORD_RE = re.compile(r"^(?:take|tab(?:let)?|capsule|cap|syrup)\s+", re.IGNORECASE)
_DURATION_RE = re.compile(r"\bfor\s+(\d+)\s*(days?|weeks?|months?)\b")
_DAYS_PER_UNIT = {"day": 1, "week": 7, "month": 30}

_AS_NEEDED_RE = re.compile(r"\bas needed\b|\bwhen needed\b|\bsos\b")
_AFTER_FOOD_RE = re.compile(r"\bafter (?:food|meal|meals)\b|\bpost meal\b")
_BEFORE_FOOD_RE = re.compile(r"\bbefore (?:food|meal|meals)\b|\bempty stomach\b")
_DAY_PART_RES = (
    ("MORNING", re.compile(r"\bmorning\b")),
    ("AFTERNOON", re.compile(r"\bafternoon\b|\bnoon\b")),
    ("NIGHT", re.compile(r"\bnight\b|\bevening\b")),
)
_THRICE_RE = re.compile(r"\bthrice daily\b|\bthree times (?:daily|a day)\b|\btid\b")
_TWICE_RE = re.compile(r"\btwice daily\b|\btwo times (?:daily|a day)\b|\bbid\b|\bbd\b")
_ONCE_RE = re.compile(r"\bonce daily\b|\bonce a day\b|\bod\b")
_BEDTIME_RE = re.compile(r"\bbefore bed\b|\bbedtime\b")

_FREQUENCY_RE = re.compile(
    r"\b(?:once|twice|thrice)\s+(?:daily|a day|per day)\b"
    r"|\b\d+\s*(?:times?|x)\s*(?:a|per)?\s*day\b"
    r"|\b(?:od|bd|bid|tid)\b",
    re.IGNORECASE,
)
_QTY_RE = re.compile(r"\bqty(?:uantity)?\s*:?\s*(\d+)\b", re.IGNORECASE)
_CONDITION_RE = re.compile(r"\bif\s+[^.]+", re.IGNORECASE)
_EXPLICIT_INSTRUCTION_RE = re.compile(r"\binstructions?\s*:\s*([^.;]+)", re.IGNORECASE)
_UNIT_COUNT_RE = re.compile(r"\b\d+\s*(?:tablets?|tabs?|capsules?|caps?|ml|drops?)\b", re.IGNORECASE)

_EMPTY_STOMACH_RE = re.compile(r"\b(?:empty stomach|avoid empty stomach)\b")
_GENERIC_WARNING_RE = re.compile(r"\bdo not\b|\bdon't\b|\bavoid\b")
_HYDRATION_RE = re.compile(r"\bdrink\b.*\bwater\b|\bhydrat")

MAX_INSTRUCTIONS = 8


@dataclass(frozen=True)
class MedicineMatch:
    name: str
    dosage: str


def _clip(value: str, limit: int) -> str:
    return value if len(value) <= limit else value[:limit].rstrip()


def extract_medicine(text: str) -> MedicineMatch | None:
    match = _MEDICINE_RE.search(text)
    if not match:
        return None
    name = _LEAD_WORD_RE.sub("", match.group(1)).strip()
    dosage = re.sub(r"\s+", " ", match.group(2)).strip()
    if not name or not dosage:
        return None
    return MedicineMatch(name=name, dosage=dosage)


def extract_duration_days(lower: str) -> int | None:
    match = _DURATION_RE.search(lower)
    if not match:
        return None
    unit = match.group(2).rstrip("s")
    return int(match.group(1)) * _DAYS_PER_UNIT[unit]


def _slot_for(part: str, meal: str) -> TimingSlot:
    # A day part with no meal word is read as after food.
    suffix = "BEFORE_FOOD" if meal == "BEFORE_FOOD" else "AFTER_FOOD"
    return TimingSlot(f"{part}_{suffix}")


def extract_timing_slots(lower: str) -> list[TimingSlot]:
    if _AS_NEEDED_RE.search(lower):
        return [TimingSlot.AS_NEEDED]

    if _AFTER_FOOD_RE.search(lower):
        meal = "AFTER_FOOD"
    elif _BEFORE_FOOD_RE.search(lower):
        meal = "BEFORE_FOOD"
    else:
        meal = "NONE"

    parts = [part for part, pattern in _DAY_PART_RES if pattern.search(lower)]
    if not parts:
        if _THRICE_RE.search(lower):
            parts = ["MORNING", "AFTERNOON", "NIGHT"]
        elif _TWICE_RE.search(lower):
            parts = ["MORNING", "NIGHT"]
        elif _ONCE_RE.search(lower):
            parts = ["MORNING"]

    slots = [_slot_for(part, meal) for part in parts]
    if _BEDTIME_RE.search(lower):
        slots.append(TimingSlot.BEDTIME)
    return list(dict.fromkeys(slots))


def extract_instructions(text: str, phrases: PhraseTable) -> list[str]:
    lower = text.lower()
    found: list[str] = []
    if re.search(r"\bafter (?:food|meal|meals)\b", lower):
        found.append(phrases.take_after_food)
    if re.search(r"\bbefore (?:food|meal|meals)\b", lower):
        found.append(phrases.take_before_food)
    frequency = _FREQUENCY_RE.search(text)
    if frequency:
        found.append(frequency.group(0))
    qty = _QTY_RE.search(text)
    if qty:
        found.append(f"Qty {qty.group(1)}")
    condition = _CONDITION_RE.search(text)
    if condition:
        found.append(condition.group(0))
    explicit = _EXPLICIT_INSTRUCTION_RE.search(text)
    if explicit:
        found.append(explicit.group(1))
    unit_count = _UNIT_COUNT_RE.search(text)
    if unit_count:
        found.append(unit_count.group(0))

    cleaned = [_clip(value.strip(), 220) for value in found if value.strip()]
    return list(dict.fromkeys(cleaned))[:MAX_INSTRUCTIONS]


def extract_warnings(lower: str, phrases: PhraseTable) -> list[str]:
    if _EMPTY_STOMACH_RE.search(lower):
        return [phrases.warning_empty_stomach]
    if _GENERIC_WARNING_RE.search(lower):
        return [phrases.warning_generic]
    return []


def extract_hydration_tips(lower: str, phrases: PhraseTable) -> list[str]:
    if _HYDRATION_RE.search(lower):
        return [phrases.hydration_tip]
    return []


def extract_prescription(
    text: str,
    language: LanguageCode = LanguageCode.EN,
) -> SimplifiedPrescriptionSummary:
    language = LanguageCode(language)
    phrases = PHRASES[language]
    cleaned = sanitize_text(text)
    lower = cleaned.lower()

    medicine = extract_medicine(cleaned)
    name = _clip(medicine.name, 160) if medicine else phrases.default_medicine
    dosage = _clip(medicine.dosage, 160) if medicine else phrases.default_dosage
    days = extract_duration_days(lower)
    duration = _clip(phrases.days(days), 160) if days is not None else phrases.default_duration
    slots = extract_timing_slots(lower) or [TimingSlot.UNSPECIFIED]
    instructions = extract_instructions(cleaned, phrases)

    explanation = " ".join(
        segment
        for segment in (phrases.use(name, dosage), phrases.schedule(duration), instructions[0] if instructions else "")
        if segment
    )
    return SimplifiedPrescriptionSummary(
        language_code=language,
        language_label=LANGUAGE_LABELS[language],
        doctor_explanation=_clip(explanation, 1200),
        medicines=(
            SimplifiedMedicine(
                medicine_name=name,
                dosage=dosage,
                duration=duration,
                timing_slots=tuple(slots[:8]),
                instructions=tuple(instructions),
            ),
        ),
        warnings=tuple(extract_warnings(lower, phrases)),
        hydration_tips=tuple(extract_hydration_tips(lower, phrases)),
        general_advice=(phrases.general_advice,),
    )
