"""Wire contracts for triage and prescription simplification.

Every model is closed (unknown keys are rejected) and immutable once built.
Python attributes are snake_case; the JSON contract is camelCase.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError
from pydantic.alias_generators import to_camel

from .errors import InvalidInputError

logger = logging.getLogger(__name__)


class TriageLevel(str, Enum):
    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"
    BLUE = "BLUE"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK = {
    TriageLevel.RED: 3,
    TriageLevel.YELLOW: 2,
    TriageLevel.GREEN: 1,
    TriageLevel.BLUE: 0,
}


def most_urgent(levels: Iterable[TriageLevel]) -> TriageLevel | None:
    ordered = sorted(levels, key=lambda level: level.rank, reverse=True)
    return ordered[0] if ordered else None


class LegacySeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EMERGENCY = "EMERGENCY"


LEGACY_SEVERITY_TO_LEVEL = {
    LegacySeverity.LOW: TriageLevel.BLUE,
    LegacySeverity.MEDIUM: TriageLevel.GREEN,
    LegacySeverity.HIGH: TriageLevel.YELLOW,
    LegacySeverity.EMERGENCY: TriageLevel.RED,
}


class TimingSlot(str, Enum):
    MORNING_BEFORE_FOOD = "MORNING_BEFORE_FOOD"
    MORNING_AFTER_FOOD = "MORNING_AFTER_FOOD"
    AFTERNOON_BEFORE_FOOD = "AFTERNOON_BEFORE_FOOD"
    AFTERNOON_AFTER_FOOD = "AFTERNOON_AFTER_FOOD"
    NIGHT_BEFORE_FOOD = "NIGHT_BEFORE_FOOD"
    NIGHT_AFTER_FOOD = "NIGHT_AFTER_FOOD"
    BEDTIME = "BEDTIME"
    AS_NEEDED = "AS_NEEDED"
    UNSPECIFIED = "UNSPECIFIED"


class LanguageCode(str, Enum):
    EN = "en"
    HI = "hi"
    TA = "ta"
    BN = "bn"


LANGUAGE_LABELS = {
    LanguageCode.EN: "English",
    LanguageCode.HI: "Hindi",
    LanguageCode.TA: "Tamil",
    LanguageCode.BN: "Bengali",
}


class EmergencyType(str, Enum):
    CHEST_PAIN = "CHEST_PAIN"
    BREATHING_DIFFICULTY = "BREATHING_DIFFICULTY"
    SEVERE_BLEEDING = "SEVERE_BLEEDING"
    STROKE_SYMPTOMS = "STROKE_SYMPTOMS"
    ALLERGIC_REACTION = "ALLERGIC_REACTION"
    UNCONSCIOUSNESS = "UNCONSCIOUSNESS"
    MENTAL_HEALTH_CRISIS = "MENTAL_HEALTH_CRISIS"
    ACCIDENT_INJURY = "ACCIDENT_INJURY"
    OTHER = "OTHER"


EMERGENCY_TYPE_LABELS = {
    EmergencyType.CHEST_PAIN: "Chest pain or pressure",
    EmergencyType.BREATHING_DIFFICULTY: "Difficulty breathing",
    EmergencyType.SEVERE_BLEEDING: "Severe bleeding",
    EmergencyType.STROKE_SYMPTOMS: "Stroke-like symptoms",
    EmergencyType.ALLERGIC_REACTION: "Severe allergic reaction",
    EmergencyType.UNCONSCIOUSNESS: "Loss of consciousness",
    EmergencyType.MENTAL_HEALTH_CRISIS: "Mental health crisis",
    EmergencyType.ACCIDENT_INJURY: "Accident or injury",
    EmergencyType.OTHER: "Other emergency",
}

ListItem = Annotated[str, StringConstraints(min_length=1, max_length=220)]
ConditionName = Annotated[str, StringConstraints(max_length=120)]


class _Contract(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ---------------- Requests ----------------
class TriageRequest(_Request):
    symptoms: str = Field(min_length=10, max_length=3000)
    age: int | None = Field(default=None, ge=0, le=120)
    duration: str | None = Field(default=None, max_length=200)
    known_conditions: list[ConditionName] | None = Field(default=None, max_length=15)
    additional_context: str | None = Field(default=None, max_length=1500)


class SimplifyRequest(_Request):
    text: str = Field(min_length=10, max_length=6000)
    language: LanguageCode = LanguageCode.EN


class SosAlertRequest(_Request):
    emergency_type: EmergencyType
    details: str | None = Field(default=None, max_length=800)


# ---------------- Results ----------------
class TriageResult(_Contract):
    summary: str = Field(min_length=5, max_length=600)
    triage_level: TriageLevel
    explanation: str = Field(min_length=5, max_length=1000)
    recommended_action: str = Field(min_length=5, max_length=600)
    disclaimer: str = Field(min_length=10, max_length=400)


class SimplifiedMedicine(_Contract):
    medicine_name: str = Field(min_length=1, max_length=160)
    dosage: str = Field(min_length=1, max_length=160)
    duration: str = Field(min_length=1, max_length=160)
    timing_slots: tuple[TimingSlot, ...] = Field(min_length=1, max_length=8)
    instructions: tuple[ListItem, ...] = Field(default=(), max_length=8)


class SimplifiedPrescriptionSummary(_Contract):
    language_code: LanguageCode
    language_label: str = Field(min_length=2, max_length=60)
    doctor_explanation: str = Field(min_length=5, max_length=1200)
    medicines: tuple[SimplifiedMedicine, ...] = Field(min_length=1, max_length=12)
    warnings: tuple[ListItem, ...] = Field(default=(), max_length=10)
    hydration_tips: tuple[ListItem, ...] = Field(default=(), max_length=8)
    general_advice: tuple[ListItem, ...] = Field(default=(), max_length=10)

    def with_language(self, language: LanguageCode) -> "SimplifiedPrescriptionSummary":
        return self.model_copy(
            update={"language_code": language, "language_label": LANGUAGE_LABELS[language]}
        )


# ---------------- Validation helpers ----------------
def _parse_request(model: type[_Request], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        raise InvalidInputError("Invalid payload", details) from exc


def parse_triage_request(payload: Any) -> TriageRequest:
    return _parse_request(TriageRequest, payload)


def parse_simplify_request(payload: Any) -> SimplifyRequest:
    return _parse_request(SimplifyRequest, payload)


def validate_triage_payload(payload: Any) -> TriageResult | None:
    # Model output must use the camelCase wire names; snake_case keys are rejected.
    if not isinstance(payload, dict):
        return None
    try:
        return TriageResult.model_validate(payload, by_alias=True, by_name=False)
    except ValidationError as exc:
        logger.warning("triage payload rejected by schema (%d errors)", exc.error_count())
        return None


def validate_summary_payload(payload: Any) -> SimplifiedPrescriptionSummary | None:
    if not isinstance(payload, dict):
        return None
    try:
        return SimplifiedPrescriptionSummary.model_validate(payload, by_alias=True, by_name=False)
    except ValidationError as exc:
        logger.warning("prescription summary payload rejected by schema (%d errors)", exc.error_count())
        return None
