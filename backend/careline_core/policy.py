from __future__ import annotations

import re
from dataclasses import dataclass

from .schemas import TriageLevel, TriageResult


DEFAULT_TRIAGE_DISCLAIMER = (
    "This triage result is not a diagnosis or treatment plan. "
    "Please consult a licensed medical professional immediately."
)


@dataclass(frozen=True)
class GateDecision:
    matched: bool
    code: str = "ok"
    reason: str | None = None


class SafetyPolicy:
    """Deterministic gates that run before any external model call.

    Matching is literal and case-insensitive. A paraphrase that avoids every
    listed phrase falls through to the model.
    """

    EMERGENCY_PHRASES = (
        "chest pain",
        "chest pressure",
        "difficulty breathing",
        "can't breathe",
        "cannot breathe",
        "not breathing",
        "unconscious",
        "loss of consciousness",
        "severe bleeding",
        "stroke",
        "heart attack",
        "seizure",
        "paralysis",
        "severe head injury",
        "suicidal",
        "overdose",
        "anaphylaxis",
    )
    DOSAGE_PHRASES = ("dosage", "dose", "how many mg", "how much medicine", "prescribe")
    DIAGNOSIS_PHRASES = ("diagnose", "diagnosis", "what disease do i have", "what illness do i have")
    BYPASS_PHRASES = ("ignore safety", "ignore your rules", "skip safety", "bypass safety")

    _OXYGEN_RE = re.compile(
        r"(?:spo2|oxygen(?: level)?|o2)\s*(?:is|:|=|at)?\s*(\d{2,3}(?:\.\d+)?)",
        re.IGNORECASE,
    )
    OXYGEN_THRESHOLD = 90.0

    def __init__(self, emergency_number: str = "112") -> None:
        self.emergency_number = emergency_number

    @staticmethod
    def gate_text(symptoms: str, additional_context: str | None = None) -> str:
        return f"{symptoms} {additional_context or ''}".lower()

    def check_emergency(self, text: str) -> GateDecision:
        lowered = (text or "").lower()
        for phrase in self.EMERGENCY_PHRASES:
            if phrase in lowered:
                return GateDecision(True, "emergency_phrase", phrase)
        match = self._OXYGEN_RE.search(lowered)
        if match and float(match.group(1)) < self.OXYGEN_THRESHOLD:
            return GateDecision(True, "low_oxygen", "oxygen level below 90%")
        return GateDecision(False)

    def check_safety_refusal(self, text: str) -> GateDecision:
        lowered = (text or "").lower()
        for code, phrases in (
            ("dosage_request", self.DOSAGE_PHRASES),
            ("diagnosis_request", self.DIAGNOSIS_PHRASES),
            ("safety_bypass", self.BYPASS_PHRASES),
        ):
            for phrase in phrases:
                if phrase in lowered:
                    return GateDecision(True, code, phrase)
        return GateDecision(False)

    def red_result(self, reason: str) -> TriageResult:
        return TriageResult(
            summary="Potential emergency warning signs were detected in the reported symptoms.",
            triage_level=TriageLevel.RED,
            explanation=f"The message includes emergency indicators ({reason}) that can be life-threatening.",
            recommended_action=(
                f"Call emergency services now ({self.emergency_number}) "
                "or go to the nearest emergency department immediately."
            ),
            disclaimer=f"{DEFAULT_TRIAGE_DISCLAIMER} Do not delay emergency care.",
        )

    def safety_refusal_result(self) -> TriageResult:
        return TriageResult(
            summary="The request asks for diagnosis, medication dosage, or unsafe guidance.",
            triage_level=TriageLevel.YELLOW,
            explanation=(
                "For safety, this assistant cannot provide diagnosis, dosing, "
                "or advice that bypasses medical safeguards."
            ),
            recommended_action=(
                "Consult a licensed doctor within 24 hours for personalized guidance. "
                "If severe symptoms are present, call emergency services immediately."
            ),
            disclaimer=DEFAULT_TRIAGE_DISCLAIMER,
        )
