"""Normalize stored triage records, current or legacy, into ``TriageResult``.

Older records carry ``severity`` (LOW/MEDIUM/HIGH/EMERGENCY) with
``urgencyLabel`` and ``safetyNotice`` instead of the four-level fields.
"""
from __future__ import annotations

from typing import Any

from .policy import DEFAULT_TRIAGE_DISCLAIMER
from .schemas import LEGACY_SEVERITY_TO_LEVEL, LegacySeverity, TriageLevel, TriageResult

DEFAULT_SUMMARY = "Symptoms were reviewed for triage."
DEFAULT_EXPLANATION = "This urgency level was selected based on the reported symptom pattern."
DEFAULT_LEGACY_EXPLANATION = "This urgency level was estimated from the reported symptoms."


def default_recommended_action(level: TriageLevel, emergency_number: str = "112") -> str:
    if level is TriageLevel.RED:
        return f"Call emergency services immediately ({emergency_number}) and seek emergency care now."
    if level is TriageLevel.YELLOW:
        return "Talk to a doctor within 24 hours and do not delay care."
    if level is TriageLevel.GREEN:
        return "Schedule a routine consultation with a doctor."
    return "Use basic self-care, monitor symptoms closely, and consult a doctor if symptoms worsen."


def _text(value: Any, fallback: str, *, min_length: int, max_length: int) -> str:
    # Stored values outside the result bounds fall back rather than fail.
    if not isinstance(value, str):
        return fallback
    cleaned = value.strip()[:max_length].rstrip()
    if len(cleaned) < min_length:
        return fallback
    return cleaned


def _parse_enum(enum_cls: type, value: Any) -> Any:
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        return None


def normalize_triage_result(value: Any, emergency_number: str = "112") -> TriageResult | None:
    if not isinstance(value, dict):
        return None

    level = _parse_enum(TriageLevel, value.get("triageLevel"))
    if level is not None:
        return TriageResult(
            summary=_text(value.get("summary"), DEFAULT_SUMMARY, min_length=5, max_length=600),
            triage_level=level,
            explanation=_text(value.get("explanation"), DEFAULT_EXPLANATION, min_length=5, max_length=1000),
            recommended_action=_text(
                value.get("recommendedAction"),
                default_recommended_action(level, emergency_number),
                min_length=5,
                max_length=600,
            ),
            disclaimer=_text(value.get("disclaimer"), DEFAULT_TRIAGE_DISCLAIMER, min_length=10, max_length=400),
        )

    severity = _parse_enum(LegacySeverity, value.get("severity"))
    if severity is None:
        return None
    level = LEGACY_SEVERITY_TO_LEVEL[severity]
    return TriageResult(
        summary=_text(value.get("summary"), DEFAULT_SUMMARY, min_length=5, max_length=600),
        triage_level=level,
        explanation=_text(value.get("urgencyLabel"), DEFAULT_LEGACY_EXPLANATION, min_length=5, max_length=1000),
        recommended_action=default_recommended_action(level, emergency_number),
        disclaimer=_text(value.get("safetyNotice"), DEFAULT_TRIAGE_DISCLAIMER, min_length=10, max_length=400),
    )
