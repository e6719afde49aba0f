from __future__ import annotations

import pytest

from careline_core.legacy import (
    DEFAULT_LEGACY_EXPLANATION,
    DEFAULT_SUMMARY,
    default_recommended_action,
    normalize_triage_result,
)
from careline_core.policy import DEFAULT_TRIAGE_DISCLAIMER
from careline_core.schemas import TriageLevel


def test_current_shape_is_parsed_case_insensitively_with_defaults():
    result = normalize_triage_result({"triageLevel": " yellow ", "explanation": "Fever for three days."})

    assert result is not None
    assert result.triage_level is TriageLevel.YELLOW
    assert result.summary == DEFAULT_SUMMARY
    assert result.explanation == "Fever for three days."
    assert result.recommended_action == "Talk to a doctor within 24 hours and do not delay care."
    assert result.disclaimer == DEFAULT_TRIAGE_DISCLAIMER


def test_current_shape_keeps_stored_recommended_action():
    result = normalize_triage_result({"triageLevel": "GREEN", "recommendedAction": "Book a visit this week."})
    assert result is not None
    assert result.recommended_action == "Book a visit this week."


def test_legacy_emergency_record_maps_to_red():
    result = normalize_triage_result(
        {
            "severity": "emergency",
            "summary": "Severe chest discomfort reported.",
            "urgencyLabel": "Emergency care needed now.",
            "safetyNotice": "This tool does not replace emergency services.",
        }
    )

    assert result is not None
    assert result.triage_level is TriageLevel.RED
    assert result.summary == "Severe chest discomfort reported."
    assert result.explanation == "Emergency care needed now."
    assert result.recommended_action == "Call emergency services immediately (112) and seek emergency care now."
    assert result.disclaimer == "This tool does not replace emergency services."


@pytest.mark.parametrize(
    ("severity", "level"),
    [("LOW", TriageLevel.BLUE), ("MEDIUM", TriageLevel.GREEN), ("High", TriageLevel.YELLOW)],
)
def test_legacy_severity_mapping(severity, level):
    result = normalize_triage_result({"severity": severity})
    assert result is not None
    assert result.triage_level is level
    assert result.explanation == DEFAULT_LEGACY_EXPLANATION
    assert result.recommended_action == default_recommended_action(level)


def test_invalid_current_level_falls_through_to_legacy_severity():
    result = normalize_triage_result({"triageLevel": "PURPLE", "severity": "HIGH"})
    assert result is not None
    assert result.triage_level is TriageLevel.YELLOW


def test_blank_or_too_short_fields_use_defaults():
    result = normalize_triage_result({"triageLevel": "BLUE", "summary": "ok", "disclaimer": "   "})
    assert result is not None
    assert result.summary == DEFAULT_SUMMARY
    assert result.disclaimer == DEFAULT_TRIAGE_DISCLAIMER


@pytest.mark.parametrize(
    "value",
    [None, "RED", ["RED"], {}, {"level": "RED"}, {"triageLevel": 3}, {"severity": "CRITICAL"}],
)
def test_unrecognized_values_return_none(value):
    assert normalize_triage_result(value) is None


def test_emergency_number_is_configurable():
    assert "(911)" in default_recommended_action(TriageLevel.RED, "911")


def test_bare_legacy_severities_normalize_with_disclaimer():
    emergency = normalize_triage_result({"severity": "EMERGENCY"})
    low = normalize_triage_result({"severity": "LOW"})
    assert emergency is not None and emergency.triage_level is TriageLevel.RED
    assert emergency.disclaimer
    assert low is not None and low.triage_level is TriageLevel.BLUE


def test_padded_fields_that_clip_below_minimum_use_defaults():
    legacy = normalize_triage_result({"severity": "LOW", "summary": "ab" + " " * 700 + "c"})
    current = normalize_triage_result({"triageLevel": "GREEN", "disclaimer": "a" + " " * 500 + "b"})

    assert legacy is not None
    assert legacy.summary == DEFAULT_SUMMARY
    assert current is not None
    assert current.disclaimer == DEFAULT_TRIAGE_DISCLAIMER
