from __future__ import annotations

import pytest

from careline_core.errors import InvalidInputError
from careline_core.schemas import (
    LanguageCode,
    TriageLevel,
    most_urgent,
    parse_simplify_request,
    parse_triage_request,
    validate_summary_payload,
    validate_triage_payload,
)


def _triage_payload(**overrides):
    payload = {
        "summary": "Mild cough for two days.",
        "triageLevel": "GREEN",
        "explanation": "No warning signs were reported.",
        "recommendedAction": "Schedule a routine consultation with a doctor.",
        "disclaimer": "This is not a diagnosis. Consult a licensed doctor.",
    }
    payload.update(overrides)
    return payload


def _summary_payload(**overrides):
    payload = {
        "languageCode": "en",
        "languageLabel": "English",
        "doctorExplanation": "Take the tablet twice a day after meals.",
        "medicines": [
            {
                "medicineName": "Paracetamol",
                "dosage": "500mg",
                "duration": "5 days",
                "timingSlots": ["MORNING_AFTER_FOOD", "NIGHT_AFTER_FOOD"],
                "instructions": ["Take after food"],
            }
        ],
        "warnings": [],
        "hydrationTips": [],
        "generalAdvice": ["See a doctor if it gets worse."],
    }
    payload.update(overrides)
    return payload


def test_snake_case_model_keys_are_rejected():
    payload = _triage_payload()
    payload["triage_level"] = payload.pop("triageLevel")
    payload["recommended_action"] = payload.pop("recommendedAction")
    assert validate_triage_payload(payload) is None


def test_valid_triage_payload_is_accepted():
    result = validate_triage_payload(_triage_payload())
    assert result is not None
    assert result.triage_level is TriageLevel.GREEN
    assert result.to_wire()["recommendedAction"].startswith("Schedule")


@pytest.mark.parametrize(
    "payload",
    [
        _triage_payload(triageLevel="PURPLE"),
        _triage_payload(disclaimer="short"),
        _triage_payload(summary="ok"),
        _triage_payload(dosage="Take 500mg every 4 hours"),
        {"summary": "Missing everything else"},
        "not an object",
        None,
    ],
)
def test_malformed_triage_payload_is_rejected(payload):
    assert validate_triage_payload(payload) is None


@pytest.mark.parametrize(
    "payload",
    [
        _summary_payload(medicines=[]),
        _summary_payload(languageCode="fr"),
        _summary_payload(diagnosis="Viral fever"),
        _summary_payload(
            medicines=[
                {
                    "medicineName": "Paracetamol",
                    "dosage": "500mg",
                    "duration": "5 days",
                    "timingSlots": ["LUNCH"],
                    "instructions": [],
                }
            ]
        ),
        _summary_payload(warnings=[""]),
    ],
)
def test_malformed_summary_payload_is_rejected(payload):
    assert validate_summary_payload(payload) is None


def test_summary_with_language_overwrites_code_and_label():
    summary = validate_summary_payload(_summary_payload(languageLabel="Klingon"))
    assert summary is not None
    coerced = summary.with_language(LanguageCode.TA)
    assert coerced.language_code is LanguageCode.TA
    assert coerced.language_label == "Tamil"
    assert coerced.medicines == summary.medicines


def test_parse_triage_request_accepts_camel_case_fields():
    request = parse_triage_request(
        {
            "symptoms": "Cough and mild fever for two days",
            "age": 34,
            "knownConditions": ["asthma"],
            "additionalContext": "no travel",
            "unknownField": "ignored",
        }
    )
    assert request.known_conditions == ["asthma"]
    assert request.additional_context == "no travel"


@pytest.mark.parametrize(
    "payload",
    [
        {"symptoms": "short"},
        {"symptoms": "Cough and mild fever", "age": 121},
        {"symptoms": "Cough and mild fever", "knownConditions": ["x"] * 16},
        {"symptoms": "x" * 3001},
        ["Cough and mild fever"],
    ],
)
def test_parse_triage_request_rejects_out_of_bounds_input(payload):
    with pytest.raises(InvalidInputError) as excinfo:
        parse_triage_request(payload)
    assert excinfo.value.details
    assert all("loc" in detail and "msg" in detail for detail in excinfo.value.details)


def test_parse_simplify_request_defaults_to_english():
    request = parse_simplify_request({"text": "Paracetamol 500mg twice daily"})
    assert request.language is LanguageCode.EN


def test_parse_simplify_request_rejects_unsupported_language():
    with pytest.raises(InvalidInputError):
        parse_simplify_request({"text": "Paracetamol 500mg twice daily", "language": "fr"})


def test_most_urgent_orders_levels():
    assert most_urgent([TriageLevel.BLUE, TriageLevel.RED, TriageLevel.GREEN]) is TriageLevel.RED
    assert most_urgent([TriageLevel.GREEN, TriageLevel.YELLOW]) is TriageLevel.YELLOW
    assert most_urgent([]) is None
