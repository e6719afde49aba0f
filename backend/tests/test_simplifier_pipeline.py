from __future__ import annotations

from model_doubles import ScriptedModel

from careline_core.extractor import extract_prescription
from careline_core.schemas import LanguageCode, SimplifyRequest
from careline_core.simplifier import SimplifierPipeline

TEXT = "Take Paracetamol 500mg twice daily for 5 days after food. Qty 10."


def _medicine(instructions):
    return {
        "medicineName": "Paracetamol",
        "dosage": "500mg",
        "duration": "5 days",
        "timingSlots": ["MORNING_AFTER_FOOD", "NIGHT_AFTER_FOOD"],
        "instructions": instructions,
    }


ENGLISH_SUMMARY = {
    "languageCode": "en",
    "languageLabel": "English",
    "doctorExplanation": "Paracetamol helps with fever. Take it twice a day after meals for 5 days.",
    "medicines": [_medicine(["Take after food", "Qty 10"])],
    "warnings": [],
    "hydrationTips": ["Drink water through the day."],
    "generalAdvice": ["See a doctor if the fever does not settle."],
}

HINDI_SUMMARY = {
    "languageCode": "hi",
    "languageLabel": "Hindi",
    "doctorExplanation": "बुखार के लिए पैरासिटामोल दिन में दो बार खाना खाने के बाद लें।",
    "medicines": [_medicine(["खाना खाने के बाद लें", "Qty 10"])],
    "warnings": [],
    "hydrationTips": ["पर्याप्त पानी पिएं।"],
    "generalAdvice": ["बुखार बना रहे तो डॉक्टर से मिलें।"],
}


def _run(model: ScriptedModel, language: str = "en"):
    return SimplifierPipeline(model=model).run(SimplifyRequest(text=TEXT, language=language))


def test_missing_model_output_returns_deterministic_summary():
    model = ScriptedModel()
    outcome = _run(model, "ta")

    assert outcome.source == "fallback"
    assert outcome.model_calls == 1
    assert outcome.summary == extract_prescription(TEXT, LanguageCode.TA)


def test_valid_english_model_output_is_used_with_canonical_language():
    model = ScriptedModel({**ENGLISH_SUMMARY, "languageCode": "hi", "languageLabel": "Whatever"})
    outcome = _run(model, "en")

    assert outcome.source == "model"
    assert outcome.model_calls == 1
    assert outcome.summary.language_code is LanguageCode.EN
    assert outcome.summary.language_label == "English"
    assert outcome.summary.doctor_explanation == ENGLISH_SUMMARY["doctorExplanation"]
    assert model.calls[0]["temperature"] == 0.2
    assert "targetLanguageCode: en" in model.calls[0]["user"]


def test_aligned_hindi_output_needs_no_retry():
    model = ScriptedModel(HINDI_SUMMARY)
    outcome = _run(model, "hi")

    assert outcome.source == "model"
    assert len(model.calls) == 1
    assert "Devanagari" in model.calls[0]["system"]


def test_misaligned_hindi_output_is_translated_once():
    model = ScriptedModel(ENGLISH_SUMMARY, {**HINDI_SUMMARY, "languageCode": "en"})
    outcome = _run(model, "hi")

    assert outcome.source == "model_translated"
    assert outcome.model_calls == 2
    assert outcome.summary.language_code is LanguageCode.HI
    assert outcome.summary.language_label == "Hindi"
    retry = model.calls[1]
    assert retry["temperature"] == 0.1
    assert "targetLanguageCode: hi" in retry["user"]
    assert "JSON to translate:" in retry["user"]
    assert "Paracetamol helps with fever." in retry["user"]


def test_retry_that_stays_in_english_falls_back():
    model = ScriptedModel(ENGLISH_SUMMARY, ENGLISH_SUMMARY)
    outcome = _run(model, "hi")

    assert outcome.source == "fallback"
    assert outcome.model_calls == 2
    assert outcome.summary == extract_prescription(TEXT, LanguageCode.HI)


def test_invalid_retry_output_falls_back():
    model = ScriptedModel(ENGLISH_SUMMARY, {"translated": True})
    outcome = _run(model, "bn")

    assert outcome.source == "fallback"
    assert outcome.summary.language_code is LanguageCode.BN


def test_schema_invalid_output_falls_back_without_retry():
    model = ScriptedModel({**ENGLISH_SUMMARY, "medicines": []}, HINDI_SUMMARY)
    outcome = _run(model, "hi")

    assert outcome.source == "fallback"
    assert len(model.calls) == 1


def test_non_object_model_output_falls_back():
    outcome = _run(ScriptedModel(["not", "an", "object"]), "en")
    assert outcome.source == "fallback"
    assert outcome.summary.medicines[0].medicine_name == "Paracetamol"
