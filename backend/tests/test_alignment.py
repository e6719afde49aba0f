from __future__ import annotations

from careline_core.alignment import check_alignment, narrative_text
from careline_core.schemas import (
    LANGUAGE_LABELS,
    LanguageCode,
    SimplifiedMedicine,
    SimplifiedPrescriptionSummary,
    TimingSlot,
)


def _summary(
    explanation: str,
    language: LanguageCode = LanguageCode.HI,
    instructions: tuple[str, ...] = (),
    advice: tuple[str, ...] = (),
) -> SimplifiedPrescriptionSummary:
    return SimplifiedPrescriptionSummary(
        language_code=language,
        language_label=LANGUAGE_LABELS[language],
        doctor_explanation=explanation,
        medicines=(
            SimplifiedMedicine(
                medicine_name="Paracetamol",
                dosage="500mg",
                duration="5 days",
                timing_slots=(TimingSlot.MORNING_AFTER_FOOD,),
                instructions=instructions,
            ),
        ),
        general_advice=advice,
    )


def test_english_target_is_always_aligned():
    assert check_alignment(_summary("Take after food.", LanguageCode.EN), LanguageCode.EN).aligned is True


def test_hindi_target_with_no_devanagari_is_rejected():
    check = check_alignment(_summary("Take this medicine after food twice a day."), LanguageCode.HI)
    assert check.aligned is False
    assert check.script_count == 0
    assert check.reason == "no_target_script"


def test_hindi_narrative_is_aligned():
    summary = _summary(
        "बुखार के लिए दवा दिन में दो बार खाना खाने के बाद लें।",
        instructions=("खाना खाने के बाद लें", "Qty 10"),
    )
    check = check_alignment(summary, LanguageCode.HI)
    assert check.aligned is True
    assert check.latin_count == 3


def test_latin_dominant_narrative_is_rejected_and_ratio_is_tunable():
    summary = _summary("Take this medicine twice daily after food करें")
    check = check_alignment(summary, LanguageCode.HI)
    assert check.aligned is False
    assert check.reason == "latin_dominant"
    assert check.script_count > 0

    assert check_alignment(summary, LanguageCode.HI, latin_ratio=100.0).aligned is True


def test_tamil_and_bengali_scripts_are_detected():
    tamil = _summary("உணவுக்குப் பிறகு எடுத்துக்கொள்ளவும்.", LanguageCode.TA)
    bengali = _summary("খাওয়ার পরে সেবন করুন।", LanguageCode.BN)
    assert check_alignment(tamil, LanguageCode.TA).aligned is True
    assert check_alignment(bengali, LanguageCode.BN).aligned is True
    # Tamil text is not Bengali.
    assert check_alignment(tamil, LanguageCode.BN).aligned is False


def test_narrative_text_excludes_medicine_names_and_collapses_whitespace():
    summary = _summary("Line one.\n\n  Line two.", instructions=("Take   after food",), advice=("Rest.",))
    text = narrative_text(summary)
    assert text == "Line one. Line two. Take after food Rest."
    assert "Paracetamol" not in text
    assert "500mg" not in text
