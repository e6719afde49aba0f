from __future__ import annotations

from typing import Iterable

from .schemas import LanguageCode, SimplifiedPrescriptionSummary, TimingSlot, TriageLevel

SLOT_ICONS = {
    TimingSlot.MORNING_BEFORE_FOOD: "☀️🍽❌",
    TimingSlot.MORNING_AFTER_FOOD: "☀️🍽✔",
    TimingSlot.AFTERNOON_BEFORE_FOOD: "🌤️🍽❌",
    TimingSlot.AFTERNOON_AFTER_FOOD: "🌤️🍽✔",
    TimingSlot.NIGHT_BEFORE_FOOD: "🌙🍽❌",
    TimingSlot.NIGHT_AFTER_FOOD: "🌙🍽✔",
    TimingSlot.BEDTIME: "🛌",
    TimingSlot.AS_NEEDED: "🕒",
    TimingSlot.UNSPECIFIED: "📌",
}

SLOT_LABELS = {
    LanguageCode.EN: {
        TimingSlot.MORNING_BEFORE_FOOD: "Morning: before food",
        TimingSlot.MORNING_AFTER_FOOD: "Morning: after food",
        TimingSlot.AFTERNOON_BEFORE_FOOD: "Afternoon: before food",
        TimingSlot.AFTERNOON_AFTER_FOOD: "Afternoon: after food",
        TimingSlot.NIGHT_BEFORE_FOOD: "Night: before food",
        TimingSlot.NIGHT_AFTER_FOOD: "Night: after food",
        TimingSlot.BEDTIME: "Before bed",
        TimingSlot.AS_NEEDED: "As needed",
        TimingSlot.UNSPECIFIED: "As directed by doctor",
    },
    LanguageCode.HI: {
        TimingSlot.MORNING_BEFORE_FOOD: "सुबह: खाने से पहले",
        TimingSlot.MORNING_AFTER_FOOD: "सुबह: खाने के बाद",
        TimingSlot.AFTERNOON_BEFORE_FOOD: "दोपहर: खाने से पहले",
        TimingSlot.AFTERNOON_AFTER_FOOD: "दोपहर: खाने के बाद",
        TimingSlot.NIGHT_BEFORE_FOOD: "रात: खाने से पहले",
        TimingSlot.NIGHT_AFTER_FOOD: "रात: खाने के बाद",
        TimingSlot.BEDTIME: "सोने से पहले",
        TimingSlot.AS_NEEDED: "जरूरत पड़ने पर",
        TimingSlot.UNSPECIFIED: "डॉक्टर के निर्देशानुसार",
    },
    LanguageCode.TA: {
        TimingSlot.MORNING_BEFORE_FOOD: "காலை: உணவுக்கு முன்",
        TimingSlot.MORNING_AFTER_FOOD: "காலை: உணவுக்குப் பிறகு",
        TimingSlot.AFTERNOON_BEFORE_FOOD: "மதியம்: உணவுக்கு முன்",
        TimingSlot.AFTERNOON_AFTER_FOOD: "மதியம்: உணவுக்குப் பிறகு",
        TimingSlot.NIGHT_BEFORE_FOOD: "இரவு: உணவுக்கு முன்",
        TimingSlot.NIGHT_AFTER_FOOD: "இரவு: உணவுக்குப் பிறகு",
        TimingSlot.BEDTIME: "தூங்குவதற்கு முன்",
        TimingSlot.AS_NEEDED: "தேவைப்பட்டால்",
        TimingSlot.UNSPECIFIED: "மருத்துவர் கூறியபடி",
    },
    LanguageCode.BN: {
        TimingSlot.MORNING_BEFORE_FOOD: "সকাল: খাবারের আগে",
        TimingSlot.MORNING_AFTER_FOOD: "সকাল: খাবারের পরে",
        TimingSlot.AFTERNOON_BEFORE_FOOD: "দুপুর: খাবারের আগে",
        TimingSlot.AFTERNOON_AFTER_FOOD: "দুপুর: খাবারের পরে",
        TimingSlot.NIGHT_BEFORE_FOOD: "রাত: খাবারের আগে",
        TimingSlot.NIGHT_AFTER_FOOD: "রাত: খাবারের পরে",
        TimingSlot.BEDTIME: "ঘুমানোর আগে",
        TimingSlot.AS_NEEDED: "প্রয়োজন হলে",
        TimingSlot.UNSPECIFIED: "ডাক্তারের নির্দেশ অনুযায়ী",
    },
}

TRIAGE_LEVEL_LABELS = {
    TriageLevel.RED: "Immediate emergency",
    TriageLevel.YELLOW: "Urgent: consult in 24h",
    TriageLevel.GREEN: "Routine consultation",
    TriageLevel.BLUE: "Self-care + monitor",
}


def slot_display(slot: TimingSlot | str, language: LanguageCode | str = LanguageCode.EN) -> dict[str, str]:
    try:
        slot = TimingSlot(slot)
    except ValueError:
        slot = TimingSlot.UNSPECIFIED
    try:
        labels = SLOT_LABELS[LanguageCode(language)]
    except ValueError:
        labels = SLOT_LABELS[LanguageCode.EN]
    return {"icon": SLOT_ICONS[slot], "label": labels[slot]}


def summary_slot_display(summary: SimplifiedPrescriptionSummary) -> dict[str, dict[str, str]]:
    used: Iterable[TimingSlot] = (
        slot for medicine in summary.medicines for slot in medicine.timing_slots
    )
    return {slot.value: slot_display(slot, summary.language_code) for slot in dict.fromkeys(used)}


def triage_level_label(level: TriageLevel) -> str:
    return TRIAGE_LEVEL_LABELS[level]
