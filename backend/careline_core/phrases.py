from __future__ import annotations

from dataclasses import dataclass

from .schemas import LanguageCode


@dataclass(frozen=True)
class PhraseTable:
    default_medicine: str
    default_dosage: str
    default_duration: str
    use_directive: str
    follow_schedule: str
    day_singular: str
    day_plural: str
    take_after_food: str
    take_before_food: str
    warning_empty_stomach: str
    warning_generic: str
    hydration_tip: str
    general_advice: str

    def use(self, medicine_name: str, dosage: str) -> str:
        return self.use_directive.format(medicine=medicine_name, dosage=dosage)

    def schedule(self, duration: str) -> str:
        return self.follow_schedule.format(duration=duration)

    def days(self, count: int) -> str:
        template = self.day_singular if count == 1 else self.day_plural
        return template.format(count=count)


PHRASES: dict[LanguageCode, PhraseTable] = {
    LanguageCode.EN: PhraseTable(
        default_medicine="Medicine",
        default_dosage="As prescribed",
        default_duration="As advised",
        use_directive="Use {medicine} {dosage} as directed by your doctor.",
        follow_schedule="Follow the schedule for {duration}.",
        day_singular="{count} day",
        day_plural="{count} days",
        take_after_food="Take after food.",
        take_before_food="Take before food.",
        warning_empty_stomach="Do not take on an empty stomach.",
        warning_generic="Follow warning instructions carefully.",
        hydration_tip="Drink more water.",
        general_advice="Consult a licensed doctor if symptoms worsen or if side effects appear.",
    ),
    LanguageCode.HI: PhraseTable(
        default_medicine="दवा",
        default_dosage="डॉक्टर के अनुसार",
        default_duration="डॉक्टर की सलाह तक",
        use_directive="{medicine} {dosage} डॉक्टर के निर्देशानुसार लें।",
        follow_schedule="{duration} तक दवा समय पर लें।",
        day_singular="{count} दिन",
        day_plural="{count} दिन",
        take_after_food="खाना खाने के बाद लें।",
        take_before_food="खाना खाने से पहले लें।",
        warning_empty_stomach="खाली पेट दवा न लें।",
        warning_generic="सावधानी संबंधी निर्देश ध्यान से मानें।",
        hydration_tip="पर्याप्त पानी पिएं।",
        general_advice="लक्षण बढ़ें या दुष्प्रभाव हों तो तुरंत डॉक्टर से संपर्क करें।",
    ),
    LanguageCode.TA: PhraseTable(
        default_medicine="மருந்து",
        default_dosage="மருத்துவர் கூறியபடி",
        default_duration="மருத்துவர் கூறும் வரை",
        use_directive="{medicine} {dosage} மருத்துவர் கூறியபடி எடுத்துக்கொள்ளவும்.",
        follow_schedule="{duration} வரை மருந்தை நேரத்திற்கு எடுத்துக்கொள்ளவும்.",
        day_singular="{count} நாள்",
        day_plural="{count} நாட்கள்",
        take_after_food="உணவுக்குப் பிறகு எடுத்துக்கொள்ளவும்.",
        take_before_food="உணவுக்கு முன் எடுத்துக்கொள்ளவும்.",
        warning_empty_stomach="வயிறு காலியாக இருக்கும்போது எடுத்துக்கொள்ள வேண்டாம்.",
        warning_generic="எச்சரிக்கை வழிமுறைகளை கவனமாக பின்பற்றவும்.",
        hydration_tip="அதிகமாக தண்ணீர் குடிக்கவும்.",
        general_advice="அறிகுறிகள் மோசமடைந்தால் அல்லது பக்கவிளைவுகள் இருந்தால் மருத்துவரை அணுகவும்.",
    ),
    LanguageCode.BN: PhraseTable(
        default_medicine="ওষুধ",
        default_dosage="ডাক্তারের নির্দেশ অনুযায়ী",
        default_duration="ডাক্তারের পরামর্শ অনুযায়ী",
        use_directive="{medicine} {dosage} ডাক্তারের নির্দেশ অনুযায়ী সেবন করুন।",
        follow_schedule="{duration} পর্যন্ত সময়মতো ওষুধ নিন।",
        day_singular="{count} দিন",
        day_plural="{count} দিন",
        take_after_food="খাওয়ার পরে সেবন করুন।",
        take_before_food="খাওয়ার আগে সেবন করুন।",
        warning_empty_stomach="খালি পেটে ওষুধ খাবেন না।",
        warning_generic="সতর্কতার নির্দেশগুলি মেনে চলুন।",
        hydration_tip="পর্যাপ্ত পানি পান করুন।",
        general_advice="লক্ষণ বাড়লে বা পার্শ্বপ্রতিক্রিয়া হলে দ্রুত ডাক্তারের সঙ্গে যোগাযোগ করুন।",
    ),
}
