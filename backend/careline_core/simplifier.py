from __future__ import annotations

import logging
from dataclasses import dataclass

from .alignment import DEFAULT_LATIN_RATIO, check_alignment
from .extractor import extract_prescription
from .model_adapter import JsonModel
from .prompts import (
    SIMPLIFY_TEMPERATURE,
    TRANSLATION_TEMPERATURE,
    simplify_system_prompt,
    simplify_user_prompt,
    translation_system_prompt,
    translation_user_prompt,
)
from .sanitizer import sanitize_text
from .schemas import (
    LanguageCode,
    SimplifiedPrescriptionSummary,
    SimplifyRequest,
    validate_summary_payload,
)

logger = logging.getLogger(__name__)

SOURCE_FALLBACK = "fallback"
SOURCE_MODEL = "model"
SOURCE_MODEL_TRANSLATED = "model_translated"


@dataclass
class SimplifyOutcome:
    summary: SimplifiedPrescriptionSummary
    source: str
    model_calls: int = 0


class SimplifierPipeline:
    """Prescription simplification with a deterministic floor.

    The extractor result is computed before anything else and is returned
    whenever the model output is missing, invalid, or stays in the wrong
    script after one translation-only retry. Simplify never fails.
    """

    def __init__(self, *, model: JsonModel, latin_ratio: float = DEFAULT_LATIN_RATIO) -> None:
        self.model = model
        self.latin_ratio = latin_ratio

    def _validated(self, payload: object, language: LanguageCode) -> SimplifiedPrescriptionSummary | None:
        summary = validate_summary_payload(payload)
        return summary.with_language(language) if summary is not None else None

    def run(self, request: SimplifyRequest) -> SimplifyOutcome:
        language = LanguageCode(request.language)
        text = sanitize_text(request.text)
        fallback = extract_prescription(text, language)

        payload = self.model.generate_json(
            simplify_system_prompt(language),
            simplify_user_prompt(request, text),
            SIMPLIFY_TEMPERATURE,
        )
        summary = self._validated(payload, language)
        if summary is None:
            return SimplifyOutcome(fallback, SOURCE_FALLBACK, model_calls=1)

        check = check_alignment(summary, language, self.latin_ratio)
        if check.aligned:
            return SimplifyOutcome(summary, SOURCE_MODEL, model_calls=1)

        logger.info(
            "simplify output misaligned for %s (%s, script=%d latin=%d); retrying translation",
            language.value,
            check.reason,
            check.script_count,
            check.latin_count,
        )
        retry_payload = self.model.generate_json(
            translation_system_prompt(language),
            translation_user_prompt(summary, language),
            TRANSLATION_TEMPERATURE,
        )
        translated = self._validated(retry_payload, language)
        if translated is not None and check_alignment(translated, language, self.latin_ratio).aligned:
            return SimplifyOutcome(translated, SOURCE_MODEL_TRANSLATED, model_calls=2)

        logger.info("translation retry for %s did not align; using deterministic summary", language.value)
        return SimplifyOutcome(fallback, SOURCE_FALLBACK, model_calls=2)
