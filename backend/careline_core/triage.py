from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import CapabilityUnavailableError
from .model_adapter import JsonModel
from .policy import SafetyPolicy
from .prompts import TRIAGE_TEMPERATURE, triage_system_prompt, triage_user_prompt
from .sanitizer import sanitize_text
from .schemas import TriageRequest, TriageResult, validate_triage_payload

logger = logging.getLogger(__name__)

STATE_RULE_BASED_RED = "rule_based_red"
STATE_RULE_BASED_SAFETY_REFUSAL = "rule_based_safety_refusal"
STATE_MODEL_VALIDATED = "model_validated"
TRIAGE_STATES = (STATE_RULE_BASED_RED, STATE_RULE_BASED_SAFETY_REFUSAL, STATE_MODEL_VALIDATED)


@dataclass
class TriageOutcome:
    result: TriageResult
    state: str
    trace: list[str] = field(default_factory=list)
    model_calls: int = 0


class TriagePipeline:
    """Sanitize, run the emergency gate, the safety gate, then the model.

    Both gates short-circuit with a fixed result and no model call. A model
    result is only returned after it passes the closed schema; there is no
    deterministic fallback for triage, so anything else raises
    ``CapabilityUnavailableError``.
    """

    def __init__(self, *, policy: SafetyPolicy, model: JsonModel) -> None:
        self.policy = policy
        self.model = model

    def run(self, request: TriageRequest) -> TriageOutcome:
        trace = ["sanitize"]
        symptoms = sanitize_text(request.symptoms)
        additional_context = sanitize_text(request.additional_context)
        gate_text = self.policy.gate_text(symptoms, additional_context)

        trace.append("emergency_gate")
        emergency = self.policy.check_emergency(gate_text)
        if emergency.matched:
            logger.info("triage short-circuit: emergency (%s)", emergency.reason)
            trace.append(STATE_RULE_BASED_RED)
            return TriageOutcome(self.policy.red_result(emergency.reason or emergency.code), STATE_RULE_BASED_RED, trace)

        trace.append("safety_gate")
        refusal = self.policy.check_safety_refusal(gate_text)
        if refusal.matched:
            logger.info("triage short-circuit: %s (%s)", refusal.code, refusal.reason)
            trace.append(STATE_RULE_BASED_SAFETY_REFUSAL)
            return TriageOutcome(self.policy.safety_refusal_result(), STATE_RULE_BASED_SAFETY_REFUSAL, trace)

        trace.append("model")
        payload = self.model.generate_json(
            triage_system_prompt(self.policy.emergency_number),
            triage_user_prompt(request, symptoms, additional_context),
            TRIAGE_TEMPERATURE,
        )
        if payload is None:
            raise CapabilityUnavailableError("model_unavailable")

        trace.append("validate")
        result = validate_triage_payload(payload)
        if result is None:
            raise CapabilityUnavailableError("schema_rejected")

        trace.append(STATE_MODEL_VALIDATED)
        return TriageOutcome(result, STATE_MODEL_VALIDATED, trace, model_calls=1)
