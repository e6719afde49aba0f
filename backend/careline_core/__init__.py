from .alignment import AlignmentCheck, check_alignment
from .config import Settings
from .errors import CapabilityUnavailableError, CarelineError, InvalidInputError
from .extractor import extract_prescription
from .legacy import normalize_triage_result
from .model_adapter import HttpJsonModel, JsonModel, build_model
from .policy import GateDecision, SafetyPolicy
from .schemas import (
    LanguageCode,
    SimplifiedPrescriptionSummary,
    SimplifyRequest,
    TimingSlot,
    TriageLevel,
    TriageRequest,
    TriageResult,
)
from .simplifier import SimplifierPipeline, SimplifyOutcome
from .triage import TRIAGE_STATES, TriageOutcome, TriagePipeline

__all__ = [
    "TRIAGE_STATES",
    "AlignmentCheck",
    "CapabilityUnavailableError",
    "CarelineError",
    "GateDecision",
    "HttpJsonModel",
    "InvalidInputError",
    "JsonModel",
    "LanguageCode",
    "SafetyPolicy",
    "Settings",
    "SimplifiedPrescriptionSummary",
    "SimplifierPipeline",
    "SimplifyOutcome",
    "SimplifyRequest",
    "TimingSlot",
    "TriageLevel",
    "TriageOutcome",
    "TriagePipeline",
    "TriageRequest",
    "TriageResult",
    "build_model",
    "check_alignment",
    "extract_prescription",
    "normalize_triage_result",
]
