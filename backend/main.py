from __future__ import annotations

import logging
import re
import sqlite3
from typing import Any

from fastapi import Body, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from audit import (
    ACTION_PRESCRIPTION_SIMPLIFY,
    ACTION_SOS_ALERT,
    ACTION_SYMPTOM_TRIAGE,
    AuditLog,
    AuditSink,
    SQLiteAuditDB,
)
from audit.time_utils import to_iso, utc_now
from careline_core import (
    CapabilityUnavailableError,
    InvalidInputError,
    JsonModel,
    SafetyPolicy,
    Settings,
    SimplifierPipeline,
    SimplifyOutcome,
    TriageLevel,
    TriageOutcome,
    TriagePipeline,
    build_model,
    normalize_triage_result,
)
from careline_core.config import bootstrap_local_env, configure_logging
from careline_core.display import summary_slot_display, triage_level_label
from careline_core.sanitizer import sanitize_text
from careline_core.schemas import (
    EMERGENCY_TYPE_LABELS,
    EmergencyType,
    SimplifyRequest,
    SosAlertRequest,
    TriageRequest,
    parse_simplify_request,
    parse_triage_request,
)
from careline_core.simplifier import SOURCE_FALLBACK
from careline_core.triage import STATE_MODEL_VALIDATED

bootstrap_local_env()

logger = logging.getLogger("careline")

RULE_BASED_MODEL = "rule-based"
TRIAGE_UNAVAILABLE_MESSAGE = "Symptom checker is unavailable right now. Please try again."


class CarelineApp:
    def __init__(
        self,
        settings: Settings | None = None,
        model: JsonModel | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.audit: AuditSink = audit if audit is not None else AuditLog(SQLiteAuditDB(self.settings.db_path))
        self.policy = SafetyPolicy(self.settings.emergency_number)
        self.model = model if model is not None else build_model(self.settings)
        self.model_name = getattr(self.model, "model_name", None) or RULE_BASED_MODEL
        self.triage_pipeline = TriagePipeline(policy=self.policy, model=self.model)
        self.simplifier = SimplifierPipeline(model=self.model, latin_ratio=self.settings.alignment_latin_ratio)

    def _audit(
        self,
        actor_user_id: str,
        action: str,
        entity_type: str,
        metadata: dict[str, Any],
    ) -> None:
        # The patient still gets their result when the audit store is down.
        try:
            self.audit.record(actor_user_id, action, entity_type, actor_user_id, metadata)
        except sqlite3.Error:
            logger.error("audit write failed for %s", action, exc_info=True)

    def triage(self, actor_user_id: str, request: TriageRequest) -> TriageOutcome:
        outcome = self.triage_pipeline.run(request)
        result = outcome.result
        self._audit(actor_user_id, ACTION_SYMPTOM_TRIAGE, "SymptomCheck", {"triageLevel": result.triage_level.value})
        if result.triage_level is TriageLevel.RED:
            self._audit(
                actor_user_id,
                ACTION_SOS_ALERT,
                "EmergencyAlert",
                {
                    "triageLevel": result.triage_level.value,
                    "summary": result.summary,
                    "explanation": result.explanation,
                    "recommendedAction": result.recommended_action,
                    "symptoms": request.symptoms[:1200],
                    "additionalContext": (request.additional_context or "")[:600],
                },
            )
        return outcome

    def simplify(self, actor_user_id: str, request: SimplifyRequest) -> SimplifyOutcome:
        outcome = self.simplifier.run(request)
        self._audit(
            actor_user_id,
            ACTION_PRESCRIPTION_SIMPLIFY,
            "PrescriptionText",
            {
                "language": outcome.summary.language_code.value,
                "medicineCount": len(outcome.summary.medicines),
            },
        )
        return outcome

    def raise_sos(self, actor_user_id: str, request: SosAlertRequest) -> dict[str, Any]:
        label = EMERGENCY_TYPE_LABELS[EmergencyType(request.emergency_type)]
        details = sanitize_text(request.details)[:800]
        number = self.settings.emergency_number
        self._audit(
            actor_user_id,
            ACTION_SOS_ALERT,
            "EmergencyAlert",
            {
                "triageLevel": TriageLevel.RED.value,
                "summary": f"Manual SOS requested: {label}",
                "explanation": (
                    f"Patient-reported emergency details: {details}"
                    if details
                    else f"Patient triggered SOS for {label}."
                ),
                "recommendedAction": f"Call emergency services now ({number}) and contact the patient immediately.",
                "symptoms": label,
                "additionalContext": details,
            },
        )
        logger.info("manual SOS alert raised (%s)", request.emergency_type.value)
        return {
            "ok": True,
            "emergencyNumber": number,
            "message": "SOS alert created for admin emergency dashboard.",
        }


container = CarelineApp()
configure_logging(container.settings.log_level)
app = FastAPI(title="Careline Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(container.settings.allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_details(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in errors]


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid payload", "details": _error_details(exc.errors())})


@app.exception_handler(InvalidInputError)
async def _invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid payload", "details": exc.details})


@app.exception_handler(CapabilityUnavailableError)
async def _capability_unavailable_handler(request: Request, exc: CapabilityUnavailableError) -> JSONResponse:
    logger.warning("triage unavailable: %s", exc.reason)
    return JSONResponse(status_code=503, content={"error": TRIAGE_UNAVAILABLE_MESSAGE})


_TRUSTED_USER_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._:@-]{1,63}$")


def resolve_actor_id(x_user_id: str | None) -> str:
    if x_user_id is None:
        return "anonymous"
    candidate = x_user_id.strip()
    if not candidate or not _TRUSTED_USER_ID_RE.fullmatch(candidate):
        raise HTTPException(status_code=400, detail="Invalid X-User-Id")
    return candidate


@app.post("/ai/symptom-checker")
def symptom_checker(payload: Any = Body(...), x_user_id: str | None = Header(default=None)):
    actor = resolve_actor_id(x_user_id)
    request = parse_triage_request(payload)
    outcome = container.triage(actor, request)
    return {
        "triage": outcome.result.to_wire(),
        "meta": {
            "model": container.model_name if outcome.state == STATE_MODEL_VALIDATED else RULE_BASED_MODEL,
            "generatedAt": to_iso(utc_now()),
            "state": outcome.state,
            "levelLabel": triage_level_label(outcome.result.triage_level),
        },
    }


@app.post("/ai/prescription-simplify")
def prescription_simplify(payload: Any = Body(...), x_user_id: str | None = Header(default=None)):
    actor = resolve_actor_id(x_user_id)
    request = parse_simplify_request(payload)
    outcome = container.simplify(actor, request)
    return {
        "summary": outcome.summary.to_wire(),
        "meta": {
            "model": RULE_BASED_MODEL if outcome.source == SOURCE_FALLBACK else container.model_name,
            "generatedAt": to_iso(utc_now()),
            "source": outcome.source,
            "slotDisplay": summary_slot_display(outcome.summary),
        },
    }


@app.post("/patients/me/sos-alert")
def sos_alert(payload: SosAlertRequest, x_user_id: str | None = Header(default=None)):
    actor = resolve_actor_id(x_user_id)
    return container.raise_sos(actor, payload)


@app.get("/admin/emergency-alerts")
def emergency_alerts(x_user_id: str | None = Header(default=None)):
    resolve_actor_id(x_user_id)
    return {"alerts": container.audit.emergency_alerts(limit=100)}


@app.get("/admin/audit-logs")
def audit_logs(limit: int = 200, x_user_id: str | None = Header(default=None)):
    resolve_actor_id(x_user_id)
    return {"logs": container.audit.recent(limit)}


@app.post("/triage/normalize")
def triage_normalize(payload: Any = Body(...)):
    result = normalize_triage_result(payload, container.settings.emergency_number)
    if result is None:
        raise HTTPException(status_code=422, detail="Unrecognized triage record")
    return {"triage": result.to_wire()}
