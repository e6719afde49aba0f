from .audit_log import (
    ACTION_PRESCRIPTION_SIMPLIFY,
    ACTION_SOS_ALERT,
    ACTION_SYMPTOM_TRIAGE,
    AuditLog,
    AuditSink,
)
from .database import SQLiteAuditDB

__all__ = [
    "ACTION_PRESCRIPTION_SIMPLIFY",
    "ACTION_SOS_ALERT",
    "ACTION_SYMPTOM_TRIAGE",
    "AuditLog",
    "AuditSink",
    "SQLiteAuditDB",
]
