from __future__ import annotations

import json
import uuid
from typing import Any, Protocol

from .database import SQLiteAuditDB
from .time_utils import to_iso, utc_now

ACTION_SYMPTOM_TRIAGE = "AI_SYMPTOM_TRIAGE"
ACTION_SOS_ALERT = "SOS_ALERT_RAISED"
ACTION_PRESCRIPTION_SIMPLIFY = "AI_PRESCRIPTION_SIMPLIFY"


class AuditSink(Protocol):
    def record(
        self,
        actor_user_id: str,
        action: str,
        entity_type: str,
        entity_id: str | None,
        metadata: dict[str, Any],
    ) -> str:
        ...

    def recent(self, limit: int = 200, action: str | None = None) -> list[dict[str, Any]]:
        ...

    def emergency_alerts(self, limit: int = 100) -> list[dict[str, Any]]:
        ...


def _metadata_string(metadata: dict[str, Any], key: str, default: str = "") -> str:
    value = metadata.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return default


class AuditLog:
    """Append-only event log backed by the ``audit_log`` table."""

    def __init__(self, db: SQLiteAuditDB) -> None:
        self.db = db

    def record(
        self,
        actor_user_id: str,
        action: str,
        entity_type: str,
        entity_id: str | None,
        metadata: dict[str, Any],
    ) -> str:
        event_id = uuid.uuid4().hex
        with self.db.connection() as conn:
            conn.execute(
                """
                INSERT INTO audit_log (id, actor_user_id, action, entity_type, entity_id, metadata_json, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event_id,
                    actor_user_id,
                    action,
                    entity_type,
                    entity_id,
                    json.dumps(metadata, ensure_ascii=False, sort_keys=True),
                    to_iso(utc_now()),
                ),
            )
        return event_id

    @staticmethod
    def _row_to_event(row: Any) -> dict[str, Any]:
        try:
            metadata = json.loads(row["metadata_json"] or "{}")
        except json.JSONDecodeError:
            metadata = {}
        return {
            "id": row["id"],
            "actorUserId": row["actor_user_id"],
            "action": row["action"],
            "entityType": row["entity_type"],
            "entityId": row["entity_id"],
            "metadata": metadata if isinstance(metadata, dict) else {},
            "createdAt": row["created_at"],
        }

    def recent(self, limit: int = 200, action: str | None = None) -> list[dict[str, Any]]:
        limit = max(1, min(int(limit), 500))
        with self.db.connection() as conn:
            if action:
                rows = conn.execute(
                    "SELECT * FROM audit_log WHERE action = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
                    (action, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM audit_log ORDER BY created_at DESC, rowid DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def emergency_alerts(self, limit: int = 100) -> list[dict[str, Any]]:
        alerts: list[dict[str, Any]] = []
        for event in self.recent(limit, action=ACTION_SOS_ALERT):
            metadata = event["metadata"]
            alerts.append(
                {
                    "id": event["id"],
                    "createdAt": event["createdAt"],
                    "actorUserId": event["actorUserId"],
                    "triageLevel": _metadata_string(metadata, "triageLevel", "RED"),
                    "summary": _metadata_string(metadata, "summary", "Emergency alert reported."),
                    "explanation": _metadata_string(metadata, "explanation"),
                    "recommendedAction": _metadata_string(metadata, "recommendedAction"),
                    "symptoms": _metadata_string(metadata, "symptoms"),
                    "additionalContext": _metadata_string(metadata, "additionalContext"),
                }
            )
        return alerts
