from __future__ import annotations

from typing import Any


class ScriptedModel:
    """Returns queued payloads in order, then ``None``; records every call."""

    model_name = "scripted-model"

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def generate_json(self, system_prompt: str, user_prompt: str, temperature: float) -> Any:
        self.calls.append({"system": system_prompt, "user": user_prompt, "temperature": temperature})
        if not self.responses:
            return None
        return self.responses.pop(0)


class MemoryAuditSink:
    """In-memory audit sink; newest events first, like the SQLite log."""

    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    def record(
        self,
        actor_user_id: str,
        action: str,
        entity_type: str,
        entity_id: str | None,
        metadata: dict[str, Any],
    ) -> str:
        event_id = f"event-{len(self.events) + 1}"
        self.events.insert(
            0,
            {
                "id": event_id,
                "actorUserId": actor_user_id,
                "action": action,
                "entityType": entity_type,
                "entityId": entity_id,
                "metadata": metadata,
            },
        )
        return event_id

    def recent(self, limit: int = 200, action: str | None = None) -> list[dict[str, Any]]:
        events = [event for event in self.events if action is None or event["action"] == action]
        return events[: max(1, min(limit, 500))]

    def emergency_alerts(self, limit: int = 100) -> list[dict[str, Any]]:
        return [
            {"id": event["id"], "actorUserId": event["actorUserId"], **event["metadata"]}
            for event in self.recent(limit, action="SOS_ALERT_RAISED")
        ]
