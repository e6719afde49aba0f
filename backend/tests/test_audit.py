from __future__ import annotations

from audit import ACTION_SOS_ALERT, ACTION_SYMPTOM_TRIAGE, AuditLog, SQLiteAuditDB


def _audit_log(tmp_path) -> AuditLog:
    return AuditLog(SQLiteAuditDB(str(tmp_path / "audit.sqlite")))


def test_record_persists_event_with_metadata(tmp_path):
    log = _audit_log(tmp_path)
    event_id = log.record("user-a", ACTION_SYMPTOM_TRIAGE, "SymptomCheck", "user-a", {"triageLevel": "GREEN"})

    events = log.recent()
    assert len(events) == 1
    assert events[0]["id"] == event_id
    assert events[0]["actorUserId"] == "user-a"
    assert events[0]["action"] == ACTION_SYMPTOM_TRIAGE
    assert events[0]["metadata"] == {"triageLevel": "GREEN"}
    assert events[0]["createdAt"].endswith("Z")


def test_recent_is_newest_first_and_filters_by_action(tmp_path):
    log = _audit_log(tmp_path)
    first = log.record("user-a", ACTION_SYMPTOM_TRIAGE, "SymptomCheck", "user-a", {"triageLevel": "BLUE"})
    second = log.record("user-a", ACTION_SOS_ALERT, "EmergencyAlert", "user-a", {"triageLevel": "RED"})
    third = log.record("user-b", ACTION_SYMPTOM_TRIAGE, "SymptomCheck", "user-b", {"triageLevel": "RED"})

    assert [event["id"] for event in log.recent()] == [third, second, first]
    assert [event["id"] for event in log.recent(action=ACTION_SYMPTOM_TRIAGE)] == [third, first]
    assert len(log.recent(limit=1)) == 1
    assert len(log.recent(limit=0)) == 1


def test_emergency_alerts_default_missing_metadata(tmp_path):
    log = _audit_log(tmp_path)
    log.record("user-a", ACTION_SYMPTOM_TRIAGE, "SymptomCheck", "user-a", {"triageLevel": "GREEN"})
    log.record("user-a", ACTION_SOS_ALERT, "EmergencyAlert", "user-a", {})

    alerts = log.emergency_alerts()
    assert len(alerts) == 1
    assert alerts[0]["triageLevel"] == "RED"
    assert alerts[0]["summary"] == "Emergency alert reported."
    assert alerts[0]["symptoms"] == ""
    assert alerts[0]["actorUserId"] == "user-a"


def test_schema_init_is_idempotent(tmp_path):
    path = str(tmp_path / "audit.sqlite")
    AuditLog(SQLiteAuditDB(path)).record("user-a", ACTION_SOS_ALERT, "EmergencyAlert", None, {"summary": "x"})
    assert len(AuditLog(SQLiteAuditDB(path)).emergency_alerts()) == 1
