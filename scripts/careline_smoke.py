#!/usr/bin/env python3
from __future__ import annotations

import importlib
import json
import os
import sys
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient


@dataclass
class Scenario:
  name: str
  path: str
  payload: dict[str, Any]
  accepted_status: set[int]
  expect: dict[str, Any] = field(default_factory=dict)


def dig(payload: Any, dotted: str) -> Any:
  current = payload
  for part in dotted.split("."):
    if isinstance(current, list) and part.isdigit():
      index = int(part)
      current = current[index] if index < len(current) else None
    elif isinstance(current, dict):
      current = current.get(part)
    else:
      return None
  return current


def run() -> int:
  repo_root = Path(__file__).resolve().parents[1]
  backend_dir = repo_root / "backend"
  if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

  # Smoke runs never touch the real audit database.
  os.environ.setdefault("CARELINE_DB_PATH", str(Path(tempfile.mkdtemp()) / "careline-smoke.sqlite"))

  backend_module = importlib.import_module("main")
  backend_module = importlib.reload(backend_module)
  model_configured = backend_module.container.model_name != backend_module.RULE_BASED_MODEL

  prescription = "Take Paracetamol 500mg twice daily for 5 days after food. Qty 10."
  scenarios = [
    Scenario(
      name="Emergency symptoms short-circuit to RED",
      path="/ai/symptom-checker",
      payload={"symptoms": "Sudden chest pain and difficulty breathing for ten minutes"},
      accepted_status={200},
      expect={"triage.triageLevel": "RED", "meta.state": "rule_based_red"},
    ),
    Scenario(
      name="Dosage request is refused",
      path="/ai/symptom-checker",
      payload={"symptoms": "What dosage of ibuprofen should I take for a headache?"},
      accepted_status={200},
      expect={"triage.triageLevel": "YELLOW", "meta.state": "rule_based_safety_refusal"},
    ),
    Scenario(
      name="Routine symptoms reach the model",
      path="/ai/symptom-checker",
      payload={"symptoms": "Runny nose and a mild cough for two days", "age": 30},
      # Without a provider the checker reports itself unavailable.
      accepted_status={200} if model_configured else {503},
    ),
    Scenario(
      name="English prescription simplification",
      path="/ai/prescription-simplify",
      payload={"text": prescription, "language": "en"},
      accepted_status={200},
      expect={"summary.languageCode": "en", "summary.medicines.0.dosage": "500mg"},
    ),
    Scenario(
      name="Hindi prescription simplification",
      path="/ai/prescription-simplify",
      payload={"text": prescription, "language": "hi"},
      accepted_status={200},
      expect={"summary.languageCode": "hi", "summary.languageLabel": "Hindi"},
    ),
    Scenario(
      name="Manual SOS alert",
      path="/patients/me/sos-alert",
      payload={"emergencyType": "BREATHING_DIFFICULTY"},
      accepted_status={200},
      expect={"ok": True},
    ),
  ]

  results: list[dict[str, Any]] = []
  headers = {"X-User-Id": "smoke-user"}

  with TestClient(backend_module.app) as client:
    for scenario in scenarios:
      response = client.post(scenario.path, headers=headers, json=scenario.payload)
      body = response.json()
      mismatches = []
      if response.status_code == 200:
        mismatches = [
          f"{key}: expected {expected!r}, got {dig(body, key)!r}"
          for key, expected in scenario.expect.items()
          if dig(body, key) != expected
        ]
      results.append(
        {
          "name": scenario.name,
          "status_code": response.status_code,
          "pass": response.status_code in scenario.accepted_status and not mismatches,
          "mismatches": mismatches,
          "body": body,
        }
      )

    alerts = client.get("/admin/emergency-alerts", headers=headers).json().get("alerts", [])
    results.append(
      {
        "name": "Emergency dashboard lists both alerts",
        "status_code": 200,
        "pass": len(alerts) == 2,
        "mismatches": [] if len(alerts) == 2 else [f"expected 2 alerts, got {len(alerts)}"],
        "body": {"alerts": alerts},
      }
    )

  passed = sum(1 for item in results if item["pass"])
  failed = len(results) - passed
  timestamp = datetime.now(timezone.utc).isoformat()

  report_lines = [
    "# Careline Smoke Report",
    "",
    f"- Timestamp (UTC): `{timestamp}`",
    f"- Model: `{backend_module.container.model_name}`",
    f"- Total scenarios: `{len(results)}`",
    f"- Passed: `{passed}`",
    f"- Failed: `{failed}`",
    "",
    "## Scenario Results",
    "",
  ]
  for item in results:
    status = "PASS" if item["pass"] else "FAIL"
    report_lines.append(f"### {status} - {item['name']}")
    report_lines.append(f"- Status code: `{item['status_code']}`")
    for mismatch in item["mismatches"]:
      report_lines.append(f"- Mismatch: `{mismatch}`")
    report_lines.append("```json")
    report_lines.append(json.dumps(item["body"], indent=2, ensure_ascii=False))
    report_lines.append("```")
    report_lines.append("")

  report_path = repo_root / "CARELINE_SMOKE_REPORT.md"
  report_path.write_text("\n".join(report_lines), encoding="utf-8")
  print(f"Wrote report: {report_path}")
  print(f"Passed {passed}/{len(results)} scenarios.")

  return 0 if failed == 0 else 1


if __name__ == "__main__":
  raise SystemExit(run())
