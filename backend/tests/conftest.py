from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from model_doubles import ScriptedModel  # noqa: E402


@pytest.fixture
def backend_module(tmp_path, monkeypatch):
    db_path = tmp_path / "careline-test.sqlite"
    monkeypatch.setenv("CARELINE_DB_PATH", str(db_path))
    # Keep CI deterministic; tests that need a model install a scripted one.
    monkeypatch.setenv("CARELINE_MODEL_PROVIDER", "none")

    if "main" in sys.modules:
        module = importlib.reload(sys.modules["main"])
    else:
        module = importlib.import_module("main")
    return module


@pytest.fixture
def client(backend_module):
    with TestClient(backend_module.app) as test_client:
        yield test_client


@pytest.fixture
def install_model(backend_module, monkeypatch) -> Callable[[ScriptedModel], object]:
    def _install(model: ScriptedModel):
        container = backend_module.CarelineApp(settings=backend_module.container.settings, model=model)
        monkeypatch.setattr(backend_module, "container", container)
        return container

    return _install


@pytest.fixture
def user_headers() -> Callable[[str], dict[str, str]]:
    def _make(user_id: str) -> dict[str, str]:
        return {"X-User-Id": user_id}

    return _make
