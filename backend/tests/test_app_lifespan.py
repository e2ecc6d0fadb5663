from __future__ import annotations

from pathlib import Path
import logging
import sys

import pytest

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

pytest.importorskip("fastapi")
try:
    from fastapi.testclient import TestClient
except RuntimeError as exc:  # pragma: no cover - dependency guard for CI/runtime
    if "httpx" in str(exc):
        TestClient = None
    else:
        raise

if TestClient is None:
    pytestmark = pytest.mark.skip(reason="fastapi.testclient requires httpx")

import backend.app as app_module


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    original = root.handlers[:]
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in original:
        root.addHandler(handler)


def test_app_startup_lifespan_validates_runtime_environment(monkeypatch, restore_root_logging):
    observed: list[str] = []

    def _fake_validate_runtime_environment(service: str) -> None:
        observed.append(service)

    monkeypatch.setenv("WHEEL_STORE_MODE", "memory")
    monkeypatch.setattr(app_module, "validate_runtime_environment", _fake_validate_runtime_environment)

    with TestClient(app_module.app) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert observed == ["api"]


def test_readiness_reports_store_status(monkeypatch, tmp_path):
    monkeypatch.setenv("WHEEL_STORE_MODE", "local")
    monkeypatch.setenv("WHEEL_STORE_DIR", str(tmp_path / "storage"))

    response = TestClient(app_module.app).get("/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"] == {"store": {"status": "ok"}}


def test_readiness_degrades_when_store_is_misconfigured(monkeypatch):
    monkeypatch.setenv("WHEEL_STORE_MODE", "tape")

    response = TestClient(app_module.app).get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["store"]["status"] == "error"


def test_get_wheel_builds_one_session_from_environment(monkeypatch):
    monkeypatch.setenv("WHEEL_STORE_MODE", "memory")
    monkeypatch.setenv("WHEEL_SPIN_DURATION_MS", "1500")
    monkeypatch.setattr(app_module, "_WHEEL", None)

    wheel = app_module.get_wheel()

    assert app_module.get_wheel() is wheel
    assert wheel.spin_duration_ms == 1500
    assert wheel.extra_full_spins == 5
