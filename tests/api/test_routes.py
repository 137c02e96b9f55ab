from __future__ import annotations

from types import SimpleNamespace
from typing import List

import pytest
from fastapi.testclient import TestClient

from fakes import FakeFetcher, FakeKeyValueStore, FakePlatform
from widget_sync.app import app
from widget_sync.config import Settings, settings
from widget_sync.models import FetchResult
from widget_sync.runtime import Runtime
from widget_sync.sync.scheduler import CommandResult, JobStatus


class _StubJobManager:
    """Records which commands the routes drive."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def start(self) -> CommandResult:
        self.calls.append("start")
        return CommandResult("Summary Widget updates scheduled! ID: abc123", "success")

    def stop(self) -> CommandResult:
        self.calls.append("stop")
        return CommandResult("Summary Widget updates are not currently scheduled.")

    def status(self) -> JobStatus:
        self.calls.append("status")
        return JobStatus(scheduled=True, job_id="abc123", stored_job_id="abc123", cron="*/5 * * * *")


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def job_manager(monkeypatch: pytest.MonkeyPatch) -> _StubJobManager:
    stub = _StubJobManager()
    monkeypatch.setattr(
        "widget_sync.runtime.get_runtime", lambda: SimpleNamespace(jobs=stub), raising=True
    )
    return stub


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "version": settings.VERSION, "service": settings.APP_NAME}


def test_start_returns_toast(client: TestClient, job_manager: _StubJobManager) -> None:
    response = client.post("/api/jobs/summary-update/start")

    assert response.status_code == 200
    assert response.json() == {
        "text": "Summary Widget updates scheduled! ID: abc123",
        "appearance": "success",
    }
    assert job_manager.calls == ["start"]


def test_stop_when_idle_is_neutral(client: TestClient, job_manager: _StubJobManager) -> None:
    response = client.post("/api/jobs/summary-update/stop")

    assert response.status_code == 200
    assert response.json()["appearance"] == "neutral"
    assert job_manager.calls == ["stop"]


def test_status(client: TestClient, job_manager: _StubJobManager) -> None:
    response = client.get("/api/jobs/summary-update")

    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "summary-update"
    assert payload["scheduled"] is True
    assert payload["cron"] == "*/5 * * * *"


def _install_runtime(monkeypatch, mocker, cfg: Settings, result: FetchResult) -> Runtime:
    runtime = Runtime(
        cfg,
        store=FakeKeyValueStore(),
        source=FakeFetcher(result),
        platform=FakePlatform(),
        scheduler=mocker.Mock(),
    )
    monkeypatch.setattr("widget_sync.runtime.get_runtime", lambda: runtime)
    return runtime


def test_manual_run_reports_outcome(client, monkeypatch, mocker) -> None:
    runtime = _install_runtime(
        monkeypatch,
        mocker,
        Settings(COMMUNITY_NAME="hurricane"),
        FetchResult(status_code=200, body=b"Calm seas", content_type="text/plain"),
    )

    response = client.post("/api/sync/run")

    assert response.status_code == 200
    assert response.json()["status"] == "created"
    assert runtime.platform.created[0].text == "Calm seas"


def test_manual_run_skip_reason_is_exposed(client, monkeypatch, mocker) -> None:
    _install_runtime(
        monkeypatch,
        mocker,
        Settings(COMMUNITY_NAME="hurricane"),
        FetchResult(status_code=200, body=b"{}", content_type="application/json"),
    )

    response = client.post("/api/sync/run")

    assert response.json() == {"status": "skipped", "reason": "invalid-content-type", "widget_id": None}


def test_manual_run_without_community_is_conflict(client, monkeypatch, mocker) -> None:
    _install_runtime(monkeypatch, mocker, Settings(COMMUNITY_NAME=""), FetchResult(status_code=304))

    response = client.post("/api/sync/run")

    assert response.status_code == 409
    assert response.json()["error"] == "configuration"


def test_manual_run_hides_unexpected_errors(client, monkeypatch, mocker) -> None:
    runtime = _install_runtime(
        monkeypatch,
        mocker,
        Settings(COMMUNITY_NAME="hurricane"),
        FetchResult(status_code=200, body=b"x", content_type="text/plain"),
    )
    mocker.patch.object(runtime.platform, "list_widgets", side_effect=RuntimeError("secret detail"))

    response = client.post("/api/sync/run")

    assert response.status_code == 502
    assert response.json() == {"error": "sync_failed"}
