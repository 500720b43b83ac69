from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest
import requests

from fakes import FakeResponse
from ytwatch.emitters import LogEmitter, WebhookEmitter, build_emitter
from ytwatch.errors import EmitError
from ytwatch.models import CandidateItem, CycleResult

T = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def result() -> CycleResult:
    return CycleResult.of([
        CandidateItem(id="v1", created_at=T, source="UC1", fields={"videoId": "v1", "title": "Launch"}),
    ])


def test_build_emitter_choice() -> None:
    assert isinstance(build_emitter(dry_run=False, webhook_url="https://x.test/hook"), WebhookEmitter)
    assert isinstance(build_emitter(dry_run=True, webhook_url="https://x.test/hook"), LogEmitter)
    assert isinstance(build_emitter(dry_run=False, webhook_url=None), LogEmitter)


def test_log_emitter_logs_payload(caplog) -> None:  # noqa: ANN001
    caplog.set_level(logging.INFO, logger="ytwatch.emit")
    emitter = LogEmitter()

    handle = emitter.emit("videos", "videos", result())

    assert handle.startswith("dry-run-")
    assert "[DRY RUN] videos would emit 1 new videos" in caplog.text
    assert "\"newVideosCount\": 1" in caplog.text


def test_log_emitter_keeps_nothing_between_emits() -> None:
    emitter = LogEmitter()
    handles = {emitter.emit("videos", "videos", result()) for _ in range(3)}
    assert len(handles) == 3
    assert vars(emitter) == {}


def test_webhook_posts_payload_and_returns_execution_id() -> None:
    calls = []

    def post(url, json=None, timeout=None):  # noqa: ANN001
        calls.append((url, json))
        return FakeResponse({"id": "exec-42"})

    handle = WebhookEmitter("https://x.test/hook", post=post).emit("launch", "videos", result())

    assert handle == "exec-42"
    url, body = calls[0]
    assert url == "https://x.test/hook"
    assert body["watcher"] == "launch"
    assert body["trigger"]["title"] == "Launch"
    assert body["trigger"]["allNewVideos"][0]["videoId"] == "v1"


def test_webhook_without_json_body_gets_generated_handle() -> None:
    handle = WebhookEmitter("https://x.test/hook", post=lambda *a, **k: FakeResponse(None, text="")).emit(
        "launch", "videos", result()
    )
    assert handle.startswith("webhook-")


def test_webhook_failure_is_emit_error() -> None:
    def post(url, json=None, timeout=None):  # noqa: ANN001
        raise requests.ConnectionError("refused")

    with pytest.raises(EmitError):
        WebhookEmitter("https://x.test/hook", post=post).emit("launch", "videos", result())
