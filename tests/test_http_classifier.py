from __future__ import annotations

from typing import Any

import pytest
import requests

from moodtext.http_classifier import HttpClassifier, HttpClassifierConfig
from moodtext.mood_service import MoodService
from moodtext.mood_types import MoodLabel


class _FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status={self.status_code}", response=self)  # type: ignore[arg-type]

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._body


class _FakeSession:
    def __init__(self, *outcomes: Any):
        self.headers: dict[str, str] = {}
        self.posts: list[dict[str, Any]] = []
        self._outcomes = list(outcomes)

    def post(self, url: str, json: Any = None, timeout: float | None = None) -> _FakeResponse:
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    monkeypatch.setattr("moodtext.http_classifier.time.sleep", lambda _: None)


def _classifier(session: _FakeSession, max_retries: int = 0) -> HttpClassifier:
    cfg = HttpClassifierConfig(
        url="http://scoring.local/predict",
        timeout_sec=2.0,
        max_retries=max_retries,
        backoff_base_sec=0.0,
        backoff_max_sec=0.0,
    )
    return HttpClassifier(cfg, session=session)  # type: ignore[arg-type]


def test_posts_features_and_returns_label():
    session = _FakeSession(_FakeResponse(body={"label": "Pos"}))
    result = _classifier(session).predict({"love": 3.0})

    assert result.label == "Pos"
    assert session.posts == [
        {"url": "http://scoring.local/predict", "json": {"features": {"love": 3.0}}, "timeout": 2.0}
    ]


def test_transport_error_after_retries():
    session = _FakeSession(requests.ConnectionError("down"), requests.ConnectionError("still down"))
    result = _classifier(session, max_retries=1).predict({"love": 1.0})

    assert result.error.reason == "transport_error"
    assert len(session.posts) == 2


def test_retry_recovers():
    session = _FakeSession(_FakeResponse(status_code=503), _FakeResponse(body={"label": "Neg"}))
    assert _classifier(session, max_retries=2).predict({"awful": 1.0}).label == "Neg"


@pytest.mark.parametrize(
    "response",
    [_FakeResponse(invalid_json=True), _FakeResponse(body={"score": 0.3}), _FakeResponse(body=["Pos"])],
)
def test_bad_response(response):
    result = _classifier(_FakeSession(response)).predict({"love": 1.0})
    assert result.error.reason == "bad_response"


def test_service_degrades_on_remote_failure():
    session = _FakeSession(requests.Timeout("slow"))
    assert MoodService(_classifier(session)).predict_mood("lovely film") == MoodLabel.NEUTRAL
