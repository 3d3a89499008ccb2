from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

from moodtext.mood_types import FrequencyMap, PredictionError, PredictionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpClassifierConfig:
    url: str
    timeout_sec: float
    max_retries: int
    backoff_base_sec: float
    backoff_max_sec: float
    model_version: str = "remote"


class HttpClassifier:
    """
    Adapter for a remote scoring endpoint:
    - POST {"features": {token: count}} as JSON
    - expects {"label": "<raw code>"} back
    - timeout + bounded retry with exponential backoff

    Never raises from predict(); failures come back as PredictionResult.failure.
    """

    def __init__(self, config: HttpClassifierConfig, session: Optional[requests.Session] = None):
        if not config.url:
            raise ValueError("HttpClassifier needs a url")
        self._cfg = config
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    @property
    def model_version(self) -> str:
        return self._cfg.model_version

    def predict(self, frequency_map: FrequencyMap) -> PredictionResult:
        try:
            resp = self._post({"features": dict(frequency_map)})
        except requests.RequestException as e:
            return PredictionResult.failure(PredictionError("transport_error", str(e)))

        try:
            body = resp.json()
        except ValueError as e:
            return PredictionResult.failure(PredictionError("bad_response", f"invalid JSON: {e}"))

        label = body.get("label") if isinstance(body, dict) else None
        if not isinstance(label, str):
            return PredictionResult.failure(
                PredictionError("bad_response", f"missing string label in response: {body!r}")
            )
        return PredictionResult.success(label)

    def _post(self, payload: dict[str, Any]) -> requests.Response:
        """
        POST payload as JSON.

        Raises:
            requests.RequestException: network/HTTP errors after retries
        """
        last_exc: Exception | None = None
        for attempt in range(self._cfg.max_retries + 1):
            try:
                resp = self._session.post(self._cfg.url, json=payload, timeout=self._cfg.timeout_sec)
                resp.raise_for_status()
                return resp
            except requests.RequestException as e:
                last_exc = e
                if attempt >= self._cfg.max_retries:
                    logger.error("Classifier POST failed after retries: url=%s err=%s", self._cfg.url, e)
                    raise
                sleep_sec = self._compute_backoff(attempt)
                logger.warning(
                    "Classifier POST failed (retrying): attempt=%s url=%s sleep=%.2fs err=%s",
                    attempt + 1,
                    self._cfg.url,
                    sleep_sec,
                    e,
                )
                time.sleep(sleep_sec)

        # Should not reach here
        assert last_exc is not None
        raise last_exc

    def _compute_backoff(self, attempt: int) -> float:
        # Exponential backoff with cap + jitter
        base = self._cfg.backoff_base_sec * (2**attempt)
        capped = min(base, self._cfg.backoff_max_sec)
        return capped + random.uniform(0.0, 0.5)
