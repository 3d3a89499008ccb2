from __future__ import annotations

import logging
from typing import Optional, Protocol

from moodtext.mood_types import FrequencyMap, NEUTRAL_CODE, PredictionError, PredictionResult

logger = logging.getLogger(__name__)


class ClassifierAdapter(Protocol):
    """
    Boundary to a pre-trained bag-of-words sentiment model.

    Contract:
    - frequency_map is non-empty (MoodService never calls with {})
    - returns a raw label code on success, or a failure carrying PredictionError
    - must not mutate frequency_map
    """

    @property
    def model_version(self) -> str:
        ...

    def predict(self, frequency_map: FrequencyMap) -> PredictionResult:
        ...


class FixedLabelClassifier:
    """Returns the same raw label (or the same failure) for every call."""

    def __init__(
            self,
            label: str = NEUTRAL_CODE,
            error: Optional[PredictionError] = None,
            model_version: str = "fixed",
    ):
        self._label = label
        self._error = error
        self._model_version = model_version

    @property
    def model_version(self) -> str:
        return self._model_version

    def predict(self, frequency_map: FrequencyMap) -> PredictionResult:
        if self._error is not None:
            return PredictionResult.failure(self._error)
        return PredictionResult.success(self._label)
