from __future__ import annotations

import logging
from typing import Iterable, Optional

from moodtext.bow_model import BagOfWordsModel, BagOfWordsModelConfig
from moodtext.classifier import ClassifierAdapter, FixedLabelClassifier
from moodtext.http_classifier import HttpClassifier, HttpClassifierConfig
from moodtext.mood_types import (
    RAW_LABEL_TO_MOOD,
    MoodAnalysis,
    MoodLabel,
    PredictionError,
    PredictionResult,
)
from moodtext.settings import MoodSettings
from moodtext.tokenizer import DEFAULT_OPTIONS, DEFAULT_SKIP_THRESHOLD, TokenizerOptions, tokenize

logger = logging.getLogger(__name__)


class MoodService:
    """
    Text -> frequency map -> raw label -> MoodLabel.

    predict_mood() is total: empty features, classifier failures and
    unrecognized labels all resolve to NEUTRAL, and nothing is raised.
    """

    def __init__(
            self,
            classifier: ClassifierAdapter,
            options: TokenizerOptions = DEFAULT_OPTIONS,
            skip_threshold: int = DEFAULT_SKIP_THRESHOLD,
    ):
        if skip_threshold < 0:
            raise ValueError("skip_threshold must be >= 0")
        self._classifier = classifier
        self._options = options
        self._skip_threshold = skip_threshold

    @classmethod
    def from_settings(
            cls,
            settings: MoodSettings,
            classifier: Optional[ClassifierAdapter] = None,
    ) -> "MoodService":
        options = TokenizerOptions(
            omit_whitespace=settings.omit_whitespace,
            omit_punctuation=settings.omit_punctuation,
            omit_other=settings.omit_other,
        )
        return cls(
            classifier=classifier or build_classifier(settings),
            options=options,
            skip_threshold=settings.skip_threshold,
        )

    @property
    def model_version(self) -> str:
        return self._classifier.model_version

    def predict_mood(self, text: Optional[str]) -> MoodLabel:
        return self.analyze(text).mood

    def predict_moods(self, texts: Iterable[Optional[str]]) -> list[MoodLabel]:
        """Keeps ordering."""
        return [self.predict_mood(t) for t in texts]

    def analyze(self, text: Optional[str]) -> MoodAnalysis:
        text = text or ""
        features = tokenize(text, self._options, self._skip_threshold)

        if not features:
            return MoodAnalysis(
                text=text, features=features, raw_label=None,
                mood=MoodLabel.NEUTRAL, fallback="empty_features",
            )

        result = self._call_classifier(features)
        if not result.ok:
            logger.warning(
                "Problem predicting mood: model=%s tokens=%s err=%s",
                self._classifier.model_version,
                len(features),
                result.error,
            )
            return MoodAnalysis(
                text=text, features=features, raw_label=None,
                mood=MoodLabel.NEUTRAL, fallback="classifier_failure",
            )

        mood = RAW_LABEL_TO_MOOD.get(result.label)
        if mood is None:
            logger.info("Unrecognized classifier label: %r -> neutral", result.label)
            return MoodAnalysis(
                text=text, features=features, raw_label=result.label,
                mood=MoodLabel.NEUTRAL, fallback="unrecognized_label",
            )

        logger.debug("Mood predicted: label=%s mood=%s tokens=%s", result.label, mood.value, len(features))
        return MoodAnalysis(text=text, features=features, raw_label=result.label, mood=mood, fallback=None)

    def _call_classifier(self, features: dict[str, float]) -> PredictionResult:
        # Adapters should report failures as results; treat a raise the same way.
        try:
            return self._classifier.predict(dict(features))
        except Exception as e:  # noqa: BLE001
            return PredictionResult.failure(PredictionError("model_error", f"{type(e).__name__}: {e}"))


def build_classifier(settings: MoodSettings) -> ClassifierAdapter:
    """
    Raises:
        ValueError: unknown backend or incomplete backend settings
    """
    backend = settings.classifier_backend.strip().lower()
    if backend == "bow":
        return BagOfWordsModel(
            BagOfWordsModelConfig(
                model_path=settings.model_path,
                model_version=settings.model_version,
                neutral_floor=settings.neutral_floor,
                device=settings.device,
            )
        )
    if backend == "http":
        return HttpClassifier(
            HttpClassifierConfig(
                url=settings.http_url,
                timeout_sec=settings.http_timeout_sec,
                max_retries=settings.http_max_retries,
                backoff_base_sec=settings.http_backoff_base_sec,
                backoff_max_sec=settings.http_backoff_max_sec,
                model_version=settings.model_version,
            )
        )
    if backend == "fixed":
        return FixedLabelClassifier(label=settings.fixed_label, model_version=settings.model_version)
    raise ValueError(f"Unknown classifier backend: {settings.classifier_backend!r}")
