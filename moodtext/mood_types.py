from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Literal, Mapping, Optional


class MoodLabel(str, Enum):
    """Closed mood verdict. Pure data: display concerns live in presentation.py."""

    NEGATIVE = "negative"
    POSITIVE = "positive"
    NEUTRAL = "neutral"


# token -> occurrence count (kept as float for real-valued classifier features)
FrequencyMap = Dict[str, float]

NEGATIVE_CODE = "Neg"
POSITIVE_CODE = "Pos"
NEUTRAL_CODE = "Neu"

RAW_LABEL_TO_MOOD: Mapping[str, MoodLabel] = {
    NEGATIVE_CODE: MoodLabel.NEGATIVE,
    POSITIVE_CODE: MoodLabel.POSITIVE,
    NEUTRAL_CODE: MoodLabel.NEUTRAL,
}

FailureReason = Literal[
    "model_unavailable",
    "malformed_features",
    "model_error",
    "transport_error",
    "bad_response",
]

Fallback = Literal["empty_features", "classifier_failure", "unrecognized_label"]


class PredictionError(Exception):
    def __init__(self, reason: FailureReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message

    def __str__(self) -> str:
        return f"{self.reason}: {self.message}"


@dataclass(frozen=True)
class PredictionResult:
    """
    Outcome of a single classifier call.

    Exactly one of `label` / `error` is set.
    """

    label: Optional[str] = None
    error: Optional[PredictionError] = None

    def __post_init__(self) -> None:
        if (self.label is None) == (self.error is None):
            raise ValueError("PredictionResult needs exactly one of label or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @staticmethod
    def success(label: str) -> "PredictionResult":
        return PredictionResult(label=label)

    @staticmethod
    def failure(error: PredictionError) -> "PredictionResult":
        return PredictionResult(error=error)


@dataclass(frozen=True)
class MoodAnalysis:
    """
    One MoodService decision, for diagnostics and CLI output.

    - fallback: None when the classifier label was recognized
    """

    text: str
    features: FrequencyMap
    raw_label: Optional[str]
    mood: MoodLabel
    fallback: Optional[Fallback]
