from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class MoodSettings(BaseSettings):
    """
    Environment-driven settings for tokenization + mood classification.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- Tokenizer ----
    skip_threshold: int = Field(default=2, ge=0, alias="MOOD_SKIP_THRESHOLD")
    omit_whitespace: bool = Field(default=True, alias="MOOD_OMIT_WHITESPACE")
    omit_punctuation: bool = Field(default=True, alias="MOOD_OMIT_PUNCTUATION")
    omit_other: bool = Field(default=True, alias="MOOD_OMIT_OTHER")

    # ---- Classifier ----
    # "bow" | "http" | "fixed"
    classifier_backend: str = Field(default="bow", alias="MOOD_CLASSIFIER_BACKEND")

    # Pre-trained bag-of-words artifact (torch.save'd dict)
    model_path: str = Field(default="./sentiment_polarity.pt", alias="MOOD_MODEL_PATH")
    model_version: str = Field(default="sentiment-polarity-v1", alias="MOOD_MODEL_VERSION")

    # If max prob below this -> neutral code (0 disables)
    neutral_floor: float = Field(default=0.0, alias="MOOD_NEUTRAL_FLOOR")

    # Device: "auto" | "cpu" | "cuda"
    device: str = Field(default="auto", alias="MOOD_DEVICE")

    # Raw code returned by the "fixed" backend
    fixed_label: str = Field(default="Neu", alias="MOOD_FIXED_LABEL")

    # ---- Remote classifier ----
    http_url: str = Field(default="", alias="MOOD_HTTP_URL")
    http_timeout_sec: float = Field(default=5.0, alias="MOOD_HTTP_TIMEOUT_SEC")
    http_max_retries: int = Field(default=0, alias="MOOD_HTTP_MAX_RETRIES")
    http_backoff_base_sec: float = Field(default=0.5, alias="MOOD_HTTP_BACKOFF_BASE_SEC")
    http_backoff_max_sec: float = Field(default=5.0, alias="MOOD_HTTP_BACKOFF_MAX_SEC")


def load_settings() -> MoodSettings:
    return MoodSettings()
