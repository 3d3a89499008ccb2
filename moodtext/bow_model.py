from __future__ import annotations

import logging
import math
import pickle
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Sequence

import numpy as np
import torch

from moodtext.mood_types import FrequencyMap, NEUTRAL_CODE, PredictionError, PredictionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BagOfWordsModelConfig:
    model_path: str
    model_version: str
    neutral_floor: float
    device: str  # "auto" | "cpu" | "cuda"


@dataclass(frozen=True)
class _LoadedModel:
    vocabulary: Mapping[str, int]
    labels: Sequence[str]
    weight: torch.Tensor  # (C, V)
    bias: torch.Tensor  # (C,)


def _select_device(device: str) -> torch.device:
    if device == "cpu":
        return torch.device("cpu")
    if device == "cuda":
        return torch.device("cuda")
    # auto
    return torch.device("cuda" if torch.cuda.is_available() else "cpu")


@lru_cache(maxsize=4)
def _load_artifact(model_path: str) -> _LoadedModel:
    """
    Load once per process. Cached by model_path.

    Artifact layout (torch.save of a dict):
      - vocabulary: list[str]
      - labels: list[str], raw label code per weight row
      - weight: float tensor (C, V)
      - bias: float tensor (C,)

    Raises:
        OSError: if the file is missing or unreadable.
        ValueError: if the artifact layout is invalid.
    """
    logger.info("Loading bag-of-words model: path=%s", model_path)
    try:
        raw: Any = torch.load(model_path, map_location="cpu", weights_only=True)
    except (EOFError, pickle.UnpicklingError, RuntimeError) as e:
        raise ValueError(f"invalid model artifact: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError("model artifact must be a dict")

    try:
        vocabulary = [str(t) for t in raw["vocabulary"]]
        labels = [str(c) for c in raw["labels"]]
        weight = torch.as_tensor(raw["weight"], dtype=torch.float32)
        bias = torch.as_tensor(raw["bias"], dtype=torch.float32)
    except KeyError as e:
        raise ValueError(f"model artifact missing key: {e}") from e
    except (TypeError, ValueError, RuntimeError) as e:
        raise ValueError(f"invalid model artifact: {e}") from e

    if weight.dim() != 2 or weight.shape != (len(labels), len(vocabulary)):
        raise ValueError(
            f"weight shape {tuple(weight.shape)} does not match labels x vocabulary "
            f"({len(labels)}, {len(vocabulary)})"
        )
    if bias.shape != (len(labels),):
        raise ValueError(f"bias shape {tuple(bias.shape)} does not match labels ({len(labels)},)")
    if not labels:
        raise ValueError("model artifact has no labels")

    index = {token: i for i, token in enumerate(vocabulary)}
    return _LoadedModel(vocabulary=index, labels=labels, weight=weight, bias=bias)


class BagOfWordsModel:
    """
    Adapter over a pre-trained linear bag-of-words sentiment model.

    - artifact loads once (process cache); a load failure is remembered and
      every predict() reports model_unavailable
    - tokens outside the vocabulary are ignored
    - optional neutral_floor: max prob below it -> neutral code
    """

    def __init__(self, cfg: BagOfWordsModelConfig):
        self._cfg = cfg
        self._device = _select_device(cfg.device)
        self._model: _LoadedModel | None = None
        self._load_error: str | None = None

        try:
            loaded = _load_artifact(cfg.model_path)
        except (OSError, ValueError) as e:
            self._load_error = str(e)
            logger.error("Bag-of-words model unavailable: path=%s err=%s", cfg.model_path, e)
            return

        self._model = _LoadedModel(
            vocabulary=loaded.vocabulary,
            labels=loaded.labels,
            weight=loaded.weight.to(self._device),
            bias=loaded.bias.to(self._device),
        )
        logger.info(
            "Bag-of-words model ready: version=%s device=%s vocab=%s labels=%s",
            cfg.model_version,
            self._device.type,
            len(loaded.vocabulary),
            ",".join(loaded.labels),
        )

    @property
    def model_version(self) -> str:
        return self._cfg.model_version

    def predict(self, frequency_map: FrequencyMap) -> PredictionResult:
        if self._model is None:
            return PredictionResult.failure(
                PredictionError("model_unavailable", self._load_error or "model not loaded")
            )

        try:
            features = self._vectorize(frequency_map)
        except PredictionError as e:
            return PredictionResult.failure(e)

        try:
            with torch.no_grad():
                x = torch.from_numpy(features).to(self._device)
                logits = self._model.weight @ x + self._model.bias  # (C,)
                probs = torch.softmax(logits, dim=-1).cpu().numpy()
        except RuntimeError as e:
            return PredictionResult.failure(PredictionError("model_error", str(e)))

        best = int(np.argmax(probs))
        max_prob = float(probs[best])
        if self._cfg.neutral_floor > 0.0 and max_prob < self._cfg.neutral_floor:
            label = NEUTRAL_CODE
        else:
            label = self._model.labels[best]

        logger.debug("Bag-of-words prediction: label=%s prob=%.3f", label, max_prob)
        return PredictionResult.success(label)

    def _vectorize(self, frequency_map: FrequencyMap) -> np.ndarray:
        assert self._model is not None
        vec = np.zeros(len(self._model.vocabulary), dtype=np.float32)
        for token, count in frequency_map.items():
            try:
                value = float(count)
            except (TypeError, ValueError) as e:
                raise PredictionError("malformed_features", f"non-numeric count for {token!r}") from e
            if not math.isfinite(value) or value < 0.0:
                raise PredictionError("malformed_features", f"invalid count for {token!r}: {count!r}")
            idx = self._model.vocabulary.get(token)
            if idx is not None:
                vec[idx] = value
        return vec
