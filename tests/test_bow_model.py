from __future__ import annotations

import torch

from moodtext.bow_model import BagOfWordsModel, BagOfWordsModelConfig
from moodtext.mood_service import MoodService
from moodtext.mood_types import MoodLabel


def _write_model(path, labels=("Neg", "Neu", "Pos")) -> str:
    # rows: Neg <- "hate", Neu <- "meh", Pos <- "love"
    torch.save(
        {
            "vocabulary": ["hate", "meh", "love"],
            "labels": list(labels),
            "weight": torch.tensor([[3.0, 0.0, 0.0], [0.0, 3.0, 0.0], [0.0, 0.0, 3.0]]),
            "bias": torch.zeros(3),
        },
        path,
    )
    return str(path)


def _model(path: str, neutral_floor: float = 0.0) -> BagOfWordsModel:
    return BagOfWordsModel(
        BagOfWordsModelConfig(model_path=path, model_version="test-v1", neutral_floor=neutral_floor, device="cpu")
    )


def test_predict_returns_argmax_label(tmp_path):
    model = _model(_write_model(tmp_path / "m.pt"))

    assert model.predict({"love": 3.0}).label == "Pos"
    assert model.predict({"hate": 2.0, "love": 1.0}).label == "Neg"
    assert model.predict({"meh": 1.0}).label == "Neu"
    assert model.model_version == "test-v1"


def test_unknown_tokens_are_ignored(tmp_path):
    model = _model(_write_model(tmp_path / "m.pt"))
    assert model.predict({"love": 1.0, "zebra": 10.0}).label == "Pos"


def test_neutral_floor_applies_to_uncertain_predictions(tmp_path):
    model = _model(_write_model(tmp_path / "m.pt"), neutral_floor=0.5)

    # all-zero features -> uniform probabilities (1/3 each)
    assert model.predict({"zebra": 1.0}).label == "Neu"
    assert model.predict({"love": 3.0}).label == "Pos"


def test_missing_artifact_reports_model_unavailable(tmp_path):
    result = _model(str(tmp_path / "nope.pt")).predict({"love": 1.0})

    assert not result.ok
    assert result.error.reason == "model_unavailable"


def test_invalid_artifact_shape_reports_model_unavailable(tmp_path):
    path = tmp_path / "bad.pt"
    torch.save(
        {"vocabulary": ["a", "b"], "labels": ["Neg", "Pos"], "weight": torch.zeros(2, 3), "bias": torch.zeros(2)},
        path,
    )
    result = _model(str(path)).predict({"a": 1.0})
    assert result.error.reason == "model_unavailable"


def test_negative_or_non_finite_counts_are_malformed(tmp_path):
    model = _model(_write_model(tmp_path / "m.pt"))

    assert model.predict({"love": -1.0}).error.reason == "malformed_features"
    assert model.predict({"love": float("nan")}).error.reason == "malformed_features"
    assert model.predict({"love": "lots"}).error.reason == "malformed_features"  # type: ignore[dict-item]


def test_service_end_to_end_with_model(tmp_path):
    service = MoodService(_model(_write_model(tmp_path / "m.pt")))

    assert service.predict_mood("I love love love this film") == MoodLabel.POSITIVE
    assert service.predict_mood("I HATE it") == MoodLabel.NEGATIVE
    assert service.predict_mood("") == MoodLabel.NEUTRAL


def test_unrecognized_model_code_is_neutral(tmp_path):
    path = _write_model(tmp_path / "m.pt", labels=("sad", "meh", "glad"))
    assert MoodService(_model(path)).predict_mood("love love") == MoodLabel.NEUTRAL


def test_empty_artifact_file_reports_model_unavailable(tmp_path):
    path = tmp_path / "truncated.pt"
    path.write_bytes(b"")

    result = _model(str(path)).predict({"love": 1.0})
    assert result.error.reason == "model_unavailable"


def test_wrong_typed_vocabulary_reports_model_unavailable(tmp_path):
    path = tmp_path / "vocab.pt"
    torch.save({"vocabulary": 5, "labels": ["Neg"], "weight": torch.zeros(1, 1), "bias": torch.zeros(1)}, path)

    assert _model(str(path)).predict({"love": 1.0}).error.reason == "model_unavailable"


def test_wrong_typed_weight_reports_model_unavailable(tmp_path):
    path = tmp_path / "weight.pt"
    torch.save({"vocabulary": ["love"], "labels": ["Pos"], "weight": "abc", "bias": torch.zeros(1)}, path)

    assert _model(str(path)).predict({"love": 1.0}).error.reason == "model_unavailable"


def test_service_answers_neutral_with_empty_artifact(tmp_path):
    path = tmp_path / "truncated.pt"
    path.write_bytes(b"")

    assert MoodService(_model(str(path))).predict_mood("love love") == MoodLabel.NEUTRAL
