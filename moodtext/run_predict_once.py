from __future__ import annotations

import json
import logging
import sys
from typing import Any, Iterable

from moodtext.mood_service import MoodService
from moodtext.mood_types import MoodAnalysis
from moodtext.presentation import display_for
from moodtext.settings import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _to_payload(analysis: MoodAnalysis, model_version: str) -> dict[str, Any]:
    display = display_for(analysis.mood)
    return {
        "text": analysis.text,
        "mood": analysis.mood.value,
        "emoji": display.emoji,
        "color": display.color,
        "raw_label": analysis.raw_label,
        "fallback": analysis.fallback,
        "token_count": len(analysis.features),
        "model_version": model_version,
    }


def _iter_inputs(argv: list[str]) -> Iterable[str]:
    if argv:
        yield from argv
        return
    # One verdict per stdin line, re-evaluated as the user types.
    for line in sys.stdin:
        yield line.rstrip("\n")


def main(argv: list[str] | None = None) -> None:
    s = load_settings()
    service = MoodService.from_settings(s)
    logger.info("Mood service ready: backend=%s model_version=%s", s.classifier_backend, service.model_version)

    count = 0
    for text in _iter_inputs(sys.argv[1:] if argv is None else argv):
        analysis = service.analyze(text)
        print(json.dumps(_to_payload(analysis, service.model_version), ensure_ascii=False), flush=True)
        count += 1
    logger.info("Predicted moods: %s", count)


if __name__ == "__main__":
    main()
