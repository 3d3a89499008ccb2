from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterator, Literal, Tuple

from nltk.tokenize import RegexpTokenizer

from moodtext.mood_types import FrequencyMap

logger = logging.getLogger(__name__)

SpanKind = Literal["word", "whitespace", "punctuation", "other"]

DEFAULT_SKIP_THRESHOLD = 2

# English word units: letters/digits (no underscores), inner apostrophes kept ("don't" is one word).
# Every input character falls into exactly one span.
_SPAN_PATTERN = r"[^\W_]+(?:['’][^\W_]+)*|\s+|[^\w\s]|_"

_span_tokenizer = RegexpTokenizer(_SPAN_PATTERN, gaps=False)


@dataclass(frozen=True)
class TokenizerOptions:
    """Which non-word span kinds segmentation drops."""

    omit_whitespace: bool = True
    omit_punctuation: bool = True
    omit_other: bool = True

    def keeps(self, kind: SpanKind) -> bool:
        if kind == "whitespace":
            return not self.omit_whitespace
        if kind == "punctuation":
            return not self.omit_punctuation
        if kind == "other":
            return not self.omit_other
        return True


DEFAULT_OPTIONS = TokenizerOptions()


def _span_kind(span: str) -> SpanKind:
    head = span[0]
    if head.isspace():
        return "whitespace"
    if head.isalnum():
        return "word"
    if unicodedata.category(head).startswith("P"):
        return "punctuation"
    return "other"


def iter_spans(text: str, options: TokenizerOptions = DEFAULT_OPTIONS) -> Iterator[Tuple[SpanKind, str]]:
    """
    Segment text into (kind, span) pairs, skipping span kinds the options omit.

    Spans are returned as they appear in the input (not normalized).
    """
    for start, end in _span_tokenizer.span_tokenize(text):
        span = text[start:end]
        kind = _span_kind(span)
        if options.keeps(kind):
            yield kind, span


def tokenize(
        text: str,
        options: TokenizerOptions = DEFAULT_OPTIONS,
        skip_threshold: int = DEFAULT_SKIP_THRESHOLD,
) -> FrequencyMap:
    """
    Build a bag-of-words frequency map from raw text.

    Rules:
    - text is NFC-normalized, spans are lowercased before counting
    - a token is kept only if len(token) > skip_threshold
    - empty / whitespace / punctuation-only input -> {}

    Raises:
        ValueError: if skip_threshold is negative
    """
    if skip_threshold < 0:
        raise ValueError("skip_threshold must be >= 0")
    if not text:
        return {}

    text = unicodedata.normalize("NFC", text)
    counts: FrequencyMap = {}
    for _, span in iter_spans(text, options):
        token = span.lower()
        if len(token) <= skip_threshold:
            continue
        counts[token] = counts.get(token, 0.0) + 1.0

    logger.debug("Tokenized: chars=%s tokens=%s", len(text), len(counts))
    return counts
