"""Text and vector helpers shared by the embedder, chunker and store.

All functions are pure; lengths and offsets are counted in code points.
"""

import math
import re
from collections.abc import Sequence

SENTENCE_TERMINATORS = frozenset("。！？.!?")

# Whitespace runs, minus the ASCII information separators U+001C..U+001F,
# which are control characters to be dropped rather than word breaks.
_WHITESPACE_RUN = re.compile(r"[^\S\x1c-\x1f]+")


def normalize_text(text: str) -> str:
    """Collapse whitespace runs into single spaces and drop control characters.

    Printable characters of every script (including CJK) are kept.

    Args:
        text: Raw text.

    Returns:
        Cleaned text with no leading or trailing whitespace.
    """
    collapsed = " ".join(part for part in _WHITESPACE_RUN.split(text) if part)
    return "".join(ch for ch in collapsed if ch.isprintable())


def sentence_spans(text: str) -> list[tuple[int, int]]:
    """Locate sentences in ``text``.

    A sentence closes when the accumulated text ends with a terminator from
    ``SENTENCE_TERMINATORS`` and is longer than one character. There is no
    abbreviation or decimal handling, so ``3.14`` ends a sentence after ``3.``.

    Args:
        text: Text to scan.

    Returns:
        ``(start, end)`` offsets of each whitespace-trimmed sentence.
    """
    spans: list[tuple[int, int]] = []
    start = 0

    for i, ch in enumerate(text):
        if ch in SENTENCE_TERMINATORS and i + 1 - start > 1:
            span = _trimmed_span(text, start, i + 1)
            if span is not None:
                spans.append(span)
            start = i + 1

    if start < len(text):
        span = _trimmed_span(text, start, len(text))
        if span is not None:
            spans.append(span)

    return spans


def _trimmed_span(text: str, start: int, end: int) -> tuple[int, int] | None:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    if start == end:
        return None
    return start, end


def split_sentences(text: str) -> list[str]:
    """Split text into trimmed sentences.

    Args:
        text: Text to split.

    Returns:
        Sentences in document order.
    """
    return [text[start:end] for start, end in sentence_spans(text)]


def truncate_text(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, marking the cut with ``...``."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when the lengths differ or either vector has zero norm.
    """
    if len(a) != len(b):
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def normalize_vector(vector: list[float]) -> None:
    """L2-normalize ``vector`` in place; a zero vector is left untouched."""
    total = math.fsum(v * v for v in vector)
    if total > 0.0:
        norm = math.sqrt(total)
        for i, v in enumerate(vector):
            vector[i] = v / norm
