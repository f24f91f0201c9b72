"""
cadence.timeline - The word timeline shared by every text analyzer.

Builds the validated, immutable sequence of TimedWord values from raw
transcriber output and provides the time-axis helpers the analyzers use.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Union

from cadence.exceptions import TimelineError
from cadence.logging import logger
from cadence.models import TimedWord

WordLike = Union[TimedWord, Mapping[str, Any]]


def _coerce_word(index: int, item: WordLike) -> TimedWord:
    if isinstance(item, TimedWord):
        return item
    try:
        word = str(item["word"]).strip()
        start = float(item["start"])
        end = float(item["end"])
    except KeyError as e:
        raise TimelineError(index, f"missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise TimelineError(index, f"invalid timestamp: {e}") from e
    return TimedWord(word=word, start=start, end=end)


def build_timeline(words: Iterable[WordLike]) -> tuple[TimedWord, ...]:
    """Validate raw words and freeze them into a timeline.

    Words whose end precedes their start are clamped to zero length.
    Ordering violations are the caller's bug and fail fast.

    Args:
        words: TimedWord values or mappings with word/start/end keys

    Returns:
        Tuple of TimedWord in transcript order

    Raises:
        TimelineError: On a missing field, a non-finite or negative start,
            or a start earlier than the previous word's start
    """
    timeline: list[TimedWord] = []
    prev_start: float | None = None

    for index, item in enumerate(words):
        word = _coerce_word(index, item)

        if not (math.isfinite(word.start) and math.isfinite(word.end)):
            raise TimelineError(index, "timestamps must be finite")
        if word.start < 0:
            raise TimelineError(index, f"negative start time {word.start}")
        if prev_start is not None and word.start < prev_start:
            raise TimelineError(
                index,
                f"start {word.start} precedes previous word start {prev_start}",
            )

        if word.end < word.start:
            logger.warning(
                "Word %d (%r) ends before it starts (%.3f < %.3f); clamping to zero length",
                index,
                word.word,
                word.end,
                word.start,
            )
            word = TimedWord(word=word.word, start=word.start, end=word.start)

        timeline.append(word)
        prev_start = word.start

    return tuple(timeline)


def timeline_duration(words: Sequence[TimedWord]) -> float:
    """Length of the time axis: from 0 to the latest word end."""
    if not words:
        return 0.0
    return max(0.0, max(w.end for w in words))


def words_in_span(
    words: Sequence[TimedWord],
    start: float,
    end: float,
    include_end: bool = False,
) -> list[int]:
    """Indices of words whose midpoint falls in [start, end).

    With include_end the interval is closed on the right, which the final
    window of a partition uses so a word ending exactly at the timeline end
    is never lost.
    """
    indices = []
    for i, w in enumerate(words):
        mid = w.midpoint
        if mid < start:
            continue
        if mid < end or (include_end and mid == end):
            indices.append(i)
    return indices


def merge_chunk_words(
    chunks: Iterable[tuple[float, Iterable[WordLike]]],
) -> tuple[TimedWord, ...]:
    """Join words from separately transcribed audio chunks.

    Args:
        chunks: (offset_seconds, words) pairs in playback order; each chunk's
            timestamps are relative to its own start

    Returns:
        Validated timeline on the absolute time axis
    """
    shifted: list[TimedWord] = []
    for offset, chunk_words in chunks:
        for index, item in enumerate(chunk_words):
            word = _coerce_word(index, item)
            shifted.append(
                TimedWord(word=word.word, start=word.start + offset, end=word.end + offset)
            )
    return build_timeline(shifted)
