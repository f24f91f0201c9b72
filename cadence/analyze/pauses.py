"""
cadence.analyze.pauses - Inter-word silence detection.

Finds gaps between consecutive words longer than a threshold and records
what was said just before each one.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from cadence.models import PauseInstance, TimedWord
from cadence.utils import mean


class PauseAnalysis(NamedTuple):
    pauses: tuple[PauseInstance, ...]
    total_count: int
    average_duration: float
    longest_pause: PauseInstance | None


def preceding_context(words: Sequence[TimedWord], index: int, context_words: int) -> str:
    """Text of up to context_words words ending at words[index]."""
    if context_words <= 0:
        return ""
    start = max(0, index - context_words + 1)
    return " ".join(w.word for w in words[start : index + 1])


def longest(pauses: Sequence[PauseInstance]) -> PauseInstance | None:
    """Pause with the largest duration; the earliest one wins a tie."""
    best = None
    for pause in pauses:
        if best is None or pause.duration > best.duration:
            best = pause
    return best


def detect_pauses(
    words: Sequence[TimedWord],
    min_duration_seconds: float = 0.5,
    context_words: int = 4,
) -> PauseAnalysis:
    """Detect pauses between consecutive words.

    Overlapping or touching words (gap <= 0) never produce a pause, whatever
    the threshold.

    Args:
        words: Validated word timeline
        min_duration_seconds: Shortest gap reported as a pause
        context_words: Words of preceding text kept with each pause

    Returns:
        PauseAnalysis of (pauses, total_count, average_duration, longest_pause)
    """
    pauses = []
    for i in range(len(words) - 1):
        before = words[i]
        after = words[i + 1]
        gap = after.start - before.end
        if gap <= 0 or gap < min_duration_seconds:
            continue
        pauses.append(
            PauseInstance(
                start=before.end,
                end=after.start,
                duration=gap,
                preceding_word=before.word,
                following_word=after.word,
                preceding_context=preceding_context(words, i, context_words),
            )
        )

    return PauseAnalysis(
        pauses=tuple(pauses),
        total_count=len(pauses),
        average_duration=mean([p.duration for p in pauses]),
        longest_pause=longest(pauses),
    )
