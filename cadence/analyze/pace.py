"""
cadence.analyze.pace - Sliding-window speaking rate.

Slides a fixed window over the timeline and counts the words whose
midpoint lands inside each window, producing words-per-minute per window
plus whole-talk pace statistics.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from cadence.models import PaceWindow, TimedWord
from cadence.timeline import timeline_duration, words_in_span
from cadence.utils import per_minute, population_stddev


class PaceAnalysis(NamedTuple):
    windows: tuple[PaceWindow, ...]
    average_wpm: float
    pace_variation: float


def window_bounds(
    total_duration: float,
    window_seconds: float,
    step_seconds: float,
) -> list[tuple[float, float]]:
    """Start/end pairs of the sliding windows over [0, total_duration].

    The last window is the first one that reaches the timeline end; it is
    clipped there rather than dropped.
    """
    if total_duration <= 0:
        return []
    if window_seconds <= 0 or total_duration < window_seconds:
        return [(0.0, total_duration)]
    if step_seconds <= 0:
        step_seconds = window_seconds

    bounds = []
    i = 0
    while True:
        start = i * step_seconds
        end = min(start + window_seconds, total_duration)
        bounds.append((start, end))
        if end >= total_duration:
            break
        i += 1
    return bounds


def window_rate(
    words: Sequence[TimedWord],
    start: float,
    end: float,
    include_end: bool = False,
) -> tuple[float, int]:
    """WPM and word count for one span, by word midpoint."""
    count = len(words_in_span(words, start, end, include_end=include_end))
    return per_minute(count, end - start), count


def analyze_pace(
    words: Sequence[TimedWord],
    window_seconds: float = 30.0,
    step_seconds: float = 10.0,
) -> PaceAnalysis:
    """Compute sliding-window WPM and overall pace statistics.

    Args:
        words: Validated word timeline
        window_seconds: Window length in seconds
        step_seconds: Offset between consecutive window starts

    Returns:
        PaceAnalysis of (windows, average_wpm, pace_variation). The average
        is taken over the whole timeline, not over the windows.
    """
    total = timeline_duration(words)
    if total <= 0:
        return PaceAnalysis((), 0.0, 0.0)

    windows = []
    for start, end in window_bounds(total, window_seconds, step_seconds):
        wpm, count = window_rate(words, start, end, include_end=end >= total)
        windows.append(PaceWindow(start_time=start, end_time=end, wpm=wpm, word_count=count))

    average_wpm = per_minute(len(words), total)
    variation = population_stddev([w.wpm for w in windows])

    return PaceAnalysis(tuple(windows), average_wpm, variation)
