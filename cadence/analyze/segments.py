"""
cadence.analyze.segments - Time-boundary content segmentation.

Partitions the talk into contiguous chunks of roughly equal length, measures
the local pace of each one and asks a topic labeler what it is about.
The labeler is an injected callable, so a remote model and a deterministic
stand-in are interchangeable.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Callable, Sequence

from cadence.analyze.cancellation import CancelToken, raise_if_cancelled
from cadence.logging import logger
from cadence.models import ContentSegment, TimedWord
from cadence.timeline import timeline_duration
from cadence.utils import per_minute

TopicLabeler = Callable[[str], str]

UNKNOWN_TOPIC = "(unknown)"
EMPTY_TOPIC = "(empty)"
HEURISTIC_LABEL_WORDS = 8


def heuristic_topic_label(text: str) -> str:
    """Label a segment with its opening words."""
    tokens = text.split()
    label = " ".join(tokens[:HEURISTIC_LABEL_WORDS])
    if len(tokens) > HEURISTIC_LABEL_WORDS:
        label += "..."
    return label


def chunk_bounds(total_duration: float, target_seconds: float) -> list[tuple[float, float]]:
    """Split [0, total_duration] into chunks of target_seconds.

    A remainder shorter than half the target is folded into the last chunk.
    """
    if total_duration <= 0:
        return []
    if target_seconds <= 0 or total_duration <= target_seconds:
        return [(0.0, total_duration)]

    count = int(total_duration // target_seconds)
    bounds = [(i * target_seconds, (i + 1) * target_seconds) for i in range(count)]
    remainder = total_duration - count * target_seconds

    if remainder >= target_seconds / 2:
        bounds.append((count * target_seconds, total_duration))
    else:
        bounds[-1] = (bounds[-1][0], total_duration)
    return bounds


def assign_to_chunks(
    words: Sequence[TimedWord],
    bounds: Sequence[tuple[float, float]],
) -> list[list[int]]:
    """Group word indices by the chunk holding their midpoint.

    A word never lands in an earlier chunk than the word before it, so
    overlapping timestamps keep the transcript order across chunks.
    """
    groups: list[list[int]] = [[] for _ in bounds]
    if not bounds:
        return groups
    starts = [start for start, _ in bounds]
    current = 0
    for i, w in enumerate(words):
        index = min(max(bisect_right(starts, w.midpoint) - 1, 0), len(bounds) - 1)
        current = max(current, index)
        groups[current].append(i)
    return groups


def label_segment(labeler: TopicLabeler, text: str, index: int) -> str:
    """Ask the labeler for a topic; failures degrade to UNKNOWN_TOPIC."""
    if not text:
        return EMPTY_TOPIC
    try:
        label = labeler(text)
    except Exception as e:
        logger.warning("Topic labeler failed for segment %d: %s", index, e)
        return UNKNOWN_TOPIC
    label = str(label).strip() if label is not None else ""
    return label or UNKNOWN_TOPIC


def segment_content(
    words: Sequence[TimedWord],
    labeler: TopicLabeler | None = None,
    target_segment_seconds: float = 45.0,
    cancel: CancelToken | None = None,
) -> tuple[ContentSegment, ...]:
    """Partition the talk into labeled content segments.

    Args:
        words: Validated word timeline
        labeler: Callable mapping segment text to a topic label; defaults to
            heuristic_topic_label
        target_segment_seconds: Desired segment length
        cancel: Optional cancellation token, checked before each segment

    Returns:
        Contiguous segments covering [0, total duration]
    """
    if labeler is None:
        labeler = heuristic_topic_label

    total = timeline_duration(words)
    bounds = chunk_bounds(total, target_segment_seconds)
    groups = assign_to_chunks(words, bounds)
    segments = []

    for index, ((start, end), members) in enumerate(zip(bounds, groups)):
        raise_if_cancelled(cancel, "content segmentation")
        text = " ".join(words[i].word for i in members)
        count = len(members)
        wpm = per_minute(count, end - start)

        segments.append(
            ContentSegment(
                start_time=start,
                end_time=end,
                text=text,
                wpm=wpm,
                word_count=count,
                topic_label=label_segment(labeler, text, index),
            )
        )
        logger.debug("Segment %d [%.1f-%.1f]: %d words", index, start, end, count)

    return tuple(segments)
