"""
cadence.utils - Shared utility functions.

Formatting and summary statistics used across the analyzers and reports.
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def format_duration(seconds: float) -> str:
    """Format seconds as H:MM:SS or M:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (H:MM:SS if >= 1 hour, otherwise M:SS)
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def per_minute(count: float, duration_seconds: float) -> float:
    """Rate per minute, 0.0 when the duration is not positive."""
    if duration_seconds <= 0:
        return 0.0
    return count / (duration_seconds / 60)


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_stddev(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))
