"""
cadence.models - Immutable value types for delivery analytics.

Every record is a frozen pydantic model. Field names are snake_case in
Python and camelCase on the wire: ``to_dict()`` produces the plain
JSON-compatible record handed to persistence and display layers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for all analytics records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a camelCase dict of plain numbers, strings and lists."""
        return self.model_dump(mode="json", by_alias=True)


class TimedWord(Record):
    word: str
    start: float
    end: float

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2


class FillerInstance(Record):
    phrase: str
    timestamp: float
    word_indices: tuple[int, ...]


class FillerSummary(Record):
    phrase: str
    count: int
    per_minute: float


class PauseInstance(Record):
    start: float
    end: float
    duration: float
    preceding_word: str
    following_word: str
    preceding_context: str


class PaceWindow(Record):
    start_time: float
    end_time: float
    wpm: float
    word_count: int


class ContentSegment(Record):
    start_time: float
    end_time: float
    text: str
    wpm: float
    word_count: int
    topic_label: str


class EnergyWindow(Record):
    start_time: float
    end_time: float
    rms_db: float


class PitchWindow(Record):
    start_time: float
    end_time: float
    median_f0_hz: float = 0.0
    median_f0_semitones: float = 0.0
    f0_range_semitones: float = 0.0
    f0_stddev_semitones: float = 0.0
    voiced_frame_ratio: float = 0.0

    @property
    def voiced(self) -> bool:
        return self.voiced_frame_ratio > 0


class DeliveryAnalytics(Record):
    """Aggregate root of one analysis run."""

    words: tuple[TimedWord, ...] = ()
    total_duration_seconds: float = 0.0

    average_wpm: float = 0.0
    pace_windows: tuple[PaceWindow, ...] = ()
    pace_variation: float = 0.0

    filler_instances: tuple[FillerInstance, ...] = ()
    filler_summary: tuple[FillerSummary, ...] = ()
    total_filler_count: int = 0
    fillers_per_minute: float = 0.0

    pauses: tuple[PauseInstance, ...] = ()
    total_pause_count: int = 0
    average_pause_duration: float = 0.0
    longest_pause: PauseInstance | None = None

    content_segments: tuple[ContentSegment, ...] = ()

    audio_analyzed: bool = False
    energy_windows: tuple[EnergyWindow, ...] = ()
    average_energy_db: float = 0.0
    energy_variation: float = 0.0
    peak_energy_db: float = 0.0

    pitch_windows: tuple[PitchWindow, ...] = ()
    average_pitch_hz: float = 0.0
    average_pitch_semitones: float = 0.0
    pitch_range_semitones: float = 0.0
    pitch_variation_semitones: float = 0.0
    overall_voiced_ratio: float = 0.0

    analyzed_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeliveryAnalytics:
        return cls.model_validate(data)


def empty_analytics() -> DeliveryAnalytics:
    """Return a zeroed report: no words, no windows, no audio."""
    return DeliveryAnalytics()
