"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cadence.models import TimedWord


def make_words(*triples: tuple[str, float, float]) -> list[TimedWord]:
    """Build TimedWord values from (word, start, end) triples."""
    return [TimedWord(word=w, start=s, end=e) for w, s, e in triples]


@pytest.fixture
def short_talk() -> list[TimedWord]:
    """Four words with one long pause after a filler."""
    return make_words(
        ("We", 0.0, 0.3),
        ("um", 0.3, 0.5),
        ("are", 2.0, 2.3),
        ("ready", 2.3, 2.6),
    )


@pytest.fixture
def even_words() -> list[TimedWord]:
    """100 back-to-back words covering exactly 60 seconds."""
    return [
        TimedWord(word=f"w{i}", start=i * 60 / 100, end=(i + 1) * 60 / 100) for i in range(100)
    ]


@pytest.fixture
def sample_transcript() -> dict:
    """Return a Whisper-style transcript with per-segment words."""
    return {
        "language": "en",
        "duration_seconds": 2.6,
        "segments": [
            {
                "start": 0.0,
                "end": 0.5,
                "text": "We um",
                "words": [
                    {"word": " We", "start": 0.0, "end": 0.3},
                    {"word": " um", "start": 0.3, "end": 0.5},
                ],
            },
            {
                "start": 2.0,
                "end": 2.6,
                "text": "are ready",
                "words": [
                    {"word": " are", "start": 2.0, "end": 2.3},
                    {"word": " ready", "start": 2.3, "end": 2.6},
                ],
            },
        ],
    }


@pytest.fixture
def transcript_file(tmp_path: Path, sample_transcript: dict) -> Path:
    path = tmp_path / "talk.json"
    with open(path, "w") as f:
        json.dump(sample_transcript, f)
    return path


@pytest.fixture
def sample_config_dict() -> dict:
    """Return a sample configuration dictionary."""
    return {
        "profile": "lecture",
        "pace": {"window_seconds": 45.0},
        "fillers": {"lexicon": ["um", "uh", "you know"]},
        "llm": {"backend": "ollama", "privacy_mode": "local"},
    }
