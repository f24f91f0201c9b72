"""Tests for cadence.analyze.pace module."""

from __future__ import annotations

import pytest

from cadence.analyze.pace import analyze_pace, window_bounds, window_rate
from cadence.models import TimedWord


class TestWindowBounds:
    def test_sliding_windows_clip_at_end(self) -> None:
        assert window_bounds(65.0, 30.0, 10.0) == [
            (0.0, 30.0),
            (10.0, 40.0),
            (20.0, 50.0),
            (30.0, 60.0),
            (40.0, 65.0),
        ]

    def test_non_overlapping(self) -> None:
        assert window_bounds(60.0, 30.0, 30.0) == [(0.0, 30.0), (30.0, 60.0)]

    def test_short_talk_single_window(self) -> None:
        """Test a talk shorter than one window yields one window over the talk."""
        assert window_bounds(12.0, 30.0, 10.0) == [(0.0, 12.0)]

    def test_zero_duration(self) -> None:
        assert window_bounds(0.0, 30.0, 10.0) == []

    def test_non_positive_step_uses_window(self) -> None:
        assert window_bounds(60.0, 30.0, 0.0) == [(0.0, 30.0), (30.0, 60.0)]


class TestWindowRate:
    def test_rate_and_count(self, even_words: list[TimedWord]) -> None:
        wpm, count = window_rate(even_words, 0.0, 30.0)
        assert count == 50
        assert wpm == pytest.approx(100.0)


class TestAnalyzePace:
    def test_even_words_two_windows(self, even_words: list[TimedWord]) -> None:
        """Test 100 words over 60s with 30s non-overlapping windows."""
        result = analyze_pace(even_words, window_seconds=30.0, step_seconds=30.0)

        assert len(result.windows) == 2
        assert [w.word_count for w in result.windows] == [50, 50]
        assert all(w.wpm == pytest.approx(100.0) for w in result.windows)
        assert result.average_wpm == pytest.approx(100.0)
        assert result.pace_variation == pytest.approx(0.0)

    def test_last_word_counted(self, even_words: list[TimedWord]) -> None:
        """Test every word lands in exactly one non-overlapping window."""
        result = analyze_pace(even_words, window_seconds=20.0, step_seconds=20.0)
        assert sum(w.word_count for w in result.windows) == 100

    def test_empty(self) -> None:
        result = analyze_pace([])
        assert result.windows == ()
        assert result.average_wpm == 0.0
        assert result.pace_variation == 0.0

    def test_variation_is_population_stddev(self) -> None:
        """Test a fast first half and an empty second half."""
        words = [TimedWord(word=f"w{i}", start=i * 0.25, end=i * 0.25 + 0.2) for i in range(40)]
        words.append(TimedWord(word="end", start=19.5, end=20.0))

        result = analyze_pace(words, window_seconds=10.0, step_seconds=10.0)

        assert [w.word_count for w in result.windows] == [40, 1]
        assert result.windows[0].wpm == pytest.approx(240.0)
        assert result.windows[1].wpm == pytest.approx(6.0)
        assert result.pace_variation == pytest.approx(117.0)

    def test_average_uses_whole_talk(self) -> None:
        words = [
            TimedWord(word="a", start=0.0, end=0.5),
            TimedWord(word="b", start=29.5, end=30.0),
        ]
        result = analyze_pace(words, window_seconds=10.0, step_seconds=10.0)
        assert result.average_wpm == pytest.approx(4.0)
