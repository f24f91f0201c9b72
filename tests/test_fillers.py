"""Tests for cadence.analyze.fillers module."""

from __future__ import annotations

import pytest

from cadence.analyze.fillers import (
    DEFAULT_FILLER_LEXICON,
    FillerLexicon,
    clean_word,
    detect_fillers,
    normalize_phrase,
)
from cadence.models import TimedWord


def make_words(*tokens: str, spacing: float = 0.4) -> list[TimedWord]:
    """Back-to-back words, each spacing seconds long."""
    return [
        TimedWord(word=token, start=i * spacing, end=(i + 1) * spacing)
        for i, token in enumerate(tokens)
    ]


class TestCleaning:
    def test_clean_word(self) -> None:
        assert clean_word("Um,") == "um"
        assert clean_word("LIKE...") == "like"
        assert clean_word("don't") == "don't"
        assert clean_word("42") == ""

    def test_normalize_phrase(self) -> None:
        assert normalize_phrase("You Know") == ("you", "know")
        assert normalize_phrase("  ") == ()


class TestFillerLexicon:
    def test_default_lexicon_loads(self) -> None:
        lexicon = FillerLexicon(DEFAULT_FILLER_LEXICON)
        assert len(lexicon) == len(DEFAULT_FILLER_LEXICON)

    def test_duplicates_collapse(self) -> None:
        lexicon = FillerLexicon(["um", "Um", "um."])
        assert lexicon.phrases == ["um"]

    def test_phrase_too_long_raises(self) -> None:
        with pytest.raises(ValueError):
            FillerLexicon(["you know what i"])


class TestDetectFillers:
    def test_single_word_filler(self) -> None:
        words = [
            TimedWord(word="We", start=0.0, end=0.3),
            TimedWord(word="um", start=0.3, end=0.5),
            TimedWord(word="are", start=2.0, end=2.3),
        ]
        result = detect_fillers(words, ["um"])

        assert result.total_count == 1
        instance = result.instances[0]
        assert instance.phrase == "um"
        assert instance.timestamp == 0.3
        assert instance.word_indices == (1,)

    def test_multi_word_phrase(self) -> None:
        result = detect_fillers(make_words("it", "was", "you", "know", "fine"))
        assert [i.phrase for i in result.instances] == ["you know"]
        assert result.instances[0].word_indices == (2, 3)
        assert result.instances[0].timestamp == pytest.approx(0.8)

    def test_longest_match_wins(self) -> None:
        """Test 'kind of' is preferred over 'kind' and consumes both words."""
        result = detect_fillers(make_words("kind", "of", "done"), ["kind", "kind of", "of"])
        assert [i.phrase for i in result.instances] == ["kind of"]

    def test_no_overlapping_matches(self) -> None:
        result = detect_fillers(make_words("i", "mean", "mean"), ["i mean", "mean"])
        assert [i.phrase for i in result.instances] == ["i mean", "mean"]
        assert [i.word_indices for i in result.instances] == [(0, 1), (2,)]

    def test_punctuation_and_case_ignored(self) -> None:
        result = detect_fillers(make_words("Um,", "So...", "Basically!"))
        assert [i.phrase for i in result.instances] == ["um", "so", "basically"]

    def test_long_gap_breaks_phrase(self) -> None:
        words = [
            TimedWord(word="you", start=0.0, end=0.2),
            TimedWord(word="know", start=1.5, end=1.7),
        ]
        assert detect_fillers(words, ["you know"]).total_count == 0
        assert detect_fillers(words, ["you know"], max_phrase_gap_seconds=None).total_count == 1

    def test_summary_sorted_by_count(self) -> None:
        words = make_words("uh", "we", "um", "go", "um", "like", "so")
        result = detect_fillers(words, ["um", "uh", "like", "so"])

        assert [(s.phrase, s.count) for s in result.summary] == [
            ("um", 2),
            ("uh", 1),
            ("like", 1),
            ("so", 1),
        ]

    def test_rates_per_minute(self) -> None:
        words = make_words("um", "ok", "um", spacing=10.0)
        result = detect_fillers(words, ["um"])

        assert result.per_minute == pytest.approx(4.0)
        assert result.summary[0].per_minute == pytest.approx(4.0)

    def test_empty(self) -> None:
        result = detect_fillers([])
        assert result.instances == ()
        assert result.summary == ()
        assert result.total_count == 0
        assert result.per_minute == 0.0

    def test_prebuilt_lexicon(self) -> None:
        lexicon = FillerLexicon(["well"])
        result = detect_fillers(make_words("well", "um"), lexicon)
        assert [i.phrase for i in result.instances] == ["well"]
