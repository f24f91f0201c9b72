"""
cadence.analyze.fillers - Filler word and phrase detection.

Matches a lexicon of hesitation phrases ("um", "you know", "sort of")
against the word timeline with a greedy longest-match scan over a token
trie, so overlapping candidates resolve the same way every time.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from cadence.models import FillerInstance, FillerSummary, TimedWord
from cadence.timeline import timeline_duration
from cadence.utils import per_minute

DEFAULT_FILLER_LEXICON: tuple[str, ...] = (
    "um",
    "uh",
    "like",
    "basically",
    "so",
    "right",
    "actually",
    "well",
    "literally",
    "you know",
    "i mean",
    "kind of",
    "sort of",
)

MAX_PHRASE_WORDS = 3

_NON_WORD_CHARS = re.compile(r"[^a-z']")


def clean_word(word: str) -> str:
    """Lowercase and strip everything but letters and apostrophes."""
    return _NON_WORD_CHARS.sub("", word.lower())


def normalize_phrase(phrase: str) -> tuple[str, ...]:
    """Split a lexicon phrase into cleaned tokens."""
    tokens = (clean_word(token) for token in phrase.split())
    return tuple(token for token in tokens if token)


class FillerLexicon:
    """Token trie over the filler phrases.

    Each node maps a cleaned token to its child node; a node where a lexicon
    entry ends also holds the phrase text under the _END sentinel.
    """

    _END = object()

    def __init__(self, phrases: Iterable[str]) -> None:
        self._root: dict = {}
        self.phrases: list[str] = []
        for phrase in phrases:
            tokens = normalize_phrase(phrase)
            if not tokens:
                continue
            if len(tokens) > MAX_PHRASE_WORDS:
                raise ValueError(
                    f"Filler phrase {phrase!r} has {len(tokens)} words "
                    f"(max {MAX_PHRASE_WORDS})"
                )
            node = self._root
            for token in tokens:
                node = node.setdefault(token, {})
            text = " ".join(tokens)
            if self._END not in node:
                self.phrases.append(text)
            node[self._END] = text

    def __len__(self) -> int:
        return len(self.phrases)

    def longest_match(
        self,
        cleaned: Sequence[str],
        words: Sequence[TimedWord],
        position: int,
        max_gap: float | None = None,
    ) -> tuple[str, int] | None:
        """Longest phrase starting at position.

        Args:
            cleaned: Cleaned token for every word in the timeline
            words: The timeline itself, for inter-word gaps
            position: Index to match from
            max_gap: Largest silence allowed between words of one phrase

        Returns:
            (phrase, last_index) of the longest match, or None
        """
        node = self._root
        best: tuple[str, int] | None = None
        for j in range(position, min(position + MAX_PHRASE_WORDS, len(cleaned))):
            if j > position and max_gap is not None:
                if words[j].start - words[j - 1].end > max_gap:
                    break
            node = node.get(cleaned[j])
            if node is None:
                break
            if self._END in node:
                best = (node[self._END], j)
        return best


class FillerAnalysis(NamedTuple):
    instances: tuple[FillerInstance, ...]
    summary: tuple[FillerSummary, ...]
    total_count: int
    per_minute: float


def find_filler_instances(
    words: Sequence[TimedWord],
    lexicon: FillerLexicon,
    max_phrase_gap_seconds: float | None = 0.5,
) -> list[FillerInstance]:
    """Left-to-right non-overlapping longest-match scan."""
    cleaned = [clean_word(w.word) for w in words]
    instances = []
    i = 0
    while i < len(words):
        match = lexicon.longest_match(cleaned, words, i, max_gap=max_phrase_gap_seconds)
        if match is None:
            i += 1
            continue
        phrase, last = match
        instances.append(
            FillerInstance(
                phrase=phrase,
                timestamp=words[i].start,
                word_indices=tuple(range(i, last + 1)),
            )
        )
        i = last + 1
    return instances


def summarize_fillers(
    instances: Sequence[FillerInstance],
    total_duration: float,
) -> tuple[FillerSummary, ...]:
    """Per-phrase counts, most frequent first, ties in order of first use."""
    counts: dict[str, int] = {}
    for instance in instances:
        counts[instance.phrase] = counts.get(instance.phrase, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return tuple(
        FillerSummary(
            phrase=phrase,
            count=count,
            per_minute=per_minute(count, total_duration),
        )
        for phrase, count in ranked
    )


def detect_fillers(
    words: Sequence[TimedWord],
    lexicon: Iterable[str] | FillerLexicon = DEFAULT_FILLER_LEXICON,
    max_phrase_gap_seconds: float | None = 0.5,
) -> FillerAnalysis:
    """Detect filler phrases and summarize their use.

    Args:
        words: Validated word timeline
        lexicon: Phrases of one to three words, or a prebuilt FillerLexicon
        max_phrase_gap_seconds: Multi-word phrases only match when each
            inter-word gap is at most this long; None disables the check

    Returns:
        FillerAnalysis of (instances, summary, total_count, per_minute)
    """
    if not isinstance(lexicon, FillerLexicon):
        lexicon = FillerLexicon(lexicon)

    total_duration = timeline_duration(words)
    instances = find_filler_instances(words, lexicon, max_phrase_gap_seconds)
    summary = summarize_fillers(instances, total_duration)

    return FillerAnalysis(
        instances=tuple(instances),
        summary=summary,
        total_count=len(instances),
        per_minute=per_minute(len(instances), total_duration),
    )
