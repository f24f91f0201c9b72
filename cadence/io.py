"""
cadence.io - Report and transcript file I/O.

Reports are written atomically (temp file in the target directory, then
rename) so an interrupted run never leaves a truncated JSON behind.
Transcripts are read from the shapes common speech-to-text tools emit.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any

from cadence.exceptions import ValidationError


def _atomic_write(path: Path, write: Callable[[IO[str]], None]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            write(tmp)
        except Exception:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    tmp_path.replace(path)


def read_json(path: Path) -> Any:
    """Read a UTF-8 JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If it is not valid JSON
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Pretty-print data to path atomically, creating parent directories."""
    _atomic_write(path, lambda f: json.dump(data, f, indent=indent, ensure_ascii=False))


def extract_words(data: Any) -> list[dict[str, Any]]:
    """Pull the flat word list out of a transcript document.

    Accepts a bare list of words, a dict with a top-level "words" list, or a
    Whisper-style dict whose "segments" each carry their own "words".

    Raises:
        ValidationError: If no word list can be found
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("words"), list):
            return data["words"]
        if isinstance(data.get("segments"), list):
            words: list[dict[str, Any]] = []
            for segment in data["segments"]:
                words.extend(segment.get("words", []))
            return words
    raise ValidationError("Transcript has no 'words' or 'segments[].words' list")


def load_transcript_words(path: Path) -> list[dict[str, Any]]:
    """Read a transcript JSON file and return its raw word mappings."""
    return extract_words(read_json(path))
