"""
cadence.validation - Input file checks and preflight warnings.

Validates transcript and audio inputs before an analysis run and reports
conditions worth warning about without failing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cadence.exceptions import ValidationError

AUDIO_EXTENSIONS = {
    ".wav",
    ".mp3",
    ".m4a",
    ".flac",
    ".ogg",
    ".webm",
    ".mp4",
    ".mov",
    ".aac",
}

SHORT_TALK_SECONDS = 30
LONG_TALK_SECONDS = 2 * 3600


def _validate_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ValidationError(f"File not found: {path}")

    if not path.is_file():
        raise ValidationError(f"Not a file: {path}")

    return {
        "path": str(path),
        "exists": True,
        "size_mb": path.stat().st_size // (1024 * 1024),
    }


def validate_transcript_file(path: Path) -> dict[str, Any]:
    """Validate a transcript JSON file exists and is non-empty.

    Raises:
        ValidationError: If missing, not a file, not .json, or empty
    """
    result = _validate_file(path)
    if path.suffix.lower() != ".json":
        raise ValidationError(f"Transcript must be a .json file: {path.name}")
    if path.stat().st_size == 0:
        raise ValidationError(f"Transcript is empty: {path.name}")
    return result


def validate_audio_file(path: Path) -> dict[str, Any]:
    """Validate an audio (or video) file exists and has a known extension.

    Raises:
        ValidationError: If missing, not a file, or of an unsupported type
    """
    result = _validate_file(path)
    if path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValidationError(
            f"Unsupported audio type '{path.suffix}'. "
            f"Supported: {', '.join(sorted(AUDIO_EXTENSIONS))}"
        )
    return result


def _format_talk_length(seconds: float) -> str:
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


def validate_talk_duration(duration_seconds: float) -> dict[str, Any]:
    """Check a talk's length and return warnings.

    Args:
        duration_seconds: Timeline length in seconds

    Returns:
        Dict with 'valid', 'warnings', 'duration_formatted', 'duration_seconds'
    """
    warnings = []
    if duration_seconds <= 0:
        warnings.append("Transcript has no timed words. The report will be empty.")
    elif duration_seconds < SHORT_TALK_SECONDS:
        warnings.append(
            "Talk is very short (<30 seconds). Pace and pitch statistics will be noisy."
        )
    elif duration_seconds > LONG_TALK_SECONDS:
        warnings.append("Talk is very long (>2 hours). Audio analysis may take significant time.")

    return {
        "valid": True,
        "warnings": warnings,
        "duration_formatted": _format_talk_length(max(0.0, duration_seconds)),
        "duration_seconds": duration_seconds,
    }


def check_ollama_running(model: str | None = None) -> dict[str, Any]:
    """Ask the local Ollama server which models it has.

    Args:
        model: Optional model name that should be among them

    Returns:
        Dict with 'running', 'model_available', and 'models' or 'error'
    """
    import json
    import urllib.error
    import urllib.request

    from cadence.llm.client import LOCAL_API_BASES

    url = f"{LOCAL_API_BASES['ollama']}/api/tags"
    try:
        with urllib.request.urlopen(url, timeout=5) as response:
            data = json.loads(response.read().decode())
    except (urllib.error.URLError, TimeoutError):
        return {
            "running": False,
            "model_available": False,
            "error": "Ollama server not running. Start with: ollama serve",
        }
    except json.JSONDecodeError:
        return {"running": False, "model_available": False, "error": "Unexpected Ollama response"}

    models = [m.get("name", "") for m in data.get("models", [])]
    return {
        "running": True,
        "model_available": model is None or any(model in name for name in models),
        "models": models,
    }
