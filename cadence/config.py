"""
cadence.config - YAML config loading, profile merging, validation.

Handles loading cadence.yaml, applying profile defaults, and validating
every analysis parameter.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from cadence.analyze.fillers import DEFAULT_FILLER_LEXICON, MAX_PHRASE_WORDS, normalize_phrase

CONFIG_FILENAME = "cadence.yaml"


class PaceSettings(BaseModel):
    """Sliding pace window."""

    window_seconds: float = Field(default=30.0, gt=0.0)
    step_seconds: float = Field(default=10.0, gt=0.0)


class FillerSettings(BaseModel):
    """Filler lexicon and phrase matching."""

    lexicon: list[str] = Field(default_factory=lambda: list(DEFAULT_FILLER_LEXICON))
    max_phrase_gap_seconds: float | None = Field(default=0.5, ge=0.0)

    @field_validator("lexicon")
    @classmethod
    def validate_lexicon(cls, v: list[str]) -> list[str]:
        for phrase in v:
            tokens = normalize_phrase(phrase)
            if not tokens:
                raise ValueError(f"Filler phrase {phrase!r} has no words")
            if len(tokens) > MAX_PHRASE_WORDS:
                raise ValueError(
                    f"Filler phrase {phrase!r} must be 1-{MAX_PHRASE_WORDS} words"
                )
        return v


class PauseSettings(BaseModel):
    """Pause threshold and context."""

    min_duration_seconds: float = Field(default=0.5, gt=0.0)
    context_words: int = Field(default=4, ge=0)


class SegmentSettings(BaseModel):
    """Content segmentation and topic labeling."""

    target_segment_seconds: float = Field(default=45.0, gt=0.0)
    labeler: str = "heuristic"

    @field_validator("labeler")
    @classmethod
    def validate_labeler(cls, v: str) -> str:
        valid = {"heuristic", "llm"}
        if v not in valid:
            raise ValueError(f"labeler must be one of: {valid}")
        return v


class AudioSettings(BaseModel):
    """Audio decoding and energy/pitch windows."""

    enabled: bool = True
    sample_rate: int = Field(default=16000, gt=0)
    window_seconds: float = Field(default=1.0, gt=0.0)
    pitch_reference_hz: float = Field(default=55.0, gt=0.0)
    pitch_min_hz: float = Field(default=50.0, gt=0.0)
    pitch_max_hz: float = Field(default=600.0, gt=0.0)
    pitch_hop_seconds: float = Field(default=0.01, gt=0.0)
    silence_floor_db: float = Field(default=-96.0, le=0.0)
    max_workers: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def validate_pitch_range(self) -> AudioSettings:
        if self.pitch_min_hz >= self.pitch_max_hz:
            raise ValueError("pitch_min_hz must be below pitch_max_hz")
        return self


class LLMSettings(BaseModel):
    """Backend used by the LLM topic labeler."""

    backend: str = "ollama"
    model: str = "llama3.1:8b-instruct-q4_K_M"
    privacy_mode: str = "local"
    timeout: int = Field(default=60, gt=0)
    max_retries: int = Field(default=3, ge=1)

    @field_validator("privacy_mode")
    @classmethod
    def validate_privacy_mode(cls, v: str) -> str:
        valid = {"local", "hybrid"}
        if v not in valid:
            raise ValueError(f"privacy_mode must be one of: {valid}")
        return v

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        valid = {"ollama", "lmstudio", "claude", "openai"}
        if v not in valid:
            raise ValueError(f"backend must be one of: {valid}")
        return v


class CadenceConfig(BaseModel):
    """Resolved analysis configuration."""

    profile: str = "presentation"

    pace: PaceSettings = Field(default_factory=PaceSettings)
    fillers: FillerSettings = Field(default_factory=FillerSettings)
    pauses: PauseSettings = Field(default_factory=PauseSettings)
    segments: SegmentSettings = Field(default_factory=SegmentSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)

    config_path: Path | None = None


BUILTIN_PROFILES: dict[str, dict[str, Any]] = {
    "presentation": {},
    "pitch": {
        "pace": {"window_seconds": 20.0, "step_seconds": 5.0},
        "pauses": {"min_duration_seconds": 0.75, "context_words": 4},
        "segments": {"target_segment_seconds": 30.0},
    },
    "lecture": {
        "pace": {"window_seconds": 60.0, "step_seconds": 20.0},
        "pauses": {"min_duration_seconds": 1.5, "context_words": 5},
        "segments": {"target_segment_seconds": 120.0},
        "audio": {"window_seconds": 30.0},
    },
}


def load_profile(name: str, profiles_dir: Path | None = None) -> dict[str, Any]:
    """Load a profile by name, checking custom profiles first."""
    if profiles_dir and profiles_dir.exists():
        profile_file = profiles_dir / f"{name}.yaml"
        if profile_file.exists():
            with open(profile_file) as f:
                return yaml.safe_load(f) or {}
    if name in BUILTIN_PROFILES:
        return _deep_copy(BUILTIN_PROFILES[name])
    raise ValueError(f"Unknown profile: {name}")


def _deep_copy(data: dict[str, Any]) -> dict[str, Any]:
    return {k: _deep_copy(v) if isinstance(v, dict) else v for k, v in data.items()}


def merge_config(project_config: dict[str, Any], profile: dict[str, Any]) -> dict[str, Any]:
    """Merge project config over profile defaults, section by section.

    Nested sections are merged key by key; project values win and None
    values never override.
    """
    merged = _deep_copy(profile)
    for key, value in project_config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(value, merged[key])
        elif value is not None:
            merged[key] = value
    return merged


def resolve_config(
    raw_config: dict[str, Any],
    profiles_dir: Path | None = None,
) -> CadenceConfig:
    """Apply the named profile (and its parent) under raw_config and validate."""
    profile_name = raw_config.get("profile") or "presentation"
    profile = load_profile(profile_name, profiles_dir)

    if "inherits" in profile:
        parent = load_profile(profile.pop("inherits"), profiles_dir)
        profile = merge_config(profile, parent)

    merged = merge_config(raw_config, profile)
    merged["profile"] = profile_name
    return CadenceConfig(**merged)


def load_config(path: Path) -> CadenceConfig:
    """Load and validate configuration from a YAML file or its directory."""
    from cadence.exceptions import ConfigError

    config_file = path / CONFIG_FILENAME if path.is_dir() else path
    if not config_file.exists():
        raise FileNotFoundError(f"No config file found at {config_file}")

    with open(config_file) as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ConfigError(f"{config_file} must contain a YAML mapping")

    profiles_dir = config_file.parent / "profiles"
    config = resolve_config(raw_config, profiles_dir if profiles_dir.exists() else None)
    return config.model_copy(update={"config_path": config_file})


def create_default_config(profile: str = "presentation") -> dict[str, Any]:
    """Create a fully spelled-out config dict for a profile."""
    config = resolve_config({"profile": profile})
    return config.model_dump(exclude={"config_path"})


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
