"""Tests for cadence.config module."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from cadence.config import (
    BUILTIN_PROFILES,
    AudioSettings,
    CadenceConfig,
    FillerSettings,
    LLMSettings,
    SegmentSettings,
    create_default_config,
    load_config,
    load_profile,
    merge_config,
    resolve_config,
    write_config,
)
from cadence.exceptions import ConfigError


class TestSettings:
    def test_defaults(self) -> None:
        config = CadenceConfig()
        assert config.profile == "presentation"
        assert config.pace.window_seconds == 30.0
        assert config.pace.step_seconds == 10.0
        assert config.pauses.min_duration_seconds == 0.5
        assert config.segments.target_segment_seconds == 45.0
        assert config.segments.labeler == "heuristic"
        assert config.audio.silence_floor_db == -96.0
        assert config.audio.pitch_reference_hz == 55.0
        assert "you know" in config.fillers.lexicon

    def test_non_positive_window_raises(self) -> None:
        with pytest.raises(ValueError):
            CadenceConfig(pace={"window_seconds": 0})

    def test_long_filler_phrase_raises(self) -> None:
        with pytest.raises(ValueError):
            FillerSettings(lexicon=["um", "at the end of"])

    def test_empty_filler_phrase_raises(self) -> None:
        with pytest.raises(ValueError):
            FillerSettings(lexicon=["..."])

    def test_invalid_labeler_raises(self) -> None:
        with pytest.raises(ValueError):
            SegmentSettings(labeler="oracle")

    def test_pitch_bounds_ordered(self) -> None:
        with pytest.raises(ValueError):
            AudioSettings(pitch_min_hz=400.0, pitch_max_hz=300.0)

    def test_invalid_privacy_mode_raises(self) -> None:
        with pytest.raises(ValueError):
            LLMSettings(privacy_mode="public")

    def test_invalid_backend_raises(self) -> None:
        with pytest.raises(ValueError):
            LLMSettings(backend="mystery")


class TestProfiles:
    def test_builtin_profiles(self) -> None:
        assert set(BUILTIN_PROFILES) == {"presentation", "pitch", "lecture"}

    def test_load_profile_is_copy(self) -> None:
        profile = load_profile("lecture")
        profile["pace"]["window_seconds"] = 1.0
        assert BUILTIN_PROFILES["lecture"]["pace"]["window_seconds"] == 60.0

    def test_unknown_profile_raises(self) -> None:
        with pytest.raises(ValueError):
            load_profile("keynote")

    def test_custom_profile_dir(self, tmp_path: Path) -> None:
        profiles = tmp_path / "profiles"
        profiles.mkdir()
        (profiles / "keynote.yaml").write_text("pace:\n  window_seconds: 15\n")
        assert load_profile("keynote", profiles) == {"pace": {"window_seconds": 15}}


class TestMergeConfig:
    def test_nested_merge(self) -> None:
        profile = {"pace": {"window_seconds": 60.0, "step_seconds": 20.0}}
        project = {"pace": {"step_seconds": 5.0}}
        merged = merge_config(project, profile)
        assert merged == {"pace": {"window_seconds": 60.0, "step_seconds": 5.0}}

    def test_none_does_not_override(self) -> None:
        merged = merge_config({"pace": {"window_seconds": None}}, {"pace": {"window_seconds": 20.0}})
        assert merged["pace"]["window_seconds"] == 20.0

    def test_profile_untouched(self) -> None:
        profile = {"pauses": {"min_duration_seconds": 1.0}}
        merge_config({"pauses": {"min_duration_seconds": 2.0}}, profile)
        assert profile["pauses"]["min_duration_seconds"] == 1.0


class TestResolveConfig:
    def test_profile_applied(self) -> None:
        config = resolve_config({"profile": "pitch"})
        assert config.profile == "pitch"
        assert config.pace.window_seconds == 20.0
        assert config.segments.target_segment_seconds == 30.0

    def test_project_overrides_profile(self, sample_config_dict: dict) -> None:
        config = resolve_config(sample_config_dict)
        assert config.profile == "lecture"
        assert config.pace.window_seconds == 45.0
        assert config.pace.step_seconds == 20.0
        assert config.pauses.min_duration_seconds == 1.5
        assert config.fillers.lexicon == ["um", "uh", "you know"]

    def test_inherited_profile(self, tmp_path: Path) -> None:
        profiles = tmp_path / "profiles"
        profiles.mkdir()
        (profiles / "seminar.yaml").write_text(
            "inherits: lecture\npauses:\n  min_duration_seconds: 2.0\n"
        )
        config = resolve_config({"profile": "seminar"}, profiles)

        assert config.profile == "seminar"
        assert config.pauses.min_duration_seconds == 2.0
        assert config.pace.window_seconds == 60.0


class TestLoadConfig:
    def test_load_from_file(self, tmp_path: Path, sample_config_dict: dict) -> None:
        path = tmp_path / "cadence.yaml"
        with open(path, "w") as f:
            yaml.dump(sample_config_dict, f)

        config = load_config(path)
        assert config.profile == "lecture"
        assert config.pace.window_seconds == 45.0
        assert config.config_path == path

    def test_load_from_directory(self, tmp_path: Path) -> None:
        (tmp_path / "cadence.yaml").write_text("profile: pitch\n")
        config = load_config(tmp_path)
        assert config.profile == "pitch"

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "cadence.yaml"
        path.write_text("")
        assert load_config(path).profile == "presentation"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "cadence.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(path)


class TestCreateDefaultConfig:
    def test_spelled_out(self) -> None:
        config = create_default_config("lecture")
        assert config["profile"] == "lecture"
        assert config["pace"]["window_seconds"] == 60.0
        assert "config_path" not in config

    def test_write_and_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "cadence.yaml"
        write_config(create_default_config("pitch"), path)

        config = load_config(path)
        assert config.profile == "pitch"
        assert config.pauses.min_duration_seconds == 0.75
