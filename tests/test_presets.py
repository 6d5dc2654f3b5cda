"""
Tests for voice-leading presets.

Tests cover:
- VoicingPreset model and option overrides
- PresetLoader discovery, precedence and caching
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from chuk_mcp_chords.constants import BassStrategy, VoicingType
from chuk_mcp_chords.models import VoiceLeadOptions
from chuk_mcp_chords.models.preset import PresetMetadata, VoicingPreset
from chuk_mcp_chords.presets import PresetLoader
from chuk_mcp_chords.voicing import voice_lead

PROJECT_PRESET = """\
schema: preset/v1
name: close-piano
description: Project override
options:
  baseOctave: 5
  maxVoices: 3
"""


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    path = temp_dir / "presets"
    path.mkdir()
    return path


@pytest.fixture
def loader(presets_library_path: Path, project_dir: Path) -> PresetLoader:
    return PresetLoader(library_path=presets_library_path, project_path=project_dir)


class TestVoicingPreset:
    """Tests for the preset model."""

    def test_from_yaml_shape(self) -> None:
        """camelCase options and the schema key are accepted."""
        preset = VoicingPreset.model_validate(
            {
                "schema": "preset/v1",
                "name": "test",
                "options": {"baseOctave": 3, "keepCommonTones": True},
            }
        )
        assert preset.schema_version == "preset/v1"
        assert preset.options.base_octave == 3
        assert preset.options.keep_common_tones is True

    def test_options_required(self) -> None:
        """A preset without base_octave is invalid."""
        with pytest.raises(ValidationError):
            VoicingPreset.model_validate({"name": "test", "options": {}})

    def test_to_options_overrides(self) -> None:
        """Overrides replace single fields and keep the rest."""
        preset = VoicingPreset(
            name="test",
            options=VoiceLeadOptions(base_octave=4, voicing=VoicingType.DROP2, max_voices=5),
        )
        options = preset.to_options(base_octave=3)
        assert options.base_octave == 3
        assert options.voicing == VoicingType.DROP2
        assert options.max_voices == 5
        assert preset.to_options() is preset.options

    def test_to_options_revalidates(self) -> None:
        """Overrides go through validation."""
        preset = VoicingPreset(name="test", options=VoiceLeadOptions(base_octave=4))
        with pytest.raises(ValidationError):
            preset.to_options(max_voices=0)

    def test_metadata(self) -> None:
        """Metadata summarises the options."""
        preset = VoicingPreset(name="pad", options=VoiceLeadOptions(base_octave=3, max_voices=5))
        meta = PresetMetadata.from_preset(preset)
        assert (meta.name, meta.max_voices, meta.voicing) == ("pad", 5, "close")


class TestPresetLoader:
    """Tests for PresetLoader."""

    def test_list_library_presets(self, loader: PresetLoader) -> None:
        """Built-in presets are listed by name."""
        names = [p.name for p in loader.list_presets()]
        assert names == sorted(names)
        assert {"close-piano", "jazz-piano", "pad", "triads"} <= set(names)

    def test_get_preset(self, loader: PresetLoader) -> None:
        """jazz-piano is drop2 with a minimal-motion bass."""
        preset = loader.get_preset("jazz-piano")
        assert preset is not None
        assert preset.options.voicing == VoicingType.DROP2
        assert preset.options.bass_strategy == BassStrategy.MINIMAL_MOTION
        assert preset.options.tone_priority[:2] == ("3", "7")

    def test_get_missing(self, loader: PresetLoader) -> None:
        """Unknown names return None."""
        assert loader.get_preset("nonexistent") is None

    def test_project_overrides_library(self, loader: PresetLoader, project_dir: Path) -> None:
        """A project preset with a library name wins."""
        (project_dir / "close-piano.yaml").write_text(PROJECT_PRESET)

        preset = loader.get_preset("close-piano")
        assert preset is not None
        assert preset.description == "Project override"

        listed = {p.name: p for p in loader.list_presets()}
        assert listed["close-piano"].max_voices == 3

    def test_cache(self, loader: PresetLoader, project_dir: Path) -> None:
        """Loaded presets are cached until cleared."""
        first = loader.get_preset("triads")
        (project_dir / "triads.yaml").write_text(PROJECT_PRESET.replace("close-piano", "triads"))
        assert loader.get_preset("triads") is first

        loader.clear_cache()
        reloaded = loader.get_preset("triads")
        assert reloaded is not None
        assert reloaded.description == "Project override"

    def test_invalid_file_skipped(
        self, loader: PresetLoader, project_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Broken YAML is logged and skipped."""
        (project_dir / "broken.yaml").write_text("name: broken\noptions: [not, a, mapping\n")
        (project_dir / "incomplete.yaml").write_text("name: incomplete\n")

        with caplog.at_level(logging.WARNING, logger="chuk_mcp_chords.presets.loader"):
            names = [p.name for p in loader.list_presets()]

        assert "broken" not in names
        assert "incomplete" not in names
        assert "Skipping preset" in caplog.text
        assert loader.get_preset("incomplete") is None

    def test_missing_project_dir(self, presets_library_path: Path, temp_dir: Path) -> None:
        """A missing project directory is not an error."""
        loader = PresetLoader(library_path=presets_library_path, project_path=temp_dir / "none")
        assert loader.get_preset("pad") is not None

    @pytest.mark.parametrize("name", ["close-piano", "jazz-piano", "pad", "triads"])
    def test_library_presets_voice_ii_v_i(self, loader: PresetLoader, name: str, ii_v_i) -> None:
        """Every built-in preset voices a ii-V-I inside its range."""
        preset = loader.get_preset(name)
        assert preset is not None
        options = preset.options
        for chord in voice_lead(ii_v_i, options):
            assert len(chord.voices) == options.max_voices
            assert all(options.min_note <= n <= options.max_note for n in chord.notes)
