"""
Preset models - named voice-leading configurations.

A preset is a reusable VoiceLeadOptions bundle ('jazz-piano', 'pad', ...)
loaded from YAML. Callers can override any option when applying one.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from chuk_mcp_chords.models.options import VoiceLeadOptions


class VoicingPreset(BaseModel):
    """A named set of voice-leading options."""

    schema_version: str = Field("preset/v1", alias="schema")
    name: str = Field(..., description="Preset name")
    description: str = Field("", description="What the preset sounds like")
    options: VoiceLeadOptions = Field(..., description="Voice-leading options")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_options(self, **overrides: Any) -> VoiceLeadOptions:
        """
        Options with overrides applied (snake_case names).

        Overrides are re-validated, so an out-of-range value still fails.
        """
        if not overrides:
            return self.options
        return VoiceLeadOptions.model_validate({**self.options.model_dump(), **overrides})


class PresetMetadata(BaseModel):
    """Lightweight metadata for listing presets."""

    name: str
    description: str
    max_voices: int
    voicing: str

    model_config = {"frozen": True}

    @classmethod
    def from_preset(cls, preset: VoicingPreset) -> PresetMetadata:
        """Create metadata from a preset."""
        return cls(
            name=preset.name,
            description=preset.description,
            max_voices=preset.options.max_voices,
            voicing=preset.options.voicing.value,
        )
