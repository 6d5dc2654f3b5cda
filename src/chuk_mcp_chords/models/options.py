"""
Option models - the knobs callers turn on rendering and voice leading.

All options accept snake_case or the camelCase names used by JSON clients
(baseOctave, maxVoices, keepCommonTones, ...).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, model_validator

from chuk_mcp_chords.constants import (
    DEFAULT_CHANNEL,
    DEFAULT_MAX_VOICES,
    DEFAULT_TONE_PRIORITY,
    DEFAULT_VELOCITY,
    MIDI_CHANNEL_MAX,
    MIDI_CHANNEL_MIN,
    MIDI_MAX,
    MIDI_MIN,
    BassStrategy,
    TonePriorityDegree,
    VoicingType,
)
from chuk_mcp_chords.core.palette import MaxExtension, PaletteColor

MidiValue = Annotated[int, Field(ge=MIDI_MIN, le=MIDI_MAX)]


class RenderOptions(BaseModel):
    """Options for plain rendering (no voice leading)."""

    base_octave: int = Field(..., alias="baseOctave", description="Octave of the lowest voice")
    bass_octave: int | None = Field(
        None, alias="bassOctave", description="Bass octave (default: base_octave - 1)"
    )
    voicing: VoicingType = Field(VoicingType.CLOSE, description="close, drop2 or drop3")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def effective_bass_octave(self) -> int:
        return self.base_octave - 1 if self.bass_octave is None else self.bass_octave


class VoiceLeadOptions(BaseModel):
    """
    Options for sequence-aware voice leading.

    max_voices fixes the number of upper voices for the whole sequence;
    tone_priority decides which degrees survive (or get doubled) to fit it.
    """

    base_octave: int = Field(..., alias="baseOctave", description="Octave of the first voicing")
    max_voices: int = Field(
        DEFAULT_MAX_VOICES, ge=1, alias="maxVoices", description="Upper voices per chord"
    )
    keep_common_tones: bool = Field(
        False, alias="keepCommonTones", description="Hold shared pitch classes in place"
    )
    tone_priority: tuple[TonePriorityDegree, ...] = Field(
        DEFAULT_TONE_PRIORITY,
        alias="tonePriority",
        description="Degrees from most to least essential",
    )
    min_note: MidiValue = Field(MIDI_MIN, alias="minNote", description="Lowest MIDI note")
    max_note: MidiValue = Field(MIDI_MAX, alias="maxNote", description="Highest MIDI note")
    bass_octave: int | None = Field(
        None, alias="bassOctave", description="Bass octave (default: base_octave - 1)"
    )
    bass_strategy: BassStrategy = Field(
        BassStrategy.FOLLOW_ROOT, alias="bassStrategy", description="followRoot or minimalMotion"
    )
    voicing: VoicingType = Field(
        VoicingType.CLOSE, description="Spacing of the first chord (close, drop2, drop3)"
    )
    allow_voice_crossing: bool = Field(
        False, alias="allowVoiceCrossing", description="Allow voices to pass each other"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="after")
    def _check_range(self) -> VoiceLeadOptions:
        if self.min_note > self.max_note:
            raise ValueError(f"min_note ({self.min_note}) must be <= max_note ({self.max_note})")
        return self

    @property
    def effective_bass_octave(self) -> int:
        return self.base_octave - 1 if self.bass_octave is None else self.bass_octave


class PerformanceOptions(BaseModel):
    """Options for flattening MIDI chords into performance output."""

    velocity: MidiValue = Field(DEFAULT_VELOCITY, description="Velocity for every note")
    velocities: list[MidiValue] | None = Field(None, description="Per-note velocities")
    start_times: list[float] | None = Field(
        None, alias="startTimes", description="Start beat for each chord"
    )
    duration: float | None = Field(None, gt=0, description="Duration in beats for every chord")
    channel: int = Field(
        DEFAULT_CHANNEL, ge=MIDI_CHANNEL_MIN, le=MIDI_CHANNEL_MAX, description="MIDI channel 1-16"
    )

    model_config = {"frozen": True, "populate_by_name": True}


class PaletteOptions(BaseModel):
    """Options for building a key's chord palette."""

    color: PaletteColor = Field("triad", description="triad, seventh or extended")
    max_extension: MaxExtension = Field(
        9, alias="maxExtension", description="Highest extension for 'extended'"
    )
    include_dominants: bool = Field(
        False, alias="includeDominants", description="Append secondary dominants"
    )
    include_borrowed: bool = Field(
        False, alias="includeBorrowed", description="Append borrowed chords"
    )

    model_config = {"frozen": True, "populate_by_name": True}
