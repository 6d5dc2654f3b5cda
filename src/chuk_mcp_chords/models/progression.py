"""
Progression and melody models - timed input and clip-note output.

Chords in a progression are harmonic state changes; activations are the
rhythmic triggers that sound whatever chord is active at that moment.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from chuk_mcp_chords.constants import DEFAULT_MAX_VOICES, DEFAULT_VELOCITY
from chuk_mcp_chords.core.chord import ChordSpec
from chuk_mcp_chords.core.pitch import NoteName
from chuk_mcp_chords.core.symbols import parse_chord_symbol


class ChordEvent(BaseModel):
    """
    A chord becoming active at a beat.

    The chord may be given as a ChordSpec, a symbol ('Dm7') or a dict
    ({'root': 'D', 'quality': 'min7'}).
    """

    chord: ChordSpec = Field(..., description="Chord spec or symbol")
    onset_time: float = Field(..., ge=0, description="Beat where the chord takes over")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("chord", mode="before")
    @classmethod
    def _coerce_chord(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_chord_symbol(v)
        if isinstance(v, dict):
            return ChordSpec.from_dict(v)
        return v


class Activation(BaseModel):
    """A rhythmic trigger: sound the active chord for a duration."""

    onset_time: float = Field(..., ge=0, description="Trigger beat")
    duration: float = Field(..., gt=0, description="Length in beats")

    model_config = {"frozen": True}


class ClipNote(BaseModel):
    """A single note in a rendered clip."""

    pitch: int = Field(..., ge=0, le=127, description="MIDI note number")
    start_time: float = Field(..., ge=0, description="Start beat")
    duration: float = Field(..., gt=0, description="Length in beats")
    velocity: int = Field(DEFAULT_VELOCITY, ge=0, le=127, description="MIDI velocity")

    model_config = {"frozen": True}


class ProgressionInput(BaseModel):
    """Input for rendering a progression."""

    chords: list[ChordEvent] = Field(..., description="Chord changes")
    activations: list[Activation] = Field(..., description="Rhythmic triggers")
    base_octave: int = Field(4, alias="baseOctave")
    max_voices: int = Field(DEFAULT_MAX_VOICES, ge=1, alias="maxVoices")
    velocity: int = Field(DEFAULT_VELOCITY, ge=0, le=127)

    model_config = {"populate_by_name": True}


class RenderedClip(BaseModel):
    """Rendered notes plus clip length."""

    notes: list[ClipNote] = Field(default_factory=list)
    total_beats: float = Field(0.0, ge=0)
    warnings: list[str] = Field(default_factory=list)


class MelodicNoteEvent(BaseModel):
    """A melody note given as a string ('C4', 'F#3', 'Bb2')."""

    note: str = Field(..., description="Note string")
    start_time: float = Field(..., ge=0, description="Start beat")
    duration: float = Field(..., gt=0, description="Length in beats")
    velocity: int = Field(DEFAULT_VELOCITY, ge=1, le=127, description="MIDI velocity")

    model_config = {"frozen": True}


class ScaleSpec(BaseModel):
    """A scale to check melody notes against."""

    root: NoteName = Field(..., description="Scale root")
    type: str = Field("major", description="Scale type name")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("root", mode="before")
    @classmethod
    def _coerce_root(cls, v: Any) -> Any:
        if isinstance(v, str):
            return NoteName.parse(v)
        return v


class MelodicLineInput(BaseModel):
    """Input for rendering a melodic line."""

    notes: list[MelodicNoteEvent] = Field(..., description="Melody notes")
    scale: ScaleSpec | None = Field(None, description="Optional scale for warnings")
