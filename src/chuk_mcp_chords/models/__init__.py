"""
Pydantic models for the chord system.

This module provides:
- VoiceLeadOptions / RenderOptions: Voicing configuration
- PerformanceOptions: Velocity, timing and channel for output
- PaletteOptions: Key palette configuration
- ChordEvent / Activation / ClipNote: Timed progression input and output
- MelodicNoteEvent / ScaleSpec: Melodic line input
"""

from chuk_mcp_chords.models.options import (
    PaletteOptions,
    PerformanceOptions,
    RenderOptions,
    VoiceLeadOptions,
)
from chuk_mcp_chords.models.progression import (
    Activation,
    ChordEvent,
    ClipNote,
    MelodicLineInput,
    MelodicNoteEvent,
    ProgressionInput,
    RenderedClip,
    ScaleSpec,
)

__all__ = [
    "Activation",
    "ChordEvent",
    "ClipNote",
    "MelodicLineInput",
    "MelodicNoteEvent",
    "PaletteOptions",
    "PerformanceOptions",
    "ProgressionInput",
    "RenderOptions",
    "RenderedClip",
    "ScaleSpec",
    "VoiceLeadOptions",
]
