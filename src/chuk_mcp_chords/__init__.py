"""
chuk-mcp-chords - chord spelling, assembly and voice leading.

Typical use:
    from chuk_mcp_chords import VoiceLeadOptions, parse_chord_symbol, voice_lead

    specs = [parse_chord_symbol(s) for s in ("Dm7", "G7", "Cmaj7")]
    voiced = voice_lead(specs, VoiceLeadOptions(base_octave=3))
"""

from chuk_mcp_chords.compiler import (
    PerformanceChord,
    performance_to_midi,
    render_chord_progression,
    render_melodic_line,
    to_performance_output,
)
from chuk_mcp_chords.core import (
    Chord,
    ChordParseError,
    ChordQuality,
    ChordSpec,
    ChordSpecError,
    Key,
    NoteName,
    PitchClass,
    build_chord,
    calculate_tone,
    chord_palette,
    format_symbol,
    parse_chord_symbol,
    parse_note_string,
    validate_chord_spec,
)
from chuk_mcp_chords.models import (
    PerformanceOptions,
    ProgressionInput,
    RenderOptions,
    VoiceLeadOptions,
)
from chuk_mcp_chords.voicing import (
    MidiChord,
    VoiceAnalysis,
    VoiceLeadingError,
    render_chord_sequence,
    voice_lead,
)

__version__ = "0.1.0"

__all__ = [
    "Chord",
    "ChordParseError",
    "ChordQuality",
    "ChordSpec",
    "ChordSpecError",
    "Key",
    "MidiChord",
    "NoteName",
    "PerformanceChord",
    "PerformanceOptions",
    "PitchClass",
    "ProgressionInput",
    "RenderOptions",
    "VoiceAnalysis",
    "VoiceLeadOptions",
    "VoiceLeadingError",
    "build_chord",
    "calculate_tone",
    "chord_palette",
    "format_symbol",
    "parse_chord_symbol",
    "parse_note_string",
    "performance_to_midi",
    "render_chord_progression",
    "render_chord_sequence",
    "render_melodic_line",
    "to_performance_output",
    "validate_chord_spec",
    "voice_lead",
]
