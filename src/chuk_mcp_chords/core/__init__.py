"""
Core chord primitives - the spelling layer.

These are the invariants everything else composes on:
- NoteName: A spelled note (letter + accidental, double-flat to double-sharp)
- PitchClass: The 12 chromatic pitch classes (0-11)
- calculate_tone: Root + interval degree -> correctly spelled note
- ChordSpec / Chord: Chord requests and their built, spelled form
- validate_chord_spec / build_chord: First-error-wins validation and assembly
- parse_chord_symbol: Chord symbols back into ChordSpecs
- ScaleType / Key / chord_palette: Scales, keys and their chords
"""

from chuk_mcp_chords.core.chord import (
    Chord,
    ChordError,
    ChordQuality,
    ChordSpec,
    ChordSpecError,
    OmitDegree,
    Result,
    Tension,
    build_chord,
    chord_intervals,
    format_symbol,
    validate_chord_spec,
)
from chuk_mcp_chords.core.intervals import (
    DEGREE_ORDER,
    INTERVAL_DEGREES,
    calculate_tone,
    degree_from_name,
    degree_name,
)
from chuk_mcp_chords.core.palette import chord_palette, get_diatonic_chords
from chuk_mcp_chords.core.pitch import MidiSpelling, NoteName, PitchClass, midi_to_spelling
from chuk_mcp_chords.core.scale import Key, KeyMode, ScaleType, is_note_in_scale, scale_pitch_classes
from chuk_mcp_chords.core.symbols import (
    ChordParseError,
    ParsedNote,
    parse_chord_symbol,
    parse_note_string,
)

__all__ = [
    # Pitch
    "NoteName",
    "PitchClass",
    "MidiSpelling",
    "midi_to_spelling",
    # Intervals
    "INTERVAL_DEGREES",
    "DEGREE_ORDER",
    "calculate_tone",
    "degree_name",
    "degree_from_name",
    # Chord
    "ChordQuality",
    "Tension",
    "OmitDegree",
    "ChordSpec",
    "Chord",
    "ChordError",
    "ChordSpecError",
    "Result",
    "validate_chord_spec",
    "build_chord",
    "chord_intervals",
    "format_symbol",
    # Parsing
    "ChordParseError",
    "ParsedNote",
    "parse_chord_symbol",
    "parse_note_string",
    # Scale
    "ScaleType",
    "Key",
    "KeyMode",
    "scale_pitch_classes",
    "is_note_in_scale",
    "chord_palette",
    "get_diatonic_chords",
]
