"""
Constants and enums for the chord system.

No magic strings - use enums and Literal types for constrained values.
"""

from enum import Enum
from typing import Literal


class ChordErrorCode(str, Enum):
    """
    Validation failure codes for chord specifications.

    Exactly one code is reported per failed validation.
    """

    DUPLICATE_TENSION = "DUPLICATE_TENSION"
    DUPLICATE_OMIT = "DUPLICATE_OMIT"
    BASS_EQUALS_ROOT = "BASS_EQUALS_ROOT"
    TENSION_DUPLICATES_CHORD_TONE = "TENSION_DUPLICATES_CHORD_TONE"
    INVALID_TENSION_FOR_QUALITY = "INVALID_TENSION_FOR_QUALITY"
    CANNOT_OMIT_DEFINING_TONE = "CANNOT_OMIT_DEFINING_TONE"


class ParseErrorCode(str, Enum):
    """Failure codes for chord symbol and note string parsing."""

    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_ROOT = "INVALID_ROOT"
    INVALID_QUALITY = "INVALID_QUALITY"
    INVALID_TENSION = "INVALID_TENSION"
    INVALID_OMIT = "INVALID_OMIT"
    MISSING_BASS_NOTE = "MISSING_BASS_NOTE"
    INVALID_BASS_NOTE = "INVALID_BASS_NOTE"
    INVALID_NOTE = "INVALID_NOTE"


class BassStrategy(str, Enum):
    """How the bass note moves between chords."""

    FOLLOW_ROOT = "followRoot"  # Root (or slash bass) at the bass octave
    MINIMAL_MOTION = "minimalMotion"  # Nearest octave to the previous bass


class VoicingType(str, Enum):
    """Spacing applied to a close-position stack."""

    CLOSE = "close"
    DROP2 = "drop2"  # Second-highest voice down an octave
    DROP3 = "drop3"  # Third-highest voice down an octave


class SpellingStrategy(str, Enum):
    """Accidental preference when spelling a bare pitch class."""

    SHARPS = "sharps"
    FLATS = "flats"


# Degree names used in tone priority lists and voice analysis
TonePriorityDegree = Literal["root", "3", "5", "7", "9", "11", "13"]

# 5th is least essential, dropped first
DEFAULT_TONE_PRIORITY: tuple[TonePriorityDegree, ...] = ("root", "3", "7", "9", "11", "13", "5")

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
MIDI_CHANNEL_MIN = 1
MIDI_CHANNEL_MAX = 16

DEFAULT_MAX_VOICES = 4
DEFAULT_VELOCITY = 100
DEFAULT_CHANNEL = 1

# Beats per chord when exporting performance output without timing
DEFAULT_CHORD_BEATS = 4.0


class ErrorMessages:
    """Standardized error messages."""

    DUPLICATE_TENSION = "Duplicate tension: {tension}"
    DUPLICATE_OMIT = "Duplicate omit: {omit}"
    BASS_EQUALS_ROOT = "Bass note cannot be the same as root"
    TENSION_DUPLICATES_CHORD_TONE = (
        "Tension {tension} conflicts with existing {degree} in {quality} chord"
    )
    INVALID_TENSION_FOR_QUALITY = "Tensions not allowed on {quality} chords"
    CANNOT_OMIT_THIRD = "Cannot omit 3rd from {quality} chord - it defines the quality"
    CANNOT_OMIT_FIFTH = "Cannot omit 5th from {quality} chord - it defines the quality"
    UNKNOWN_DEGREE = "Unknown interval degree: {degree}"
    UNKNOWN_SCALE = "Unknown scale type: '{scale}'. Valid: {valid}"
    PRESET_NOT_FOUND = "Preset '{name}' not found."
    NO_CANDIDATE = "No MIDI candidate for pitch class {pitch_class} in range {low}-{high}"
    VOICES_DO_NOT_FIT = "Cannot fit {count} unique voices into range {low}-{high}"
