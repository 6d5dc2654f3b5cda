"""
Scale primitives - ScaleType and Key.

Scales are pitch-class offsets from a root. Keys are a spelled root plus a
mode, and resolve scale degrees to correctly spelled notes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from chuk_mcp_chords.constants import ErrorMessages
from chuk_mcp_chords.core.intervals import INTERVAL_DEGREES, calculate_tone
from chuk_mcp_chords.core.pitch import NoteName, PitchClass


@dataclass(frozen=True)
class ScaleType:
    """
    A scale defined by semitone offsets from its root.

    A major scale is (0, 2, 4, 5, 7, 9, 11).

    Immutable and hashable.
    """

    offsets: tuple[int, ...]
    name: str = ""

    # Common scale types (defined after class)
    MAJOR: ClassVar[ScaleType]
    NATURAL_MINOR: ClassVar[ScaleType]
    HARMONIC_MINOR: ClassVar[ScaleType]
    MELODIC_MINOR: ClassVar[ScaleType]
    DORIAN: ClassVar[ScaleType]
    PHRYGIAN: ClassVar[ScaleType]
    LYDIAN: ClassVar[ScaleType]
    MIXOLYDIAN: ClassVar[ScaleType]
    LOCRIAN: ClassVar[ScaleType]

    def __post_init__(self) -> None:
        if not self.offsets or self.offsets[0] != 0:
            raise ValueError("Scale offsets must start at 0")
        if any(not 0 <= o < 12 for o in self.offsets):
            raise ValueError(f"Scale offsets must be within an octave, got {self.offsets}")

    def pitch_classes(self, root: NoteName) -> frozenset[PitchClass]:
        """Pitch classes of this scale on a root."""
        return frozenset(root.pitch_class.transpose(o) for o in self.offsets)

    def contains(self, note: NoteName, root: NoteName) -> bool:
        """Whether a note belongs to this scale on a root (enharmonics count)."""
        return note.pitch_class in self.pitch_classes(root)

    def __str__(self) -> str:
        return self.name or f"ScaleType({self.offsets})"

    @classmethod
    def get(cls, name: str) -> ScaleType:
        """
        Look up a scale type by name ('major', 'minor', 'dorian', ...).

        Raises:
            ValueError: If the name is unknown
        """
        try:
            return SCALE_TYPES[name.lower()]
        except KeyError:
            raise ValueError(
                ErrorMessages.UNKNOWN_SCALE.format(scale=name, valid=", ".join(SCALE_TYPES))
            ) from None


ScaleType.MAJOR = ScaleType((0, 2, 4, 5, 7, 9, 11), "major")
ScaleType.NATURAL_MINOR = ScaleType((0, 2, 3, 5, 7, 8, 10), "minor")
ScaleType.HARMONIC_MINOR = ScaleType((0, 2, 3, 5, 7, 8, 11), "harmonic_minor")
ScaleType.MELODIC_MINOR = ScaleType((0, 2, 3, 5, 7, 9, 11), "melodic_minor")
ScaleType.DORIAN = ScaleType((0, 2, 3, 5, 7, 9, 10), "dorian")
ScaleType.PHRYGIAN = ScaleType((0, 1, 3, 5, 7, 8, 10), "phrygian")
ScaleType.LYDIAN = ScaleType((0, 2, 4, 6, 7, 9, 11), "lydian")
ScaleType.MIXOLYDIAN = ScaleType((0, 2, 4, 5, 7, 9, 10), "mixolydian")
ScaleType.LOCRIAN = ScaleType((0, 1, 3, 5, 6, 8, 10), "locrian")

SCALE_TYPES: dict[str, ScaleType] = {
    s.name: s
    for s in (
        ScaleType.MAJOR,
        ScaleType.NATURAL_MINOR,
        ScaleType.HARMONIC_MINOR,
        ScaleType.MELODIC_MINOR,
        ScaleType.DORIAN,
        ScaleType.PHRYGIAN,
        ScaleType.LYDIAN,
        ScaleType.MIXOLYDIAN,
        ScaleType.LOCRIAN,
    )
}


def scale_pitch_classes(root: NoteName, scale_type: str) -> frozenset[PitchClass]:
    """Pitch classes for a root + named scale type."""
    return ScaleType.get(scale_type).pitch_classes(root)


def is_note_in_scale(note: NoteName, root: NoteName, scale_type: str) -> bool:
    """Check whether a note belongs to a named scale on a root."""
    return ScaleType.get(scale_type).contains(note, root)


class KeyMode(str, Enum):
    """Key modes used for chord palettes."""

    MAJOR = "major"
    MINOR = "minor"


@dataclass(frozen=True)
class Key:
    """
    A spelled tonic plus a mode.

    Examples:
        Key(NoteName.C, KeyMode.MAJOR) = C major
        Key(NoteName("E", -1), KeyMode.MINOR) = Eb minor
    """

    root: NoteName
    mode: KeyMode = KeyMode.MAJOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", KeyMode(self.mode))

    @property
    def scale(self) -> ScaleType:
        return ScaleType.MAJOR if self.mode == KeyMode.MAJOR else ScaleType.NATURAL_MINOR

    def degree_tone(self, degree: int) -> NoteName:
        """
        Spell scale degree 1-7 of this key.

        The letter always advances by the degree, so F major's 4th is Bb, not A#.
        """
        if not 1 <= degree <= 7:
            raise ValueError(f"Degree must be 1-7, got {degree}")
        offset = self.scale.offsets[degree - 1] - INTERVAL_DEGREES[degree][1]
        return calculate_tone(self.root, degree, offset)

    def get_tones(self) -> list[NoteName]:
        """All seven spelled scale tones."""
        return [self.degree_tone(d) for d in range(1, 8)]

    def __str__(self) -> str:
        return f"{self.root} {self.mode.value}"

    @classmethod
    def parse(cls, name: str) -> Key:
        """
        Parse a key from a string like 'C_major', 'D_minor', 'F#_minor'.

        Args:
            name: Key name with underscore separator

        Returns:
            Parsed Key object
        """
        parts = name.split("_")
        if len(parts) != 2:
            raise ValueError(f"Invalid key format: {name}. Expected 'root_mode' like 'C_major'")

        return cls(NoteName.parse(parts[0]), KeyMode(parts[1].lower()))
