"""
Pitch primitives - NoteName and PitchClass.

These are the foundational types for all pitch-related operations.
NoteName is a spelled note (letter + accidental), so C# and Db are distinct.
PitchClass represents the 12 chromatic pitches (octave-independent),
where enharmonic spellings collapse onto one value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from chuk_mcp_chords.constants import SpellingStrategy

LETTERS: tuple[str, ...] = ("C", "D", "E", "F", "G", "A", "B")

LETTER_SEMITONES: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

_ACCIDENTAL_SYMBOLS: dict[int, str] = {-2: "bb", -1: "b", 0: "", 1: "#", 2: "##"}


@dataclass(frozen=True)
class NoteName:
    """
    A spelled note: letter plus accidental.

    Accidental ranges from -2 (double flat) to 2 (double sharp).
    Immutable and hashable; equality is by spelling, not by pitch.
    """

    letter: str
    accidental: int = 0

    # Naturals (defined after class)
    C: ClassVar[NoteName]
    D: ClassVar[NoteName]
    E: ClassVar[NoteName]
    F: ClassVar[NoteName]
    G: ClassVar[NoteName]
    A: ClassVar[NoteName]
    B: ClassVar[NoteName]

    def __post_init__(self) -> None:
        """Validate letter and accidental."""
        if self.letter not in LETTER_SEMITONES:
            raise ValueError(f"Letter must be one of A-G, got {self.letter!r}")
        if not -2 <= self.accidental <= 2:
            raise ValueError(f"Accidental must be -2..2, got {self.accidental}")

    @property
    def pitch_class(self) -> PitchClass:
        """Octave-independent pitch of this spelling."""
        return PitchClass((LETTER_SEMITONES[self.letter] + self.accidental) % 12)

    def to_midi(self, octave: int) -> int:
        """
        Convert to MIDI note number. C4 = 60.

        The accidental is applied directly, so spellings can cross the
        octave boundary: Cb4 = 59, B#4 = 72.
        """
        return 12 + octave * 12 + LETTER_SEMITONES[self.letter] + self.accidental

    def same_pitch(self, other: NoteName) -> bool:
        """True if both spellings sound the same pitch class."""
        return self.pitch_class == other.pitch_class

    def __str__(self) -> str:
        return f"{self.letter}{_ACCIDENTAL_SYMBOLS[self.accidental]}"

    @classmethod
    def parse(cls, name: str) -> NoteName:
        """Parse a spelling like 'C', 'F#', 'Bb', 'Ebb', 'G##'."""
        name = name.strip()
        if not name or name[0].upper() not in LETTER_SEMITONES:
            raise ValueError(f"Unknown note name: {name!r}")

        suffix = name[1:]
        for accidental, symbol in _ACCIDENTAL_SYMBOLS.items():
            if suffix == symbol:
                return cls(name[0].upper(), accidental)

        raise ValueError(f"Unknown note name: {name!r}")


NoteName.C = NoteName("C")
NoteName.D = NoteName("D")
NoteName.E = NoteName("E")
NoteName.F = NoteName("F")
NoteName.G = NoteName("G")
NoteName.A = NoteName("A")
NoteName.B = NoteName("B")


# Canonical spellings for a bare pitch class
_SHARP_SPELLINGS: tuple[NoteName, ...] = (
    NoteName("C"),
    NoteName("C", 1),
    NoteName("D"),
    NoteName("D", 1),
    NoteName("E"),
    NoteName("F"),
    NoteName("F", 1),
    NoteName("G"),
    NoteName("G", 1),
    NoteName("A"),
    NoteName("A", 1),
    NoteName("B"),
)
_FLAT_SPELLINGS: tuple[NoteName, ...] = (
    NoteName("C"),
    NoteName("D", -1),
    NoteName("D"),
    NoteName("E", -1),
    NoteName("E"),
    NoteName("F"),
    NoteName("G", -1),
    NoteName("G"),
    NoteName("A", -1),
    NoteName("A"),
    NoteName("B", -1),
    NoteName("B"),
)


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def signed_distance_to(self, other: int) -> int:
        """
        Shortest signed move from this pitch class to another.

        Folded into [-6, 6]; a tritone stays at +6 or -6 as computed.
        """
        diff = (other % 12) - self.value
        if diff > 6:
            diff -= 12
        if diff < -6:
            diff += 12
        return diff

    def to_midi(self, octave: int = 4) -> int:
        """Convert to MIDI note number. C4 = 60."""
        return self.value + (octave + 1) * 12

    def spell(self, strategy: SpellingStrategy = SpellingStrategy.SHARPS) -> NoteName:
        """Canonical spelling using sharps or flats."""
        spellings = _SHARP_SPELLINGS if strategy == SpellingStrategy.SHARPS else _FLAT_SPELLINGS
        return spellings[self.value]

    @classmethod
    def from_midi(cls, midi_note: int) -> PitchClass:
        """Extract pitch class from MIDI note number."""
        return cls(midi_note % 12)


@dataclass(frozen=True)
class MidiSpelling:
    """A MIDI note number resolved back to a spelling and octave."""

    note: NoteName
    octave: int

    def __str__(self) -> str:
        return f"{self.note}{self.octave}"


def midi_to_spelling(
    midi: int, strategy: SpellingStrategy = SpellingStrategy.SHARPS
) -> MidiSpelling:
    """Spell a MIDI note number canonically (60 -> C4, 61 -> C#4 or Db4)."""
    return MidiSpelling(PitchClass.from_midi(midi).spell(strategy), midi // 12 - 1)
