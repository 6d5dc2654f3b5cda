"""
Symbol parsing - chord symbols and note strings into typed values.

parse_chord_symbol() is the inverse of format_symbol(): it accepts the
symbols build_chord() renders ("Ebm7b9", "C7#9#11(no5)/Bb") plus the
common aliases people type ("CM7", "Cø7", "C°7", "C-7", "C+").

The parser only checks syntax. Musical validity (a tension on a dim chord,
a slash bass equal to the root) is left to validate_chord_spec().
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from chuk_mcp_chords.constants import ParseErrorCode
from chuk_mcp_chords.core.chord import ChordQuality, ChordSpec, OmitDegree, Tension
from chuk_mcp_chords.core.pitch import LETTER_SEMITONES, NoteName


class ChordParseError(ValueError):
    """A chord symbol or note string could not be parsed."""

    def __init__(self, message: str, code: ParseErrorCode, position: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.position = position


# Quality tokens, including aliases; matched longest first
_QUALITY_TOKENS: dict[str, ChordQuality] = {
    "": ChordQuality.MAJOR,
    "maj": ChordQuality.MAJOR,
    "M": ChordQuality.MAJOR,
    "m": ChordQuality.MINOR,
    "min": ChordQuality.MINOR,
    "-": ChordQuality.MINOR,
    "dim": ChordQuality.DIMINISHED,
    "°": ChordQuality.DIMINISHED,
    "aug": ChordQuality.AUGMENTED,
    "+": ChordQuality.AUGMENTED,
    "7": ChordQuality.DOMINANT_7,
    "maj7": ChordQuality.MAJOR_7,
    "M7": ChordQuality.MAJOR_7,
    "Δ": ChordQuality.MAJOR_7,
    "Δ7": ChordQuality.MAJOR_7,
    "m7": ChordQuality.MINOR_7,
    "min7": ChordQuality.MINOR_7,
    "-7": ChordQuality.MINOR_7,
    "m7b5": ChordQuality.HALF_DIMINISHED_7,
    "ø": ChordQuality.HALF_DIMINISHED_7,
    "ø7": ChordQuality.HALF_DIMINISHED_7,
    "dim7": ChordQuality.DIMINISHED_7,
    "°7": ChordQuality.DIMINISHED_7,
    "9": ChordQuality.DOMINANT_9,
    "maj9": ChordQuality.MAJOR_9,
    "M9": ChordQuality.MAJOR_9,
    "m9": ChordQuality.MINOR_9,
    "min9": ChordQuality.MINOR_9,
    "11": ChordQuality.DOMINANT_11,
    "maj11": ChordQuality.MAJOR_11,
    "M11": ChordQuality.MAJOR_11,
    "m11": ChordQuality.MINOR_11,
    "min11": ChordQuality.MINOR_11,
    "13": ChordQuality.DOMINANT_13,
    "maj13": ChordQuality.MAJOR_13,
    "M13": ChordQuality.MAJOR_13,
    "m13": ChordQuality.MINOR_13,
    "min13": ChordQuality.MINOR_13,
}
_TOKENS_LONGEST_FIRST = sorted(_QUALITY_TOKENS, key=len, reverse=True)

_TENSIONS_LONGEST_FIRST = sorted(Tension, key=lambda t: len(t.value), reverse=True)

_OMIT = re.compile(r"^\(no(\w+)\)")

_NOTE_STRING = re.compile(r"^([A-G])([#b]?)(-?\d)$")


def _parse_note(text: str, position: int, code: ParseErrorCode) -> tuple[NoteName, int]:
    """Parse a spelling at the start of text; return it and characters consumed."""
    if not text or text[0].upper() not in LETTER_SEMITONES:
        found = text[0] if text else ""
        raise ChordParseError(f"Invalid note: {found!r}", code, position)

    accidental = 0
    consumed = 1
    for symbol, value in (("##", 2), ("bb", -2), ("#", 1), ("b", -1)):
        if text[1:].startswith(symbol):
            accidental = value
            consumed += len(symbol)
            break

    return NoteName(text[0].upper(), accidental), consumed


def parse_chord_symbol(symbol: str) -> ChordSpec:
    """
    Parse a chord symbol into a ChordSpec.

    Grammar: root quality tension* (noN)* [/bass]

    Args:
        symbol: A chord symbol such as 'F#m7b5', 'Bb13#11', 'C(no3)/G'

    Returns:
        The parsed ChordSpec (not yet validated)

    Raises:
        ChordParseError: With a code and the character position of the problem
    """
    if not symbol or not symbol.strip():
        raise ChordParseError("Empty chord string", ParseErrorCode.EMPTY_INPUT, 0)

    text = symbol.strip()
    root, pos = _parse_note(text, 0, ParseErrorCode.INVALID_ROOT)

    slash = text.find("/", pos)
    body = text[pos:] if slash < 0 else text[pos:slash]

    # Longest matching quality token; "" always matches
    token = next(t for t in _TOKENS_LONGEST_FIRST if body.startswith(t))
    quality = _QUALITY_TOKENS[token]
    rest = body[len(token) :]
    pos += len(token)

    tensions: list[Tension] = []
    while rest and rest[0] in "b#":
        for tension in _TENSIONS_LONGEST_FIRST:
            if rest.startswith(tension.value):
                tensions.append(tension)
                rest = rest[len(tension.value) :]
                pos += len(tension.value)
                break
        else:
            raise ChordParseError(
                f"Unknown tension: {rest!r}", ParseErrorCode.INVALID_TENSION, pos
            )

    omit: list[OmitDegree] = []
    while rest:
        match = _OMIT.match(rest)
        if not match:
            code = ParseErrorCode.INVALID_QUALITY if not tensions else ParseErrorCode.INVALID_TENSION
            raise ChordParseError(f"Unexpected characters: {rest!r}", code, pos)
        try:
            omit.append(OmitDegree(match.group(1)))
        except ValueError:
            raise ChordParseError(
                f"Cannot omit degree: {match.group(1)!r}", ParseErrorCode.INVALID_OMIT, pos
            ) from None
        rest = rest[match.end() :]
        pos += match.end()

    bass = None
    if slash >= 0:
        bass_text = text[slash + 1 :]
        if not bass_text:
            raise ChordParseError(
                "Missing bass note after /", ParseErrorCode.MISSING_BASS_NOTE, slash + 1
            )
        bass, consumed = _parse_note(bass_text, slash + 1, ParseErrorCode.INVALID_BASS_NOTE)
        if consumed != len(bass_text):
            raise ChordParseError(
                f"Unexpected characters after bass note: {bass_text[consumed:]!r}",
                ParseErrorCode.INVALID_BASS_NOTE,
                slash + 1 + consumed,
            )

    return ChordSpec(root=root, quality=quality, tensions=tuple(tensions), omit=tuple(omit), bass=bass)


@dataclass(frozen=True)
class ParsedNote:
    """A note string split into spelling and octave."""

    note: NoteName
    octave: int

    def to_midi(self) -> int:
        """MIDI number of this note."""
        return self.note.to_midi(self.octave)

    def __str__(self) -> str:
        return f"{self.note}{self.octave}"


def parse_note_string(text: str) -> ParsedNote:
    """
    Parse a note string like 'C4', 'F#3', 'Bb2'.

    Only single sharps/flats are accepted, keeping the format unambiguous.

    Raises:
        ChordParseError: If the string does not match
    """
    match = _NOTE_STRING.match(text.strip())
    if not match:
        raise ChordParseError(
            f"Invalid note string: {text!r}. Expected format: C4, F#3, Bb2",
            ParseErrorCode.INVALID_NOTE,
        )

    letter, accidental_symbol, octave = match.groups()
    accidental = {"#": 1, "b": -1}.get(accidental_symbol, 0)
    return ParsedNote(NoteName(letter, accidental), int(octave))
