"""
Chord palettes - the chords that belong to a key.

A palette is a list of ChordSpecs: the seven diatonic chords at a chosen
color, optionally followed by secondary dominants and borrowed chords.
All roots are spelled through the tone calculator.
"""

from __future__ import annotations

from typing import Literal

from chuk_mcp_chords.core.chord import ChordQuality, ChordSpec
from chuk_mcp_chords.core.intervals import calculate_tone
from chuk_mcp_chords.core.scale import Key, KeyMode

PaletteColor = Literal["triad", "seventh", "extended"]
MaxExtension = Literal[7, 9, 11, 13]

Q = ChordQuality

# Diatonic qualities by scale degree
_MAJOR_QUALITIES: dict[int, tuple[ChordQuality, ...]] = {
    5: (Q.MAJOR, Q.MINOR, Q.MINOR, Q.MAJOR, Q.MAJOR, Q.MINOR, Q.DIMINISHED),
    7: (Q.MAJOR_7, Q.MINOR_7, Q.MINOR_7, Q.MAJOR_7, Q.DOMINANT_7, Q.MINOR_7, Q.HALF_DIMINISHED_7),
    9: (Q.MAJOR_9, Q.MINOR_9, Q.MINOR_9, Q.MAJOR_9, Q.DOMINANT_9, Q.MINOR_9, Q.HALF_DIMINISHED_7),
    11: (
        Q.MAJOR_11,
        Q.MINOR_11,
        Q.MINOR_11,
        Q.MAJOR_11,
        Q.DOMINANT_11,
        Q.MINOR_11,
        Q.HALF_DIMINISHED_7,
    ),
    13: (
        Q.MAJOR_13,
        Q.MINOR_13,
        Q.MINOR_13,
        Q.MAJOR_13,
        Q.DOMINANT_13,
        Q.MINOR_13,
        Q.HALF_DIMINISHED_7,
    ),
}

# Natural minor
_MINOR_QUALITIES: dict[int, tuple[ChordQuality, ...]] = {
    5: (Q.MINOR, Q.DIMINISHED, Q.MAJOR, Q.MINOR, Q.MINOR, Q.MAJOR, Q.MAJOR),
    7: (Q.MINOR_7, Q.HALF_DIMINISHED_7, Q.MAJOR_7, Q.MINOR_7, Q.MINOR_7, Q.MAJOR_7, Q.DOMINANT_7),
    9: (Q.MINOR_9, Q.HALF_DIMINISHED_7, Q.MAJOR_9, Q.MINOR_9, Q.MINOR_9, Q.MAJOR_9, Q.DOMINANT_9),
    11: (
        Q.MINOR_11,
        Q.HALF_DIMINISHED_7,
        Q.MAJOR_11,
        Q.MINOR_11,
        Q.MINOR_11,
        Q.MAJOR_11,
        Q.DOMINANT_11,
    ),
    13: (
        Q.MINOR_13,
        Q.HALF_DIMINISHED_7,
        Q.MAJOR_13,
        Q.MINOR_13,
        Q.MINOR_13,
        Q.MAJOR_13,
        Q.DOMINANT_13,
    ),
}

_DOMINANTS: dict[int, ChordQuality] = {
    7: Q.DOMINANT_7,
    9: Q.DOMINANT_9,
    11: Q.DOMINANT_11,
    13: Q.DOMINANT_13,
}


def _extension(color: PaletteColor, max_extension: MaxExtension) -> int:
    if color == "triad":
        return 5
    if color == "seventh":
        return 7
    return max_extension


def get_diatonic_chords(key: Key, extension: int = 5) -> list[ChordSpec]:
    """
    The seven diatonic chords of a key.

    Args:
        key: The key
        extension: Highest stacked degree (5 = triads, 7, 9, 11, 13)

    Returns:
        ChordSpecs for degrees I-VII
    """
    table = _MAJOR_QUALITIES if key.mode == KeyMode.MAJOR else _MINOR_QUALITIES
    return [
        ChordSpec(root=key.degree_tone(degree), quality=quality)
        for degree, quality in enumerate(table[extension], start=1)
    ]


def get_secondary_dominants(key: Key, quality: ChordQuality = Q.DOMINANT_7) -> list[ChordSpec]:
    """
    Dominants a fifth above each non-tonic diatonic target.

    Major keys target ii-vi (V/ii .. V/vi); minor keys target III-VII.
    """
    targets = (2, 3, 4, 5, 6) if key.mode == KeyMode.MAJOR else (3, 4, 5, 6, 7)
    return [
        ChordSpec(root=calculate_tone(key.degree_tone(target), 5), quality=quality)
        for target in targets
    ]


def get_borrowed_chords(key: Key, sevenths: bool = False) -> list[ChordSpec]:
    """
    Chords borrowed from the parallel minor (major keys only).

    bVII, bVI, bIII and iv, in that order.
    """
    if key.mode != KeyMode.MAJOR:
        return []

    return [
        ChordSpec(calculate_tone(key.root, 7, -1), Q.DOMINANT_7 if sevenths else Q.MAJOR),
        ChordSpec(calculate_tone(key.root, 6, -1), Q.MAJOR_7 if sevenths else Q.MAJOR),
        ChordSpec(calculate_tone(key.root, 3, -1), Q.MAJOR_7 if sevenths else Q.MAJOR),
        ChordSpec(calculate_tone(key.root, 4), Q.MINOR_7 if sevenths else Q.MINOR),
    ]


def chord_palette(
    key: Key,
    color: PaletteColor = "triad",
    max_extension: MaxExtension = 9,
    include_dominants: bool = False,
    include_borrowed: bool = False,
) -> list[ChordSpec]:
    """
    Build the chord palette for a key.

    Args:
        key: The key
        color: 'triad', 'seventh', or 'extended'
        max_extension: Highest extension for 'extended' (7, 9, 11, 13)
        include_dominants: Append secondary dominants
        include_borrowed: Append borrowed chords (major keys only)

    Returns:
        Diatonic chords, then dominants, then borrowed chords
    """
    extension = _extension(color, max_extension)
    palette = get_diatonic_chords(key, extension)

    if include_dominants:
        palette += get_secondary_dominants(key, _DOMINANTS[max(extension, 7)])

    if include_borrowed:
        palette += get_borrowed_chords(key, sevenths=color != "triad")

    return palette
