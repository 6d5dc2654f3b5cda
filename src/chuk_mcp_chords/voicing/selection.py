"""
Tone selection - fitting a chord's tones to a fixed voice count.

When a chord has fewer tones than voices, tones are doubled by walking the
priority list. When it has more, the lowest-priority degrees are omitted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chuk_mcp_chords.constants import DEFAULT_TONE_PRIORITY
from chuk_mcp_chords.core.chord import Chord
from chuk_mcp_chords.core.intervals import degree_from_name, degree_name
from chuk_mcp_chords.core.pitch import NoteName, PitchClass


@dataclass(frozen=True)
class ToneSelection:
    """The tones chosen for one chord, with degree bookkeeping."""

    tones: tuple[NoteName, ...]
    degrees: tuple[int, ...]
    omitted: tuple[str, ...] = ()
    doubled: tuple[str, ...] = ()

    @property
    def pitch_classes(self) -> list[PitchClass]:
        return [tone.pitch_class for tone in self.tones]


def _double(chord: Chord, count: int, walk: Sequence[int]) -> tuple[list[int], list[str]]:
    """Indices of chord tones to double, walking the degree list repeatedly."""
    present = [chord.degrees.index(d) for d in walk if d in chord.degrees]
    if not present:
        # Priority names nothing in this chord: fall back to tertian order
        present = list(range(len(chord.degrees)))

    indices: list[int] = []
    while len(indices) < count:
        indices.append(present[len(indices) % len(present)])
    return indices, [degree_name(chord.degrees[i]) for i in indices]


def select_tones(
    chord: Chord,
    max_voices: int,
    priority: Sequence[str] = DEFAULT_TONE_PRIORITY,
) -> ToneSelection:
    """
    Choose exactly max_voices tones from a built chord.

    Args:
        chord: A built chord (degrees after tension overlay and omissions)
        max_voices: Number of upper voices to fill
        priority: Degree names from most to least essential

    Returns:
        ToneSelection in tertian order, doubles appended

    Example:
        C7 with 3 voices -> C, E, Bb (5th omitted)
        C major with 4 voices -> C, E, G, C (root doubled)
    """
    priority_degrees = [degree_from_name(p) for p in priority]

    if max_voices >= len(chord.tones):
        indices, doubled = _double(chord, max_voices - len(chord.tones), priority_degrees)
        return ToneSelection(
            tones=chord.tones + tuple(chord.tones[i] for i in indices),
            degrees=chord.degrees + tuple(chord.degrees[i] for i in indices),
            doubled=tuple(doubled),
        )

    def rank(degree: int) -> int:
        if degree in priority_degrees:
            return priority_degrees.index(degree)
        return len(priority_degrees)

    # sorted() is stable, so unlisted degrees keep tertian order
    kept = set(sorted(chord.degrees, key=rank)[:max_voices])

    tones = tuple(t for t, d in zip(chord.tones, chord.degrees) if d in kept)
    degrees = tuple(d for d in chord.degrees if d in kept)
    omitted = tuple(degree_name(d) for d in chord.degrees if d not in kept)

    return ToneSelection(tones=tones, degrees=degrees, omitted=omitted)
