"""
Spacing helpers - MIDI candidates, close stacks and drop voicings.

Everything here works on plain MIDI numbers. Range limits are applied when
candidates are generated, so out-of-range values are never considered.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence

from chuk_mcp_chords.constants import MIDI_MAX, MIDI_MIN, VoicingType

# Index from the top of a sorted voicing that drops an octave
_DROP_INDEX: dict[VoicingType, int] = {
    VoicingType.DROP2: 2,
    VoicingType.DROP3: 3,
}


def candidates(
    pitch_class: int,
    low: int = MIDI_MIN,
    high: int = MIDI_MAX,
    exclude: Collection[int] = (),
) -> list[int]:
    """All MIDI values of a pitch class inside [low, high], ascending."""
    start = low + (pitch_class - low) % 12
    return [m for m in range(start, high + 1, 12) if m not in exclude]


def nearest(values: Iterable[int], target: float) -> int | None:
    """The value closest to target; ties go to the lower value."""
    return min(values, key=lambda v: (abs(v - target), v), default=None)


def stack_close(
    pitch_classes: Sequence[int],
    start: int,
    avoid: Collection[int] = (),
) -> list[int]:
    """
    Stack pitch classes cyclically upward, strictly ascending.

    The first voice is its pitch class at or above start; each later voice
    takes the lowest value above the one before. Values in avoid are skipped
    an octave up.
    """
    voices: list[int] = []
    floor = start
    for pc in pitch_classes:
        midi = floor + (pc - floor) % 12
        while midi in avoid or (voices and midi <= voices[-1]):
            midi += 12
        voices.append(midi)
        floor = midi
    return voices


def apply_voicing(
    voices: Sequence[int],
    voicing: VoicingType,
    low: int = MIDI_MIN,
    high: int = MIDI_MAX,
    avoid: Collection[int] = (),
) -> list[int]:
    """
    Open a close voicing by dropping one voice an octave.

    drop2 drops the second-highest voice, drop3 the third-highest. Voicings
    with fewer than four voices are left alone, as is any drop that would
    leave the range or land on an existing note.

    Returns:
        Voices sorted ascending
    """
    ordered = sorted(voices)
    drop = _DROP_INDEX.get(VoicingType(voicing))
    if drop is None or len(ordered) < 4:
        return ordered

    index = len(ordered) - drop
    dropped = ordered[index] - 12
    if dropped < low or dropped > high or dropped in avoid or dropped in ordered:
        return ordered

    ordered[index] = dropped
    return sorted(ordered)
