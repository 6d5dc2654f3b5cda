"""
Interval degrees and the enharmonic tone calculator.

Every spelled chord tone in the system comes from calculate_tone().
The letter is fixed by the degree (a third above C is always some kind of E),
and the accidental is whatever makes that letter land on the target pitch.
That is what makes a diminished seventh spell as Bbb rather than A.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from chuk_mcp_chords.constants import ErrorMessages
from chuk_mcp_chords.core.pitch import LETTER_SEMITONES, LETTERS, NoteName

# degree -> (letter offset from root, semitones of the major/perfect interval)
# 9/11/13 share letters with 2/4/6 and fold back into the octave.
INTERVAL_DEGREES: Mapping[int, tuple[int, int]] = MappingProxyType(
    {
        1: (0, 0),
        2: (1, 2),
        3: (2, 4),
        4: (3, 5),
        5: (4, 7),
        6: (5, 9),
        7: (6, 11),
        9: (1, 2),
        11: (3, 5),
        13: (5, 9),
    }
)

# Tertian stacking order
DEGREE_ORDER: tuple[int, ...] = (1, 3, 5, 7, 9, 11, 13)


def degree_name(degree: int) -> str:
    """Name used in priority lists and analysis ('root', '3', '5', ...)."""
    return "root" if degree == 1 else str(degree)


def degree_from_name(name: str) -> int:
    """Inverse of degree_name()."""
    return 1 if name == "root" else int(name)


def _lookup(degree: int) -> tuple[int, int]:
    try:
        return INTERVAL_DEGREES[degree]
    except KeyError:
        raise ValueError(ErrorMessages.UNKNOWN_DEGREE.format(degree=degree)) from None


def calculate_tone(root: NoteName, degree: int, accidental_offset: int = 0) -> NoteName:
    """
    Spell the note a given interval degree above a root.

    Args:
        root: The root spelling
        degree: Interval degree (1-7, 9, 11, 13)
        accidental_offset: Alteration from the major/perfect interval
            (-1 = minor/diminished, +1 = augmented, -2 = diminished 7th)

    Returns:
        The spelled tone

    Raises:
        ValueError: If the degree is not in the interval table

    Example:
        calculate_tone(NoteName("C"), 7, -2)  # Bbb
        calculate_tone(NoteName("F", 1), 7)  # E#
    """
    letter_offset, base_semitones = _lookup(degree)

    letter_index = (LETTERS.index(root.letter) + letter_offset) % 7
    target_pc = (root.pitch_class + base_semitones + accidental_offset) % 12

    # One wrap by an octave: B# above a root near C is +1, not -11
    accidental = target_pc - LETTER_SEMITONES[LETTERS[letter_index]]
    if accidental > 6:
        accidental -= 12
    elif accidental < -6:
        accidental += 12

    # Beyond a double accidental: respell on the neighbouring letter
    while not -2 <= accidental <= 2:
        step = 1 if accidental > 0 else -1
        letter_index = (letter_index + step) % 7
        accidental = target_pc - LETTER_SEMITONES[LETTERS[letter_index]]
        if accidental > 6:
            accidental -= 12
        elif accidental < -6:
            accidental += 12

    return NoteName(LETTERS[letter_index], accidental)
