"""
Voice leading - a chord sequence to MIDI voices with stable slots.

Slot i of every MidiChord is the same voice throughout the sequence.
Each voice moves as little as it can between chords, while an anchor fixed
by the first voicing keeps the whole texture from drifting up or down.

Two assignment strategies:
- Rank greedy (default): voices and targets are paired in pitch order and
  each voice takes the nearest candidate of its target.
- Common tones (keep_common_tones): voices already sitting on a tone of
  the next chord stay put; the rest move to the nearest remaining tone.

The greedy pairing is a heuristic, not an optimal bipartite matching.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from chuk_mcp_chords.constants import BassStrategy, ErrorMessages, VoicingType
from chuk_mcp_chords.core.chord import ChordSpec, build_chord
from chuk_mcp_chords.core.intervals import degree_name
from chuk_mcp_chords.core.pitch import PitchClass
from chuk_mcp_chords.models.options import VoiceLeadOptions
from chuk_mcp_chords.voicing.selection import ToneSelection, select_tones
from chuk_mcp_chords.voicing.spacing import apply_voicing, candidates, nearest, stack_close

logger = logging.getLogger(__name__)


class VoiceLeadingError(RuntimeError):
    """Raised when no valid MIDI value exists for a voice."""


@dataclass(frozen=True)
class VoiceAnalysis:
    """What tone selection and assignment did to a chord."""

    omitted: tuple[str, ...] = ()
    doubled: tuple[str, ...] = ()
    crossed: tuple[tuple[int, int], ...] = ()  # Slot pairs that swapped order

    def __bool__(self) -> bool:
        return bool(self.omitted or self.doubled or self.crossed)

    def to_dict(self) -> dict[str, list]:
        d: dict[str, list] = {}
        if self.omitted:
            d["omitted"] = list(self.omitted)
        if self.doubled:
            d["doubled"] = list(self.doubled)
        if self.crossed:
            d["crossed"] = [list(pair) for pair in self.crossed]
        return d


@dataclass(frozen=True)
class MidiChord:
    """
    A chord placed on MIDI numbers.

    voices are indexed by slot, not sorted by pitch.
    """

    bass: int
    voices: tuple[int, ...]
    spec: ChordSpec
    analysis: VoiceAnalysis | None = None

    @property
    def notes(self) -> list[int]:
        """Bass and voices merged, deduplicated, ascending."""
        return sorted({self.bass, *self.voices})

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {
            "bass": self.bass,
            "voices": list(self.voices),
            "spec": self.spec.to_dict(),
        }
        if self.analysis is not None:
            d["analysis"] = self.analysis.to_dict()
        return d


@dataclass
class _LeadState:
    """Fold state carried through one voice_lead() call."""

    previous_voices: list[int] | None = None
    previous_bass: int | None = None
    anchor_center: float | None = None


# =============================================================================
# Bass
# =============================================================================


def _place_bass(
    spec: ChordSpec, options: VoiceLeadOptions, state: _LeadState
) -> int:
    """Explicit slash bass wins; then minimal motion; then root at the bass octave."""
    bass_octave = options.effective_bass_octave

    if spec.bass is not None:
        preferred = spec.bass.to_midi(bass_octave)
    elif options.bass_strategy == BassStrategy.MINIMAL_MOTION and state.previous_bass is not None:
        move = PitchClass.from_midi(state.previous_bass).signed_distance_to(
            spec.root.pitch_class
        )
        preferred = state.previous_bass + move
    else:
        preferred = spec.root.to_midi(bass_octave)

    bass = nearest(candidates(preferred % 12, options.min_note, options.max_note), preferred)
    if bass is None:
        raise VoiceLeadingError(
            ErrorMessages.NO_CANDIDATE.format(
                pitch_class=preferred % 12, low=options.min_note, high=options.max_note
            )
        )
    return bass


# =============================================================================
# First chord
# =============================================================================


def _octave_order(base_octave: int) -> list[int]:
    """Octaves -1..9 ordered by distance from base_octave."""
    return sorted(range(-1, 10), key=lambda o: (abs(o - base_octave), o))


def _range_error(count: int, options: VoiceLeadOptions) -> VoiceLeadingError:
    return VoiceLeadingError(
        ErrorMessages.VOICES_DO_NOT_FIT.format(
            count=count, low=options.min_note, high=options.max_note
        )
    )


def _fit_stack(
    pitch_classes: Sequence[int], bass: int, options: VoiceLeadOptions
) -> list[int] | None:
    """Close stack from base_octave, trying inversions and then the nearest other octaves."""
    for octave in _octave_order(options.base_octave):
        for shift in range(len(pitch_classes)):
            stack = list(pitch_classes[shift:]) + list(pitch_classes[:shift])
            voices = stack_close(stack, (octave + 1) * 12, avoid={bass})
            if voices[0] >= options.min_note and voices[-1] <= options.max_note:
                if shift or octave != options.base_octave:
                    logger.debug("Stack moved to octave %d, starting on %d", octave, stack[0])
                return voices
    return None


def _spread_voicing(
    pitch_classes: Sequence[int], bass: int, options: VoiceLeadOptions
) -> tuple[list[int], list[int]]:
    """
    One voice per distinct pitch class, then spare voices on free candidates.

    Each spare voice takes the unused candidate of any chord tone nearest
    the center of the distinct voices.

    Returns:
        Voices ascending, and the pitch classes of the spare voices
    """
    low, high = options.min_note, options.max_note
    distinct = list(dict.fromkeys(pitch_classes))

    voices = _fit_stack(distinct, bass, options)
    if voices is None:
        middle = (options.base_octave + 1) * 12 + 6
        voices = []
        for pc in distinct:
            choice = nearest(candidates(pc, low, high, {bass, *voices}), middle)
            if choice is None:
                raise _range_error(len(pitch_classes), options)
            voices.append(choice)

    center = sum(voices) / len(voices)
    doubled: list[int] = []
    for _ in range(len(pitch_classes) - len(distinct)):
        pool = [c for pc in distinct for c in candidates(pc, low, high, {bass, *voices})]
        choice = nearest(pool, center)
        if choice is None:
            raise _range_error(len(pitch_classes), options)
        voices.append(choice)
        doubled.append(choice % 12)

    return sorted(voices), doubled


def _first_voicing(
    pitch_classes: Sequence[int], bass: int, options: VoiceLeadOptions
) -> tuple[list[int], list[int] | None]:
    """
    Close stack from base_octave.

    If root position does not fit the range, inversions are tried, then
    the nearest other octaves. If no stack fits at all, the distinct pitch
    classes are voiced first and the spare voices double whichever chord
    tones still have room.

    Returns:
        Voices ascending, and the doubled pitch classes when the fallback
        chose them (None when the selection's doubles were kept)
    """
    doubled: list[int] | None = None
    voices = _fit_stack(pitch_classes, bass, options)
    if voices is None:
        voices, doubled = _spread_voicing(pitch_classes, bass, options)
        logger.debug("No close stack fits; spread voicing %s doubles %s", voices, doubled)

    if options.voicing != VoicingType.CLOSE:
        voices = apply_voicing(
            voices, options.voicing, options.min_note, options.max_note, avoid={bass}
        )
    return voices, doubled


def _doubled_names(selection: ToneSelection, pitch_classes: Sequence[int]) -> tuple[str, ...]:
    """Degree names for doubled pitch classes."""
    names: dict[int, str] = {}
    for pc, degree in zip(selection.pitch_classes, selection.degrees):
        names.setdefault(int(pc), degree_name(degree))
    return tuple(names[pc] for pc in pitch_classes)


# =============================================================================
# Later chords
# =============================================================================


def _hold(previous: int, used: set[int], bass: int, options: VoiceLeadOptions) -> int:
    """Keep a voice where it was when nothing else is available."""
    if previous in used or previous == bass or not options.min_note <= previous <= options.max_note:
        raise _range_error(options.max_voices, options)
    return previous


def _double_nearest(
    previous: int,
    pitch_classes: Sequence[int],
    used: set[int],
    bass: int,
    options: VoiceLeadOptions,
) -> int:
    """Nearest unused candidate of any chord tone, else hold."""
    pool = [
        c
        for pc in set(pitch_classes)
        for c in candidates(pc, options.min_note, options.max_note, used | {bass})
    ]
    choice = nearest(pool, previous)
    return _hold(previous, used, bass, options) if choice is None else choice


def _greedy_assign(
    previous: Sequence[int],
    pitch_classes: Sequence[int],
    bass: int,
    anchor_center: float,
    options: VoiceLeadOptions,
) -> list[int]:
    """
    Pair voices and targets by rank, then take nearest candidates.

    A voice only looks at candidates within an octave of its target's home
    (the candidate nearest the anchor), falling back to the whole range
    when that window is empty. Voices left without a target double the
    nearest free chord tone, or hold their previous value.
    """
    low, high = options.min_note, options.max_note

    # Drift control: each target's home is its candidate nearest the anchor
    anchors: list[tuple[int, int]] = []
    for pc in pitch_classes:
        home = nearest(candidates(pc, low, high, {bass}), anchor_center)
        if home is not None:
            anchors.append((home, pc))
    anchors.sort()

    voice_order = sorted(range(len(previous)), key=lambda i: previous[i])
    assigned: dict[int, int] = {}
    used: set[int] = set()

    for slot, (home, pc) in zip(voice_order, anchors):
        pool = candidates(pc, low, high, used | {bass})
        local = [c for c in pool if abs(c - home) <= 12]
        choice = min(
            local or pool,
            key=lambda c: (abs(c - previous[slot]), abs(c - home), c),
            default=None,
        )
        if choice is not None:
            assigned[slot] = choice
            used.add(choice)

    for slot in voice_order:
        if slot not in assigned:
            assigned[slot] = _double_nearest(previous[slot], pitch_classes, used, bass, options)
            used.add(assigned[slot])

    if options.allow_voice_crossing:
        return [assigned[slot] for slot in range(len(previous))]

    # Re-deal so pitch order follows the previous pitch order
    voices = [0] * len(previous)
    for slot, value in zip(voice_order, sorted(assigned.values())):
        voices[slot] = value
    return voices


def _common_tone_assign(
    previous: Sequence[int],
    pitch_classes: Sequence[int],
    bass: int,
    options: VoiceLeadOptions,
) -> list[int]:
    """Hold common tones, move the rest by nearest distance."""
    low, high = options.min_note, options.max_note
    remaining = Counter(pitch_classes)
    assigned: dict[int, int] = {}
    used: set[int] = set()

    # Pass 1: common tones stay in their slot
    for slot, value in enumerate(previous):
        pc = value % 12
        if remaining[pc] > 0 and low <= value <= high and value != bass and value not in used:
            assigned[slot] = value
            used.add(value)
            remaining[pc] -= 1

    # Pass 2: nearest remaining target
    for slot, value in enumerate(previous):
        if slot in assigned:
            continue
        pool = [
            (c, pc)
            for pc, count in remaining.items()
            if count > 0
            for c in candidates(pc, low, high, used | {bass})
        ]
        if not pool:
            continue
        choice, pc = min(pool, key=lambda item: (abs(item[0] - value), item[0]))
        assigned[slot] = choice
        used.add(choice)
        remaining[pc] -= 1

    # Pass 3: double an already-used target
    for slot, value in enumerate(previous):
        if slot not in assigned:
            assigned[slot] = _double_nearest(value, pitch_classes, used, bass, options)
            used.add(assigned[slot])

    return [assigned[slot] for slot in range(len(previous))]


def _crossings(previous: Sequence[int], voices: Sequence[int]) -> tuple[tuple[int, int], ...]:
    """Slot pairs whose pitch order flipped."""
    return tuple(
        (i, j)
        for i in range(len(voices))
        for j in range(i + 1, len(voices))
        if (previous[i] - previous[j]) * (voices[i] - voices[j]) < 0
    )


# =============================================================================
# Public API
# =============================================================================


def voice_lead(specs: Sequence[ChordSpec], options: VoiceLeadOptions) -> list[MidiChord]:
    """
    Voice a chord sequence with minimal motion and stable voice slots.

    Args:
        specs: Chord specs in playing order
        options: Voice-leading options (base_octave is required)

    Returns:
        One MidiChord per spec, each with exactly max_voices voices

    Raises:
        ChordSpecError: If any spec is invalid (nothing is rendered)
        VoiceLeadingError: If the range cannot hold the voices

    Example:
        opts = VoiceLeadOptions(base_octave=4, max_voices=3, keep_common_tones=True)
        voice_lead([ChordSpec(NoteName.C, "maj"), ChordSpec(NoteName.A, "min")], opts)
        # C and E keep their MIDI values; G moves up to A
    """
    chords = [build_chord(spec).unwrap() for spec in specs]
    state = _LeadState()
    results: list[MidiChord] = []

    for index, (spec, chord) in enumerate(zip(specs, chords)):
        selection: ToneSelection = select_tones(chord, options.max_voices, options.tone_priority)
        pitch_classes = [int(pc) for pc in selection.pitch_classes]
        bass = _place_bass(spec, options, state)
        crossed: tuple[tuple[int, int], ...] = ()
        doubled = selection.doubled

        if state.previous_voices is None or state.anchor_center is None:
            voices, spread = _first_voicing(pitch_classes, bass, options)
            if spread is not None:
                doubled = _doubled_names(selection, spread)
            state.anchor_center = sum(voices) / len(voices)
            logger.debug("Anchor center %.2f from %s", state.anchor_center, chord.symbol)
        elif options.keep_common_tones:
            voices = _common_tone_assign(state.previous_voices, pitch_classes, bass, options)
            crossed = _crossings(state.previous_voices, voices)
            if crossed and not options.allow_voice_crossing:
                logger.warning(
                    "Voice crossing at chord %d (%s): slots %s", index, chord.symbol, crossed
                )
        else:
            voices = _greedy_assign(
                state.previous_voices, pitch_classes, bass, state.anchor_center, options
            )
            crossed = _crossings(state.previous_voices, voices)

        logger.debug("%s: bass=%d voices=%s", chord.symbol, bass, voices)

        analysis = VoiceAnalysis(selection.omitted, doubled, crossed)
        results.append(
            MidiChord(bass=bass, voices=tuple(voices), spec=spec, analysis=analysis or None)
        )
        state.previous_voices = voices
        state.previous_bass = bass

    return results
