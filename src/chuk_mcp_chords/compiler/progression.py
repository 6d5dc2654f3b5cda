"""
Progression rendering - chord changes stamped by rhythmic activations.

Each chord is active from its onset until the next chord's onset.
Voice leading runs once across the chord sequence; every activation then
emits the voiced pitches of whichever chord is active at its onset.
"""

from __future__ import annotations

import logging

from chuk_mcp_chords.models.options import VoiceLeadOptions
from chuk_mcp_chords.models.progression import ClipNote, ProgressionInput, RenderedClip
from chuk_mcp_chords.voicing.leader import voice_lead

logger = logging.getLogger(__name__)


def render_chord_progression(progression: ProgressionInput) -> RenderedClip:
    """
    Render a progression into clip notes.

    Args:
        progression: Chord changes, activations and voicing settings

    Returns:
        RenderedClip; total_beats is the later of the last activation's
        end and the last chord's onset

    Raises:
        ValueError: On empty lists, duplicate chord onsets, or an
            activation before the first chord
        ChordSpecError: If any chord is invalid
    """
    if not progression.chords:
        raise ValueError("chords must not be empty")
    if not progression.activations:
        raise ValueError("activations must not be empty")

    chords = sorted(progression.chords, key=lambda c: c.onset_time)
    activations = sorted(progression.activations, key=lambda a: a.onset_time)

    for prev, current in zip(chords, chords[1:]):
        if current.onset_time == prev.onset_time:
            raise ValueError(f"Duplicate chord onset_time: {current.onset_time}")

    first_onset = chords[0].onset_time
    if activations[0].onset_time < first_onset:
        raise ValueError(
            f"Activation at {activations[0].onset_time} fires before first chord "
            f"at {first_onset} - no chord is active"
        )

    voiced = voice_lead(
        [c.chord for c in chords],
        VoiceLeadOptions(base_octave=progression.base_octave, max_voices=progression.max_voices),
    )

    notes: list[ClipNote] = []
    index = 0
    for activation in activations:
        while index + 1 < len(chords) and chords[index + 1].onset_time <= activation.onset_time:
            index += 1

        for pitch in dict.fromkeys([voiced[index].bass, *voiced[index].voices]):
            notes.append(
                ClipNote(
                    pitch=pitch,
                    start_time=activation.onset_time,
                    duration=activation.duration,
                    velocity=progression.velocity,
                )
            )

    last = activations[-1]
    total_beats = max(last.onset_time + last.duration, chords[-1].onset_time)
    logger.debug("Rendered %d notes over %.2f beats", len(notes), total_beats)

    return RenderedClip(notes=notes, total_beats=total_beats)
