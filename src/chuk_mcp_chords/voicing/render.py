"""
Plain rendering - each chord voiced on its own, no voice leading.

Every chord is stacked upward from its root in the base octave and
optionally opened with a drop voicing. Consecutive chords are unrelated,
so large jumps are expected; use voice_lead() for smooth motion.
"""

from __future__ import annotations

from collections.abc import Sequence

from chuk_mcp_chords.core.chord import ChordSpec, build_chord
from chuk_mcp_chords.models.options import RenderOptions
from chuk_mcp_chords.voicing.leader import MidiChord
from chuk_mcp_chords.voicing.spacing import apply_voicing, stack_close


def render_chord_sequence(specs: Sequence[ChordSpec], options: RenderOptions) -> list[MidiChord]:
    """
    Render chords to MIDI without voice leading.

    Args:
        specs: Chord specs in playing order
        options: Base octave, bass octave and voicing

    Returns:
        One MidiChord per spec; voices ascending, one per chord tone,
        never equal to the bass

    Raises:
        ChordSpecError: If any spec is invalid
    """
    chords = [build_chord(spec).unwrap() for spec in specs]
    results: list[MidiChord] = []

    for spec, chord in zip(specs, chords):
        bass = (spec.bass or spec.root).to_midi(options.effective_bass_octave)
        start = chord.tones[0].to_midi(options.base_octave)
        voices = stack_close([int(t.pitch_class) for t in chord.tones], start, avoid={bass})
        voices = apply_voicing(voices, options.voicing, avoid={bass})
        results.append(MidiChord(bass=bass, voices=tuple(voices), spec=spec))

    return results
