"""
Output pipeline - voiced chords to playable notes and MIDI files.

The pipeline:
    ChordSpec sequence → MidiChord (voice_lead / render_chord_sequence)
    → PerformanceChord (flattened, sorted notes)
    → MIDI File
"""

from chuk_mcp_chords.compiler.melody import render_melodic_line
from chuk_mcp_chords.compiler.midi import (
    TICKS_PER_BEAT,
    MidiEvent,
    beats_to_ticks,
    clip_to_midi,
    events_to_midi,
    performance_to_events,
    performance_to_midi,
)
from chuk_mcp_chords.compiler.performance import PerformanceChord, to_performance_output
from chuk_mcp_chords.compiler.progression import render_chord_progression

__all__ = [
    # Performance
    "PerformanceChord",
    "to_performance_output",
    # Clips
    "render_chord_progression",
    "render_melodic_line",
    # MIDI
    "TICKS_PER_BEAT",
    "MidiEvent",
    "beats_to_ticks",
    "clip_to_midi",
    "events_to_midi",
    "performance_to_events",
    "performance_to_midi",
]
