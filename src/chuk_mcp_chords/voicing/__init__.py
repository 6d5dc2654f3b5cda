"""
Voicing - chords placed on MIDI numbers.

This module provides:
- voice_lead: Sequence-aware voicing with stable voice slots
- render_chord_sequence: Independent close/drop voicings
- select_tones: Fitting chord tones to a voice count
- MidiChord / VoiceAnalysis: The voiced result
"""

from chuk_mcp_chords.voicing.leader import (
    MidiChord,
    VoiceAnalysis,
    VoiceLeadingError,
    voice_lead,
)
from chuk_mcp_chords.voicing.render import render_chord_sequence
from chuk_mcp_chords.voicing.selection import ToneSelection, select_tones
from chuk_mcp_chords.voicing.spacing import apply_voicing, candidates, stack_close

__all__ = [
    "MidiChord",
    "ToneSelection",
    "VoiceAnalysis",
    "VoiceLeadingError",
    "apply_voicing",
    "candidates",
    "render_chord_sequence",
    "select_tones",
    "stack_close",
    "voice_lead",
]
