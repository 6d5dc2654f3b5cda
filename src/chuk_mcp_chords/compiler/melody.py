"""
Melodic line rendering - note strings to clip notes.

Notes outside an optional scale produce warnings, not errors: chromatic
passing tones are valid music.
"""

from __future__ import annotations

from chuk_mcp_chords.constants import MIDI_MAX, MIDI_MIN
from chuk_mcp_chords.core.pitch import midi_to_spelling
from chuk_mcp_chords.core.scale import is_note_in_scale
from chuk_mcp_chords.core.symbols import parse_note_string
from chuk_mcp_chords.models.progression import ClipNote, MelodicLineInput, RenderedClip


def render_melodic_line(line: MelodicLineInput) -> RenderedClip:
    """
    Render a melodic line.

    Raises:
        ValueError: On an empty line or a note outside MIDI 0-127
        ChordParseError: On an unparseable note string
    """
    if not line.notes:
        raise ValueError("notes must not be empty")

    notes: list[ClipNote] = []
    warnings: list[str] = []

    for event in line.notes:
        parsed = parse_note_string(event.note)
        midi = parsed.to_midi()
        if not MIDI_MIN <= midi <= MIDI_MAX:
            raise ValueError(
                f"Note {event.note!r} produces MIDI pitch {midi}, "
                f"which is outside valid range {MIDI_MIN}-{MIDI_MAX}"
            )

        if line.scale is not None and not is_note_in_scale(
            parsed.note, line.scale.root, line.scale.type
        ):
            warnings.append(f"{midi_to_spelling(midi)} is not in {line.scale.root} {line.scale.type}")

        notes.append(
            ClipNote(
                pitch=midi,
                start_time=event.start_time,
                duration=event.duration,
                velocity=event.velocity,
            )
        )

    total_beats = max(n.start_time + n.duration for n in notes)
    return RenderedClip(notes=notes, total_beats=total_beats, warnings=warnings)
