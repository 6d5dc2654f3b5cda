"""
MIDI export - the end of the pipeline.

This module handles conversion from performance chords and clip notes to
MIDI files using mido. All operations are deterministic: same input → same output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mido import Message, MetaMessage, MidiFile, MidiTrack, bpm2tempo

from chuk_mcp_chords.constants import DEFAULT_CHANNEL, DEFAULT_CHORD_BEATS

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chuk_mcp_chords.compiler.performance import PerformanceChord
    from chuk_mcp_chords.models.progression import ClipNote


# Standard ticks per beat (quarter note) - industry standard
TICKS_PER_BEAT = 480


@dataclass(frozen=True)
class MidiEvent:
    """
    A single MIDI note event.

    This is the lowest-level representation before writing to MIDI.
    All times are in ticks (absolute from start of track).
    """

    pitch: int  # MIDI note number (0-127)
    start_ticks: int  # Absolute start time in ticks
    duration_ticks: int
    velocity: int  # 0-127
    channel: int = 0  # 0-15 on the wire

    def __post_init__(self) -> None:
        """Validate MIDI ranges."""
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 0 <= self.velocity <= 127:
            raise ValueError(f"Velocity must be 0-127, got {self.velocity}")
        if not 0 <= self.channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {self.channel}")
        if self.start_ticks < 0:
            raise ValueError(f"Start ticks must be >= 0, got {self.start_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"Duration ticks must be >= 0, got {self.duration_ticks}")


def _note_messages(event: MidiEvent) -> tuple[tuple[int, Message], tuple[int, Message]]:
    """Absolute-time note_on / note_off pair for one event."""
    on = Message("note_on", channel=event.channel, note=event.pitch, velocity=event.velocity)
    off = Message("note_off", channel=event.channel, note=event.pitch, velocity=0)
    return (event.start_ticks, on), (event.start_ticks + event.duration_ticks, off)


def events_to_midi(
    events: Sequence[MidiEvent],
    tempo_bpm: int = 120,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """
    Write note events to a single-track MidiFile.

    Args:
        events: Note events with absolute tick times
        tempo_bpm: Tempo in beats per minute
        ticks_per_beat: Resolution (default 480)

    Returns:
        A mido MidiFile ready to be saved
    """
    timed = [message for event in events for message in _note_messages(event)]

    # note_off first at equal ticks so a repeated chord re-triggers cleanly
    timed.sort(key=lambda item: (item[0], item[1].type == "note_on"))

    track = MidiTrack([MetaMessage("set_tempo", tempo=bpm2tempo(tempo_bpm))])
    last_tick = 0
    for tick, message in timed:
        track.append(message.copy(time=tick - last_tick))
        last_tick = tick
    track.append(MetaMessage("end_of_track"))

    mid = MidiFile(ticks_per_beat=ticks_per_beat)
    mid.tracks.append(track)
    return mid


def beats_to_ticks(beats: float, ticks_per_beat: int = TICKS_PER_BEAT) -> int:
    """Convert a beat position to ticks."""
    return int(beats * ticks_per_beat)


def performance_to_events(
    chords: Sequence[PerformanceChord],
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> list[MidiEvent]:
    """
    Expand performance chords into note events.

    Chords without a start beat follow the previous chord; chords without
    a duration last DEFAULT_CHORD_BEATS. Per-note velocities apply by note
    position, falling back to the chord velocity.
    """
    events: list[MidiEvent] = []
    cursor = 0.0

    for chord in chords:
        start = cursor if chord.start_beat is None else chord.start_beat
        duration = DEFAULT_CHORD_BEATS if chord.duration_beats is None else chord.duration_beats
        velocities = chord.velocities or ()

        for i, pitch in enumerate(chord.notes):
            events.append(
                MidiEvent(
                    pitch=pitch,
                    start_ticks=beats_to_ticks(start, ticks_per_beat),
                    duration_ticks=beats_to_ticks(duration, ticks_per_beat),
                    velocity=velocities[i] if i < len(velocities) else chord.velocity,
                    channel=chord.channel - 1,
                )
            )
        cursor = start + duration

    return events


def performance_to_midi(
    chords: Sequence[PerformanceChord],
    tempo_bpm: int = 120,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """
    Convert performance output directly to a MidiFile.

    Example:
        perf = to_performance_output(voice_lead(specs, opts))
        performance_to_midi(perf, tempo_bpm=90).save("changes.mid")
    """
    return events_to_midi(
        performance_to_events(chords, ticks_per_beat),
        tempo_bpm=tempo_bpm,
        ticks_per_beat=ticks_per_beat,
    )


def clip_to_midi(
    notes: Sequence[ClipNote],
    tempo_bpm: int = 120,
    channel: int = DEFAULT_CHANNEL,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """Convert rendered clip notes (progression or melody) to a MidiFile."""
    events = [
        MidiEvent(
            pitch=note.pitch,
            start_ticks=beats_to_ticks(note.start_time, ticks_per_beat),
            duration_ticks=beats_to_ticks(note.duration, ticks_per_beat),
            velocity=note.velocity,
            channel=channel - 1,
        )
        for note in notes
    ]
    return events_to_midi(events, tempo_bpm=tempo_bpm, ticks_per_beat=ticks_per_beat)
