"""
Performance output - voiced chords flattened for a synth or sequencer.

Harmonic data (bass + voice slots) becomes sorted note lists with velocity,
optional timing and a channel. Pure formatting; nothing is re-voiced.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chuk_mcp_chords.constants import DEFAULT_CHANNEL, DEFAULT_VELOCITY
from chuk_mcp_chords.models.options import PerformanceOptions
from chuk_mcp_chords.voicing.leader import MidiChord


@dataclass(frozen=True)
class PerformanceChord:
    """One chord ready to play."""

    notes: tuple[int, ...]  # Ascending, no duplicates
    index: int
    velocity: int = DEFAULT_VELOCITY
    velocities: tuple[int, ...] | None = None
    start_beat: float | None = None
    duration_beats: float | None = None
    channel: int = DEFAULT_CHANNEL  # 1-16

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary (unset timing omitted)."""
        d: dict[str, object] = {
            "notes": list(self.notes),
            "velocity": self.velocity,
            "index": self.index,
            "channel": self.channel,
        }
        if self.velocities is not None:
            d["velocities"] = list(self.velocities)
        if self.start_beat is not None:
            d["start_beat"] = self.start_beat
        if self.duration_beats is not None:
            d["duration_beats"] = self.duration_beats
        return d


def to_performance_output(
    chords: Sequence[MidiChord],
    options: PerformanceOptions | None = None,
) -> list[PerformanceChord]:
    """
    Flatten voiced chords into performance chords.

    Args:
        chords: Output of voice_lead() or render_chord_sequence()
        options: Velocity, timing and channel (defaults: 100, none, 1)

    Returns:
        One PerformanceChord per input chord, same order
    """
    options = options or PerformanceOptions()
    start_times = options.start_times or []
    velocities = tuple(options.velocities) if options.velocities is not None else None

    return [
        PerformanceChord(
            notes=tuple(chord.notes),
            index=index,
            velocity=options.velocity,
            velocities=velocities,
            start_beat=start_times[index] if index < len(start_times) else None,
            duration_beats=options.duration,
            channel=options.channel,
        )
        for index, chord in enumerate(chords)
    ]
