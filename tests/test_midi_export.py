"""
Performance output and MIDI export tests.

Voiced chords become performance chords, then note events, then a mido file.
"""

from pathlib import Path

import pytest
from mido import MidiFile, bpm2tempo
from pydantic import ValidationError

from chuk_mcp_chords.compiler import (
    TICKS_PER_BEAT,
    MidiEvent,
    PerformanceChord,
    beats_to_ticks,
    clip_to_midi,
    events_to_midi,
    performance_to_events,
    performance_to_midi,
    to_performance_output,
)
from chuk_mcp_chords.core import ChordSpec, parse_chord_symbol
from chuk_mcp_chords.models import ClipNote, PerformanceOptions, VoiceLeadOptions
from chuk_mcp_chords.voicing import MidiChord, voice_lead


def note_ons(mid: MidiFile) -> list:
    return [msg for msg in mid.tracks[0] if msg.type == "note_on"]


@pytest.fixture
def voiced_ii_v_i(ii_v_i: list[ChordSpec]) -> list[MidiChord]:
    return voice_lead(ii_v_i, VoiceLeadOptions(base_octave=3))


class TestMidiEvent:
    """Test MidiEvent validation."""

    def test_valid_event(self) -> None:
        """Defaults to wire channel 0."""
        event = MidiEvent(pitch=60, start_ticks=0, duration_ticks=480, velocity=100)
        assert event.channel == 0

    def test_pitch_range(self) -> None:
        """Pitch must be 0-127."""
        with pytest.raises(ValueError, match="Pitch must be 0-127"):
            MidiEvent(pitch=128, start_ticks=0, duration_ticks=480, velocity=100)

    def test_velocity_range(self) -> None:
        """Velocity must be 0-127."""
        with pytest.raises(ValueError, match="Velocity must be 0-127"):
            MidiEvent(pitch=60, start_ticks=0, duration_ticks=480, velocity=-1)

    def test_channel_range(self) -> None:
        """Wire channels are 0-15."""
        with pytest.raises(ValueError, match="Channel must be 0-15"):
            MidiEvent(pitch=60, start_ticks=0, duration_ticks=480, velocity=100, channel=16)

    def test_negative_start(self) -> None:
        """Events cannot start before zero."""
        with pytest.raises(ValueError, match="Start ticks"):
            MidiEvent(pitch=60, start_ticks=-1, duration_ticks=480, velocity=100)


class TestEventsToMidi:
    """Test events_to_midi."""

    def test_empty(self) -> None:
        """Tempo and end of track only."""
        mid = events_to_midi([], tempo_bpm=90)
        assert mid.ticks_per_beat == TICKS_PER_BEAT
        tempo = next(msg for msg in mid.tracks[0] if msg.type == "set_tempo")
        assert tempo.tempo == bpm2tempo(90)

    def test_note_off_before_note_on(self) -> None:
        """A repeated pitch re-triggers at the boundary."""
        events = [
            MidiEvent(pitch=60, start_ticks=0, duration_ticks=480, velocity=100),
            MidiEvent(pitch=60, start_ticks=480, duration_ticks=480, velocity=100),
        ]
        messages = [m for m in events_to_midi(events).tracks[0] if not m.is_meta]
        assert [m.type for m in messages] == ["note_on", "note_off", "note_on", "note_off"]
        assert [m.time for m in messages] == [0, 480, 0, 480]

    def test_deterministic(self, temp_dir: Path) -> None:
        """Same events, same bytes."""
        events = [
            MidiEvent(pitch=60, start_ticks=0, duration_ticks=480, velocity=100),
            MidiEvent(pitch=64, start_ticks=480, duration_ticks=480, velocity=90),
        ]
        path1, path2 = temp_dir / "a.mid", temp_dir / "b.mid"
        events_to_midi(events).save(str(path1))
        events_to_midi(events).save(str(path2))
        assert path1.read_bytes() == path2.read_bytes()

    def test_beats_to_ticks(self) -> None:
        """Beats scale by the resolution."""
        assert beats_to_ticks(0) == 0
        assert beats_to_ticks(1.5) == 720
        assert beats_to_ticks(4, ticks_per_beat=96) == 384


class TestPerformanceOutput:
    """Test to_performance_output."""

    def test_notes_merge_bass_and_voices(self, voiced_ii_v_i: list[MidiChord]) -> None:
        """Notes are bass plus voices, ascending."""
        perf = to_performance_output(voiced_ii_v_i)
        assert perf[0].notes == (38, 50, 53, 57, 60)
        assert [p.index for p in perf] == [0, 1, 2]

    def test_notes_deduplicated(self) -> None:
        """A voice equal to the bass is not played twice."""
        chord = MidiChord(bass=48, voices=(48, 52, 55), spec=parse_chord_symbol("C"))
        assert to_performance_output([chord])[0].notes == (48, 52, 55)

    def test_defaults(self, voiced_ii_v_i: list[MidiChord]) -> None:
        """Velocity 100, channel 1, no timing."""
        d = to_performance_output(voiced_ii_v_i)[1].to_dict()
        assert d["velocity"] == 100
        assert d["channel"] == 1
        assert "start_beat" not in d
        assert "duration_beats" not in d
        assert "velocities" not in d

    def test_timing_and_channel(self, voiced_ii_v_i: list[MidiChord]) -> None:
        """Start times apply by index; missing ones stay unset."""
        options = PerformanceOptions(velocity=80, start_times=[0, 2], duration=2, channel=10)
        perf = to_performance_output(voiced_ii_v_i, options)
        assert [p.start_beat for p in perf] == [0, 2, None]
        assert all(p.duration_beats == 2 for p in perf)
        assert all(p.channel == 10 and p.velocity == 80 for p in perf)

    def test_options_camel_case(self) -> None:
        """startTimes is accepted."""
        options = PerformanceOptions.model_validate({"startTimes": [1.0]})
        assert options.start_times == [1.0]

    def test_options_validation(self) -> None:
        """Channel 1-16, velocity 0-127, positive duration."""
        with pytest.raises(ValidationError):
            PerformanceOptions(channel=0)
        with pytest.raises(ValidationError):
            PerformanceOptions(channel=17)
        with pytest.raises(ValidationError):
            PerformanceOptions(velocity=128)
        with pytest.raises(ValidationError):
            PerformanceOptions(duration=0)


class TestPerformanceToMidi:
    """Test performance export."""

    def test_sequential_without_start(self) -> None:
        """Chords without a start follow each other at four beats."""
        chords = [
            PerformanceChord(notes=(48, 52, 55), index=0),
            PerformanceChord(notes=(50, 53, 57), index=1),
        ]
        mid = performance_to_midi(chords)
        track = mid.tracks[0]
        assert len(track) == 14

        events = performance_to_events(chords)
        assert [e.start_ticks for e in events] == [0, 0, 0, 1920, 1920, 1920]
        assert all(e.duration_ticks == 1920 for e in events)

    def test_channel_is_zero_based_on_wire(self) -> None:
        """Channel 1 is wire channel 0, channel 10 is 9."""
        mid = performance_to_midi([PerformanceChord(notes=(36,), index=0, channel=10)])
        assert note_ons(mid)[0].channel == 9

    def test_explicit_timing(self) -> None:
        """start_beat and duration_beats override the cursor."""
        chords = [
            PerformanceChord(notes=(60,), index=0, start_beat=1.0, duration_beats=0.5),
            PerformanceChord(notes=(62,), index=1),
        ]
        events = performance_to_events(chords)
        assert (events[0].start_ticks, events[0].duration_ticks) == (480, 240)
        assert events[1].start_ticks == 720

    def test_per_note_velocities(self) -> None:
        """Velocities apply by note position, falling back to velocity."""
        chord = PerformanceChord(notes=(48, 60, 64), index=0, velocity=70, velocities=(90, 100))
        assert [e.velocity for e in performance_to_events([chord])] == [90, 100, 70]

    def test_voice_led_round_trip(self, voiced_ii_v_i: list[MidiChord], temp_midi_path: Path) -> None:
        """A voiced progression saves and reloads."""
        performance_to_midi(to_performance_output(voiced_ii_v_i), tempo_bpm=100).save(
            str(temp_midi_path)
        )
        loaded = MidiFile(str(temp_midi_path))
        assert {msg.note for msg in note_ons(loaded)} == {
            n for chord in voiced_ii_v_i for n in chord.notes
        }


class TestClipToMidi:
    """Test clip export."""

    def test_clip_notes(self) -> None:
        """Clip notes keep their timing and velocity."""
        notes = [
            ClipNote(pitch=60, start_time=0, duration=1, velocity=90),
            ClipNote(pitch=64, start_time=1, duration=1),
        ]
        mid = clip_to_midi(notes, channel=2)
        ons = note_ons(mid)
        assert [(m.note, m.velocity, m.channel) for m in ons] == [(60, 90, 1), (64, 100, 1)]
