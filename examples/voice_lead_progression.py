#!/usr/bin/env python3
"""
Example: Voice lead a few progressions and write them to MIDI.

This demonstrates the whole pipeline - symbols, voice leading,
performance output and MIDI export.

Usage:
    python examples/voice_lead_progression.py
    # Creates: examples/output/ii_v_i.mid, examples/output/pop_pad.mid,
    #          examples/output/comping.mid
"""

from pathlib import Path

from chuk_mcp_chords.compiler import (
    clip_to_midi,
    performance_to_midi,
    render_chord_progression,
    to_performance_output,
)
from chuk_mcp_chords.core import format_symbol, parse_chord_symbol
from chuk_mcp_chords.models import (
    Activation,
    ChordEvent,
    PerformanceOptions,
    ProgressionInput,
    VoiceLeadOptions,
)
from chuk_mcp_chords.presets import PresetLoader
from chuk_mcp_chords.voicing import MidiChord, voice_lead


def show(voiced: list[MidiChord]) -> None:
    for chord in voiced:
        print(f"  {format_symbol(chord.spec):8} bass={chord.bass:3} voices={chord.voices}")


def main() -> None:
    """Generate example MIDI files."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    # Example 1: ii-V-I with default options
    print("Generating ii_v_i.mid...")
    specs = [parse_chord_symbol(s) for s in ("Dm7", "G7", "Cmaj7")]
    voiced = voice_lead(specs, VoiceLeadOptions(base_octave=3))
    show(voiced)
    performance_to_midi(to_performance_output(voiced), tempo_bpm=90).save(
        str(output_dir / "ii_v_i.mid")
    )

    # Example 2: Pop progression with the 'pad' preset
    print("\nGenerating pop_pad.mid...")
    preset = PresetLoader().get_preset("pad")
    if preset is None:
        raise SystemExit("Preset 'pad' not found")
    specs = [parse_chord_symbol(s) for s in ("C", "Am", "F", "G")]
    voiced = voice_lead(specs, preset.options)
    show(voiced)
    performance = to_performance_output(voiced, PerformanceOptions(velocity=70, duration=4))
    performance_to_midi(performance, tempo_bpm=80).save(str(output_dir / "pop_pad.mid"))

    # Example 3: Comping rhythm over chord changes
    print("\nGenerating comping.mid...")
    progression = ProgressionInput(
        chords=[
            ChordEvent(chord="Dm9", onset_time=0),
            ChordEvent(chord="G13", onset_time=4),
            ChordEvent(chord="Cmaj9", onset_time=8),
        ],
        activations=[
            Activation(onset_time=beat, duration=0.75) for beat in (0, 1.5, 3, 4, 5.5, 7, 8, 9.5)
        ],
        base_octave=3,
    )
    clip = render_chord_progression(progression)
    print(f"  {len(clip.notes)} notes over {clip.total_beats} beats")
    clip_to_midi(clip.notes, tempo_bpm=110).save(str(output_dir / "comping.mid"))

    print("\nDone! Open the MIDI files in your DAW to hear them.")


if __name__ == "__main__":
    main()
