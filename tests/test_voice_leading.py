"""
Tests for the voicing engine.

Tests cover:
- select_tones doubling and omission (selection.py)
- voice_lead invariants, common tones, bass strategies (leader.py)
- render_chord_sequence and drop voicings (render.py, spacing.py)
"""

import logging

import pytest
from pydantic import ValidationError

from chuk_mcp_chords.constants import BassStrategy, VoicingType
from chuk_mcp_chords.core import ChordSpec, ChordSpecError, NoteName, build_chord, parse_chord_symbol
from chuk_mcp_chords.models import RenderOptions, VoiceLeadOptions
from chuk_mcp_chords.voicing import (
    MidiChord,
    VoiceLeadingError,
    apply_voicing,
    candidates,
    render_chord_sequence,
    select_tones,
    stack_close,
    voice_lead,
)


def chords(*symbols: str) -> list[ChordSpec]:
    return [parse_chord_symbol(s) for s in symbols]


def assert_well_formed(voiced: list[MidiChord], options: VoiceLeadOptions) -> None:
    for chord in voiced:
        assert len(chord.voices) == options.max_voices
        values = [chord.bass, *chord.voices]
        assert len(set(values)) == len(values)
        assert all(options.min_note <= v <= options.max_note for v in values)


class TestSelectTones:
    """Tests for tone selection."""

    def test_exact_fit(self) -> None:
        """No doubling or omission when counts match."""
        selection = select_tones(build_chord(parse_chord_symbol("C7")).unwrap(), 4)
        assert [str(t) for t in selection.tones] == ["C", "E", "G", "Bb"]
        assert selection.omitted == ()
        assert selection.doubled == ()

    def test_double_root(self) -> None:
        """A triad in four voices doubles the root."""
        selection = select_tones(build_chord(parse_chord_symbol("C")).unwrap(), 4)
        assert [str(t) for t in selection.tones] == ["C", "E", "G", "C"]
        assert selection.doubled == ("root",)

    def test_double_walks_priority(self) -> None:
        """More doubles continue down the priority list."""
        selection = select_tones(build_chord(parse_chord_symbol("C")).unwrap(), 6)
        assert selection.doubled == ("root", "3", "5")

    def test_double_repeats_walk(self) -> None:
        """The walk starts again once every present degree is doubled."""
        selection = select_tones(build_chord(parse_chord_symbol("Am")).unwrap(), 8)
        assert len(selection.tones) == 8
        assert selection.doubled == ("root", "3", "5", "root", "3")

    def test_omit_fifth_first(self) -> None:
        """The fifth is the first tone dropped."""
        selection = select_tones(build_chord(parse_chord_symbol("C7")).unwrap(), 3)
        assert [str(t) for t in selection.tones] == ["C", "E", "Bb"]
        assert selection.omitted == ("5",)

    def test_omitted_in_tertian_order(self) -> None:
        """Omitted degrees are listed low to high."""
        selection = select_tones(build_chord(parse_chord_symbol("C13")).unwrap(), 4)
        assert selection.degrees == (1, 3, 7, 9)
        assert selection.omitted == ("5", "11", "13")

    def test_custom_priority(self) -> None:
        """Guide tones first drops the root."""
        chord = build_chord(parse_chord_symbol("G7")).unwrap()
        selection = select_tones(chord, 2, ["3", "7", "root", "5"])
        assert [str(t) for t in selection.tones] == ["B", "F"]
        assert selection.omitted == ("root", "5")

    def test_unlisted_degrees_rank_last(self) -> None:
        """Degrees missing from the priority are dropped before listed ones."""
        chord = build_chord(parse_chord_symbol("C9")).unwrap()
        selection = select_tones(chord, 3, ["5", "root", "3"])
        assert selection.degrees == (1, 3, 5)
        assert selection.omitted == ("7", "9")

    def test_tensions_count_as_degrees(self) -> None:
        """Overlaid tensions are real degrees for selection."""
        chord = build_chord(parse_chord_symbol("C7b9")).unwrap()
        selection = select_tones(chord, 4)
        assert [str(t) for t in selection.tones] == ["C", "E", "Bb", "Db"]
        assert selection.omitted == ("5",)


class TestVoiceLead:
    """Tests for voice_lead."""

    def test_empty(self) -> None:
        """No chords, no output."""
        assert voice_lead([], VoiceLeadOptions(base_octave=4)) == []

    def test_first_chord_close_position(self) -> None:
        """First chord stacks upward from the base octave."""
        voiced = voice_lead(chords("C"), VoiceLeadOptions(base_octave=4, max_voices=3))
        assert voiced[0].bass == 48
        assert voiced[0].voices == (60, 64, 67)
        assert voiced[0].analysis is None

    def test_ii_v_i_voice_counts(self, ii_v_i: list[ChordSpec]) -> None:
        """Every chord gets exactly max_voices voices."""
        options = VoiceLeadOptions(base_octave=3, max_voices=4)
        voiced = voice_lead(ii_v_i, options)
        assert len(voiced) == 3
        assert_well_formed(voiced, options)

    def test_ii_v_i_values(self, ii_v_i: list[ChordSpec]) -> None:
        """Minimal motion around the anchor."""
        voiced = voice_lead(ii_v_i, VoiceLeadOptions(base_octave=3))
        assert [c.bass for c in voiced] == [38, 43, 36]
        assert voiced[0].voices == (50, 53, 57, 60)
        assert voiced[1].voices == (50, 53, 55, 59)
        assert voiced[2].voices == (52, 55, 59, 60)

    def test_common_tones_held(self) -> None:
        """C and E stay on the same MIDI values from C to Am."""
        voiced = voice_lead(
            chords("C", "Am"),
            VoiceLeadOptions(base_octave=4, max_voices=3, keep_common_tones=True),
        )
        first, second = voiced
        for pc in (0, 4):
            before = [v for v in first.voices if v % 12 == pc]
            after = [v for v in second.voices if v % 12 == pc]
            assert before == after
        assert second.voices == (60, 64, 69)

    def test_common_tones_keep_slots(self) -> None:
        """Held tones stay in their slot."""
        voiced = voice_lead(
            chords("C", "Em", "G"),
            VoiceLeadOptions(base_octave=4, max_voices=3, keep_common_tones=True),
        )
        assert voiced[1].voices[1:] == voiced[0].voices[1:]  # E and G held
        assert voiced[2].voices[2] == voiced[1].voices[2]  # G held again

    def test_no_crossing_by_default(self, pop_progression: list[ChordSpec]) -> None:
        """Greedy voices keep their pitch order."""
        voiced = voice_lead(pop_progression * 2, VoiceLeadOptions(base_octave=4))
        for chord in voiced:
            assert list(chord.voices) == sorted(chord.voices)
            assert chord.analysis is None or chord.analysis.crossed == ()

    def test_no_drift(self) -> None:
        """Voices stay near the first chord's center over a long cycle."""
        voiced = voice_lead(chords("C", "F", "G", "C") * 8, VoiceLeadOptions(base_octave=4))
        center = sum(voiced[0].voices) / len(voiced[0].voices)
        for chord in voiced:
            assert all(abs(v - center) <= 19 for v in chord.voices)

    def test_range_respected(self) -> None:
        """Every value stays within min_note..max_note."""
        options = VoiceLeadOptions(base_octave=4, min_note=48, max_note=76)
        voiced = voice_lead(chords("Dm7", "G7", "Cmaj7", "A7", "Dm9", "G13", "Cmaj7"), options)
        assert_well_formed(voiced, options)

    def test_first_voicing_fits_narrow_range(self) -> None:
        """The first stack moves to fit the range."""
        options = VoiceLeadOptions(base_octave=6, max_voices=3, min_note=40, max_note=70)
        voiced = voice_lead(chords("C"), options)
        assert_well_formed(voiced, options)

    def test_first_voicing_doubles_another_tone(self) -> None:
        """When the doubled tone has no free octave, a different chord tone is doubled."""
        options = VoiceLeadOptions(base_octave=4, max_voices=4, min_note=55, max_note=76)
        voiced = voice_lead(chords("C"), options)
        # The bass takes C 60, leaving 72 as the only free C
        assert voiced[0].bass == 60
        assert voiced[0].voices == (64, 67, 72, 76)
        assert voiced[0].analysis is not None
        assert voiced[0].analysis.doubled == ("3",)
        assert_well_formed(voiced, options)

    def test_narrow_range_sequence(self) -> None:
        """A tight range still voices a whole progression."""
        options = VoiceLeadOptions(base_octave=4, max_voices=4, min_note=55, max_note=76)
        voiced = voice_lead(chords("C", "F", "G", "C"), options)
        assert_well_formed(voiced, options)
        assert voiced[-1].voices == (64, 67, 72, 76)

    def test_greedy_leftover_doubles_nearest(self) -> None:
        """A voice whose target ran out doubles the nearest free chord tone."""
        options = VoiceLeadOptions(base_octave=4, max_voices=4, min_note=55, max_note=76)
        first, second = voice_lead(chords("Am7", "C"), options)
        assert first.voices == (60, 64, 67, 69)
        # Only one free C (72); the top voice takes E 76 over G 55
        assert second.voices == (64, 67, 72, 76)
        assert_well_formed([first, second], options)

    def test_greedy_holds_when_nothing_is_free(self) -> None:
        """With no free candidate a voice keeps its previous value."""
        options = VoiceLeadOptions(
            base_octave=4, max_voices=2, min_note=60, max_note=67, tone_priority=("3", "5", "root")
        )
        first, second = voice_lead(chords("C", "Dm"), options)
        assert first.voices == (64, 67)
        # A has no octave in range and F 65 is taken
        assert second.bass == 62
        assert second.voices == (65, 67)
        assert_well_formed([first, second], options)

    def test_common_tones_leftover_doubles_nearest(self) -> None:
        """The common-tone path doubles the nearest free tone once targets run out."""
        options = VoiceLeadOptions(
            base_octave=4, max_voices=4, min_note=55, max_note=76, keep_common_tones=True
        )
        first, second = voice_lead(chords("Am7", "C"), options)
        assert first.voices == (60, 64, 67, 69)
        # E and G held; slot 0 leaves the bass for C 72; slot 3 doubles E
        assert second.voices == (72, 64, 67, 76)
        assert second.analysis is not None
        assert second.analysis.crossed == ((0, 1), (0, 2))
        assert_well_formed([first, second], options)

    def test_common_tones_holds_when_nothing_is_free(self) -> None:
        """The common-tone path also holds a voice with no candidate left."""
        options = VoiceLeadOptions(
            base_octave=4,
            max_voices=2,
            min_note=60,
            max_note=67,
            keep_common_tones=True,
            tone_priority=("3", "5", "root"),
        )
        first, second = voice_lead(chords("C", "Dm"), options)
        assert first.voices == (64, 67)
        assert second.voices == (65, first.voices[1])

    def test_impossible_range(self) -> None:
        """No room for the voices raises."""
        options = VoiceLeadOptions(base_octave=4, max_voices=4, min_note=60, max_note=63)
        with pytest.raises(VoiceLeadingError):
            voice_lead(chords("C7"), options)

    def test_invalid_spec_fails_whole_call(self) -> None:
        """One bad chord means no output at all."""
        bad = ChordSpec(NoteName.C, "dim", omit=("3",))
        with pytest.raises(ChordSpecError):
            voice_lead([parse_chord_symbol("C"), bad], VoiceLeadOptions(base_octave=4))

    def test_analysis_reports_selection(self) -> None:
        """Doubles and omissions show up in the analysis."""
        voiced = voice_lead(chords("C", "C13"), VoiceLeadOptions(base_octave=4))
        assert voiced[0].analysis is not None
        assert voiced[0].analysis.doubled == ("root",)
        assert voiced[1].analysis is not None
        assert voiced[1].analysis.omitted == ("5", "11", "13")

    def test_slash_bass(self) -> None:
        """An explicit bass note wins."""
        voiced = voice_lead(chords("C/E"), VoiceLeadOptions(base_octave=4, max_voices=3))
        assert voiced[0].bass == 52
        assert 52 not in voiced[0].voices

    def test_bass_follows_root(self) -> None:
        """followRoot places each root in the bass octave."""
        voiced = voice_lead(chords("C", "G", "F"), VoiceLeadOptions(base_octave=4))
        assert [c.bass for c in voiced] == [48, 55, 53]

    def test_bass_minimal_motion(self) -> None:
        """minimalMotion moves the bass by the shortest step."""
        voiced = voice_lead(
            chords("C", "G", "F"),
            VoiceLeadOptions(base_octave=4, bass_strategy=BassStrategy.MINIMAL_MOTION),
        )
        assert [c.bass for c in voiced] == [48, 43, 41]

    def test_bass_octave_option(self) -> None:
        """bass_octave overrides base_octave - 1."""
        voiced = voice_lead(chords("A"), VoiceLeadOptions(base_octave=4, bass_octave=1))
        assert voiced[0].bass == 33

    def test_drop2_first_chord(self) -> None:
        """Voicing applies to the first chord."""
        voiced = voice_lead(
            chords("Cmaj7"), VoiceLeadOptions(base_octave=4, voicing=VoicingType.DROP2)
        )
        assert voiced[0].voices == (55, 60, 64, 71)

    def test_crossing_reported_with_common_tones(self, caplog: pytest.LogCaptureFixture) -> None:
        """The common-tone path reports crossings instead of re-sorting."""
        options = VoiceLeadOptions(
            base_octave=4, bass_octave=5, max_voices=2, keep_common_tones=True, min_note=60
        )
        with caplog.at_level(logging.WARNING, logger="chuk_mcp_chords.voicing.leader"):
            voiced = voice_lead(chords("C", "Em"), options)
        # E (64) is held in slot 1; min_note forces slot 0 up from C to G
        assert voiced[1].voices == (67, 64)
        assert voiced[1].analysis is not None
        assert voiced[1].analysis.crossed == ((0, 1),)
        assert "Voice crossing" in caplog.text

    def test_options_camel_case(self) -> None:
        """JSON-style option names are accepted."""
        options = VoiceLeadOptions.model_validate(
            {"baseOctave": 3, "maxVoices": 5, "keepCommonTones": True, "bassStrategy": "minimalMotion"}
        )
        assert options.max_voices == 5
        assert options.bass_strategy == BassStrategy.MINIMAL_MOTION
        assert options.effective_bass_octave == 2

    def test_options_reject_bad_range(self) -> None:
        """min_note above max_note is rejected."""
        with pytest.raises(ValidationError):
            VoiceLeadOptions(base_octave=4, min_note=80, max_note=60)
        with pytest.raises(ValidationError):
            VoiceLeadOptions(base_octave=4, max_voices=0)
        with pytest.raises(ValidationError):
            VoiceLeadOptions(base_octave=4, max_note=128)


class TestRender:
    """Tests for render_chord_sequence and spacing helpers."""

    def test_close(self) -> None:
        """Tones stack upward from the root."""
        rendered = render_chord_sequence(chords("C", "Am7"), RenderOptions(base_octave=4))
        assert rendered[0].bass == 48
        assert rendered[0].voices == (60, 64, 67)
        assert rendered[1].bass == 57
        assert rendered[1].voices == (69, 72, 76, 79)

    def test_voices_avoid_bass(self) -> None:
        """A voice that would land on the bass moves up an octave."""
        rendered = render_chord_sequence(chords("C"), RenderOptions(base_octave=4, bass_octave=4))
        assert rendered[0].bass == 60
        assert rendered[0].voices == (72, 76, 79)

    def test_one_voice_per_tone(self) -> None:
        """Plain rendering does not double or omit."""
        rendered = render_chord_sequence(chords("G13"), RenderOptions(base_octave=3))
        assert len(rendered[0].voices) == 7

    def test_drop2_widens(self) -> None:
        """drop2 spreads a four-note chord beyond an octave."""
        rendered = render_chord_sequence(
            chords("Cmaj7"), RenderOptions(base_octave=4, voicing=VoicingType.DROP2)
        )
        voices = rendered[0].voices
        assert voices == (55, 60, 64, 71)
        assert voices[-1] - voices[0] > 12

    def test_drop3(self) -> None:
        """drop3 lowers the third voice from the top."""
        rendered = render_chord_sequence(
            chords("Cmaj7"), RenderOptions(base_octave=4, voicing=VoicingType.DROP3)
        )
        assert rendered[0].voices == (52, 60, 67, 71)

    def test_drop_needs_four_voices(self) -> None:
        """Triads are left in close position."""
        assert apply_voicing([60, 64, 67], VoicingType.DROP2) == [60, 64, 67]

    def test_flat_root_crosses_octave(self) -> None:
        """Cb in octave 4 is MIDI 59."""
        rendered = render_chord_sequence(chords("Cb"), RenderOptions(base_octave=4))
        assert rendered[0].voices[0] == 59

    def test_stack_close_skips_avoided(self) -> None:
        """Avoided values are pushed up an octave."""
        assert stack_close([0, 4, 7], 48, avoid={52}) == [48, 64, 67]

    def test_candidates(self) -> None:
        """Candidates are the in-range octaves of a pitch class."""
        assert candidates(0, 50, 80) == [60, 72]
        assert candidates(0, 48, 60, exclude={48}) == [60]

    def test_invalid_spec(self) -> None:
        """Invalid specs raise."""
        with pytest.raises(ChordSpecError):
            render_chord_sequence(
                [ChordSpec(NoteName.C, "maj", bass=NoteName.C)], RenderOptions(base_octave=4)
            )
