"""
Voicing tools - MCP tools for voice leading, rendering and MIDI export.

Chords are passed as symbols ('Dm7', 'G7', 'Cmaj7'). Voice-leading options
can come from a named preset, with any explicit argument overriding it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.compiler import performance_to_midi, to_performance_output
from chuk_mcp_chords.constants import ErrorMessages
from chuk_mcp_chords.core import ChordParseError, ChordSpec, ChordSpecError, parse_chord_symbol
from chuk_mcp_chords.models.options import PerformanceOptions, RenderOptions, VoiceLeadOptions
from chuk_mcp_chords.presets import PresetLoader
from chuk_mcp_chords.tools.chords import parse_error_response
from chuk_mcp_chords.voicing import VoiceLeadingError, render_chord_sequence, voice_lead

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def parse_chords(chords: list[str]) -> list[ChordSpec]:
    """Parse a list of chord symbols."""
    return [parse_chord_symbol(symbol) for symbol in chords]


def build_voice_lead_options(
    preset_loader: PresetLoader,
    preset: str | None = None,
    **overrides: Any,
) -> VoiceLeadOptions:
    """
    Resolve voice-leading options from a preset plus explicit overrides.

    None-valued overrides are ignored. Without a preset, base_octave
    defaults to 4.
    """
    explicit = {k: v for k, v in overrides.items() if v is not None}

    if preset is not None:
        loaded = preset_loader.get_preset(preset)
        if loaded is None:
            raise ValueError(ErrorMessages.PRESET_NOT_FOUND.format(name=preset))
        return loaded.to_options(**explicit)

    explicit.setdefault("base_octave", 4)
    return VoiceLeadOptions(**explicit)


def error_response(e: Exception) -> str:
    """JSON error body for the expected failure types."""
    if isinstance(e, ChordParseError):
        return parse_error_response(e)
    if isinstance(e, ChordSpecError):
        return json.dumps({"status": "error", "code": e.code.value, "message": e.error.message})
    return json.dumps({"status": "error", "message": str(e)})


def register_voicing_tools(
    mcp: ChukMCPServer,
    preset_loader: PresetLoader,
    output_dir: Path,
) -> dict[str, Any]:
    """
    Register voicing and export tools with the MCP server.

    Args:
        mcp: The MCP server instance
        preset_loader: The preset loader
        output_dir: Directory for MIDI files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chords_voice_lead(
        chords: list[str],
        preset: str | None = None,
        base_octave: int | None = None,
        max_voices: int | None = None,
        keep_common_tones: bool | None = None,
        tone_priority: list[str] | None = None,
        min_note: int | None = None,
        max_note: int | None = None,
        bass_octave: int | None = None,
        bass_strategy: str | None = None,
        voicing: str | None = None,
        allow_voice_crossing: bool | None = None,
    ) -> str:
        """
        Voice a chord sequence with smooth voice leading.

        Every chord gets the same number of upper voices; voice i is the
        same line in every chord.

        Args:
            chords: Chord symbols in playing order
            preset: Optional preset name (see chords_list_presets)
            base_octave: Octave of the first voicing (default 4)
            max_voices: Upper voices per chord (default 4)
            keep_common_tones: Hold shared tones in place
            tone_priority: Degrees from most to least essential
            min_note: Lowest MIDI note allowed
            max_note: Highest MIDI note allowed
            bass_octave: Bass octave (default base_octave - 1)
            bass_strategy: 'followRoot' or 'minimalMotion'
            voicing: Spacing of the first chord ('close', 'drop2', 'drop3')
            allow_voice_crossing: Let voices pass each other

        Returns:
            JSON string with bass and voices per chord

        Example:
            chords_voice_lead(chords=["Dm7", "G7", "Cmaj7"], base_octave=3)
        """
        try:
            options = build_voice_lead_options(
                preset_loader,
                preset,
                base_octave=base_octave,
                max_voices=max_voices,
                keep_common_tones=keep_common_tones,
                tone_priority=tone_priority,
                min_note=min_note,
                max_note=max_note,
                bass_octave=bass_octave,
                bass_strategy=bass_strategy,
                voicing=voicing,
                allow_voice_crossing=allow_voice_crossing,
            )
            voiced = voice_lead(parse_chords(chords), options)

            return json.dumps(
                {
                    "status": "success",
                    "chords": [
                        {"symbol": symbol, **chord.to_dict()}
                        for symbol, chord in zip(chords, voiced)
                    ],
                    "options": options.model_dump(mode="json", by_alias=True),
                }
            )
        except (ChordParseError, ChordSpecError, VoiceLeadingError, ValueError) as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Failed to voice lead")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_voice_lead"] = chords_voice_lead

    @mcp.tool  # type: ignore[arg-type]
    async def chords_render(
        chords: list[str],
        base_octave: int = 4,
        bass_octave: int | None = None,
        voicing: str = "close",
    ) -> str:
        """
        Render chords independently, without voice leading.

        Args:
            chords: Chord symbols
            base_octave: Octave the root of each chord starts in
            bass_octave: Bass octave (default base_octave - 1)
            voicing: 'close', 'drop2' or 'drop3'

        Returns:
            JSON string with bass and voices per chord

        Example:
            chords_render(chords=["Cmaj7", "Fmaj7"], voicing="drop2")
        """
        try:
            options = RenderOptions(
                base_octave=base_octave,
                bass_octave=bass_octave,
                voicing=voicing,  # type: ignore[arg-type]
            )
            rendered = render_chord_sequence(parse_chords(chords), options)

            return json.dumps(
                {
                    "status": "success",
                    "chords": [
                        {"symbol": symbol, **chord.to_dict()}
                        for symbol, chord in zip(chords, rendered)
                    ],
                }
            )
        except (ChordParseError, ChordSpecError, ValueError) as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Failed to render chords")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_render"] = chords_render

    @mcp.tool  # type: ignore[arg-type]
    async def chords_performance(
        chords: list[str],
        preset: str | None = None,
        base_octave: int | None = None,
        max_voices: int | None = None,
        keep_common_tones: bool | None = None,
        velocity: int = 100,
        velocities: list[int] | None = None,
        start_times: list[float] | None = None,
        duration: float | None = None,
        channel: int = 1,
    ) -> str:
        """
        Voice lead chords and flatten them into playable note lists.

        Args:
            chords: Chord symbols in playing order
            preset: Optional preset name
            base_octave: Octave of the first voicing (default 4)
            max_voices: Upper voices per chord
            keep_common_tones: Hold shared tones in place
            velocity: Velocity for every note (0-127)
            velocities: Optional per-note velocities
            start_times: Optional start beat per chord
            duration: Optional duration in beats for every chord
            channel: MIDI channel 1-16

        Returns:
            JSON string with sorted notes per chord

        Example:
            chords_performance(chords=["C", "Am", "F", "G"], start_times=[0, 4, 8, 12], duration=4)
        """
        try:
            options = build_voice_lead_options(
                preset_loader,
                preset,
                base_octave=base_octave,
                max_voices=max_voices,
                keep_common_tones=keep_common_tones,
            )
            performance = to_performance_output(
                voice_lead(parse_chords(chords), options),
                PerformanceOptions(
                    velocity=velocity,
                    velocities=velocities,
                    start_times=start_times,
                    duration=duration,
                    channel=channel,
                ),
            )

            return json.dumps(
                {"status": "success", "chords": [chord.to_dict() for chord in performance]}
            )
        except (ChordParseError, ChordSpecError, VoiceLeadingError, ValueError) as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Failed to build performance output")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_performance"] = chords_performance

    @mcp.tool  # type: ignore[arg-type]
    async def chords_export_midi(
        chords: list[str],
        output_name: str,
        preset: str | None = None,
        base_octave: int | None = None,
        max_voices: int | None = None,
        keep_common_tones: bool | None = None,
        tempo: int = 120,
        beats_per_chord: float = 4.0,
        velocity: int = 100,
        channel: int = 1,
    ) -> str:
        """
        Voice lead chords and write them to a MIDI file.

        Chords play back to back, each lasting beats_per_chord.

        Args:
            chords: Chord symbols in playing order
            output_name: Output filename (without .mid extension)
            preset: Optional preset name
            base_octave: Octave of the first voicing (default 4)
            max_voices: Upper voices per chord
            keep_common_tones: Hold shared tones in place
            tempo: Tempo in BPM
            beats_per_chord: Length of each chord in beats
            velocity: Velocity for every note
            channel: MIDI channel 1-16

        Returns:
            JSON string with the output path

        Example:
            chords_export_midi(chords=["Dm7", "G7", "Cmaj7"], output_name="ii-v-i", tempo=90)
        """
        try:
            options = build_voice_lead_options(
                preset_loader,
                preset,
                base_octave=base_octave,
                max_voices=max_voices,
                keep_common_tones=keep_common_tones,
            )
            performance = to_performance_output(
                voice_lead(parse_chords(chords), options),
                PerformanceOptions(velocity=velocity, duration=beats_per_chord, channel=channel),
            )

            output_path = output_dir / f"{output_name}.mid"
            output_dir.mkdir(parents=True, exist_ok=True)
            performance_to_midi(performance, tempo_bpm=tempo).save(str(output_path))

            return json.dumps(
                {
                    "status": "success",
                    "output_path": str(output_path),
                    "chords": len(performance),
                    "total_beats": beats_per_chord * len(performance),
                }
            )
        except (ChordParseError, ChordSpecError, VoiceLeadingError, ValueError) as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Failed to export MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_export_midi"] = chords_export_midi

    return tools
