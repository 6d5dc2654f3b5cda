"""
Clip tools - MCP tools for rendering progressions and melodies.

Both tools return clip notes (pitch, start_time, duration, velocity) and
can optionally write the clip to a MIDI file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from chuk_mcp_chords.compiler import clip_to_midi, render_chord_progression, render_melodic_line
from chuk_mcp_chords.core import ChordParseError, ChordSpecError
from chuk_mcp_chords.models.progression import (
    MelodicLineInput,
    ProgressionInput,
    RenderedClip,
)
from chuk_mcp_chords.tools.voicing import error_response
from chuk_mcp_chords.voicing import VoiceLeadingError

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_clip_tools(mcp: ChukMCPServer, output_dir: Path) -> dict[str, Any]:
    """
    Register clip rendering tools with the MCP server.

    Args:
        mcp: The MCP server instance
        output_dir: Directory for MIDI files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    def clip_response(clip: RenderedClip, output_name: str | None, tempo: int) -> str:
        body: dict[str, Any] = {"status": "success", **clip.model_dump(mode="json")}
        body["count"] = len(clip.notes)
        if output_name:
            output_path = output_dir / f"{output_name}.mid"
            output_dir.mkdir(parents=True, exist_ok=True)
            clip_to_midi(clip.notes, tempo_bpm=tempo).save(str(output_path))
            body["output_path"] = str(output_path)
        return json.dumps(body)

    @mcp.tool  # type: ignore[arg-type]
    async def chords_render_progression(
        chords: list[dict[str, Any]],
        activations: list[dict[str, Any]],
        base_octave: int = 4,
        max_voices: int = 4,
        velocity: int = 100,
        output_name: str | None = None,
        tempo: int = 120,
    ) -> str:
        """
        Render a chord progression triggered by rhythmic activations.

        Each chord is active from its onset_time until the next chord.
        Each activation sounds the active chord for its duration.

        Args:
            chords: [{"chord": "Dm7", "onset_time": 0}, ...]; chord may also be
                a spec like {"root": "D", "quality": "min7"}
            activations: [{"onset_time": 0, "duration": 1.5}, ...]
            base_octave: Octave of the first voicing
            max_voices: Upper voices per chord
            velocity: Velocity for every note
            output_name: Optional MIDI filename (without .mid extension)
            tempo: Tempo for the MIDI file

        Returns:
            JSON string with clip notes and total_beats

        Example:
            chords_render_progression(
                chords=[{"chord": "C", "onset_time": 0}, {"chord": "G", "onset_time": 4}],
                activations=[{"onset_time": 0, "duration": 2}, {"onset_time": 4, "duration": 2}],
            )
        """
        try:
            progression = ProgressionInput(
                chords=chords,  # type: ignore[arg-type]
                activations=activations,  # type: ignore[arg-type]
                base_octave=base_octave,
                max_voices=max_voices,
                velocity=velocity,
            )
            return clip_response(render_chord_progression(progression), output_name, tempo)
        except (ChordParseError, ChordSpecError, VoiceLeadingError, ValidationError, ValueError) as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Failed to render progression")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_render_progression"] = chords_render_progression

    @mcp.tool  # type: ignore[arg-type]
    async def chords_render_melody(
        notes: list[dict[str, Any]],
        scale_root: str | None = None,
        scale_type: str = "major",
        output_name: str | None = None,
        tempo: int = 120,
    ) -> str:
        """
        Render a melodic line from note strings.

        Notes outside the optional scale are reported as warnings.

        Args:
            notes: [{"note": "C4", "start_time": 0, "duration": 1}, ...]
            scale_root: Optional scale root for out-of-key warnings
            scale_type: Scale type (major, minor, dorian, ...)
            output_name: Optional MIDI filename (without .mid extension)
            tempo: Tempo for the MIDI file

        Returns:
            JSON string with clip notes, total_beats and warnings

        Example:
            chords_render_melody(
                notes=[{"note": "E4", "start_time": 0, "duration": 1}],
                scale_root="C",
            )
        """
        try:
            line = MelodicLineInput(
                notes=notes,  # type: ignore[arg-type]
                scale={"root": scale_root, "type": scale_type} if scale_root else None,  # type: ignore[arg-type]
            )
            return clip_response(render_melodic_line(line), output_name, tempo)
        except (ChordParseError, ValidationError, ValueError) as e:
            return error_response(e)
        except Exception as e:
            logger.exception("Failed to render melody")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_render_melody"] = chords_render_melody

    return tools
