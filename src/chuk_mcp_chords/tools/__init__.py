"""
MCP tool implementations.

Tools are organized by domain:
- chords - Build, validate and parse chords; key palettes
- voicing - Voice leading, plain rendering, performance output, MIDI export
- clips - Progression and melodic line rendering
- presets - Preset discovery
"""

from chuk_mcp_chords.tools.chords import register_chord_tools
from chuk_mcp_chords.tools.clips import register_clip_tools
from chuk_mcp_chords.tools.presets import register_preset_tools
from chuk_mcp_chords.tools.voicing import register_voicing_tools

__all__ = [
    "register_chord_tools",
    "register_clip_tools",
    "register_preset_tools",
    "register_voicing_tools",
]
