#!/usr/bin/env python3
"""
Async Chords MCP Server using chuk-mcp-server

This server provides MCP tools for building chords and voicing chord
sequences. Chords are spelled correctly (a C diminished seventh contains
Bbb, not A) and sequences are voice led with stable voice slots.

The server provides tools for:
- Building, validating and parsing chords
- Listing the chords of a key
- Voice leading chord sequences, with optional presets
- Rendering progressions and melodies to clip notes
- Exporting to MIDI files
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_chords.presets import PresetLoader
from chuk_mcp_chords.tools import (
    register_chord_tools,
    register_clip_tools,
    register_preset_tools,
    register_voicing_tools,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-chords")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
PRESETS_DIR = BASE_PATH / "presets"
OUTPUT_DIR = BASE_PATH / "output"
PRESETS_LIBRARY_PATH = Path(__file__).parent / "presets" / "library"

preset_loader = PresetLoader(
    library_path=PRESETS_LIBRARY_PATH,
    project_path=PRESETS_DIR,
)

# Register all tools
chord_tools = register_chord_tools(mcp)
voicing_tools = register_voicing_tools(mcp, preset_loader, OUTPUT_DIR)
clip_tools = register_clip_tools(mcp, OUTPUT_DIR)
preset_tools = register_preset_tools(mcp, preset_loader)

# Export tool functions for direct access
chords_build = chord_tools["chords_build"]
chords_validate = chord_tools["chords_validate"]
chords_parse = chord_tools["chords_parse"]
chords_palette = chord_tools["chords_palette"]

chords_voice_lead = voicing_tools["chords_voice_lead"]
chords_render = voicing_tools["chords_render"]
chords_performance = voicing_tools["chords_performance"]
chords_export_midi = voicing_tools["chords_export_midi"]

chords_render_progression = clip_tools["chords_render_progression"]
chords_render_melody = clip_tools["chords_render_melody"]

chords_list_presets = preset_tools["chords_list_presets"]
chords_describe_preset = preset_tools["chords_describe_preset"]

logger.info("CHUK Chords MCP Server initialized")
logger.info(f"  Presets library: {PRESETS_LIBRARY_PATH}")
logger.info(f"  Output dir: {OUTPUT_DIR}")
