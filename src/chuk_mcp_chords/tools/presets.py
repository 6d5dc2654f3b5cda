"""
Preset tools - MCP tools for preset discovery.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.constants import ErrorMessages
from chuk_mcp_chords.presets import PresetLoader

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_preset_tools(mcp: ChukMCPServer, preset_loader: PresetLoader) -> dict[str, Any]:
    """
    Register preset tools with the MCP server.

    Args:
        mcp: The MCP server instance
        preset_loader: The preset loader

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chords_list_presets() -> str:
        """
        List available voice-leading presets.

        Returns:
            JSON string with list of preset summaries

        Example:
            chords_list_presets()
        """
        try:
            presets = preset_loader.list_presets()
            return json.dumps(
                {
                    "status": "success",
                    "presets": [p.model_dump() for p in presets],
                    "count": len(presets),
                }
            )
        except Exception as e:
            logger.exception("Failed to list presets")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_list_presets"] = chords_list_presets

    @mcp.tool  # type: ignore[arg-type]
    async def chords_describe_preset(name: str) -> str:
        """
        Get the full options of a preset.

        Args:
            name: Preset name

        Returns:
            JSON string with the preset's options

        Example:
            chords_describe_preset(name="jazz-piano")
        """
        try:
            preset = preset_loader.get_preset(name)
            if preset is None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.PRESET_NOT_FOUND.format(name=name)}
                )

            return json.dumps(
                {
                    "status": "success",
                    "preset": {
                        "name": preset.name,
                        "description": preset.description,
                        "options": preset.options.model_dump(mode="json", by_alias=True),
                    },
                }
            )
        except Exception as e:
            logger.exception("Failed to describe preset")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_describe_preset"] = chords_describe_preset

    return tools
