"""
Chord tools - MCP tools for building, validating and parsing chords.

Tools for assembling chords from specs, checking specs without building,
parsing chord symbols, and listing a key's chord palette.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.core import (
    ChordParseError,
    ChordSpec,
    Key,
    NoteName,
    build_chord,
    chord_palette,
    format_symbol,
    parse_chord_symbol,
    validate_chord_spec,
)
from chuk_mcp_chords.models.options import PaletteOptions

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _spec_from_args(
    root: str,
    quality: str,
    tensions: list[str] | None,
    omit: list[str] | None,
    bass: str | None,
) -> ChordSpec:
    return ChordSpec(
        root=NoteName.parse(root),
        quality=quality,  # type: ignore[arg-type]
        tensions=tuple(tensions or ()),  # type: ignore[arg-type]
        omit=tuple(omit or ()),  # type: ignore[arg-type]
        bass=NoteName.parse(bass) if bass else None,
    )


def parse_error_response(e: ChordParseError) -> str:
    """JSON error body for a parse failure."""
    return json.dumps(
        {
            "status": "error",
            "code": e.code.value,
            "position": e.position,
            "message": str(e),
        }
    )


def register_chord_tools(mcp: ChukMCPServer) -> dict[str, Any]:
    """
    Register chord assembly tools with the MCP server.

    Args:
        mcp: The MCP server instance

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chords_build(
        root: str,
        quality: str,
        tensions: list[str] | None = None,
        omit: list[str] | None = None,
        bass: str | None = None,
    ) -> str:
        """
        Build a chord and spell its tones.

        Args:
            root: Root note ('C', 'F#', 'Bb')
            quality: One of maj, min, dim, aug, 7, maj7, min7, m7b5, dim7,
                9, maj9, min9, 11, maj11, min11, 13, maj13, min13
            tensions: Optional altered tensions (b9, #9, #11, b13)
            omit: Optional degrees to leave out ('3', '5')
            bass: Optional slash bass note

        Returns:
            JSON string with symbol, tones and degrees, or the validation error

        Example:
            chords_build(root="C", quality="7", tensions=["b9"])
        """
        try:
            spec = _spec_from_args(root, quality, tensions, omit, bass)
            result = build_chord(spec)
            if result.error is not None:
                return json.dumps(
                    {
                        "status": "error",
                        "code": result.error.code.value,
                        "message": result.error.message,
                    }
                )

            return json.dumps({"status": "success", "chord": result.unwrap().to_dict()})
        except Exception as e:
            logger.exception("Failed to build chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_build"] = chords_build

    @mcp.tool  # type: ignore[arg-type]
    async def chords_validate(
        root: str,
        quality: str,
        tensions: list[str] | None = None,
        omit: list[str] | None = None,
        bass: str | None = None,
    ) -> str:
        """
        Validate a chord spec without building it.

        Reports at most one problem - the first rule that fails.

        Returns:
            JSON string with valid flag and, if invalid, the error code

        Example:
            chords_validate(root="C", quality="dim", omit=["3"])
        """
        try:
            spec = _spec_from_args(root, quality, tensions, omit, bass)
            result = validate_chord_spec(spec)
            body: dict[str, Any] = {"status": "success", "valid": result.ok}
            if result.error is not None:
                body["code"] = result.error.code.value
                body["message"] = result.error.message
            return json.dumps(body)
        except Exception as e:
            logger.exception("Failed to validate chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_validate"] = chords_validate

    @mcp.tool  # type: ignore[arg-type]
    async def chords_parse(symbol: str) -> str:
        """
        Parse a chord symbol into a spec and build it.

        Args:
            symbol: Chord symbol such as 'Dm7', 'G7b9', 'F#m7b5/C', 'C(no3)'

        Returns:
            JSON string with the parsed spec and the built chord

        Example:
            chords_parse(symbol="Bb13#11")
        """
        try:
            spec = parse_chord_symbol(symbol)
            body: dict[str, Any] = {"status": "success", "spec": spec.to_dict()}
            result = build_chord(spec)
            if result.error is not None:
                body["valid"] = False
                body["code"] = result.error.code.value
                body["message"] = result.error.message
            else:
                body["valid"] = True
                body["chord"] = result.unwrap().to_dict()
            return json.dumps(body)
        except ChordParseError as e:
            return parse_error_response(e)
        except Exception as e:
            logger.exception("Failed to parse chord")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_parse"] = chords_parse

    @mcp.tool  # type: ignore[arg-type]
    async def chords_palette(
        key: str,
        color: str = "triad",
        max_extension: int = 9,
        include_dominants: bool = False,
        include_borrowed: bool = False,
    ) -> str:
        """
        List the chords that belong to a key.

        Args:
            key: Key like 'C_major' or 'F#_minor'
            color: 'triad', 'seventh' or 'extended'
            max_extension: Highest extension for 'extended' (7, 9, 11, 13)
            include_dominants: Append secondary dominants
            include_borrowed: Append chords borrowed from the parallel minor

        Returns:
            JSON string with symbols and specs in palette order

        Example:
            chords_palette(key="C_major", color="seventh", include_dominants=True)
        """
        try:
            options = PaletteOptions(
                color=color,  # type: ignore[arg-type]
                max_extension=max_extension,  # type: ignore[arg-type]
                include_dominants=include_dominants,
                include_borrowed=include_borrowed,
            )
            palette = chord_palette(
                Key.parse(key),
                color=options.color,
                max_extension=options.max_extension,
                include_dominants=options.include_dominants,
                include_borrowed=options.include_borrowed,
            )

            return json.dumps(
                {
                    "status": "success",
                    "key": key,
                    "chords": [
                        {"symbol": format_symbol(spec), "spec": spec.to_dict()} for spec in palette
                    ],
                    "count": len(palette),
                }
            )
        except Exception as e:
            logger.exception("Failed to build palette")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chords_palette"] = chords_palette

    return tools
