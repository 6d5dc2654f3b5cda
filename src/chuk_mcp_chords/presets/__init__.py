"""
Preset system - named voice-leading configurations.

Presets bundle the options for a playing style (close piano, drop-2 jazz
comping, wide pads) so callers don't repeat them on every request.
"""

from chuk_mcp_chords.presets.loader import PresetLoader

__all__ = ["PresetLoader"]
