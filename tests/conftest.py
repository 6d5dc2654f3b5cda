"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_chords.core import ChordSpec, parse_chord_symbol


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def presets_library_path() -> Path:
    """Path to the built-in preset library."""
    return Path(__file__).parent.parent / "src" / "chuk_mcp_chords" / "presets" / "library"


@pytest.fixture
def ii_v_i() -> list[ChordSpec]:
    """Dm7 - G7 - Cmaj7."""
    return [parse_chord_symbol(s) for s in ("Dm7", "G7", "Cmaj7")]


@pytest.fixture
def pop_progression() -> list[ChordSpec]:
    """C - Am - F - G."""
    return [parse_chord_symbol(s) for s in ("C", "Am", "F", "G")]
