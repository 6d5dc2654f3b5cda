"""
Chord primitives - ChordQuality, ChordSpec, Chord.

A ChordSpec is what a caller asks for: root, quality, optional tensions,
omissions and a slash bass. build_chord() validates it and spells every tone
through the tone calculator, in tertian order.

Validation failures are values (Result), never exceptions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Generic, Mapping, TypeVar

from chuk_mcp_chords.constants import ChordErrorCode, ErrorMessages
from chuk_mcp_chords.core.intervals import DEGREE_ORDER, calculate_tone
from chuk_mcp_chords.core.pitch import NoteName

T = TypeVar("T")


class ChordQuality(str, Enum):
    """The 18 supported chord qualities."""

    MAJOR = "maj"
    MINOR = "min"
    DIMINISHED = "dim"
    AUGMENTED = "aug"
    DOMINANT_7 = "7"
    MAJOR_7 = "maj7"
    MINOR_7 = "min7"
    HALF_DIMINISHED_7 = "m7b5"
    DIMINISHED_7 = "dim7"
    DOMINANT_9 = "9"
    MAJOR_9 = "maj9"
    MINOR_9 = "min9"
    DOMINANT_11 = "11"
    MAJOR_11 = "maj11"
    MINOR_11 = "min11"
    DOMINANT_13 = "13"
    MAJOR_13 = "maj13"
    MINOR_13 = "min13"

    @property
    def intervals(self) -> tuple[tuple[int, int], ...]:
        """(degree, accidental offset) pairs defining this quality."""
        return QUALITY_INTERVALS[self]

    @property
    def degrees(self) -> frozenset[int]:
        """Degrees present in this quality."""
        return frozenset(degree for degree, _ in QUALITY_INTERVALS[self])

    @property
    def suffix(self) -> str:
        """Symbol token written after the root."""
        return _QUALITY_SUFFIXES.get(self, self.value)


class Tension(str, Enum):
    """Altered extensions added above the seventh."""

    FLAT_9 = "b9"
    SHARP_9 = "#9"
    SHARP_11 = "#11"
    FLAT_13 = "b13"

    @property
    def degree(self) -> int:
        return _TENSION_DEGREES[self][0]

    @property
    def accidental(self) -> int:
        return _TENSION_DEGREES[self][1]


class OmitDegree(str, Enum):
    """Degrees that may be left out of a chord."""

    THIRD = "3"
    FIFTH = "5"

    @property
    def degree(self) -> int:
        return int(self.value)


# Quality definitions: (degree, accidental offset from major/perfect)
QUALITY_INTERVALS: Mapping[ChordQuality, tuple[tuple[int, int], ...]] = MappingProxyType(
    {
        # Triads
        ChordQuality.MAJOR: ((1, 0), (3, 0), (5, 0)),
        ChordQuality.MINOR: ((1, 0), (3, -1), (5, 0)),
        ChordQuality.DIMINISHED: ((1, 0), (3, -1), (5, -1)),
        ChordQuality.AUGMENTED: ((1, 0), (3, 0), (5, 1)),
        # Sevenths
        ChordQuality.DOMINANT_7: ((1, 0), (3, 0), (5, 0), (7, -1)),
        ChordQuality.MAJOR_7: ((1, 0), (3, 0), (5, 0), (7, 0)),
        ChordQuality.MINOR_7: ((1, 0), (3, -1), (5, 0), (7, -1)),
        ChordQuality.HALF_DIMINISHED_7: ((1, 0), (3, -1), (5, -1), (7, -1)),
        ChordQuality.DIMINISHED_7: ((1, 0), (3, -1), (5, -1), (7, -2)),
        # Ninths
        ChordQuality.DOMINANT_9: ((1, 0), (3, 0), (5, 0), (7, -1), (9, 0)),
        ChordQuality.MAJOR_9: ((1, 0), (3, 0), (5, 0), (7, 0), (9, 0)),
        ChordQuality.MINOR_9: ((1, 0), (3, -1), (5, 0), (7, -1), (9, 0)),
        # Elevenths
        ChordQuality.DOMINANT_11: ((1, 0), (3, 0), (5, 0), (7, -1), (9, 0), (11, 0)),
        ChordQuality.MAJOR_11: ((1, 0), (3, 0), (5, 0), (7, 0), (9, 0), (11, 0)),
        ChordQuality.MINOR_11: ((1, 0), (3, -1), (5, 0), (7, -1), (9, 0), (11, 0)),
        # Thirteenths
        ChordQuality.DOMINANT_13: ((1, 0), (3, 0), (5, 0), (7, -1), (9, 0), (11, 0), (13, 0)),
        ChordQuality.MAJOR_13: ((1, 0), (3, 0), (5, 0), (7, 0), (9, 0), (11, 0), (13, 0)),
        ChordQuality.MINOR_13: ((1, 0), (3, -1), (5, 0), (7, -1), (9, 0), (11, 0), (13, 0)),
    }
)

_QUALITY_SUFFIXES: dict[ChordQuality, str] = {
    ChordQuality.MAJOR: "",
    ChordQuality.MINOR: "m",
    ChordQuality.MINOR_7: "m7",
    ChordQuality.MINOR_9: "m9",
    ChordQuality.MINOR_11: "m11",
    ChordQuality.MINOR_13: "m13",
}

_TENSION_DEGREES: dict[Tension, tuple[int, int]] = {
    Tension.FLAT_9: (9, -1),
    Tension.SHARP_9: (9, 1),
    Tension.SHARP_11: (11, 1),
    Tension.FLAT_13: (13, -1),
}

# Symbol order for tensions
TENSION_ORDER: tuple[Tension, ...] = (
    Tension.FLAT_9,
    Tension.SHARP_9,
    Tension.SHARP_11,
    Tension.FLAT_13,
)

# Qualities whose third/fifth define them
DIMINISHED_QUALITIES = frozenset(
    {ChordQuality.DIMINISHED, ChordQuality.DIMINISHED_7, ChordQuality.HALF_DIMINISHED_7}
)
AUGMENTED_QUALITIES = frozenset({ChordQuality.AUGMENTED})


@dataclass(frozen=True)
class ChordSpec:
    """
    A chord request: root, quality, and optional color.

    Strings are coerced to enums, so ChordSpec(NoteName.C, "min7", tensions=["b9"])
    works. Duplicates are allowed here - catching them is the validator's job.
    """

    root: NoteName
    quality: ChordQuality
    tensions: tuple[Tension, ...] = ()
    omit: tuple[OmitDegree, ...] = ()
    bass: NoteName | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "quality", ChordQuality(self.quality))
        object.__setattr__(self, "tensions", tuple(Tension(t) for t in self.tensions))
        object.__setattr__(self, "omit", tuple(OmitDegree(o) for o in self.omit))

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        d: dict[str, object] = {"root": str(self.root), "quality": self.quality.value}
        if self.tensions:
            d["tensions"] = [t.value for t in self.tensions]
        if self.omit:
            d["omit"] = [o.value for o in self.omit]
        if self.bass is not None:
            d["bass"] = str(self.bass)
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, object]) -> ChordSpec:
        """Create from a dictionary with note names as strings."""
        bass = d.get("bass")
        return cls(
            root=NoteName.parse(str(d["root"])),
            quality=ChordQuality(d["quality"]),
            tensions=tuple(d.get("tensions") or ()),  # type: ignore[arg-type]
            omit=tuple(d.get("omit") or ()),  # type: ignore[arg-type]
            bass=NoteName.parse(str(bass)) if bass else None,
        )


@dataclass(frozen=True)
class Chord:
    """
    A built chord: display symbol and spelled tones in tertian order.

    degrees is aligned with tones (1, 3, 5, 7, 9, 11, 13 as present).
    """

    symbol: str
    tones: tuple[NoteName, ...]
    degrees: tuple[int, ...]
    bass: NoteName | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        d: dict[str, object] = {
            "symbol": self.symbol,
            "tones": [str(t) for t in self.tones],
            "degrees": list(self.degrees),
        }
        if self.bass is not None:
            d["bass"] = str(self.bass)
        return d


@dataclass(frozen=True)
class ChordError:
    """A single validation failure."""

    code: ChordErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ChordSpecError(ValueError):
    """Raised when an invalid ChordSpec reaches code that cannot return a Result."""

    def __init__(self, error: ChordError) -> None:
        super().__init__(f"Failed to build chord: {error.message}")
        self.error = error

    @property
    def code(self) -> ChordErrorCode:
        return self.error.code


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a ChordError."""

    value: T | None = None
    error: ChordError | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising ChordSpecError on failure."""
        if self.error is not None:
            raise ChordSpecError(self.error)
        return self.value  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ChordError) -> Result[T]:
        return cls(error=error)


# =============================================================================
# Validation - ordered rule chain, first match wins
# =============================================================================


def _first_duplicate(items: Iterable[T]) -> T | None:
    seen: set[T] = set()
    for item in items:
        if item in seen:
            return item
        seen.add(item)
    return None


def _duplicate_tension(spec: ChordSpec) -> ChordError | None:
    tension = _first_duplicate(spec.tensions)
    if tension is None:
        return None
    return ChordError(
        ChordErrorCode.DUPLICATE_TENSION,
        ErrorMessages.DUPLICATE_TENSION.format(tension=tension.value),
    )


def _duplicate_omit(spec: ChordSpec) -> ChordError | None:
    omit = _first_duplicate(spec.omit)
    if omit is None:
        return None
    return ChordError(
        ChordErrorCode.DUPLICATE_OMIT, ErrorMessages.DUPLICATE_OMIT.format(omit=omit.value)
    )


def _bass_equals_root(spec: ChordSpec) -> ChordError | None:
    if spec.bass is None or spec.bass != spec.root:
        return None
    return ChordError(ChordErrorCode.BASS_EQUALS_ROOT, ErrorMessages.BASS_EQUALS_ROOT)


def _tension_duplicates_chord_tone(spec: ChordSpec) -> ChordError | None:
    degrees = spec.quality.degrees
    for tension in spec.tensions:
        if tension.degree in degrees:
            return ChordError(
                ChordErrorCode.TENSION_DUPLICATES_CHORD_TONE,
                ErrorMessages.TENSION_DUPLICATES_CHORD_TONE.format(
                    tension=tension.value, degree=tension.degree, quality=spec.quality.value
                ),
            )
    return None


def _tension_on_diminished(spec: ChordSpec) -> ChordError | None:
    if not spec.tensions or spec.quality not in DIMINISHED_QUALITIES:
        return None
    return ChordError(
        ChordErrorCode.INVALID_TENSION_FOR_QUALITY,
        ErrorMessages.INVALID_TENSION_FOR_QUALITY.format(quality=spec.quality.value),
    )


def _omits_defining_third(spec: ChordSpec) -> ChordError | None:
    if OmitDegree.THIRD not in spec.omit or spec.quality not in DIMINISHED_QUALITIES:
        return None
    return ChordError(
        ChordErrorCode.CANNOT_OMIT_DEFINING_TONE,
        ErrorMessages.CANNOT_OMIT_THIRD.format(quality=spec.quality.value),
    )


def _omits_defining_fifth(spec: ChordSpec) -> ChordError | None:
    if OmitDegree.FIFTH not in spec.omit:
        return None
    if spec.quality not in DIMINISHED_QUALITIES | AUGMENTED_QUALITIES:
        return None
    return ChordError(
        ChordErrorCode.CANNOT_OMIT_DEFINING_TONE,
        ErrorMessages.CANNOT_OMIT_FIFTH.format(quality=spec.quality.value),
    )


VALIDATION_RULES: tuple[Callable[[ChordSpec], ChordError | None], ...] = (
    _duplicate_tension,
    _duplicate_omit,
    _bass_equals_root,
    _tension_duplicates_chord_tone,
    _tension_on_diminished,
    _omits_defining_third,
    _omits_defining_fifth,
)


def validate_chord_spec(spec: ChordSpec) -> Result[None]:
    """
    Validate a chord spec.

    Rules run in a fixed order and the first violation is returned.

    Returns:
        Result with no value on success, or the single ChordError found
    """
    for rule in VALIDATION_RULES:
        error = rule(spec)
        if error is not None:
            return Result.failure(error)
    return Result.success(None)


# =============================================================================
# Assembly
# =============================================================================


def chord_intervals(spec: ChordSpec) -> list[tuple[int, int]]:
    """
    (degree, accidental) pairs for a spec, in tertian order.

    Tensions overwrite or add their degree; omitted degrees are removed.
    Assumes the spec is valid.
    """
    intervals = dict(spec.quality.intervals)
    for tension in spec.tensions:
        intervals[tension.degree] = tension.accidental
    for omit in spec.omit:
        intervals.pop(omit.degree, None)
    return sorted(intervals.items(), key=lambda item: DEGREE_ORDER.index(item[0]))


def format_symbol(spec: ChordSpec) -> str:
    """
    Render a chord symbol deterministically.

    root + quality token + sorted tensions + (noN) per omission + /bass
    """
    symbol = f"{spec.root}{spec.quality.suffix}"
    symbol += "".join(t.value for t in sorted(spec.tensions, key=TENSION_ORDER.index))
    symbol += "".join(f"(no{o.value})" for o in spec.omit)
    if spec.bass is not None:
        symbol += f"/{spec.bass}"
    return symbol


def build_chord(spec: ChordSpec) -> Result[Chord]:
    """
    Build a chord from a spec.

    Args:
        spec: The chord specification

    Returns:
        Result holding the Chord, or the first validation error

    Example:
        build_chord(ChordSpec(NoteName.C, "dim7")).unwrap().tones
        # (C, Eb, Gb, Bbb)
    """
    validation = validate_chord_spec(spec)
    if not validation.ok:
        return Result.failure(validation.error)

    intervals = chord_intervals(spec)
    tones = tuple(calculate_tone(spec.root, degree, offset) for degree, offset in intervals)

    return Result.success(
        Chord(
            symbol=format_symbol(spec),
            tones=tones,
            degrees=tuple(degree for degree, _ in intervals),
            bass=spec.bass,
        )
    )
