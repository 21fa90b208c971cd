"""Composition results: offsets, fills and styled output.

This module defines the transient records that flow out of composition:
- OffsetSide: Which side of its source an offset loop ended up on
- OffsetPair: A source loop and its derived offset loop
- FillSpec: Colour and pattern designation for a fill
- Band: Outer ring with at most one hole, filled for display
- StyledLoop: A loop with the colour it should be persisted with
"""

from dataclasses import dataclass
from enum import Enum, auto

from loopsmith.domain.loop import Loop

SOLID_PATTERN = "SOLID"
BY_LAYER = 256


class OffsetSide(Enum):
    """Side of the source loop an offset lies on, judged by area."""

    INNER = auto()
    OUTER = auto()


@dataclass(frozen=True)
class OffsetPair:
    """A loop and the offset derived from it.

    Attributes:
        source: Loop the offset was requested for
        offset: Loop returned by the kernel
        distance: Signed distance the kernel was asked for
        side: INNER if the offset encloses less area than the source
        suspect: True when an inward offset was requested but none of the
            kernel's answers shrank the loop
    """

    source: Loop
    offset: Loop
    distance: float
    side: OffsetSide
    suspect: bool = False


@dataclass(frozen=True)
class FillSpec:
    """Fill designation handed to the persistence sink.

    Attributes:
        color: Colour index (1 = red, 3 = green, 256 = by layer)
        pattern: "SOLID" or the name of a predefined hatch pattern
        scale: Pattern scale (ignored for solid fills)
    """

    color: int = BY_LAYER
    pattern: str = SOLID_PATTERN
    scale: float = 1.0

    @property
    def is_solid(self) -> bool:
        return self.pattern.upper() == SOLID_PATTERN


@dataclass(frozen=True)
class Band:
    """Area between an outer loop and one inner loop, used for fill only.

    A band without an inner loop fills the whole outer loop (a core fill).

    Attributes:
        outer: Outer ring
        inner: Inner ring (hole), or None
        fill: How to fill the band
    """

    outer: Loop
    inner: Loop | None
    fill: FillSpec

    @property
    def area(self) -> float:
        inner_area = self.inner.area if self.inner is not None else 0.0
        return self.outer.area - inner_area

    def boundaries(self) -> list[Loop]:
        """Outer ring first, then the hole if any."""
        if self.inner is None:
            return [self.outer]
        return [self.outer, self.inner]


@dataclass(frozen=True)
class StyledLoop:
    """A loop together with its display colour."""

    loop: Loop
    color: int
