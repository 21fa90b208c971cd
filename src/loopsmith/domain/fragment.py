"""Curve fragment types for boundary reconstruction.

This module defines the loose pieces a boundary is rebuilt from:
- Point: A 2D point in drawing units
- Segment: A straight line fragment
- Arc: A circular arc fragment
- CurveFragment: The tagged union of the two

Fragments are immutable. All geometry shares one elevation and normal for a
working set, so only the arc's normal sign is carried per fragment.
"""

import math
from dataclasses import dataclass
from typing import Any, Union

from loopsmith.domain import _bulge
from loopsmith.exceptions import DegenerateFragmentError, UnsupportedFragmentError


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in drawing units
        y: Y coordinate in drawing units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_close(self, other: "Point", tolerance: float) -> bool:
        """Check whether another point lies within ``tolerance``."""
        return self.distance_to(other) <= tolerance

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class Segment:
    """A straight line fragment.

    Attributes:
        start: Start point as stored by the source
        end: End point as stored by the source
    """

    start: Point
    end: Point

    kind = "line"

    def bulge(self, forward: bool = True) -> float:  # noqa: ARG002
        """Bulge of a straight edge is always zero."""
        return 0.0

    def reversed(self) -> "Segment":
        """Same segment traversed end to start."""
        return Segment(self.end, self.start)

    def is_degenerate(self, tolerance: float) -> bool:
        """True if both endpoints coincide within tolerance."""
        return self.start.is_close(self.end, tolerance)

    def length(self) -> float:
        return self.start.distance_to(self.end)

    def midpoint(self) -> Point:
        return Point((self.start.x + self.end.x) / 2.0, (self.start.y + self.end.y) / 2.0)

    def midpoint_tangent(self) -> tuple[float, float]:
        """Unit direction of travel at the midpoint.

        Raises:
            DegenerateFragmentError: If the segment has zero length
        """
        length = self.length()
        if length == 0.0:
            raise DegenerateFragmentError(self, 0.0)
        return ((self.end.x - self.start.x) / length, (self.end.y - self.start.y) / length)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True, slots=True)
class Arc:
    """A circular arc fragment.

    The arc runs from ``start`` to ``end`` sweeping ``sweep`` radians
    counter-clockwise in its own plane. When the arc's normal points away
    from the working plane (``normal_sign == -1``) it appears clockwise.

    Attributes:
        start: Start point in working-plane coordinates
        end: End point in working-plane coordinates
        sweep: Swept angle magnitude, normalised into [0, 2*pi)
        normal_sign: +1 or -1, orientation of the arc's plane normal
    """

    start: Point
    end: Point
    sweep: float
    normal_sign: int = 1

    kind = "arc"

    def __post_init__(self) -> None:
        if self.normal_sign not in (1, -1):
            raise ValueError(f"normal_sign must be +1 or -1, got {self.normal_sign}")
        object.__setattr__(self, "sweep", self.sweep % math.tau)

    @classmethod
    def from_angles(
        cls,
        center: Point,
        radius: float,
        start_angle: float,
        end_angle: float,
        normal_sign: int = 1,
    ) -> "Arc":
        """Build an arc from centre, radius and start/end angles.

        Angles are in radians, measured counter-clockwise in the arc's own
        plane the way drawing hosts store them. For a flipped normal the
        plane is viewed from behind, which mirrors x.

        Args:
            center: Arc centre in the arc's own plane coordinates
            radius: Arc radius
            start_angle: Start angle in radians
            end_angle: End angle in radians
            normal_sign: +1 or -1, orientation of the plane normal

        Returns:
            Arc with working-plane endpoints
        """
        mirror = -1.0 if normal_sign < 0 else 1.0
        start = Point(
            mirror * (center.x + radius * math.cos(start_angle)),
            center.y + radius * math.sin(start_angle),
        )
        end = Point(
            mirror * (center.x + radius * math.cos(end_angle)),
            center.y + radius * math.sin(end_angle),
        )
        return cls(start=start, end=end, sweep=end_angle - start_angle, normal_sign=normal_sign)

    def bulge(self, forward: bool = True) -> float:
        """Bulge contributed by this arc for the given traversal direction.

        Args:
            forward: True for start->end traversal, False for end->start

        Returns:
            tan(sweep/4), negated for a flipped normal and again for reverse travel
        """
        value = _bulge.bulge_from_sweep(self.sweep, self.normal_sign)
        return value if forward else -value

    def reversed(self) -> "Arc":
        """Same arc traversed end to start."""
        return Arc(self.end, self.start, self.sweep, -self.normal_sign)

    def is_degenerate(self, tolerance: float) -> bool:
        """True if both endpoints coincide within tolerance.

        A closed circle cannot be carried as a single bulge, so it counts as
        degenerate too.
        """
        return self.start.is_close(self.end, tolerance)

    def _chord(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def radius(self) -> float:
        return _bulge.arc_radius(self._chord(), self.bulge())

    def center(self) -> Point:
        x, y = _bulge.arc_center(self.start.x, self.start.y, self.end.x, self.end.y, self.bulge())
        return Point(x, y)

    def length(self) -> float:
        return _bulge.arc_length(self._chord(), self.bulge())

    def midpoint(self) -> Point:
        x, y = _bulge.arc_midpoint(self.start.x, self.start.y, self.end.x, self.end.y, self.bulge())
        return Point(x, y)

    def midpoint_tangent(self) -> tuple[float, float]:
        """Unit direction of travel at the midpoint.

        At the middle of an arc the tangent is parallel to the chord.

        Raises:
            DegenerateFragmentError: If the arc's endpoints coincide
        """
        chord = self._chord()
        if chord == 0.0:
            raise DegenerateFragmentError(self, 0.0)
        return ((self.end.x - self.start.x) / chord, (self.end.y - self.start.y) / chord)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "sweep": self.sweep,
            "normal_sign": self.normal_sign,
        }


CurveFragment = Union[Segment, Arc]


def ensure_fragment(obj: object) -> CurveFragment:
    """Admit only line and arc fragments into the working set.

    Args:
        obj: Candidate fragment

    Returns:
        The same object, typed as a CurveFragment

    Raises:
        UnsupportedFragmentError: If obj is not a Segment or Arc
    """
    if isinstance(obj, (Segment, Arc)):
        return obj
    raise UnsupportedFragmentError(type(obj).__name__)


def fragment_from_dict(data: dict[str, Any]) -> CurveFragment:
    """Deserialize a fragment from its dictionary form.

    Raises:
        UnsupportedFragmentError: If the kind tag is unknown
    """
    kind = data.get("kind")
    start = Point.from_dict(data["start"])
    end = Point.from_dict(data["end"])
    if kind == Segment.kind:
        return Segment(start, end)
    if kind == Arc.kind:
        return Arc(start, end, data["sweep"], data.get("normal_sign", 1))
    raise UnsupportedFragmentError(str(kind))
