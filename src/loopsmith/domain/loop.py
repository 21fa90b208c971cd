"""Closed loop representation.

This module defines the boundary types produced by loop assembly:
- Vertex: A loop vertex with the bulge of the edge leaving it
- Loop: A closed, ordered, bulge-encoded boundary
- Plane: Elevation and normal orientation shared by a working set

Loops use an open-array convention: N vertices describe N edges when closed,
the last edge running from the final vertex back to the first. The closing
vertex is never repeated.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from loopsmith.domain import _bulge
from loopsmith.domain.fragment import Point


@dataclass(frozen=True, slots=True)
class Vertex:
    """A loop vertex.

    Attributes:
        x: X coordinate in drawing units
        y: Y coordinate in drawing units
        bulge: Bulge of the edge from this vertex to the next one
            (0 for a straight edge)
    """

    x: float
    y: float
    bulge: float = 0.0

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert to (x, y, bulge), the layout drawing formats use."""
        return (self.x, self.y, self.bulge)


@dataclass(frozen=True, slots=True)
class Plane:
    """Working plane shared by all geometry of one run.

    Attributes:
        elevation: Distance of the plane from the origin along its normal
        normal_sign: +1 for the standard +Z normal, -1 for a flipped one
    """

    elevation: float = 0.0
    normal_sign: int = 1


@dataclass
class Loop:
    """A closed boundary assembled from curve fragments.

    Loops are sealed once built and never mutated afterwards; derived
    values are cached.

    Attributes:
        vertices: Ordered vertices, no repeated closing vertex
        closed: Whether the loop is sealed
        complete: False when the chain was force-closed without returning to
            its start, has fewer than 3 vertices, or encloses no usable area
        fragment_count: Number of fragments consumed to build the loop
        order: Discovery index, used to keep sorting stable
    """

    vertices: list[Vertex]
    closed: bool = True
    complete: bool = True
    fragment_count: int = 0
    order: int = 0
    _cached_area: float | None = field(default=None, repr=False, init=False, compare=False)

    def edges(self) -> list[tuple[Vertex, Vertex]]:
        """Edges as (from, to) vertex pairs, including the closing edge."""
        n = len(self.vertices)
        if n < 2:
            return []
        count = n if self.closed else n - 1
        return [(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(count)]

    def signed_area(self) -> float:
        """Calculate signed area using the shoelace formula with arc segments.

        Each bulged edge adds the area between the arc and its chord, so a
        loop of two half circles reports the full circle area.

        - Positive area: counter-clockwise winding
        - Negative area: clockwise winding

        Returns:
            Signed area of the loop
        """
        if self._cached_area is not None:
            return self._cached_area

        area = 0.0
        for a, b in self.edges():
            area += (a.x * b.y - b.x * a.y) / 2.0
            chord = _bulge.chord_length(a.x, a.y, b.x, b.y)
            area += _bulge.segment_area(chord, a.bulge)

        self._cached_area = area
        return area

    @property
    def area(self) -> float:
        """Unsigned area."""
        return abs(self.signed_area())

    def is_counter_clockwise(self) -> bool:
        return self.signed_area() > 0

    def distinct_vertex_count(self, tolerance: float) -> int:
        """Number of vertices not within tolerance of an earlier one."""
        distinct: list[Vertex] = []
        for v in self.vertices:
            if all(math.hypot(v.x - d.x, v.y - d.y) > tolerance for d in distinct):
                distinct.append(v)
        return len(distinct)

    def points(self, segments_per_circle: int = 64) -> list[Point]:
        """Flatten the loop into a polygon, approximating arcs.

        Args:
            segments_per_circle: Line segments per full turn of arc

        Returns:
            Polygon points without a repeated closing point
        """
        result: list[Point] = []
        for a, b in self.edges():
            for x, y in _bulge.flatten_bulge(a.x, a.y, b.x, b.y, a.bulge, segments_per_circle):
                result.append(Point(x, y))
        if not self.closed and self.vertices:
            last = self.vertices[-1]
            result.append(Point(last.x, last.y))
        return result

    def reversed(self) -> "Loop":
        """Same boundary traversed the other way.

        Each edge's bulge moves to the vertex that now starts it, negated.
        """
        n = len(self.vertices)
        new_vertices: list[Vertex] = []
        for k in range(n):
            v = self.vertices[n - 1 - k]
            # Edge (n-1-k) <- (n-2-k) reversed starts at v
            prev = self.vertices[(n - 2 - k) % n]
            new_vertices.append(Vertex(v.x, v.y, -prev.bulge))
        return Loop(
            vertices=new_vertices,
            closed=self.closed,
            complete=self.complete,
            fragment_count=self.fragment_count,
            order=self.order,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "vertices": [list(v.to_tuple()) for v in self.vertices],
            "closed": self.closed,
            "complete": self.complete,
            "fragment_count": self.fragment_count,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Loop":
        """Deserialize from dictionary."""
        return cls(
            vertices=[Vertex(*v) for v in data["vertices"]],
            closed=data.get("closed", True),
            complete=data.get("complete", True),
            fragment_count=data.get("fragment_count", 0),
            order=data.get("order", 0),
        )

    @classmethod
    def from_points(
        cls,
        points: list[tuple[float, float]] | list[tuple[float, float, float]],
        order: int = 0,
    ) -> "Loop":
        """Build a closed loop from (x, y) or (x, y, bulge) tuples.

        A trailing point equal to the first one is dropped.
        """
        vertices = [Vertex(p[0], p[1], p[2] if len(p) > 2 else 0.0) for p in points]
        if len(vertices) > 1 and (vertices[0].x, vertices[0].y) == (vertices[-1].x, vertices[-1].y):
            vertices.pop()
        return cls(
            vertices=vertices,
            closed=True,
            complete=True,
            fragment_count=len(vertices),
            order=order,
        )
