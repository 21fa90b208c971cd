"""Geometry kernel: region construction, booleans and curve offset.

The composer and offset code talk to the kernel only through the
``RegionKernel`` and ``Region`` protocols, so a drafting host's native
kernel can be dropped in. ``ShapelyKernel`` is the bundled implementation.

Key classes:
- Region: Opaque boolean-composable area (protocol)
- RegionKernel: Region constructor and curve offset (protocol)
- ShapelyRegion, ShapelyKernel: Implementations backed by shapely
"""

from typing import Protocol

from shapely import BufferJoinStyle
from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.validation import explain_validity

from loopsmith.domain import CurveFragment, Loop, Point, Segment, Vertex
from loopsmith.exceptions import KernelOperationError


class Region(Protocol):
    """A kernel-owned area supporting in-place boolean operations.

    ``subtract`` and ``unite`` consume their operand: it is released whether
    or not the operation succeeds.
    """

    @property
    def area(self) -> float: ...

    @property
    def released(self) -> bool: ...

    def subtract(self, other: "Region") -> None: ...

    def unite(self, other: "Region") -> None: ...

    def explode(self) -> list[CurveFragment]: ...

    def release(self) -> None: ...


class RegionKernel(Protocol):
    """Region constructor and curve offset primitive."""

    def region_from_loop(self, loop: Loop) -> Region: ...

    def offset_curves(self, loop: Loop, distance: float) -> list[Loop]: ...


def _polygon_parts(geometry: BaseGeometry) -> list[Polygon]:
    """Polygonal pieces of a boolean result, dropping stray lines and points."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if hasattr(geometry, "geoms"):
        parts: list[Polygon] = []
        for part in geometry.geoms:
            parts.extend(_polygon_parts(part))
        return parts
    return []


class ShapelyRegion:
    """Region backed by a shapely (Multi)Polygon.

    Arcs are flattened when the region is built, so exploding a region
    yields straight segments only.
    """

    def __init__(self, geometry: BaseGeometry) -> None:
        self._geometry: BaseGeometry | None = geometry

    @property
    def geometry(self) -> BaseGeometry:
        if self._geometry is None:
            raise KernelOperationError("access", "region has been released")
        return self._geometry

    @property
    def area(self) -> float:
        return float(self.geometry.area)

    @property
    def released(self) -> bool:
        return self._geometry is None

    def polygons(self) -> list[Polygon]:
        return _polygon_parts(self.geometry)

    def subtract(self, other: Region) -> None:
        """Remove ``other`` from this region in place, consuming ``other``.

        Raises:
            KernelOperationError: If the boolean fails; this region is unchanged
        """
        self._combine(other, "subtract")

    def unite(self, other: Region) -> None:
        """Add ``other`` to this region in place, consuming ``other``.

        Raises:
            KernelOperationError: If the boolean fails; this region is unchanged
        """
        self._combine(other, "unite")

    def _combine(self, other: Region, operation: str) -> None:
        try:
            if not isinstance(other, ShapelyRegion):
                raise KernelOperationError(operation, f"foreign region type {type(other).__name__}")
            if other.released:
                raise KernelOperationError(operation, "operand has been released")
            mine = self.geometry
            try:
                if operation == "subtract":
                    combined = mine.difference(other.geometry)
                else:
                    combined = mine.union(other.geometry)
            except GEOSException as e:
                raise KernelOperationError(operation, str(e)) from e
            parts = _polygon_parts(combined)
            self._geometry = MultiPolygon(parts) if len(parts) != 1 else parts[0]
        finally:
            other.release()

    def explode(self) -> list[CurveFragment]:
        """Decompose the region into its boundary segments.

        Every ring (outer boundaries and holes) contributes its edges.
        """
        fragments: list[CurveFragment] = []
        for polygon in self.polygons():
            for ring in [polygon.exterior, *polygon.interiors]:
                coords = list(ring.coords)
                for (x1, y1), (x2, y2) in zip(coords, coords[1:]):
                    if (x1, y1) != (x2, y2):
                        fragments.append(Segment(Point(x1, y1), Point(x2, y2)))
        return fragments

    def release(self) -> None:
        self._geometry = None


class ShapelyKernel:
    """Region kernel backed by shapely.

    Offsets follow the drafting convention: a positive distance moves the
    curve to the right of its direction of travel. Which side is "inside"
    therefore depends on the loop's winding.
    """

    def __init__(self, arc_segments: int = 64, mitre_limit: float = 5.0) -> None:
        """Initialize the kernel.

        Args:
            arc_segments: Line segments per full circle when flattening arcs
            mitre_limit: Mitre ratio limit for offset corners
        """
        self.arc_segments = arc_segments
        self.mitre_limit = mitre_limit

    def to_polygon(self, loop: Loop) -> Polygon:
        """Flatten a loop into a validated shapely polygon.

        Raises:
            KernelOperationError: If the loop is open, too small or self-intersecting
        """
        if not loop.closed:
            raise KernelOperationError("region_from_loop", "loop is not closed")
        coords = [p.to_tuple() for p in loop.points(self.arc_segments)]
        if len(coords) < 3:
            raise KernelOperationError("region_from_loop", f"only {len(coords)} boundary points")
        polygon = Polygon(coords)
        if not polygon.is_valid:
            raise KernelOperationError("region_from_loop", explain_validity(polygon))
        if polygon.area <= 0.0:
            raise KernelOperationError("region_from_loop", "loop encloses no area")
        return polygon

    def region_from_loop(self, loop: Loop) -> ShapelyRegion:
        return ShapelyRegion(self.to_polygon(loop))

    def offset_curves(self, loop: Loop, distance: float) -> list[Loop]:
        """Offset a closed loop by a signed distance.

        Args:
            loop: Closed loop to offset
            distance: Signed distance, positive to the right of travel

        Returns:
            Zero or more offset loops, largest first, wound like the source

        Raises:
            KernelOperationError: If the loop cannot be turned into a polygon
        """
        polygon = self.to_polygon(loop)
        ccw = loop.is_counter_clockwise()
        # Right of travel is outside for a counter-clockwise loop
        grow = distance if ccw else -distance
        try:
            buffered = polygon.buffer(
                grow,
                join_style=BufferJoinStyle.mitre,
                mitre_limit=self.mitre_limit,
            )
        except GEOSException as e:
            raise KernelOperationError("offset", str(e)) from e

        parts = sorted(_polygon_parts(buffered), key=lambda p: p.area, reverse=True)
        sign = 1.0 if ccw else -1.0
        result: list[Loop] = []
        for part in parts:
            ring = orient(part, sign=sign).exterior
            coords = list(ring.coords)[:-1]
            result.append(
                Loop(
                    vertices=[Vertex(x, y) for x, y in coords],
                    closed=True,
                    complete=True,
                    fragment_count=len(coords),
                    order=loop.order,
                )
            )
        return result
