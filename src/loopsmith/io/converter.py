"""Conversion between ezdxf entities and domain models.

This module handles the format-specific parts of reading and writing:
- LINE, ARC and exploded LWPOLYLINE/POLYLINE entities to curve fragments
- Closed LWPOLYLINE entities to loops
- Loops to LWPOLYLINE vertex tuples

Anything other than lines, arcs and the polylines built from them is
rejected here, before it can reach the assembler.
"""

import math
from typing import Any

from ezdxf.math import Vec3

from loopsmith.domain import Arc, CurveFragment, Loop, Plane, Point, Segment, Vertex
from loopsmith.exceptions import UnsupportedFragmentError

POLYLINE_TYPES = ("LWPOLYLINE", "POLYLINE")


def normal_sign(entity: Any) -> int:
    """Orientation of an entity's extrusion relative to +Z."""
    extrusion = entity.dxf.get("extrusion", Vec3(0, 0, 1))
    return -1 if Vec3(extrusion).z < 0 else 1


def line_to_segment(entity: Any) -> Segment:
    """Convert a LINE entity (WCS endpoints) to a segment."""
    start = entity.dxf.start
    end = entity.dxf.end
    return Segment(Point(start.x, start.y), Point(end.x, end.y))


def arc_to_fragment(entity: Any) -> Arc:
    """Convert an ARC entity to an arc fragment.

    The DXF arc always runs counter-clockwise from start to end angle in its
    own coordinate system; ezdxf reports the endpoints in world coordinates,
    and the extrusion sign says whether the arc appears mirrored.
    """
    start = entity.start_point
    end = entity.end_point
    sweep = math.radians((entity.dxf.end_angle - entity.dxf.start_angle) % 360.0)
    return Arc(
        start=Point(start.x, start.y),
        end=Point(end.x, end.y),
        sweep=sweep,
        normal_sign=normal_sign(entity),
    )


def entity_to_fragments(entity: Any) -> list[CurveFragment]:
    """Convert a drawing entity to curve fragments.

    Polylines are exploded into their line and arc pieces first.

    Args:
        entity: ezdxf entity

    Returns:
        One fragment per line/arc piece

    Raises:
        UnsupportedFragmentError: For any other entity type
    """
    dxftype = entity.dxftype()
    if dxftype == "LINE":
        return [line_to_segment(entity)]
    if dxftype == "ARC":
        return [arc_to_fragment(entity)]
    if dxftype in POLYLINE_TYPES:
        fragments: list[CurveFragment] = []
        for piece in entity.virtual_entities():
            fragments.extend(entity_to_fragments(piece))
        return fragments
    raise UnsupportedFragmentError(dxftype)


def entity_plane(entity: Any) -> Plane:
    """Working plane of an entity."""
    if entity.dxftype() == "LWPOLYLINE":
        elevation = float(entity.dxf.get("elevation", 0.0))
    elif entity.dxftype() == "LINE":
        elevation = float(entity.dxf.start.z)
    else:
        elevation = float(entity.dxf.get("center", Vec3()).z)
    return Plane(elevation=elevation, normal_sign=normal_sign(entity))


def lwpolyline_to_loop(entity: Any, order: int = 0, tolerance: float = 1e-9) -> Loop:
    """Convert an LWPOLYLINE to a loop in world coordinates.

    Polylines drawn on a flipped plane are mirrored into the working plane,
    which reverses the turning direction of every bulge.

    Args:
        entity: LWPOLYLINE entity
        order: Discovery index for the loop
        tolerance: Distance under which a repeated last point counts as closing

    Returns:
        Loop; ``complete`` is False for polylines that are not closed
    """
    ocs = entity.ocs()
    elevation = float(entity.dxf.get("elevation", 0.0))
    flipped = normal_sign(entity) < 0

    vertices: list[Vertex] = []
    for x, y, bulge in entity.get_points(format="xyb"):
        wcs = ocs.to_wcs(Vec3(x, y, elevation))
        vertices.append(Vertex(wcs.x, wcs.y, -bulge if flipped else bulge))

    closed = bool(entity.closed)
    if len(vertices) > 1:
        first, last = vertices[0], vertices[-1]
        if math.hypot(first.x - last.x, first.y - last.y) <= tolerance:
            vertices.pop()
            closed = True

    return Loop(
        vertices=vertices,
        closed=True,
        complete=closed and len(vertices) >= 3,
        fragment_count=len(vertices),
        order=order,
    )


def loop_to_points(loop: Loop) -> list[tuple[float, float, float]]:
    """Vertex tuples in the (x, y, bulge) layout LWPOLYLINE and HATCH expect."""
    return [v.to_tuple() for v in loop.vertices]
