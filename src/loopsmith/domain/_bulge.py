"""Internal bulge arithmetic.

A bulge is the tangent of a quarter of the included angle of an arc edge.
Positive bulges turn counter-clockwise from the edge's start to its end.
These helpers work on bare coordinates so fragments and loops can share
them.
"""

import math

# Below this magnitude an edge is treated as straight
BULGE_EPSILON = 1e-12


def bulge_from_sweep(sweep: float, normal_sign: int = 1) -> float:
    """Bulge of an arc swept by ``sweep`` radians.

    Args:
        sweep: Swept angle, normalised into [0, 2*pi)
        normal_sign: +1 if the arc's plane normal matches the working plane,
            -1 if it points the other way

    Returns:
        tan(sweep / 4) with the angle negated for a flipped normal
    """
    angle = sweep % math.tau
    if normal_sign < 0:
        angle = -angle
    return math.tan(angle / 4.0)


def included_angle(bulge: float) -> float:
    """Signed included angle of a bulged edge (positive = counter-clockwise)."""
    return 4.0 * math.atan(bulge)


def chord_length(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def arc_radius(chord: float, bulge: float) -> float:
    """Radius of the arc spanning ``chord`` with the given bulge."""
    if abs(bulge) < BULGE_EPSILON:
        return math.inf
    half_angle = abs(included_angle(bulge)) / 2.0
    return chord / (2.0 * math.sin(half_angle))


def arc_length(chord: float, bulge: float) -> float:
    """Length of a bulged edge; equals the chord for straight edges."""
    if abs(bulge) < BULGE_EPSILON:
        return chord
    return arc_radius(chord, bulge) * abs(included_angle(bulge))


def segment_area(chord: float, bulge: float) -> float:
    """Signed area between a bulged edge and its chord.

    Positive bulges add area to a counter-clockwise loop, negative bulges
    remove it, so the value can be summed straight into a shoelace total.
    """
    if abs(bulge) < BULGE_EPSILON or chord == 0.0:
        return 0.0
    theta = abs(included_angle(bulge))
    radius = arc_radius(chord, bulge)
    area = radius * radius * (theta - math.sin(theta)) / 2.0
    return area if bulge > 0 else -area


def arc_midpoint(x1: float, y1: float, x2: float, y2: float, bulge: float) -> tuple[float, float]:
    """Point halfway along a bulged edge."""
    mx = (x1 + x2) / 2.0
    my = (y1 + y2) / 2.0
    if abs(bulge) < BULGE_EPSILON:
        return mx, my
    # Left normal of the chord scaled by half its length: (-dy, dx) / 2
    nx = -(y2 - y1) / 2.0
    ny = (x2 - x1) / 2.0
    return mx - nx * bulge, my - ny * bulge


def arc_center(x1: float, y1: float, x2: float, y2: float, bulge: float) -> tuple[float, float]:
    """Centre of the circle carrying a bulged edge.

    Raises:
        ValueError: If the edge is straight
    """
    if abs(bulge) < BULGE_EPSILON:
        raise ValueError("Straight edge has no arc centre")
    mx = (x1 + x2) / 2.0
    my = (y1 + y2) / 2.0
    # Signed distance from chord midpoint to centre, along the left normal
    scale = (1.0 - bulge * bulge) / (4.0 * bulge)
    return mx - (y2 - y1) * scale, my + (x2 - x1) * scale


def flatten_bulge(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    bulge: float,
    segments_per_circle: int,
) -> list[tuple[float, float]]:
    """Approximate a bulged edge by a polyline.

    Returns the start point followed by interior points; the end point is
    left out so consecutive edges can be concatenated.
    """
    if abs(bulge) < BULGE_EPSILON:
        return [(x1, y1)]

    theta = included_angle(bulge)
    cx, cy = arc_center(x1, y1, x2, y2, bulge)
    radius = math.hypot(x1 - cx, y1 - cy)
    start_angle = math.atan2(y1 - cy, x1 - cx)
    steps = max(2, math.ceil(abs(theta) / math.tau * segments_per_circle))

    points = [(x1, y1)]
    for k in range(1, steps):
        angle = start_angle + theta * k / steps
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return points
