"""Tests for domain models to verify they work correctly."""

import math

import pytest

from loopsmith.domain import (
    BY_LAYER,
    Arc,
    Band,
    FillSpec,
    Loop,
    OffsetPair,
    OffsetSide,
    Plane,
    Point,
    Segment,
    StyledLoop,
    Vertex,
    ensure_fragment,
    fragment_from_dict,
)
from loopsmith.exceptions import DegenerateFragmentError, UnsupportedFragmentError


def square(size: float = 10.0, x0: float = 0.0, y0: float = 0.0) -> Loop:
    """Counter-clockwise axis-aligned square."""
    return Loop.from_points(
        [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]
    )


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100.0, 200.0)
        assert p.x == 100.0
        assert p.y == 200.0

    def test_point_to_tuple(self) -> None:
        """Test point to tuple conversion."""
        assert Point(100.0, 200.0).to_tuple() == (100.0, 200.0)

    def test_distance_and_closeness(self) -> None:
        """Test distance and tolerance comparison."""
        a = Point(0.0, 0.0)
        b = Point(3.0, 4.0)
        assert a.distance_to(b) == 5.0
        assert a.is_close(Point(1e-7, 0.0), 1e-6)
        assert not a.is_close(b, 4.9)

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(100.0, 200.0)
        p2 = Point.from_dict(p1.to_dict())
        assert p2 == p1

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 300.0  # type: ignore


class TestSegment:
    """Tests for Segment fragments."""

    def test_bulge_is_zero_both_ways(self) -> None:
        """A straight edge never carries a bulge."""
        seg = Segment(Point(0, 0), Point(10, 0))
        assert seg.bulge(forward=True) == 0.0
        assert seg.bulge(forward=False) == 0.0

    def test_reversed(self) -> None:
        """Reversing swaps the endpoints."""
        seg = Segment(Point(0, 0), Point(10, 0)).reversed()
        assert seg.start == Point(10, 0)
        assert seg.end == Point(0, 0)

    def test_measurements(self) -> None:
        """Test length, midpoint and tangent."""
        seg = Segment(Point(0, 0), Point(6, 8))
        assert seg.length() == 10.0
        assert seg.midpoint() == Point(3, 4)
        assert seg.midpoint_tangent() == pytest.approx((0.6, 0.8))

    def test_degenerate(self) -> None:
        """Coincident endpoints make a degenerate segment."""
        seg = Segment(Point(1, 1), Point(1, 1 + 1e-9))
        assert seg.is_degenerate(1e-6)
        with pytest.raises(DegenerateFragmentError):
            Segment(Point(1, 1), Point(1, 1)).midpoint_tangent()

    def test_kind(self) -> None:
        assert Segment(Point(0, 0), Point(1, 0)).kind == "line"


class TestArc:
    """Tests for Arc fragments."""

    def test_quarter_arc_bulge(self) -> None:
        """A counter-clockwise quarter arc has bulge tan(pi/8)."""
        arc = Arc.from_angles(Point(0, 0), 1.0, 0.0, math.pi / 2)
        assert arc.start.x == pytest.approx(1.0)
        assert arc.end.y == pytest.approx(1.0)
        assert arc.bulge() == pytest.approx(math.tan(math.pi / 8))

    def test_reverse_travel_negates_bulge(self) -> None:
        """Traversing an arc backwards flips the bulge sign."""
        arc = Arc.from_angles(Point(0, 0), 1.0, 0.0, math.pi / 2)
        assert arc.bulge(forward=False) == pytest.approx(-arc.bulge())

    def test_flipped_normal_negates_bulge(self) -> None:
        """An arc seen from behind turns clockwise."""
        arc = Arc(Point(1, 0), Point(0, 1), math.pi / 2, normal_sign=-1)
        assert arc.bulge() == pytest.approx(-math.tan(math.pi / 8))

    def test_from_angles_flipped_mirrors_x(self) -> None:
        """Endpoints of an arc with a flipped normal are mirrored in x."""
        arc = Arc.from_angles(Point(0, 0), 1.0, 0.0, math.pi / 2, normal_sign=-1)
        assert arc.start.x == pytest.approx(-1.0)
        assert arc.start.y == pytest.approx(0.0)
        assert arc.bulge() < 0

    def test_reversed_arc(self) -> None:
        """The reversed arc carries the opposite bulge."""
        arc = Arc.from_angles(Point(0, 0), 1.0, 0.0, math.pi / 2)
        back = arc.reversed()
        assert back.start == arc.end
        assert back.end == arc.start
        assert back.bulge() == pytest.approx(-arc.bulge())

    def test_sweep_normalised(self) -> None:
        """Negative sweeps are brought into [0, 2*pi)."""
        arc = Arc(Point(1, 0), Point(0, -1), -math.pi / 2)
        assert arc.sweep == pytest.approx(3 * math.pi / 2)

    def test_invalid_normal_sign(self) -> None:
        with pytest.raises(ValueError, match="normal_sign"):
            Arc(Point(1, 0), Point(0, 1), math.pi / 2, normal_sign=0)

    def test_geometry_queries(self) -> None:
        """Test radius, centre, length and midpoint."""
        arc = Arc.from_angles(Point(0, 0), 2.0, 0.0, math.pi / 2)
        assert arc.radius == pytest.approx(2.0)
        center = arc.center()
        assert center.x == pytest.approx(0.0, abs=1e-12)
        assert center.y == pytest.approx(0.0, abs=1e-12)
        assert arc.length() == pytest.approx(math.pi)
        mid = arc.midpoint()
        assert mid.x == pytest.approx(math.sqrt(2))
        assert mid.y == pytest.approx(math.sqrt(2))

    def test_midpoint_tangent_parallel_to_chord(self) -> None:
        arc = Arc.from_angles(Point(0, 0), 1.0, 0.0, math.pi / 2)
        tx, ty = arc.midpoint_tangent()
        assert tx == pytest.approx(-math.sqrt(0.5))
        assert ty == pytest.approx(math.sqrt(0.5))

    def test_full_circle_is_degenerate(self) -> None:
        """A closed circle has coincident endpoints."""
        assert Arc(Point(1, 0), Point(1, 0), 0.0).is_degenerate(1e-6)


class TestFragmentHelpers:
    """Tests for fragment admission and serialization."""

    def test_ensure_fragment_accepts_lines_and_arcs(self) -> None:
        seg = Segment(Point(0, 0), Point(1, 0))
        arc = Arc(Point(1, 0), Point(0, 1), math.pi / 2)
        assert ensure_fragment(seg) is seg
        assert ensure_fragment(arc) is arc

    def test_ensure_fragment_rejects_others(self) -> None:
        """Anything that is not a line or arc is rejected."""
        with pytest.raises(UnsupportedFragmentError) as exc_info:
            ensure_fragment(Point(0, 0))
        assert exc_info.value.kind == "Point"

    def test_fragment_from_dict(self) -> None:
        arc = Arc(Point(1, 0), Point(0, 1), math.pi / 2, normal_sign=-1)
        restored = fragment_from_dict(arc.to_dict())
        assert restored == arc

    def test_fragment_from_dict_unknown_kind(self) -> None:
        data = {"kind": "spline", "start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 0}}
        with pytest.raises(UnsupportedFragmentError):
            fragment_from_dict(data)


class TestVertex:
    """Tests for Vertex and Plane."""

    def test_vertex_defaults(self) -> None:
        v = Vertex(1.0, 2.0)
        assert v.bulge == 0.0
        assert v.point == Point(1.0, 2.0)
        assert v.to_tuple() == (1.0, 2.0, 0.0)

    def test_plane_defaults(self) -> None:
        plane = Plane()
        assert plane.elevation == 0.0
        assert plane.normal_sign == 1


class TestLoop:
    """Tests for Loop class."""

    def test_signed_area_counterclockwise(self) -> None:
        """Counter-clockwise loops have positive area."""
        loop = square(10.0)
        assert loop.signed_area() == pytest.approx(100.0)
        assert loop.is_counter_clockwise()

    def test_signed_area_clockwise(self) -> None:
        """Clockwise loops have negative area but positive magnitude."""
        loop = Loop.from_points([(0, 0), (0, 10), (10, 10), (10, 0)])
        assert loop.signed_area() == pytest.approx(-100.0)
        assert loop.area == pytest.approx(100.0)
        assert not loop.is_counter_clockwise()

    def test_area_with_arcs(self) -> None:
        """Two half circles enclose a full circle."""
        loop = Loop(vertices=[Vertex(0, 0, 1.0), Vertex(2, 0, 1.0)])
        assert loop.area == pytest.approx(math.pi)

    def test_area_is_cached(self) -> None:
        loop = square(4.0)
        first = loop.signed_area()
        assert loop._cached_area == first
        assert loop.signed_area() == first

    def test_edges_include_closing_edge(self) -> None:
        loop = square(1.0)
        edges = loop.edges()
        assert len(edges) == 4
        assert edges[-1][0] == loop.vertices[-1]
        assert edges[-1][1] == loop.vertices[0]

    def test_from_points_drops_repeated_closing_point(self) -> None:
        loop = Loop.from_points([(0, 0), (1, 0), (1, 1), (0, 0)])
        assert len(loop.vertices) == 3
        assert loop.fragment_count == 3

    def test_distinct_vertex_count(self) -> None:
        loop = Loop(vertices=[Vertex(0, 0), Vertex(1, 0), Vertex(1, 1e-9), Vertex(0, 1)])
        assert loop.distinct_vertex_count(1e-6) == 3

    def test_points_flatten_arcs(self) -> None:
        """Flattened arc points lie on the circle."""
        loop = Loop(vertices=[Vertex(0, 0, 1.0), Vertex(2, 0, 1.0)])
        pts = loop.points(segments_per_circle=32)
        assert len(pts) > 4
        for p in pts:
            assert math.hypot(p.x - 1.0, p.y) == pytest.approx(1.0)

    def test_area_cache_ignored_by_equality(self) -> None:
        cached = square(10.0)
        assert cached.signed_area() == pytest.approx(100.0)
        assert cached == square(10.0)

    def test_reversed_flips_winding_and_bulges(self) -> None:
        """Reversal keeps the area magnitude and moves bulges to new edge starts."""
        loop = Loop(
            vertices=[Vertex(0, 0), Vertex(10, 0, 1.0), Vertex(10, 4), Vertex(0, 4)]
        )
        back = loop.reversed()
        assert back.signed_area() == pytest.approx(-loop.signed_area())
        # Edge (10,0)->(10,4) becomes (10,4)->(10,0), starting at (10,4)
        by_point = {(v.x, v.y): v.bulge for v in back.vertices}
        assert by_point[(10, 4)] == -1.0
        assert by_point[(10, 0)] == 0.0

    def test_serialization(self) -> None:
        loop = Loop(
            vertices=[Vertex(0, 0, 0.5), Vertex(1, 0), Vertex(1, 1)],
            complete=False,
            fragment_count=2,
            order=3,
        )
        restored = Loop.from_dict(loop.to_dict())
        assert restored.vertices == loop.vertices
        assert restored.complete is False
        assert restored.fragment_count == 2
        assert restored.order == 3


class TestRegionModels:
    """Tests for offset and fill records."""

    def test_fill_defaults_to_solid_by_layer(self) -> None:
        fill = FillSpec()
        assert fill.color == BY_LAYER
        assert fill.is_solid

    def test_pattern_fill(self) -> None:
        fill = FillSpec(color=1, pattern="ANSI31", scale=20.0)
        assert not fill.is_solid
        assert FillSpec(pattern="solid").is_solid

    def test_band_area(self) -> None:
        """A band's area is the outer area minus its hole."""
        band = Band(outer=square(10.0), inner=square(2.0, 4.0, 4.0), fill=FillSpec())
        assert band.area == pytest.approx(96.0)
        assert len(band.boundaries()) == 2

    def test_core_band(self) -> None:
        band = Band(outer=square(3.0), inner=None, fill=FillSpec(color=6))
        assert band.area == pytest.approx(9.0)
        assert band.boundaries() == [band.outer]

    def test_offset_pair_is_frozen(self) -> None:
        pair = OffsetPair(
            source=square(10.0),
            offset=square(6.0, 2.0, 2.0),
            distance=2.0,
            side=OffsetSide.INNER,
        )
        assert pair.suspect is False
        with pytest.raises(AttributeError):
            pair.distance = 3.0  # type: ignore

    def test_styled_loop(self) -> None:
        styled = StyledLoop(square(1.0), color=3)
        assert styled.color == 3
