"""Unit tests for loop ranking and nesting analysis."""

import pytest

from loopsmith.core.nesting import NestingAnalyzer, contains_loop, rank_loops, sort_by_area
from loopsmith.domain import Loop, Vertex
from loopsmith.exceptions import AmbiguousMainError, EmptyInputError


def rect(width: float, height: float, x0: float = 0.0, y0: float = 0.0, order: int = 0) -> Loop:
    return Loop.from_points(
        [(x0, y0), (x0 + width, y0), (x0 + width, y0 + height), (x0, y0 + height)],
        order=order,
    )


class TestRanking:
    """Tests for area ranking."""

    def test_ranking_order(self):
        """Areas [10, 50, 30] rank as [50, 30, 10]."""
        loops = [rect(10, 1, order=0), rect(50, 1, order=1), rect(30, 1, order=2)]
        ranked = rank_loops(loops)
        assert [loop.area for loop in ranked.ordered] == pytest.approx([50, 30, 10])
        assert ranked.main is loops[1]

    def test_ties_keep_input_order(self):
        loops = [rect(2, 2, order=0), rect(4, 1, order=1), rect(1, 4, order=2)]
        assert [loop.order for loop in sort_by_area(loops)] == [0, 1, 2]

    def test_winding_does_not_matter(self):
        """Ranking uses absolute area."""
        clockwise = Loop.from_points([(0, 0), (0, 10), (10, 10), (10, 0)], order=1)
        ranked = rank_loops([rect(5, 5), clockwise])
        assert ranked.main is clockwise

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            rank_loops([])

    def test_main_is_largest(self):
        big = rect(10, 10)
        small = rect(2, 2, 4, 4)
        ranked = rank_loops([small, big], main=big)
        assert ranked.main is big
        assert ranked.others == [small]

    def test_main_not_largest_raises(self):
        """A caller-chosen main loop that is not the largest is rejected."""
        big = rect(10, 10)
        small = rect(2, 2, 4, 4)
        with pytest.raises(AmbiguousMainError) as exc_info:
            rank_loops([small, big], main=small)
        assert exc_info.value.largest_area == pytest.approx(100.0)

    def test_main_added_when_missing(self):
        big = rect(10, 10)
        ranked = rank_loops([rect(2, 2, 4, 4)], main=big)
        assert ranked.main is big
        assert len(ranked.ordered) == 2


class TestNestingAnalyzer:
    """Tests for NestingAnalyzer."""

    @pytest.fixture
    def analyzer(self) -> NestingAnalyzer:
        return NestingAnalyzer()

    def test_single_loop(self, analyzer):
        hierarchy = analyzer.analyze([rect(10, 10)])
        assert hierarchy.outers == [0]
        assert hierarchy.holes == []
        assert not hierarchy.has_holes()

    def test_outer_with_holes(self, analyzer):
        loops = [rect(2, 2, 1, 1), rect(10, 10), rect(2, 2, 6, 6)]
        hierarchy = analyzer.analyze(loops)
        assert hierarchy.outers == [1]
        assert sorted(hierarchy.holes) == [0, 2]
        assert sorted(hierarchy.holes_of(1)) == [0, 2]

    def test_island_in_hole(self, analyzer):
        """Depth alternates: outer, hole, island."""
        loops = [rect(20, 20), rect(10, 10, 5, 5), rect(2, 2, 9, 9)]
        hierarchy = analyzer.analyze(loops)
        assert sorted(hierarchy.outers) == [0, 2]
        assert hierarchy.holes == [1]
        assert hierarchy.nodes[2].depth == 2
        assert hierarchy.nodes[2].parent == 1
        assert hierarchy.holes_of(0) == [1]
        assert hierarchy.holes_of(2) == []

    def test_separate_outers(self, analyzer):
        hierarchy = analyzer.analyze([rect(5, 5), rect(5, 5, 10, 0)])
        assert hierarchy.outers == [0, 1]

    def test_hole_touching_outer(self, analyzer):
        """A notch whose tip sits on the outer edge is still a hole."""
        notch = Loop.from_points([(10, 5), (8, 4), (8, 6)], order=1)
        hierarchy = analyzer.analyze([rect(10, 10), notch])
        assert hierarchy.outers == [0]
        assert hierarchy.holes == [1]

    def test_coincident_loops(self, analyzer):
        hierarchy = analyzer.analyze([rect(10, 10), rect(10, 10, order=1)])
        assert hierarchy.outers == [0]
        assert hierarchy.nodes[1].parent == 0

    def test_incomplete_loops_ignored(self, analyzer):
        hole = rect(2, 2, 4, 4)
        hole.complete = False
        hierarchy = analyzer.analyze([rect(10, 10), hole])
        assert hierarchy.outers == [0]
        assert 1 not in hierarchy.nodes

    def test_empty(self, analyzer):
        hierarchy = analyzer.analyze([])
        assert hierarchy.outers == []
        assert hierarchy.holes_of(0) == []


class TestContainsLoop:
    def test_nested(self):
        assert contains_loop(rect(10, 10), rect(2, 2, 4, 4))
        assert not contains_loop(rect(2, 2, 4, 4), rect(10, 10))

    def test_disjoint(self):
        assert not contains_loop(rect(10, 10), rect(2, 2, 20, 20))

    def test_arc_bounded(self):
        """Arc edges are flattened before testing."""
        disc = Loop(vertices=[Vertex(0, 0, 1.0), Vertex(10, 0, 1.0)])
        assert contains_loop(disc, rect(2, 2, 4, -1))
        assert not contains_loop(disc, rect(2, 2, 20, 0))

    def test_incomplete(self):
        outer = rect(10, 10)
        outer.complete = False
        assert not contains_loop(outer, rect(2, 2, 4, 4))
