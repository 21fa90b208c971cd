"""Loop ranking and nesting analysis.

This module orders loops by enclosed area and works out which loops are
outer contours and which are holes:
- rank_loops: Stable area ranking with validation of a caller-chosen main loop
- NestingAnalyzer: Containment tree over all loops of a drawing

Outer/hole classification uses nesting depth rather than winding, since
loops rebuilt from exploded fragments carry whatever direction the first
fragment happened to have.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog
from shapely.errors import GEOSException
from shapely.geometry import Polygon

from loopsmith.domain import Loop
from loopsmith.exceptions import AmbiguousMainError, EmptyInputError

logger = structlog.get_logger(__name__)


@dataclass
class RankedLoops:
    """Loops ordered by absolute area, largest first.

    Attributes:
        main: Presumptive outer contour
        others: Remaining loops (presumptive holes), largest first
    """

    main: Loop
    others: list[Loop]

    @property
    def ordered(self) -> list[Loop]:
        return [self.main, *self.others]


def sort_by_area(loops: Sequence[Loop]) -> list[Loop]:
    """Sort loops by absolute area, descending. Ties keep their input order."""
    return sorted(loops, key=lambda loop: loop.area, reverse=True)


def rank_loops(
    loops: Sequence[Loop],
    main: Loop | None = None,
    tolerance: float = 1e-9,
) -> RankedLoops:
    """Rank loops by area and pick the outer contour.

    Args:
        loops: Loops to rank
        main: Loop the caller already identified as the outer contour, if
            any. It must be one of ``loops`` or is added to them.
        tolerance: Area slack when checking that ``main`` is the largest

    Returns:
        RankedLoops with the main loop split from the rest

    Raises:
        EmptyInputError: If there are no loops and no main loop
        AmbiguousMainError: If ``main`` is smaller than the largest loop
    """
    candidates = list(loops)
    if main is not None and not any(loop is main for loop in candidates):
        candidates.append(main)
    if not candidates:
        raise EmptyInputError("loops")

    ordered = sort_by_area(candidates)

    if main is None:
        return RankedLoops(main=ordered[0], others=ordered[1:])

    largest = ordered[0]
    if main.area + tolerance < largest.area:
        raise AmbiguousMainError(main.area, largest.area)

    return RankedLoops(main=main, others=[loop for loop in ordered if loop is not main])


def _loop_polygon(loop: Loop, segments_per_circle: int) -> Polygon:
    coords = [p.to_tuple() for p in loop.points(segments_per_circle)]
    if len(coords) < 3:
        return Polygon()
    return Polygon(coords)


def _encloses(outer: Polygon, inner: Polygon) -> bool:
    """Whether a point strictly inside ``inner`` lies strictly inside ``outer``.

    Testing an interior point rather than a vertex keeps holes whose
    boundary touches the outer contour nested.
    """
    try:
        interior = inner.representative_point()
        return not interior.is_empty and outer.contains(interior)
    except GEOSException as e:
        logger.warning("Containment test failed", error=str(e))
        return False


def contains_loop(outer: Loop, inner: Loop, segments_per_circle: int = 64) -> bool:
    """Check whether ``inner`` lies inside ``outer``.

    Args:
        outer: Candidate enclosing loop
        inner: Candidate enclosed loop
        segments_per_circle: Arc flattening resolution

    Returns:
        True if an interior point of ``inner`` is inside ``outer``
    """
    if not (outer.complete and inner.complete):
        return False
    return _encloses(
        _loop_polygon(outer, segments_per_circle),
        _loop_polygon(inner, segments_per_circle),
    )


@dataclass
class LoopNode:
    """A node in the loop nesting tree.

    Attributes:
        index: Index of this loop in the analysed list
        parent: Index of the smallest loop containing this one (None if root)
        children: Indices of loops directly inside this one
        depth: Nesting depth (0 for top-level)
    """

    index: int
    parent: int | None
    children: list[int]
    depth: int

    @property
    def is_outer(self) -> bool:
        """Even depths are material, odd depths are holes."""
        return self.depth % 2 == 0


@dataclass
class LoopHierarchy:
    """Containment classification of a set of loops.

    Attributes:
        outers: Indices of loops at even nesting depth
        holes: Indices of loops at odd nesting depth
        nodes: Nesting tree node for every analysed loop
    """

    outers: list[int]
    holes: list[int]
    nodes: dict[int, LoopNode]

    def holes_of(self, outer_index: int) -> list[int]:
        """Direct holes of an outer loop."""
        node = self.nodes.get(outer_index)
        if node is None:
            return []
        return [i for i in node.children if not self.nodes[i].is_outer]

    def has_holes(self) -> bool:
        return len(self.holes) > 0


class NestingAnalyzer:
    """Builds the containment tree of a set of loops.

    Each loop's parent is the smallest-area loop that contains a point
    strictly inside it. Incomplete loops are skipped; they never become
    parents or children.
    """

    def __init__(self, segments_per_circle: int = 64):
        self.segments_per_circle = segments_per_circle

    def analyze(self, loops: Sequence[Loop]) -> LoopHierarchy:
        """Analyze loops to determine their nesting.

        Args:
            loops: Loops to analyse

        Returns:
            LoopHierarchy keyed by index into ``loops``
        """
        usable = [i for i, loop in enumerate(loops) if loop.complete]
        if not usable:
            return LoopHierarchy(outers=[], holes=[], nodes={})

        polygons = {i: _loop_polygon(loops[i], self.segments_per_circle) for i in usable}

        def can_enclose(outer_idx: int, inner_idx: int) -> bool:
            # Equal areas only nest one way so parents never form a cycle
            outer_area, inner_area = loops[outer_idx].area, loops[inner_idx].area
            if outer_area == inner_area:
                return outer_idx < inner_idx
            return outer_area > inner_area

        parent_map: dict[int, int | None] = {}
        for idx in usable:
            candidates = [
                other_idx
                for other_idx in usable
                if other_idx != idx
                and can_enclose(other_idx, idx)
                and _encloses(polygons[other_idx], polygons[idx])
            ]
            if candidates:
                parent_map[idx] = min(candidates, key=lambda i: loops[i].area)
            else:
                parent_map[idx] = None

        def get_depth(idx: int, memo: dict[int, int]) -> int:
            if idx in memo:
                return memo[idx]
            parent = parent_map.get(idx)
            memo[idx] = 0 if parent is None else get_depth(parent, memo) + 1
            return memo[idx]

        depth_memo: dict[int, int] = {}
        nodes: dict[int, LoopNode] = {}
        for idx in usable:
            nodes[idx] = LoopNode(
                index=idx,
                parent=parent_map[idx],
                children=[],
                depth=get_depth(idx, depth_memo),
            )

        for idx, node in nodes.items():
            if node.parent is not None:
                nodes[node.parent].children.append(idx)

        outers = [idx for idx in usable if nodes[idx].is_outer]
        holes = [idx for idx in usable if not nodes[idx].is_outer]

        return LoopHierarchy(outers=outers, holes=holes, nodes=nodes)
