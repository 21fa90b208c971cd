"""Loop assembly from loose curve fragments.

This module rebuilds closed boundaries from an unordered collection of line
and arc fragments, such as the pieces left after exploding a region or a
polyline. Fragments are chained by matching endpoints within a tolerance;
a fragment matched at its end point is traversed backwards and its bulge
negated.

Vertex convention: a loop that closes on itself has exactly one vertex per
fragment (the closing vertex is not repeated). A chain that runs out of
connecting fragments is force-closed with a straight edge and flagged
incomplete; it carries one vertex more than it has fragments.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

import structlog

from loopsmith.domain import CurveFragment, Loop, Point, Vertex, ensure_fragment

logger = structlog.get_logger(__name__)


@dataclass
class AssemblyResult:
    """Outcome of one assembly run.

    Attributes:
        loops: Sealed loops in discovery order
        degenerate: Fragments skipped because their endpoints coincide
        input_count: Number of fragments supplied
    """

    loops: list[Loop] = field(default_factory=list)
    degenerate: list[CurveFragment] = field(default_factory=list)
    input_count: int = 0

    @property
    def consumed_count(self) -> int:
        """Fragments consumed across all loops."""
        return sum(loop.fragment_count for loop in self.loops)

    @property
    def complete_loops(self) -> list[Loop]:
        return [loop for loop in self.loops if loop.complete]

    @property
    def incomplete_loops(self) -> list[Loop]:
        return [loop for loop in self.loops if not loop.complete]

    def has_incomplete(self) -> bool:
        return any(not loop.complete for loop in self.loops)


class LoopAssembler:
    """Chains curve fragments into closed loops.

    Uses a greedy scan: for each open chain, the first remaining fragment
    with an endpoint within tolerance of the chain's last vertex is appended.
    This is quadratic in the fragment count, which is fine for the tens to
    low hundreds of fragments a single outline produces.

    Example:
        assembler = LoopAssembler(tolerance=1e-6)
        result = assembler.assemble(fragments)
        for loop in result.complete_loops:
            print(loop.area)
    """

    def __init__(self, tolerance: float = 1e-6, min_area: float = 0.0) -> None:
        """Initialize the assembler.

        Args:
            tolerance: Maximum endpoint distance for two fragments to connect
            min_area: Loops enclosing less absolute area are flagged incomplete
        """
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self.min_area = min_area

    def assemble(self, fragments: Iterable[CurveFragment]) -> AssemblyResult:
        """Assemble fragments into sealed loops.

        The input is copied; every non-degenerate fragment ends up in exactly
        one loop.

        Args:
            fragments: Line and arc fragments in any order and direction

        Returns:
            AssemblyResult with loops, skipped degenerate fragments and counts

        Raises:
            UnsupportedFragmentError: If an item is not a Segment or Arc
        """
        result = AssemblyResult()
        remaining: list[CurveFragment] = []

        for item in fragments:
            fragment = ensure_fragment(item)
            result.input_count += 1
            if fragment.is_degenerate(self.tolerance):
                result.degenerate.append(fragment)
                logger.debug(
                    "Degenerate fragment skipped",
                    kind=fragment.kind,
                    start=fragment.start.to_tuple(),
                )
                continue
            remaining.append(fragment)

        while remaining:
            seed = remaining.pop(0)
            loop = self._grow_loop(seed, remaining, order=len(result.loops))
            result.loops.append(loop)

        if result.loops:
            logger.debug(
                "Fragments assembled",
                fragments=result.input_count,
                loops=len(result.loops),
                incomplete=len(result.incomplete_loops),
                degenerate=len(result.degenerate),
            )

        return result

    def _grow_loop(self, seed: CurveFragment, remaining: list[CurveFragment], order: int) -> Loop:
        """Grow one loop from a seed fragment, consuming from ``remaining``."""
        first = seed.start
        chain = [
            Vertex(seed.start.x, seed.start.y, seed.bulge(forward=True)),
            Vertex(seed.end.x, seed.end.y, 0.0),
        ]
        used = 1
        closed_on_itself = False

        while remaining:
            last = chain[-1]
            match = self._find_next(Point(last.x, last.y), remaining)
            if match is None:
                break

            index, forward = match
            fragment = remaining.pop(index)
            far = fragment.end if forward else fragment.start
            chain[-1] = Vertex(last.x, last.y, fragment.bulge(forward=forward))
            used += 1

            if far.is_close(first, self.tolerance):
                closed_on_itself = True
                break
            chain.append(Vertex(far.x, far.y, 0.0))

        sealed = Loop(vertices=chain, closed=True, fragment_count=used, order=order)
        complete = (
            closed_on_itself
            and sealed.distinct_vertex_count(self.tolerance) >= 3
            and sealed.area >= self.min_area
        )
        loop = replace(sealed, complete=complete)

        if not complete:
            logger.debug(
                "Loop sealed incomplete",
                order=order,
                vertices=len(chain),
                fragments=used,
                closed_on_itself=closed_on_itself,
            )

        return loop

    def _find_next(
        self, tip: Point, remaining: list[CurveFragment]
    ) -> tuple[int, bool] | None:
        """Find the first fragment touching ``tip``.

        Returns:
            (index, forward) where forward is False if the fragment must be
            traversed end to start, or None if nothing connects
        """
        for index, fragment in enumerate(remaining):
            if fragment.start.is_close(tip, self.tolerance):
                return index, True
            if fragment.end.is_close(tip, self.tolerance):
                return index, False
        return None


def assemble_loops(fragments: Iterable[CurveFragment], tolerance: float = 1e-6) -> list[Loop]:
    """Assemble fragments into loops.

    This is a convenience function for callers that only need the loops.

    Args:
        fragments: Line and arc fragments
        tolerance: Endpoint matching tolerance

    Returns:
        Sealed loops in discovery order (empty for empty input)
    """
    return LoopAssembler(tolerance=tolerance).assemble(fragments).loops
