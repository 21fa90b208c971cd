"""Boolean composition of ranked loops into regions.

The composer turns a main loop and its holes into a single region through
the kernel, one operand at a time. A hole the kernel cannot handle is
skipped and recorded; only a main loop that cannot become a region aborts
the composition.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from loopsmith.core.assembler import LoopAssembler
from loopsmith.core.kernel import Region, RegionKernel
from loopsmith.core.nesting import NestingAnalyzer
from loopsmith.domain import Loop
from loopsmith.exceptions import EmptyInputError, KernelOperationError, MainRegionError

logger = structlog.get_logger(__name__)


@dataclass
class SkippedOperand:
    """A loop left out of a composition.

    Attributes:
        loop: The loop that was skipped
        position: Index of the loop in the operand list
        reason: Kernel error message
    """

    loop: Loop
    position: int
    reason: str


@dataclass
class CompositionResult:
    """Outcome of a boolean composition.

    Attributes:
        region: The composed region (owned by the caller)
        applied: Operand loops that were merged into the region
        skipped: Operand loops the kernel rejected
    """

    region: Region
    applied: list[Loop] = field(default_factory=list)
    skipped: list[SkippedOperand] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


class RegionComposer:
    """Sequences region construction and booleans over a kernel.

    Every transient region is released on all paths; the composed region is
    handed to the caller, who must release it once persisted.

    Example:
        composer = RegionComposer(ShapelyKernel())
        result = composer.compose(outer, holes)
        print(result.region.area, result.skipped_count)
    """

    def __init__(self, kernel: RegionKernel) -> None:
        self.kernel = kernel

    def compose(self, main: Loop, subtract: Sequence[Loop]) -> CompositionResult:
        """Subtract each loop in ``subtract`` from the region of ``main``.

        Args:
            main: Outer contour
            subtract: Holes to remove, in order

        Returns:
            CompositionResult with the final region and skipped holes

        Raises:
            MainRegionError: If ``main`` cannot be turned into a region
        """
        return self._compose(main, subtract, "subtract")

    def unite(self, loops: Sequence[Loop]) -> CompositionResult:
        """Union all loops into one region.

        The first loop seeds the region; the rest are merged in order.

        Raises:
            EmptyInputError: If ``loops`` is empty
            MainRegionError: If the first loop cannot be turned into a region
        """
        if not loops:
            raise EmptyInputError("loops to unite")
        return self._compose(loops[0], loops[1:], "unite")

    def _compose(self, main: Loop, operands: Sequence[Loop], operation: str) -> CompositionResult:
        try:
            region = self.kernel.region_from_loop(main)
        except (KernelOperationError, ValueError) as e:
            raise MainRegionError(str(e)) from e

        result = CompositionResult(region=region)

        try:
            for position, loop in enumerate(operands):
                try:
                    self._apply(region, loop, operation)
                except (KernelOperationError, ValueError) as e:
                    logger.warning(
                        "Operand skipped",
                        operation=operation,
                        position=position,
                        order=loop.order,
                        error=str(e),
                    )
                    result.skipped.append(
                        SkippedOperand(loop=loop, position=position, reason=str(e))
                    )
                    continue
                result.applied.append(loop)
        except BaseException:
            region.release()
            raise

        logger.debug(
            "Composition complete",
            operation=operation,
            applied=len(result.applied),
            skipped=len(result.skipped),
        )
        return result

    def _apply(self, region: Region, loop: Loop, operation: str) -> None:
        operand = self.kernel.region_from_loop(loop)
        try:
            if operation == "subtract":
                region.subtract(operand)
            else:
                region.unite(operand)
        finally:
            if not operand.released:
                operand.release()


def boundary_loops(region: Region, tolerance: float = 1e-6) -> list[Loop]:
    """Decompose a region back into closed loops.

    Args:
        region: Region to decompose (not consumed)
        tolerance: Endpoint matching tolerance for reassembly

    Returns:
        Loops for every boundary ring, largest first
    """
    loops = LoopAssembler(tolerance=tolerance).assemble(region.explode()).loops
    return sorted(loops, key=lambda loop: loop.area, reverse=True)


def region_area(loops: Sequence[Loop]) -> float:
    """Net area of a set of boundary loops, holes counted negative by nesting.

    Loops are classified by containment depth, so the result does not depend
    on the winding the loops were reassembled with.
    """
    hierarchy = NestingAnalyzer().analyze(loops)
    total = 0.0
    for idx, node in hierarchy.nodes.items():
        total += loops[idx].area if node.is_outer else -loops[idx].area
    return total
