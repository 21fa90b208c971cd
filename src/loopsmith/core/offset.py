"""Inward offsets and band fills between nested loops.

The kernel's offset primitive is not trusted to know which way is "in": an
offset is requested at +distance, and if that grew the loop it is thrown
away and -distance is tried instead. The loop that comes back smaller is
taken as the inward offset.

Key functions and classes:
- offset_inward: Area-checked inward offset of one loop
- fill_band / fill_core: Fill records between or inside loops
- OrderedOffsetPlanner: Offsets and fills for a pair of nested loops
"""

from dataclasses import dataclass, field

import structlog

from loopsmith.config import OffsetConfig
from loopsmith.core.kernel import RegionKernel
from loopsmith.core.nesting import contains_loop
from loopsmith.domain import (
    SOLID_PATTERN,
    Band,
    FillSpec,
    Loop,
    OffsetPair,
    OffsetSide,
    StyledLoop,
)
from loopsmith.exceptions import IncompleteLoopError, KernelOperationError

logger = structlog.get_logger(__name__)


def _pair(source: Loop, offset: Loop, distance: float, suspect: bool = False) -> OffsetPair:
    side = OffsetSide.INNER if offset.area < source.area else OffsetSide.OUTER
    return OffsetPair(source=source, offset=offset, distance=distance, side=side, suspect=suspect)


def offset_inward(kernel: RegionKernel, loop: Loop, distance: float) -> OffsetPair | None:
    """Offset a closed loop towards its inside.

    Args:
        kernel: Kernel providing the offset primitive
        loop: Closed source loop
        distance: Unsigned offset distance

    Returns:
        OffsetPair for the inward offset, or None if the kernel produced
        nothing usable (e.g. the loop is too thin for the distance)

    Raises:
        KernelOperationError: If the kernel cannot offset the loop at all
    """
    distance = abs(distance)
    first = kernel.offset_curves(loop, distance)
    if first and first[0].area <= loop.area:
        return _pair(loop, first[0], distance)

    second = kernel.offset_curves(loop, -distance)
    if not second:
        logger.debug("No offset available", order=loop.order, distance=distance)
        return None

    candidate = second[0]
    if candidate.area < loop.area:
        return _pair(loop, candidate, -distance)

    if not first:
        # The only answer grew the loop: the inward side collapsed
        logger.debug("Inward offset collapsed", order=loop.order, distance=distance)
        return None

    logger.warning(
        "Offset direction unresolved",
        order=loop.order,
        source_area=round(loop.area, 6),
        offset_area=round(candidate.area, 6),
    )
    if first[0].area < candidate.area:
        return _pair(loop, first[0], distance, suspect=True)
    return _pair(loop, candidate, -distance, suspect=True)


def fill_band(outer: Loop, inner: Loop, fill: FillSpec) -> Band:
    """Fill the area between an outer loop and one inner loop."""
    return Band(outer=outer, inner=inner, fill=fill)


def fill_core(loop: Loop, fill: FillSpec) -> Band:
    """Fill the whole of a single loop."""
    return Band(outer=loop, inner=None, fill=fill)


@dataclass
class OrderedOffsetPlan:
    """Everything the ordered offset workflow wants persisted.

    Attributes:
        outer: Larger selected loop, styled
        inner: Smaller selected loop, styled
        outer_offset: Inward offset of the outer loop, if any
        inner_offset: Inward offset of the inner loop, if any
        bands: Fills in drawing order
        pairs: Offset pairs that were produced
        missing: Descriptions of offsets that could not be produced
    """

    outer: StyledLoop
    inner: StyledLoop
    outer_offset: StyledLoop | None = None
    inner_offset: StyledLoop | None = None
    bands: list[Band] = field(default_factory=list)
    pairs: list[OffsetPair] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def loops(self) -> list[StyledLoop]:
        """Styled loops in drawing order."""
        styled = [self.outer, self.inner]
        for extra in (self.outer_offset, self.inner_offset):
            if extra is not None:
                styled.append(extra)
        return styled


class OrderedOffsetPlanner:
    """Plans offsets and band fills for two nested closed loops.

    The larger loop is the outer one. Each loop gets an inward offset;
    the band between each loop and its offset is filled with the band
    pattern, the gap between the outer offset and the inner loop with the
    gap pattern, and the inside of the inner offset with a solid core.
    """

    def __init__(self, kernel: RegionKernel, config: OffsetConfig | None = None) -> None:
        self.kernel = kernel
        self.config = config or OffsetConfig()

    def plan(self, first: Loop, second: Loop) -> OrderedOffsetPlan:
        """Build the offset plan for two selected loops.

        Args:
            first: One of the selected loops
            second: The other selected loop

        Returns:
            OrderedOffsetPlan; offsets the kernel could not produce are
            listed in ``missing`` and their fills left out

        Raises:
            IncompleteLoopError: If either loop did not close on itself
        """
        for loop in (first, second):
            if not loop.complete:
                raise IncompleteLoopError(loop.order, len(loop.vertices))

        cfg = self.config
        outer, inner = (first, second) if first.area > second.area else (second, first)
        if not contains_loop(outer, inner):
            logger.warning(
                "Selected loops are not nested",
                outer_order=outer.order,
                inner_order=inner.order,
            )

        plan = OrderedOffsetPlan(
            outer=StyledLoop(outer, cfg.outer_color),
            inner=StyledLoop(inner, cfg.inner_color),
        )

        outer_pair = self._offset(outer, "outer", plan)
        inner_pair = self._offset(inner, "inner", plan)

        band_fill = FillSpec(pattern=cfg.band_pattern, scale=cfg.pattern_scale)
        gap_fill = FillSpec(pattern=cfg.gap_pattern, scale=cfg.pattern_scale)

        if outer_pair is not None:
            plan.outer_offset = StyledLoop(outer_pair.offset, cfg.outer_offset_color)
            plan.bands.append(fill_band(outer, outer_pair.offset, band_fill))
        if inner_pair is not None:
            plan.inner_offset = StyledLoop(inner_pair.offset, cfg.inner_offset_color)
            plan.bands.append(fill_band(inner, inner_pair.offset, band_fill))
        if outer_pair is not None:
            plan.bands.append(fill_band(outer_pair.offset, inner, gap_fill))
        if inner_pair is not None:
            core_fill = FillSpec(color=cfg.core_color, pattern=SOLID_PATTERN)
            plan.bands.append(fill_core(inner_pair.offset, core_fill))

        return plan

    def _offset(self, loop: Loop, label: str, plan: OrderedOffsetPlan) -> OffsetPair | None:
        try:
            pair = offset_inward(self.kernel, loop, self.config.distance)
        except KernelOperationError as e:
            logger.warning("Offset failed", loop=label, error=str(e))
            plan.missing.append(f"{label}: {e.reason}")
            return None
        if pair is None:
            plan.missing.append(f"{label}: no offset at distance {self.config.distance}")
            return None
        plan.pairs.append(pair)
        return pair
