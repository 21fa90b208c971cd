"""Persistence sink interface.

The core hands finished geometry to a sink and never writes drawings
itself. ``loopsmith.io.DrawingWriter`` is the bundled sink.
"""

from typing import Protocol

from loopsmith.core.kernel import Region
from loopsmith.core.offset import OrderedOffsetPlan
from loopsmith.domain import Band, FillSpec, Loop


class LoopSink(Protocol):
    """Accepts finished loops, fills and regions."""

    def add_loop(self, loop: Loop, color: int) -> None: ...

    def add_band(self, band: Band) -> None: ...

    def add_region(self, region: Region, fill: FillSpec) -> None: ...


def emit_plan(plan: OrderedOffsetPlan, sink: LoopSink) -> int:
    """Send an ordered offset plan to a sink.

    Returns:
        Number of entities handed over
    """
    count = 0
    for styled in plan.loops():
        sink.add_loop(styled.loop, styled.color)
        count += 1
    for band in plan.bands:
        sink.add_band(band)
        count += 1
    return count
