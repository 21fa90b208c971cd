"""Core processing algorithms for loopsmith.

This module contains the core algorithms for:

- Loop assembly (stitching fragments into closed loops)
- Nesting (area ranking, outer/hole classification)
- Boolean composition (subtract/union over a region kernel)
- Inward offsets and band fills

Key functions:
- rank_loops: Rank loops by area and validate the main loop
- contains_loop: Test whether one loop lies inside another
- offset_inward: Offset a loop towards its inside
- boundary_loops: Decompose a region back into loops

Key classes:
- LoopAssembler: Builds loops from curve fragments
- NestingAnalyzer: Classifies loops as outer contours or holes
- RegionComposer: Sequences region booleans with catch-and-skip
- OrderedOffsetPlanner: Plans offsets and fills for two nested loops
- ShapelyKernel: Region kernel backed by shapely

The drawing-level orchestrator lives in loopsmith.core.processor and is
imported from there, since it depends on the I/O layer.
"""

from loopsmith.core.assembler import AssemblyResult, LoopAssembler, assemble_loops
from loopsmith.core.composer import (
    CompositionResult,
    RegionComposer,
    SkippedOperand,
    boundary_loops,
    region_area,
)
from loopsmith.core.kernel import Region, RegionKernel, ShapelyKernel, ShapelyRegion
from loopsmith.core.nesting import (
    LoopHierarchy,
    LoopNode,
    NestingAnalyzer,
    RankedLoops,
    contains_loop,
    rank_loops,
    sort_by_area,
)
from loopsmith.core.offset import (
    OrderedOffsetPlan,
    OrderedOffsetPlanner,
    fill_band,
    fill_core,
    offset_inward,
)
from loopsmith.core.sink import LoopSink, emit_plan

__all__ = [
    # Assembler
    "AssemblyResult",
    # Composer
    "CompositionResult",
    "LoopAssembler",
    # Nesting
    "LoopHierarchy",
    "LoopNode",
    # Sink
    "LoopSink",
    "NestingAnalyzer",
    # Offset
    "OrderedOffsetPlan",
    "OrderedOffsetPlanner",
    "RankedLoops",
    # Kernel
    "Region",
    "RegionComposer",
    "RegionKernel",
    "ShapelyKernel",
    "ShapelyRegion",
    "SkippedOperand",
    "assemble_loops",
    "boundary_loops",
    "contains_loop",
    "emit_plan",
    "fill_band",
    "fill_core",
    "offset_inward",
    "rank_loops",
    "region_area",
    "sort_by_area",
]
