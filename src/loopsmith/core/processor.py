"""Processing orchestration for boundary reconstruction.

This module coordinates the full workflows over a drawing:

- reconstruct: read fragments -> assemble loops -> rank -> nest ->
  compose each outer contour minus its holes -> persist loops and regions
- ordered_offset: read closed polylines -> pick the two largest ->
  plan inward offsets and band fills -> persist

Key components:
- ReconstructionResult: In-memory outcome of reconstruction
- BoundaryProcessor: Main orchestrator class
"""

import time
import traceback
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loopsmith.config import LoopsmithSettings
from loopsmith.core.assembler import AssemblyResult, LoopAssembler
from loopsmith.core.composer import CompositionResult, RegionComposer
from loopsmith.core.kernel import RegionKernel, ShapelyKernel
from loopsmith.core.nesting import (
    LoopHierarchy,
    NestingAnalyzer,
    RankedLoops,
    rank_loops,
    sort_by_area,
)
from loopsmith.core.offset import OrderedOffsetPlanner
from loopsmith.core.sink import emit_plan
from loopsmith.domain import CurveFragment, FillSpec, Loop
from loopsmith.exceptions import EmptyInputError, KernelOperationError, MainRegionError
from loopsmith.io import DrawingReader, DrawingWriter
from loopsmith.utils import ProcessingLogger, ProcessingStats, configure_logging


@dataclass
class ReconstructionResult:
    """Outcome of reconstructing one set of fragments.

    Attributes:
        assembly: Loops built by the assembler (complete and incomplete)
        hierarchy: Nesting of the complete loops, indexed into assembly.loops
        ranked: Complete loops ranked by area, or None if there were none
        compositions: One composed region per outer contour, keyed by the
            outer loop's index in assembly.loops
    """

    assembly: AssemblyResult
    hierarchy: LoopHierarchy
    ranked: RankedLoops | None = None
    compositions: dict[int, CompositionResult] = field(default_factory=dict)

    @property
    def loops(self) -> list[Loop]:
        return self.assembly.loops

    def release(self) -> None:
        """Release every composed region."""
        for composition in self.compositions.values():
            if not composition.region.released:
                composition.region.release()


class BoundaryProcessor:
    """Orchestrates boundary reconstruction and ordered offsets.

    Example:
        settings = LoopsmithSettings()
        processor = BoundaryProcessor(settings)
        stats = processor.process(
            input_path=Path("exploded.dxf"),
            output_path=Path("exploded-loops.dxf"),
        )
    """

    def __init__(
        self,
        config: LoopsmithSettings,
        kernel: RegionKernel | None = None,
        quiet: bool = False,
    ) -> None:
        """Initialize the processor with configuration.

        Args:
            config: Loopsmith settings
            kernel: Region kernel (shapely kernel if None)
            quiet: Suppress console log output except errors
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)
        self.kernel = kernel or ShapelyKernel(arc_segments=config.geometry.arc_segments)
        self.assembler = LoopAssembler(
            tolerance=config.geometry.tolerance,
            min_area=config.geometry.min_loop_area,
        )
        self.analyzer = NestingAnalyzer(segments_per_circle=config.geometry.arc_segments)
        self.composer = RegionComposer(self.kernel)

    def _start_run(self) -> ProcessingStats:
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()
        return stats

    def read_fragments(self, input_path: Path) -> tuple[list[CurveFragment], DrawingReader]:
        """Read every line/arc fragment from a drawing.

        Returns:
            Fragments and the (closed) reader, which keeps the plane and
            rejection counts

        Raises:
            FileNotFoundError: If the drawing does not exist
            DrawingLoadError: If the drawing cannot be read
        """
        reader = DrawingReader(input_path, layers=self.config.composition.layers)
        reader.load()
        try:
            fragments = list(reader.iter_fragments())
        finally:
            reader.close()

        self.processing_logger.log_drawing_loaded(
            str(input_path),
            fragments=len(fragments),
            rejected=sum(reader.rejected.values()),
        )
        return fragments, reader

    def assemble(self, fragments: Iterable[CurveFragment]) -> tuple[AssemblyResult, LoopHierarchy]:
        """Assemble fragments into loops and classify them by nesting."""
        assembly = self.assembler.assemble(fragments)
        self.processing_logger.log_assembly(
            loops=len(assembly.loops),
            incomplete=len(assembly.incomplete_loops),
            degenerate=len(assembly.degenerate),
        )
        return assembly, self.analyzer.analyze(assembly.loops)

    def reconstruct(
        self,
        fragments: Iterable[CurveFragment],
        main: Loop | None = None,
    ) -> ReconstructionResult:
        """Rebuild loops from fragments and compose every outer with its holes.

        Args:
            fragments: Curve fragments in any order and direction
            main: Loop the caller considers the outer contour; must be the
                largest complete loop if given

        Returns:
            ReconstructionResult; the caller releases its regions

        Raises:
            EmptyInputError: If no fragments closed into a loop
            AmbiguousMainError: If ``main`` is not the largest loop
            MainRegionError: If no outer loop could be turned into a region
        """
        assembly, hierarchy = self.assemble(fragments)
        result = ReconstructionResult(assembly=assembly, hierarchy=hierarchy)

        complete = assembly.complete_loops
        if not complete:
            self.logger.warning("No closed loops assembled", incomplete=len(assembly.loops))
            raise EmptyInputError("closed loops")

        result.ranked = rank_loops(
            complete, main=main, tolerance=self.config.geometry.min_loop_area
        )

        loops = assembly.loops
        failures: list[str] = []
        try:
            for outer_idx in sorted(hierarchy.outers, key=lambda i: loops[i].area, reverse=True):
                holes = [loops[i] for i in hierarchy.holes_of(outer_idx)]
                try:
                    composition = self.composer.compose(loops[outer_idx], holes)
                except MainRegionError as e:
                    self.processing_logger.log_error(f"loop #{loops[outer_idx].order}", e)
                    failures.append(e.reason)
                    continue
                result.compositions[outer_idx] = composition
                self.processing_logger.log_composition(
                    outer_order=loops[outer_idx].order,
                    subtracted=len(composition.applied),
                    skipped=composition.skipped_count,
                    area=composition.region.area,
                )
            if not result.compositions:
                raise MainRegionError("; ".join(failures) or "no outer loop found")
        except BaseException:
            result.release()
            raise

        return result

    def process(self, input_path: Path, output_path: Path | None = None) -> ProcessingStats:
        """Reconstruct the boundaries in a drawing and write them out.

        Complete loops are written in the loop colour, loops that did not
        close in the incomplete colour, and each composed region as a fill.

        Args:
            input_path: Drawing with exploded fragments
            output_path: Output drawing (auto-generated if None)

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the input drawing does not exist
            DrawingLoadError: If the input drawing cannot be read
            EmptyInputError: If no fragments closed into a loop
            MainRegionError: If no outer loop could be turned into a region
            DrawingSaveError: If the output drawing cannot be written
        """
        stats = self._start_run()
        if output_path is None:
            output_path = DrawingWriter.get_output_path(input_path, "loops")

        self.logger.info("Starting reconstruction", input=str(input_path), output=str(output_path))

        fragments, reader = self.read_fragments(input_path)
        result = self.reconstruct(fragments)

        comp = self.config.composition
        writer = DrawingWriter(output_path, plane=reader.plane)
        region_fill = FillSpec(
            color=comp.region_color,
            pattern=comp.region_pattern,
            scale=comp.region_pattern_scale,
        )
        try:
            for loop in result.loops:
                writer.add_loop(loop, comp.loop_color if loop.complete else comp.incomplete_color)
            for composition in result.compositions.values():
                try:
                    writer.add_region(composition.region, region_fill)
                except (KernelOperationError, ValueError) as e:
                    self.processing_logger.log_error("region fill", e, traceback.format_exc())
        finally:
            result.release()

        self.processing_logger.log_fills(writer.fills_written)
        writer.save()

        stats.end_time = time.time()
        self.logger.info(
            "Reconstruction complete",
            loops=stats.loops_assembled,
            incomplete=stats.incomplete_loops,
            holes=stats.holes_subtracted,
            skipped=stats.holes_skipped,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats

    def ordered_offset(self, input_path: Path, output_path: Path | None = None) -> ProcessingStats:
        """Offset the two largest closed polylines inward and fill the bands.

        Args:
            input_path: Drawing with at least two closed polylines
            output_path: Output drawing (auto-generated if None)

        Returns:
            ProcessingStats with offset and fill counts

        Raises:
            EmptyInputError: If fewer than two closed polylines are found
            DrawingSaveError: If the output drawing cannot be written
        """
        stats = self._start_run()
        if output_path is None:
            output_path = DrawingWriter.get_output_path(input_path, "offset")

        self.logger.info("Starting ordered offset", input=str(input_path), output=str(output_path))

        with DrawingReader(input_path, layers=self.config.composition.layers) as reader:
            loops = [loop for loop in reader.iter_loops() if loop.complete]
            plane = reader.plane

        self.processing_logger.log_drawing_loaded(str(input_path), fragments=len(loops), rejected=0)
        if len(loops) < 2:
            raise EmptyInputError("pair of closed polylines")

        first, second = sort_by_area(loops)[:2]
        planner = OrderedOffsetPlanner(self.kernel, self.config.offset)
        plan = planner.plan(first, second)

        writer = DrawingWriter(output_path, plane=plane)
        emit_plan(plan, writer)
        self.processing_logger.log_offsets(created=len(plan.pairs), missing=plan.missing)
        self.processing_logger.log_fills(writer.fills_written)
        writer.save()

        stats.end_time = time.time()
        self.logger.info(
            "Ordered offset complete",
            offsets=stats.offsets_created,
            missing=stats.offsets_missing,
            fills=stats.fills_created,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats
