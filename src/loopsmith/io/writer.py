"""Drawing writer for persisting loops, offsets and fills.

This module provides the DrawingWriter class, the bundled LoopSink. Loops
are written as closed LWPOLYLINE entities with their bulges; bands and
regions are written as HATCH entities with polyline boundary paths.
"""

from pathlib import Path
from typing import Any

import ezdxf
from ezdxf import const
from ezdxf.math import Vec3

from loopsmith.core.composer import boundary_loops
from loopsmith.core.kernel import Region
from loopsmith.core.nesting import NestingAnalyzer
from loopsmith.domain import Band, FillSpec, Loop, Plane
from loopsmith.exceptions import DrawingSaveError
from loopsmith.io.converter import loop_to_points

DXF_VERSION = "R2010"


class DrawingWriter:
    """Writes loops and fills to a new DXF drawing.

    Example:
        writer = DrawingWriter(Path("part-loops.dxf"))
        writer.add_loop(loop, color=7)
        writer.add_band(band)
        writer.save()
    """

    def __init__(self, output_path: Path, layer: str = "0", plane: Plane | None = None) -> None:
        """Initialize the drawing writer.

        Args:
            output_path: Path where the drawing will be saved
            layer: Layer every entity is placed on
            plane: Working plane; only its elevation is used
        """
        self._output_path = output_path
        self._layer = layer
        self._plane = plane or Plane()
        self._doc = ezdxf.new(DXF_VERSION)
        self._msp = self._doc.modelspace()
        self.loops_written = 0
        self.fills_written = 0

    @property
    def document(self) -> Any:
        """The ezdxf document being built."""
        return self._doc

    def add_loop(self, loop: Loop, color: int) -> None:
        """Add a loop as a closed polyline.

        Open chains are still closed on output so they stay visible as a
        single entity; their colour is what marks them.
        """
        self._msp.add_lwpolyline(
            loop_to_points(loop),
            format="xyb",
            close=True,
            dxfattribs={
                "layer": self._layer,
                "color": color,
                "elevation": self._plane.elevation,
            },
        )
        self.loops_written += 1

    def _new_hatch(self, fill: FillSpec) -> Any:
        hatch = self._msp.add_hatch(
            color=fill.color,
            dxfattribs={
                "layer": self._layer,
                "elevation": Vec3(0, 0, self._plane.elevation),
            },
        )
        if fill.is_solid:
            hatch.set_solid_fill(color=fill.color)
        else:
            hatch.set_pattern_fill(fill.pattern, color=fill.color, scale=fill.scale)
        self.fills_written += 1
        return hatch

    def add_band(self, band: Band) -> None:
        """Add a hatch between a band's outer ring and its hole."""
        hatch = self._new_hatch(band.fill)
        hatch.paths.add_polyline_path(
            loop_to_points(band.outer),
            is_closed=True,
            flags=const.BOUNDARY_PATH_EXTERNAL,
        )
        if band.inner is not None:
            hatch.paths.add_polyline_path(
                loop_to_points(band.inner),
                is_closed=True,
                flags=const.BOUNDARY_PATH_DEFAULT,
            )

    def add_region(self, region: Region, fill: FillSpec) -> None:
        """Add a hatch covering a composed region.

        The region's boundary is reassembled into loops; outer rings become
        external paths and holes default paths.
        """
        loops = boundary_loops(region)
        if not loops:
            return
        hierarchy = NestingAnalyzer().analyze(loops)
        hatch = self._new_hatch(fill)
        for idx, loop in enumerate(loops):
            node = hierarchy.nodes.get(idx)
            outer = node is None or node.is_outer
            hatch.paths.add_polyline_path(
                loop_to_points(loop),
                is_closed=True,
                flags=const.BOUNDARY_PATH_EXTERNAL if outer else const.BOUNDARY_PATH_DEFAULT,
            )

    def save(self) -> None:
        """Save the drawing to the output path.

        Raises:
            DrawingSaveError: If the file cannot be written
        """
        try:
            self._doc.saveas(str(self._output_path))
        except OSError as e:
            raise DrawingSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_output_path(input_path: Path, suffix: str = "loops") -> Path:
        """Generate an output path next to the input drawing.

        Converts: part.dxf -> part-loops.dxf
                  part.dxf -> part-offset.dxf (suffix="offset")

        Args:
            input_path: Input drawing path
            suffix: Tag appended to the stem

        Returns:
            Path with the tag before the extension
        """
        return input_path.parent / f"{input_path.stem}-{suffix}{input_path.suffix or '.dxf'}"
