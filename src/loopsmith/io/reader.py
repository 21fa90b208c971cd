"""Drawing reader for loading DXF files.

This module provides the DrawingReader class for loading drawings and
extracting line/arc fragments and closed polylines into domain models.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import ezdxf
import structlog

from loopsmith.domain import CurveFragment, Loop, Plane
from loopsmith.exceptions import DrawingLoadError, UnsupportedFragmentError
from loopsmith.io.converter import (
    entity_plane,
    entity_to_fragments,
    lwpolyline_to_loop,
)

logger = structlog.get_logger(__name__)


class DrawingReader:
    """Loads DXF drawings and extracts boundary geometry.

    Example:
        with DrawingReader(Path("part.dxf")) as reader:
            fragments = list(reader.iter_fragments())
            print(len(fragments), reader.rejected)
    """

    def __init__(self, drawing_path: Path, layers: list[str] | None = None) -> None:
        """Initialize the drawing reader.

        Args:
            drawing_path: Path to the DXF file
            layers: Only read entities on these layers (None = all)
        """
        self._drawing_path = drawing_path
        self._layers = {name.upper() for name in layers} if layers else None
        self._doc: Any | None = None
        self._plane: Plane | None = None
        self.rejected: dict[str, int] = {}

    def load(self) -> None:
        """Load the drawing file.

        Raises:
            FileNotFoundError: If the file does not exist
            DrawingLoadError: If the file is not a readable DXF drawing
        """
        if not self._drawing_path.exists():
            raise FileNotFoundError(f"Drawing file not found: {self._drawing_path}")

        try:
            self._doc = ezdxf.readfile(str(self._drawing_path))
        except (OSError, ezdxf.DXFError) as e:
            raise DrawingLoadError(str(self._drawing_path), str(e)) from e

    def _modelspace(self) -> Any:
        if self._doc is None:
            raise RuntimeError("Drawing not loaded. Call load() first.")
        return self._doc.modelspace()

    @property
    def dxf_version(self) -> str:
        """Return the DXF version string (e.g. 'AC1024').

        Raises:
            RuntimeError: If drawing has not been loaded yet
        """
        if self._doc is None:
            raise RuntimeError("Drawing not loaded. Call load() first.")
        return self._doc.dxfversion

    @property
    def plane(self) -> Plane:
        """Working plane of the first geometry read, default plane before that."""
        return self._plane or Plane()

    def _selected(self, entity: Any) -> bool:
        if self._layers is None:
            return True
        return entity.dxf.get("layer", "0").upper() in self._layers

    def _note_plane(self, entity: Any) -> None:
        if self._plane is None:
            self._plane = entity_plane(entity)

    def iter_fragments(self) -> Iterator[CurveFragment]:
        """Iterate over line and arc fragments in model space.

        LINE and ARC entities are taken as they are; polylines are exploded.
        Other entity types are counted in ``rejected`` and skipped.

        Yields:
            Curve fragments

        Raises:
            RuntimeError: If drawing has not been loaded yet
        """
        for entity in self._modelspace():
            if not self._selected(entity):
                continue
            try:
                fragments = entity_to_fragments(entity)
            except UnsupportedFragmentError as e:
                self.rejected[e.kind] = self.rejected.get(e.kind, 0) + 1
                logger.debug("Entity rejected", dxftype=e.kind, handle=entity.dxf.get("handle"))
                continue
            self._note_plane(entity)
            yield from fragments

    def iter_loops(self) -> Iterator[Loop]:
        """Iterate over closed polylines as loops.

        Only LWPOLYLINE entities are considered; open ones are yielded as
        incomplete loops so callers can report them.

        Yields:
            Loops in model space order

        Raises:
            RuntimeError: If drawing has not been loaded yet
        """
        order = 0
        for entity in self._modelspace():
            if entity.dxftype() != "LWPOLYLINE" or not self._selected(entity):
                continue
            self._note_plane(entity)
            yield lwpolyline_to_loop(entity, order=order)
            order += 1

    def close(self) -> None:
        """Release the loaded drawing."""
        self._doc = None

    def __enter__(self) -> "DrawingReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
