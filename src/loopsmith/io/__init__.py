"""Drawing I/O layer for loopsmith.

This module handles reading and writing DXF drawings using ezdxf.
It provides a clean abstraction layer between ezdxf and the domain
models.

Key responsibilities:
- Load DXF drawings and filter by layer
- Convert LINE/ARC/polyline entities to curve fragments
- Read closed polylines as loops
- Write loops, bands and regions to a new drawing

Key classes:
- DrawingReader: Load drawings and extract fragments or loops
- DrawingWriter: Persist results (the bundled loop sink)
"""

from loopsmith.io.reader import DrawingReader
from loopsmith.io.writer import DrawingWriter

__all__ = [
    "DrawingReader",
    "DrawingWriter",
]
