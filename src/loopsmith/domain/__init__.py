"""Domain models for loopsmith.

This module contains the core domain models representing curve fragments,
assembled loops and composition results. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable to plain dictionaries
- Independent of the drawing format and geometry kernel

Key classes:
- Point: A 2D point
- Segment, Arc: Line and arc fragments (the CurveFragment union)
- Vertex, Loop: Bulge-encoded closed boundaries
- Plane: Shared elevation and normal orientation
- OffsetPair, Band, FillSpec, StyledLoop: Composition output
"""

from loopsmith.domain.fragment import (
    Arc,
    CurveFragment,
    Point,
    Segment,
    ensure_fragment,
    fragment_from_dict,
)
from loopsmith.domain.loop import Loop, Plane, Vertex
from loopsmith.domain.region import (
    BY_LAYER,
    SOLID_PATTERN,
    Band,
    FillSpec,
    OffsetPair,
    OffsetSide,
    StyledLoop,
)

__all__: list[str] = [
    # Enums and constants
    "OffsetSide",
    "SOLID_PATTERN",
    "BY_LAYER",
    # Fragments
    "Point",
    "Segment",
    "Arc",
    "CurveFragment",
    "ensure_fragment",
    "fragment_from_dict",
    # Loops
    "Vertex",
    "Loop",
    "Plane",
    # Composition
    "OffsetPair",
    "FillSpec",
    "Band",
    "StyledLoop",
]
