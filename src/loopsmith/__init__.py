"""Loopsmith - Rebuild closed CAD boundaries from loose line and arc fragments.

Loopsmith takes the unordered LINE/ARC debris left behind by exploding a
region or polyline, stitches it back into closed bulge-encoded loops, ranks
the loops by area into an outer contour with holes, composes them with
boolean region operations, and derives ordered inward offsets with band
fills between nested loops.

Example:
    $ loopsmith reconstruct exploded.dxf

This will create exploded-loops.dxf with the rebuilt polylines and a filled
region for every outer contour and its holes.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
