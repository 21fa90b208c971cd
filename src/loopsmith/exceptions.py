"""Exception hierarchy for Loopsmith."""


class LoopsmithError(Exception):
    """Base exception for all Loopsmith errors."""

    pass


class DrawingError(LoopsmithError):
    """Errors related to drawing loading or saving."""

    pass


class DrawingLoadError(DrawingError):
    """Error loading a drawing file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load drawing '{path}': {reason}")


class DrawingSaveError(DrawingError):
    """Error saving a drawing file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save drawing '{path}': {reason}")


class FragmentError(LoopsmithError):
    """Errors related to curve fragments."""

    pass


class DegenerateFragmentError(FragmentError):
    """Fragment whose endpoints coincide within tolerance."""

    def __init__(self, fragment: object, tolerance: float) -> None:
        self.fragment = fragment
        self.tolerance = tolerance
        super().__init__(f"Degenerate fragment {fragment!r} (tolerance {tolerance})")


class UnsupportedFragmentError(FragmentError):
    """Input that is neither a line segment nor a circular arc."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unsupported fragment type '{kind}': only lines and arcs are accepted")


class LoopError(LoopsmithError):
    """Errors related to assembled loops."""

    pass


class IncompleteLoopError(LoopError):
    """A loop that did not close on itself was used where a closed outline is required."""

    def __init__(self, order: int, vertex_count: int) -> None:
        self.order = order
        self.vertex_count = vertex_count
        super().__init__(
            f"Loop #{order} is incomplete ({vertex_count} vertices, did not close on itself)"
        )


class CompositionError(LoopsmithError):
    """Errors in loop ranking or boolean composition."""

    pass


class EmptyInputError(CompositionError):
    """No usable loops were supplied."""

    def __init__(self, what: str = "loops") -> None:
        self.what = what
        super().__init__(f"No {what} to process")


class MainRegionError(CompositionError):
    """The main loop could not be turned into a region."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Main loop could not be converted to a region: {reason}")


class AmbiguousMainError(CompositionError):
    """The caller's main loop is not the largest loop."""

    def __init__(self, main_area: float, largest_area: float) -> None:
        self.main_area = main_area
        self.largest_area = largest_area
        super().__init__(
            f"Selected main loop (area {main_area:.6g}) is not the largest loop "
            f"(area {largest_area:.6g})"
        )


class KernelOperationError(LoopsmithError):
    """A geometry kernel operation failed (bad geometry, self-intersection)."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Kernel operation '{operation}' failed: {reason}")
