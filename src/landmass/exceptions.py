"""Custom exceptions for landmass generation."""


class LandmassError(Exception):
    """Base exception for landmass errors."""

    pass


class InvalidDimensionsError(LandmassError, ValueError):
    """Raised when a grid is smaller than 2x2 vertices.

    Generation is rejected before any buffer is allocated, so callers
    holding earlier buffers can keep them.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(
            f"Grid must be at least 2x2 vertices, got {width}x{height}"
        )
