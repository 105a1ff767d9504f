"""Height map construction: fractal noise normalized to [0, 1]."""

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import GenerationConfig
from .noise import fractal_noise, octave_offsets

logger = structlog.get_logger()

HeightMap = NDArray[np.float64]


def normalize_heights(raw: NDArray[np.float64]) -> HeightMap:
    """Linearly remap a field from its [min, max] range to [0, 1].

    A constant field has no range to remap and comes back as all zeros
    rather than NaN. Non-finite samples are treated as 0 after the remap.

    Args:
        raw: Raw noise field.

    Returns:
        Field of the same shape with every value finite and in [0, 1].
    """
    finite = np.isfinite(raw)
    if not finite.any():
        logger.debug("height_range_degenerate", reason="no_finite_samples")
        return np.zeros(raw.shape, dtype=np.float64)

    low = float(np.min(raw[finite]))
    high = float(np.max(raw[finite]))
    span = high - low

    if span <= 0.0 or not np.isfinite(span):
        logger.debug("height_range_degenerate", low=low, high=high)
        return np.zeros(raw.shape, dtype=np.float64)

    normalized = np.clip((raw - low) / span, 0.0, 1.0)
    normalized[~finite] = 0.0
    return normalized


def build_height_map(config: GenerationConfig) -> HeightMap:
    """Generate a normalized height map for the configured grid.

    Dimensions are not validated here; the smallest grid the generator
    accepts is 2x2.

    Args:
        config: Generation configuration.

    Returns:
        Array of shape (height, width). Flattened row-major, vertex
        ``(x, y)`` sits at index ``x + y * width``.
    """
    offsets = octave_offsets(config.seed, config.octaves, config.offset)
    raw = fractal_noise(config.width, config.height, config, offsets)
    return normalize_heights(raw)
