"""Surface metrics: world positions, vertex normals and slope."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .config import GenerationConfig

UP = np.array([0.0, 0.0, 1.0], dtype=np.float64)

# Normals shorter than this are considered degenerate
MIN_NORMAL_LENGTH = 1e-8

# Correlation weights producing in[i - 1] - in[i + 1]
_CENTRAL_DIFFERENCE = np.array([1.0, 0.0, -1.0], dtype=np.float64)


@dataclass(frozen=True, eq=False)
class SurfaceMetrics:
    """Per-vertex geometry in row-major vertex order."""

    positions: NDArray[np.float64]
    normals: NDArray[np.float64]
    slopes: NDArray[np.float64]


def grid_positions(
    width: int,
    height: int,
    cell_size: float,
    heights_z: NDArray[np.float64] | float,
) -> NDArray[np.float64]:
    """Lay out grid vertices in world space, centered on the origin.

    Args:
        width: Vertex count along X.
        height: Vertex count along Y.
        cell_size: World distance between neighboring vertices.
        heights_z: World Z per vertex, shape (height, width), or a scalar.

    Returns:
        Array of shape (width * height, 3).
    """
    half_width = (width - 1) * cell_size * 0.5
    half_height = (height - 1) * cell_size * 0.5

    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )

    positions = np.empty((height, width, 3), dtype=np.float64)
    positions[..., 0] = xs * cell_size - half_width
    positions[..., 1] = ys * cell_size - half_height
    positions[..., 2] = heights_z
    return positions.reshape(-1, 3)


def compute_normals(
    world_heights: NDArray[np.float64],
    cell_size: float,
) -> NDArray[np.float64]:
    """Estimate vertex normals from central differences.

    Neighbors beyond the grid edge replicate the edge vertex. The
    unnormalized normal is ``(hL - hR, hD - hU, 2 * cell_size)``.

    Args:
        world_heights: World-space heights of shape (height, width).
        cell_size: World distance between neighboring vertices.

    Returns:
        Unit normals of shape (width * height, 3). Degenerate or
        non-finite results are replaced by the up vector.
    """
    dx = ndimage.correlate1d(world_heights, _CENTRAL_DIFFERENCE, axis=1, mode="nearest")
    dy = ndimage.correlate1d(world_heights, _CENTRAL_DIFFERENCE, axis=0, mode="nearest")

    normals = np.empty(world_heights.shape + (3,), dtype=np.float64)
    normals[..., 0] = dx
    normals[..., 1] = dy
    normals[..., 2] = 2.0 * cell_size
    normals = normals.reshape(-1, 3)

    with np.errstate(invalid="ignore", over="ignore"):
        lengths = np.linalg.norm(normals, axis=1)
        valid = np.isfinite(lengths) & (lengths > MIN_NORMAL_LENGTH)
        normals[valid] /= lengths[valid][:, np.newaxis]

    valid &= np.all(np.isfinite(normals), axis=1)
    normals[~valid] = UP
    return normals


def compute_slopes(normals: NDArray[np.float64]) -> NDArray[np.float64]:
    """Slope per vertex: 0 when flat, approaching 1 when vertical."""
    return np.clip(1.0 - normals @ UP, 0.0, 1.0)


def compute_surface(
    height_map: NDArray[np.float64],
    config: GenerationConfig,
) -> SurfaceMetrics:
    """Derive positions, normals and slopes from a normalized height map."""
    world_heights = height_map * config.height_multiplier
    normals = compute_normals(world_heights, config.cell_size)

    return SurfaceMetrics(
        positions=grid_positions(
            config.width, config.height, config.cell_size, world_heights
        ),
        normals=normals,
        slopes=compute_slopes(normals),
    )
