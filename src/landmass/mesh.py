"""Mesh assembly: grid triangulation, UVs and final vertex buffers."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .surface import SurfaceMetrics

TANGENT_X = np.array([1.0, 0.0, 0.0], dtype=np.float64)

_ARRAY_FIELDS = ("positions", "normals", "uvs", "colors", "tangents", "indices")


@dataclass(frozen=True, eq=False)
class MeshBuffers:
    """Vertex and index buffers for one triangulated grid.

    Vertex arrays hold ``width * height`` rows in row-major order. Every
    array is copied and made read-only on construction; a regeneration
    produces a new instance rather than mutating an old one.
    """

    positions: NDArray[np.float64]
    normals: NDArray[np.float64]
    uvs: NDArray[np.float64]
    colors: NDArray[np.float64]
    tangents: NDArray[np.float64]
    indices: NDArray[np.int32]
    width: int
    height: int
    create_collision: bool = True

    def __post_init__(self) -> None:
        # Freeze private copies; the caller's arrays stay writable
        for name in _ARRAY_FIELDS:
            array = np.array(getattr(self, name))
            array.setflags(write=False)
            object.__setattr__(self, name, array)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def triangles(self) -> NDArray[np.int32]:
        """Indices viewed as (triangle_count, 3)."""
        return self.indices.reshape(-1, 3)


def grid_uvs(width: int, height: int) -> NDArray[np.float64]:
    """UVs spanning [0, 1] across the grid: u = x/(width-1), v = y/(height-1)."""
    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )
    uvs = np.empty((height, width, 2), dtype=np.float64)
    uvs[..., 0] = xs / (width - 1)
    uvs[..., 1] = ys / (height - 1)
    return uvs.reshape(-1, 2)


def grid_indices(width: int, height: int) -> NDArray[np.int32]:
    """Triangulate a grid into two triangles per cell.

    For a cell at (x, y) with corners I0=(x, y), I1=(x, y+1),
    I2=(x+1, y) and I3=(x+1, y+1), the triangles are (I0, I3, I2)
    and (I0, I1, I3). Cells are emitted row by row. The winding fixes
    which side faces forward.

    Args:
        width: Vertex count along X.
        height: Vertex count along Y.

    Returns:
        Flat index array of length (width-1) * (height-1) * 6.
    """
    ys, xs = np.meshgrid(
        np.arange(height - 1, dtype=np.int32),
        np.arange(width - 1, dtype=np.int32),
        indexing="ij",
    )
    i0 = (xs + ys * width).ravel()
    i1 = i0 + width
    i2 = i0 + 1
    i3 = i0 + width + 1

    return np.stack([i0, i3, i2, i0, i1, i3], axis=1).ravel().astype(np.int32)


def assemble_mesh(
    surface: SurfaceMetrics,
    colors: NDArray[np.float64],
    width: int,
    height: int,
    create_collision: bool = True,
) -> MeshBuffers:
    """Combine per-vertex attributes with UVs, tangents and indices.

    Args:
        surface: Positions and normals for every vertex.
        colors: RGBA colors of shape (width * height, 4).
        width: Vertex count along X.
        height: Vertex count along Y.
        create_collision: Whether the consumer should build collision.

    Returns:
        New MeshBuffers.
    """
    vertex_count = width * height

    return MeshBuffers(
        positions=surface.positions,
        normals=surface.normals,
        uvs=grid_uvs(width, height),
        colors=np.asarray(colors, dtype=np.float64).reshape(vertex_count, 4),
        tangents=np.tile(TANGENT_X, (vertex_count, 1)),
        indices=grid_indices(width, height),
        width=width,
        height=height,
        create_collision=create_collision,
    )


def empty_mesh() -> MeshBuffers:
    """Buffers with no vertices or triangles."""
    return MeshBuffers(
        positions=np.zeros((0, 3), dtype=np.float64),
        normals=np.zeros((0, 3), dtype=np.float64),
        uvs=np.zeros((0, 2), dtype=np.float64),
        colors=np.zeros((0, 4), dtype=np.float64),
        tangents=np.zeros((0, 3), dtype=np.float64),
        indices=np.zeros(0, dtype=np.int32),
        width=0,
        height=0,
        create_collision=False,
    )
