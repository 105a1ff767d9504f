"""Noise generation functions for terrain generation.

Provides a 2D gradient (Perlin) noise primitive, seeded per-octave
offsets, and the fractal (multi-octave) composition used to build
height maps.
"""

import numpy as np
import structlog
from numpy.typing import ArrayLike, NDArray

from .config import GenerationConfig

logger = structlog.get_logger()

# Smallest usable noise scale; non-positive scales are clamped to this
NOISE_SCALE_EPSILON = 1e-4

# Range of the per-octave random offsets
OCTAVE_OFFSET_RANGE = 100_000.0

# Ken Perlin's reference permutation, doubled to avoid index wrapping
_PERMUTATION = np.array(
    [
        151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
        140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
        247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
        57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
        74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
        60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
        65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
        200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
        52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
        207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
        119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
        129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
        218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
        81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
        184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
        222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
    ],
    dtype=np.int64,
)
_P = np.concatenate([_PERMUTATION, _PERMUTATION])

# Gradient directions selected by the low three hash bits
_GRADIENTS = np.array(
    [
        (1.0, 1.0),
        (-1.0, 1.0),
        (1.0, -1.0),
        (-1.0, -1.0),
        (1.0, 0.0),
        (-1.0, 0.0),
        (0.0, 1.0),
        (0.0, -1.0),
    ],
    dtype=np.float64,
)


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic easing curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _grad(
    hashed: NDArray[np.int64],
    dx: NDArray[np.float64],
    dy: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Dot product of the hashed corner gradient with the offset vector."""
    g = _GRADIENTS[hashed & 7]
    return g[..., 0] * dx + g[..., 1] * dy


def _lerp(
    t: NDArray[np.float64],
    a: NDArray[np.float64],
    b: NDArray[np.float64],
) -> NDArray[np.float64]:
    return a + t * (b - a)


def perlin_noise(x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Evaluate 2D Perlin gradient noise.

    A pure function of its inputs: there is no seed or internal state,
    variation between runs comes entirely from the sample coordinates.
    Scalars and arrays are accepted and broadcast against each other.

    Args:
        x: Sample X coordinates.
        y: Sample Y coordinates.

    Returns:
        Noise values in [-1, 1]. Integer lattice points evaluate to 0.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    x, y = np.broadcast_arrays(x, y)

    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xi = x_floor.astype(np.int64) & 255
    yi = y_floor.astype(np.int64) & 255

    # Position within the unit cell
    dx = x - x_floor
    dy = y - y_floor
    u = _fade(dx)
    v = _fade(dy)

    a = _P[xi] + yi
    b = _P[xi + 1] + yi
    aa = _P[a]
    ab = _P[a + 1]
    ba = _P[b]
    bb = _P[b + 1]

    bottom = _lerp(u, _grad(aa, dx, dy), _grad(ba, dx - 1.0, dy))
    top = _lerp(u, _grad(ab, dx, dy - 1.0), _grad(bb, dx - 1.0, dy - 1.0))

    return np.clip(_lerp(v, bottom, top), -1.0, 1.0)


def octave_offsets(
    seed: int,
    octaves: int,
    offset: tuple[float, float] = (0.0, 0.0),
) -> NDArray[np.float64]:
    """Generate the seeded sample offset of every octave.

    A fresh generator is built from the seed on every call, so identical
    seed and octave count always reproduce identical offsets.

    Args:
        seed: Random seed.
        octaves: Number of octaves (floored to 1).
        offset: Global offset added to every octave.

    Returns:
        Array of shape (octaves, 2) holding (x, y) offsets.
    """
    count = max(octaves, 1)
    rng = np.random.default_rng(seed)

    # Draws are interleaved x, y per octave
    draws = rng.uniform(-OCTAVE_OFFSET_RANGE, OCTAVE_OFFSET_RANGE, size=(count, 2))
    return draws + np.asarray(offset, dtype=np.float64)


def effective_noise_scale(noise_scale: float) -> float:
    """Clamp a non-positive noise scale to a small positive epsilon."""
    if noise_scale > 0.0:
        return noise_scale
    logger.warning(
        "noise_scale_clamped", noise_scale=noise_scale, clamped_to=NOISE_SCALE_EPSILON
    )
    return NOISE_SCALE_EPSILON


def fractal_noise(
    width: int,
    height: int,
    config: GenerationConfig,
    offsets: NDArray[np.float64] | None = None,
) -> NDArray[np.float64]:
    """Sum octaves of Perlin noise over a grid.

    Sample coordinates are centered on the grid so the field is
    symmetric about its middle. Each octave is sampled at
    ``((x - width/2) / scale) * frequency + offset``, weighted by the
    current amplitude, after which amplitude is multiplied by
    persistence and frequency by lacunarity.

    Args:
        width: Grid width in vertices.
        height: Grid height in vertices.
        config: Noise parameters.
        offsets: Per-octave offsets; derived from the config seed if None.

    Returns:
        Raw (unnormalized) noise of shape (height, width).
    """
    if offsets is None:
        offsets = octave_offsets(config.seed, config.octaves, config.offset)

    scale = effective_noise_scale(config.noise_scale)
    half_width = width / 2.0
    half_height = height / 2.0

    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )
    centered_x = (xs - half_width) / scale
    centered_y = (ys - half_height) / scale

    result = np.zeros((height, width), dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0

    for offset_x, offset_y in offsets:
        sample_x = centered_x * frequency + offset_x
        sample_y = centered_y * frequency + offset_y
        result += amplitude * perlin_noise(sample_x, sample_y)

        amplitude *= config.persistence
        frequency *= config.lacunarity

    return result


def smoothstep(edge0: float, edge1: float, x: ArrayLike) -> NDArray[np.float64]:
    """Smooth Hermite interpolation between 0 and 1.

    Args:
        edge0: Lower edge of transition.
        edge1: Upper edge of transition.
        x: Input values.

    Returns:
        Smoothly interpolated values in [0, 1].
    """
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)
