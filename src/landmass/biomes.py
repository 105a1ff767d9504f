"""Biome classification: height and slope to a blended vertex color.

The biome table is scanned in order. For a given height and slope the
first slope-eligible biome whose threshold reaches the height is the
*upper* match; the most recent slope-eligible biome passed over on the
way there is the *lower* candidate. Just below the upper threshold the
two colors are blended with a smoothstep over ``height_blend_range``.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from .config import BiomeDefinition, Color
from .noise import smoothstep

MAX_HEIGHT_BLEND_RANGE = 0.5


def _lerp_color(lower: Color, upper: Color, alpha: float) -> Color:
    return tuple(a + (b - a) * alpha for a, b in zip(lower, upper))  # type: ignore[return-value]


class BiomeClassifier:
    """Maps (normalized height, slope) to an RGBA color."""

    def __init__(
        self,
        biomes: Sequence[BiomeDefinition],
        height_blend_range: float = 0.02,
    ):
        if not 0.0 <= height_blend_range <= MAX_HEIGHT_BLEND_RANGE:
            raise ValueError(
                f"height_blend_range must be in [0, {MAX_HEIGHT_BLEND_RANGE}], "
                f"got {height_blend_range}"
            )
        self.biomes = tuple(biomes)
        self.height_blend_range = height_blend_range

        self._thresholds = np.array(
            [b.height_threshold for b in self.biomes], dtype=np.float64
        )
        self._palette = np.array(
            [b.color for b in self.biomes], dtype=np.float64
        ).reshape(-1, 4)

    def color_for(self, height01: float, slope: float) -> Color:
        """Color of a single vertex.

        Args:
            height01: Normalized height in [0, 1].
            slope: Slope in [0, 1].

        Returns:
            RGBA color.
        """
        if not self.biomes:
            return (height01, height01, height01, 1.0)

        upper: BiomeDefinition | None = None
        lower: BiomeDefinition | None = None

        for biome in self.biomes:
            if not biome.min_slope <= slope <= biome.max_slope:
                continue
            if height01 <= biome.height_threshold:
                upper = biome
                break
            lower = biome

        if upper is None:
            for biome in reversed(self.biomes):
                if biome.min_slope <= slope <= biome.max_slope:
                    return biome.color
            return self.biomes[-1].color

        if lower is None or self.height_blend_range <= 0.0:
            return upper.color

        blend_top = upper.height_threshold
        blend_bottom = blend_top - self.height_blend_range

        if height01 <= blend_bottom:
            return lower.color
        if height01 >= blend_top:
            return upper.color

        t = (height01 - blend_bottom) / self.height_blend_range
        alpha = float(smoothstep(0.0, 1.0, t))
        return _lerp_color(lower.color, upper.color, alpha)

    def colors_for(
        self,
        heights: NDArray[np.float64],
        slopes: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Vectorized :meth:`color_for` over many vertices.

        Args:
            heights: Normalized heights, any shape.
            slopes: Slopes, same shape as heights.

        Returns:
            Colors of shape (heights.size, 4).
        """
        heights = np.asarray(heights, dtype=np.float64).ravel()
        slopes = np.asarray(slopes, dtype=np.float64).ravel()
        count = heights.size

        if not self.biomes:
            colors = np.ones((count, 4), dtype=np.float64)
            colors[:, 0] = heights
            colors[:, 1] = heights
            colors[:, 2] = heights
            return colors

        upper_idx = np.full(count, -1, dtype=np.int64)
        lower_idx = np.full(count, -1, dtype=np.int64)
        last_eligible = np.full(count, -1, dtype=np.int64)
        matched = np.zeros(count, dtype=bool)

        for i, biome in enumerate(self.biomes):
            eligible = (slopes >= biome.min_slope) & (slopes <= biome.max_slope)
            last_eligible[eligible] = i

            scanning = eligible & ~matched
            is_upper = scanning & (heights <= biome.height_threshold)
            upper_idx[is_upper] = i
            lower_idx[scanning & ~is_upper] = i
            matched |= is_upper

        # Past every eligible threshold: highest eligible biome, else the last one
        fallback = np.where(last_eligible >= 0, last_eligible, len(self.biomes) - 1)
        colors = self._palette[np.where(matched, upper_idx, fallback)]

        if self.height_blend_range <= 0.0:
            return colors

        blended = matched & (lower_idx >= 0)
        if not blended.any():
            return colors

        h = heights[blended]
        lower = self._palette[lower_idx[blended]]
        upper = self._palette[upper_idx[blended]]
        blend_top = self._thresholds[upper_idx[blended]]
        blend_bottom = blend_top - self.height_blend_range

        alpha = smoothstep(0.0, 1.0, (h - blend_bottom) / self.height_blend_range)
        mixed = lower + (upper - lower) * alpha[:, np.newaxis]

        below = h <= blend_bottom
        above = h >= blend_top
        mixed[below] = lower[below]
        mixed[above] = upper[above]

        colors[blended] = mixed
        return colors


def color_for(
    biomes: Sequence[BiomeDefinition],
    height01: float,
    slope: float,
    height_blend_range: float = 0.02,
) -> Color:
    """Color a single vertex with a one-off classifier."""
    return BiomeClassifier(biomes, height_blend_range).color_for(height01, slope)
