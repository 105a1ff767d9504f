"""Tests for biome classification."""

import numpy as np
import pytest

from landmass.biomes import BiomeClassifier, color_for
from landmass.config import BiomeDefinition, default_biome_table


def _by_name(name: str) -> BiomeDefinition:
    return next(b for b in default_biome_table() if b.name == name)


class TestEmptyTable:
    """Tests for the grayscale fallback."""

    def test_grayscale_by_height(self) -> None:
        """With no biomes the color is the height in every channel."""
        assert color_for([], 0.4, 0.0) == (0.4, 0.4, 0.4, 1.0)

    def test_vectorized_grayscale(self) -> None:
        colors = BiomeClassifier([]).colors_for(np.array([0.0, 0.5]), np.zeros(2))
        np.testing.assert_array_equal(
            colors, [[0.0, 0.0, 0.0, 1.0], [0.5, 0.5, 0.5, 1.0]]
        )


class TestHeightBands:
    """Tests for height matching and blending between two biomes."""

    def test_below_first_threshold_is_first_color(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """Nothing lies below the first biome, so it is never blended."""
        classifier = BiomeClassifier(two_biomes, height_blend_range=0.1)
        assert classifier.color_for(0.19, 0.0) == two_biomes[0].color
        assert classifier.color_for(0.25, 0.0) == two_biomes[0].color

    def test_below_blend_band_is_lower_color(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """Below threshold minus blend range the lower biome is pure."""
        classifier = BiomeClassifier(two_biomes, height_blend_range=0.1)
        assert classifier.color_for(0.49, 0.0) == two_biomes[0].color

    def test_at_threshold_is_upper_color(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """At the upper threshold the upper biome is pure."""
        classifier = BiomeClassifier(two_biomes, height_blend_range=0.1)
        assert classifier.color_for(0.6, 0.0) == two_biomes[1].color

    def test_inside_blend_band_is_between(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """Inside the band every channel lies strictly between the two."""
        classifier = BiomeClassifier(two_biomes, height_blend_range=0.1)
        blended = classifier.color_for(0.55, 0.0)
        for value, a, b in zip(blended, two_biomes[0].color, two_biomes[1].color):
            assert min(a, b) < value < max(a, b)

    def test_band_midpoint_is_even_mix(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """Smoothstep of 0.5 is 0.5, giving the average color."""
        classifier = BiomeClassifier(two_biomes, height_blend_range=0.1)
        expected = [
            (a + b) / 2 for a, b in zip(two_biomes[0].color, two_biomes[1].color)
        ]
        np.testing.assert_allclose(classifier.color_for(0.55, 0.0), expected, atol=1e-9)

    def test_band_edges_around_point_three(self) -> None:
        """Band [0.2, 0.3] below a 0.3 boundary with a biome beneath it."""
        lower = BiomeDefinition(name="Shore", height_threshold=0.1, color=(0.1, 0.2, 0.3, 0.4))
        upper = BiomeDefinition(name="Field", height_threshold=0.3, color=(0.9, 0.8, 0.7, 1.0))
        classifier = BiomeClassifier([lower, upper], height_blend_range=0.1)

        assert classifier.color_for(0.19, 0.5) == lower.color
        assert classifier.color_for(0.3, 0.5) == upper.color
        blended = classifier.color_for(0.25, 0.5)
        for value, a, b in zip(blended, lower.color, upper.color):
            assert a < value < b

    def test_zero_blend_range_is_unblended(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """Without a blend band the upper match is used directly."""
        classifier = BiomeClassifier(two_biomes, height_blend_range=0.0)
        assert classifier.color_for(0.55, 0.0) == two_biomes[1].color
        assert classifier.color_for(0.31, 0.0) == two_biomes[1].color

    def test_above_every_threshold_uses_last_eligible(
        self, two_biomes: list[BiomeDefinition]
    ) -> None:
        """Heights past the table take the highest eligible biome."""
        classifier = BiomeClassifier(two_biomes)
        assert classifier.color_for(0.8, 0.0) == two_biomes[1].color


class TestSlopeEligibility:
    """Tests for slope-restricted biomes."""

    def test_steep_high_ground_is_rock(self) -> None:
        """Only rock and snow accept steep slopes; rock covers 0.9."""
        assert color_for(default_biome_table(), 0.9, 0.7) == _by_name("Rock").color

    def test_gentle_high_ground_skips_rock(self) -> None:
        """Rock is ineligible on gentle slopes, so grass runs up to snow."""
        assert color_for(default_biome_table(), 0.9, 0.1) == _by_name("Grass").color

    def test_slope_bounds_inclusive(self) -> None:
        """A slope equal to max_slope is eligible."""
        biomes = [
            BiomeDefinition(name="A", height_threshold=1.0, max_slope=0.5, color=(1, 0, 0, 1)),
            BiomeDefinition(name="B", height_threshold=1.0, color=(0, 0, 1, 1)),
        ]
        assert color_for(biomes, 0.5, 0.5) == (1.0, 0.0, 0.0, 1.0)
        assert color_for(biomes, 0.5, 0.51) == (0.0, 0.0, 1.0, 1.0)

    def test_no_upper_falls_back_to_last_eligible(self) -> None:
        """Past every eligible threshold the reverse scan picks the color."""
        biomes = [
            BiomeDefinition(name="A", height_threshold=0.3, color=(1, 0, 0, 1)),
            BiomeDefinition(
                name="B", height_threshold=0.6, min_slope=0.5, color=(0, 1, 0, 1)
            ),
        ]
        assert color_for(biomes, 0.9, 0.1) == (1.0, 0.0, 0.0, 1.0)

    def test_nothing_eligible_uses_last_biome(self) -> None:
        """With no eligible biome the last table entry is used."""
        biomes = [
            BiomeDefinition(name="A", height_threshold=0.3, max_slope=0.1, color=(1, 0, 0, 1)),
            BiomeDefinition(name="B", height_threshold=0.6, max_slope=0.1, color=(0, 1, 0, 1)),
        ]
        assert color_for(biomes, 0.2, 0.9) == (0.0, 1.0, 0.0, 1.0)

    def test_table_order_is_respected(self) -> None:
        """The first eligible biome reaching the height wins."""
        first = BiomeDefinition(name="First", height_threshold=0.8, color=(1, 0, 0, 1))
        second = BiomeDefinition(name="Second", height_threshold=0.5, color=(0, 1, 0, 1))
        assert color_for([first, second], 0.4, 0.0) == first.color
        assert color_for([second, first], 0.4, 0.0) == second.color


class TestVectorized:
    """Tests for colors_for against color_for."""

    def test_matches_scalar_path(self) -> None:
        """Vectorized colors equal per-vertex colors."""
        rng = np.random.default_rng(21)
        thresholds = np.array([b.height_threshold for b in default_biome_table()])
        heights = np.concatenate([rng.uniform(0, 1, 400), thresholds, thresholds - 0.01])
        slopes = np.concatenate([rng.uniform(0, 1, 400), np.full(12, 0.45)])

        classifier = BiomeClassifier(default_biome_table(), height_blend_range=0.05)
        expected = np.array(
            [classifier.color_for(h, s) for h, s in zip(heights, slopes)]
        )
        np.testing.assert_array_equal(classifier.colors_for(heights, slopes), expected)

    def test_output_shape_flattens_grid(self) -> None:
        """A (rows, cols) grid gives (rows * cols, 4) colors."""
        colors = BiomeClassifier(default_biome_table()).colors_for(
            np.full((3, 4), 0.5), np.zeros((3, 4))
        )
        assert colors.shape == (12, 4)


class TestBlendRangeValidation:
    """Tests for the blend range bounds."""

    @pytest.mark.parametrize("blend_range", [-0.01, 0.51, 1.0])
    def test_out_of_range_rejected(self, blend_range: float) -> None:
        with pytest.raises(ValueError):
            BiomeClassifier(default_biome_table(), height_blend_range=blend_range)

    @pytest.mark.parametrize("blend_range", [0.0, 0.5])
    def test_bounds_accepted(self, blend_range: float) -> None:
        classifier = BiomeClassifier(default_biome_table(), height_blend_range=blend_range)
        assert classifier.height_blend_range == blend_range
