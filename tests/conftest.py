"""Shared test fixtures for landmass tests."""

import pytest

from landmass.config import BiomeDefinition, GenerationConfig


@pytest.fixture
def small_config() -> GenerationConfig:
    """16x12 grid with enough relief to produce varied slopes."""
    return GenerationConfig(
        width=16,
        height=12,
        cell_size=10.0,
        noise_scale=6.0,
        seed=42,
        octaves=4,
        height_multiplier=40.0,
    )


@pytest.fixture
def two_biomes() -> list[BiomeDefinition]:
    """Low and high biomes at 0.3 and 0.6 with distinct channels.

    Every channel of the two colors differs so blends can be checked
    component-wise.
    """
    return [
        BiomeDefinition(
            name="Low", height_threshold=0.3, color=(0.2, 0.4, 0.6, 0.5)
        ),
        BiomeDefinition(
            name="High", height_threshold=0.6, color=(0.8, 0.1, 0.9, 1.0)
        ),
    ]
