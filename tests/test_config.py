"""Tests for configuration models and loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from landmass.config import (
    BiomeDefinition,
    GenerationConfig,
    LandmassConfig,
    default_biome_table,
    load_config,
)

EXAMPLE_CONFIG = Path(__file__).parent.parent / "configs" / "island.toml"


class TestGenerationConfig:
    """Tests for terrain parameters."""

    def test_defaults(self) -> None:
        config = GenerationConfig()
        assert (config.width, config.height) == (100, 100)
        assert config.cell_size == 100.0
        assert config.noise_scale == 50.0
        assert config.seed == 1337
        assert config.octaves == 4
        assert config.persistence == 0.5
        assert config.lacunarity == 2.0
        assert config.offset == (0.0, 0.0)
        assert config.height_multiplier == 300.0
        assert config.height_blend_range == 0.02

    def test_frozen(self) -> None:
        config = GenerationConfig()
        with pytest.raises(ValidationError):
            config.seed = 5  # type: ignore[misc]

    def test_small_grid_accepted(self) -> None:
        """Grid size is checked at generation time, not here."""
        assert GenerationConfig(width=1, height=0).width == 1

    @pytest.mark.parametrize(
        "field,value",
        [
            ("persistence", -0.1),
            ("persistence", 1.5),
            ("lacunarity", 0.5),
            ("cell_size", 0.0),
            ("height_blend_range", 0.6),
            ("height_blend_range", -0.01),
        ],
    )
    def test_out_of_range_rejected(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            GenerationConfig(**{field: value})

    def test_non_positive_noise_scale_accepted(self) -> None:
        """Non-positive scales are clamped during sampling."""
        assert GenerationConfig(noise_scale=0.0).noise_scale == 0.0


class TestBiomeDefinition:
    """Tests for biome entries."""

    def test_defaults(self) -> None:
        biome = BiomeDefinition(name="Plain", height_threshold=0.5)
        assert biome.min_slope == 0.0
        assert biome.max_slope == 1.0
        assert biome.color == (1.0, 1.0, 1.0, 1.0)

    @pytest.mark.parametrize("threshold", [-0.1, 1.1])
    def test_threshold_range(self, threshold: float) -> None:
        with pytest.raises(ValidationError):
            BiomeDefinition(name="Bad", height_threshold=threshold)

    def test_default_table_order(self) -> None:
        names = [b.name for b in default_biome_table()]
        assert names == ["Water", "Sand", "Dirt", "Grass", "Rock", "Snow"]

    def test_default_thresholds_ascend(self) -> None:
        thresholds = [b.height_threshold for b in default_biome_table()]
        assert thresholds == sorted(thresholds)
        assert thresholds[-1] == 1.0


class TestLandmassConfig:
    """Tests for the top-level config."""

    def test_defaults(self) -> None:
        config = LandmassConfig()
        assert config.terrain == GenerationConfig()
        assert len(config.biomes) == 6
        assert config.water.auto_sync is True
        assert config.water.generate_mesh is True
        assert config.origin == (0.0, 0.0, 0.0)


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_partial_file(self, tmp_path: Path) -> None:
        """Omitted values keep their defaults."""
        path = tmp_path / "landmass.toml"
        path.write_text(
            "origin = [1.0, 2.0, 3.0]\n"
            "\n"
            "[terrain]\n"
            "width = 64\n"
            "seed = 9\n"
            "\n"
            "[water]\n"
            "auto_sync = false\n"
            "world_height_z = 12.5\n"
        )
        config = load_config(path)
        assert config.terrain.width == 64
        assert config.terrain.seed == 9
        assert config.terrain.height == 100
        assert config.water.auto_sync is False
        assert config.water.world_height_z == 12.5
        assert config.origin == (1.0, 2.0, 3.0)
        assert len(config.biomes) == 6

    def test_biome_tables(self, tmp_path: Path) -> None:
        path = tmp_path / "biomes.toml"
        path.write_text(
            "[[biomes]]\n"
            'name = "Lava"\n'
            "height_threshold = 1.0\n"
            "color = [1.0, 0.2, 0.0, 1.0]\n"
        )
        config = load_config(path)
        assert [b.name for b in config.biomes] == ["Lava"]
        assert config.biomes[0].color == (1.0, 0.2, 0.0, 1.0)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[terrain]\npersistence = 3.0\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.toml")

    def test_example_config(self) -> None:
        config = load_config(EXAMPLE_CONFIG)
        assert config.terrain.width == 128
        assert [b.name for b in config.biomes][0] == "Water"
        assert config.biomes[-1].height_threshold == 1.0
