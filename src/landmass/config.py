"""Generation configuration models and TOML loading."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

Color = tuple[float, float, float, float]
Vec3 = tuple[float, float, float]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)


class GenerationConfig(BaseModel):
    """Immutable input to one terrain generation run.

    Width and height are vertex counts. They are deliberately not
    range-checked here: grids smaller than 2x2 are rejected by the
    generator so that a live edit can be refused without losing the
    previously generated buffers.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=100, description="Vertex count along X")
    height: int = Field(default=100, description="Vertex count along Y")
    cell_size: float = Field(
        default=100.0, gt=0.0, description="World distance between vertices"
    )
    noise_scale: float = Field(
        default=50.0, description="Noise wavelength in cells (<= 0 is clamped)"
    )
    seed: int = Field(default=1337, description="Seed for per-octave offsets")
    octaves: int = Field(default=4, description="Noise layers (floored to 1)")
    persistence: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Amplitude multiplier per octave"
    )
    lacunarity: float = Field(
        default=2.0, ge=1.0, description="Frequency multiplier per octave"
    )
    offset: tuple[float, float] = Field(
        default=(0.0, 0.0), description="Global offset added to every octave"
    )
    height_multiplier: float = Field(
        default=300.0, description="World height of a normalized 1.0 sample"
    )
    height_blend_range: float = Field(
        default=0.02,
        ge=0.0,
        le=0.5,
        description="Normalized height band blended below each biome boundary",
    )


class BiomeDefinition(BaseModel):
    """A named height/slope-bounded color region."""

    model_config = ConfigDict(frozen=True)

    name: str
    height_threshold: float = Field(
        ge=0.0, le=1.0, description="Normalized height up to which this biome applies"
    )
    min_slope: float = Field(default=0.0, description="Lowest eligible slope")
    max_slope: float = Field(default=1.0, description="Highest eligible slope")
    color: Color = Field(default=WHITE, description="Linear RGBA vertex color")


BiomeTable = tuple[BiomeDefinition, ...]


def default_biome_table() -> BiomeTable:
    """Water, sand, dirt, grass, rock and snow, ordered by height."""
    return (
        BiomeDefinition(
            name="Water",
            height_threshold=0.20,
            min_slope=0.0,
            max_slope=0.4,
            color=(0.05, 0.15, 0.35, 1.0),
        ),
        BiomeDefinition(
            name="Sand",
            height_threshold=0.35,
            min_slope=0.0,
            max_slope=0.6,
            color=(0.86, 0.80, 0.61, 1.0),
        ),
        BiomeDefinition(
            name="Dirt",
            height_threshold=0.55,
            min_slope=0.0,
            max_slope=0.6,
            color=(0.40, 0.25, 0.15, 1.0),
        ),
        BiomeDefinition(
            name="Grass",
            height_threshold=0.75,
            min_slope=0.0,
            max_slope=0.5,
            color=(0.10, 0.50, 0.10, 1.0),
        ),
        BiomeDefinition(
            name="Rock",
            height_threshold=0.95,
            min_slope=0.4,
            max_slope=1.0,
            color=(0.35, 0.35, 0.35, 1.0),
        ),
        BiomeDefinition(
            name="Snow",
            height_threshold=1.0,
            min_slope=0.0,
            max_slope=1.0,
            color=WHITE,
        ),
    )


class WaterSettings(BaseModel):
    """Water plane options.

    The grid and height values are only used when auto-sync is off;
    otherwise they are derived from the linked terrain.
    """

    auto_sync: bool = Field(
        default=True, description="Derive size and height from the terrain"
    )
    generate_mesh: bool = Field(
        default=True, description="Produce water buffers at all"
    )
    width: int = Field(default=100, description="Manual vertex count along X")
    height: int = Field(default=100, description="Manual vertex count along Y")
    cell_size: float = Field(default=100.0, gt=0.0, description="Manual cell size")
    world_height_z: float = Field(default=60.0, description="Manual surface height")


class LandmassConfig(BaseModel):
    """Complete configuration for a terrain and its water plane."""

    terrain: GenerationConfig = Field(default_factory=GenerationConfig)
    biomes: list[BiomeDefinition] = Field(
        default_factory=lambda: list(default_biome_table())
    )
    water: WaterSettings = Field(default_factory=WaterSettings)
    origin: Vec3 = Field(
        default=(0.0, 0.0, 0.0), description="World location of the terrain"
    )


def load_config(config_path: Path) -> LandmassConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed LandmassConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return LandmassConfig.model_validate(data)
