"""Procedural terrain and water mesh generation.

This package turns a seed, noise parameters, grid dimensions and a biome
table into a normalized height field, per-vertex normals and slope,
biome-blended vertex colors and triangulated grid buffers, plus a flat
water plane matched to the terrain's water biome.
"""

from .biomes import BiomeClassifier, color_for
from .config import (
    BiomeDefinition,
    GenerationConfig,
    LandmassConfig,
    WaterSettings,
    default_biome_table,
    load_config,
)
from .exceptions import InvalidDimensionsError, LandmassError
from .generator import (
    RegenerationResult,
    TerrainGenerator,
    generate_terrain,
    generate_water_plane,
)
from .heightmap import build_height_map
from .mesh import MeshBuffers
from .persistence import load_mesh, save_mesh
from .validation import ValidationResult, validate_mesh
from .water import WaterPlaneConfig, derive_water_plane

__all__ = [
    "BiomeClassifier",
    "BiomeDefinition",
    "GenerationConfig",
    "InvalidDimensionsError",
    "LandmassConfig",
    "LandmassError",
    "MeshBuffers",
    "RegenerationResult",
    "TerrainGenerator",
    "ValidationResult",
    "WaterPlaneConfig",
    "WaterSettings",
    "build_height_map",
    "color_for",
    "default_biome_table",
    "derive_water_plane",
    "generate_terrain",
    "generate_water_plane",
    "load_config",
    "load_mesh",
    "save_mesh",
    "validate_mesh",
]
