"""Water plane derivation from a terrain snapshot."""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import structlog

from .config import WHITE, BiomeDefinition, GenerationConfig, Vec3
from .mesh import MeshBuffers, TANGENT_X, grid_indices, grid_uvs
from .surface import UP, grid_positions

logger = structlog.get_logger()

# Normalized water level used when the terrain has no biomes at all
DEFAULT_WATER_HEIGHT = 0.2

WATER_BIOME_NAME = "water"


@dataclass(frozen=True)
class WaterPlaneConfig:
    """Grid and surface height of a flat water plane."""

    width: int
    height: int
    cell_size: float
    world_height_z: float


def water_height01(biomes: Sequence[BiomeDefinition]) -> float:
    """Normalized water level of a biome table.

    Prefers a biome named "Water" (any case), then the first biome,
    then DEFAULT_WATER_HEIGHT for an empty table.
    """
    for biome in biomes:
        if biome.name.casefold() == WATER_BIOME_NAME:
            return biome.height_threshold
    if biomes:
        return biomes[0].height_threshold
    return DEFAULT_WATER_HEIGHT


def derive_water_plane(
    terrain_config: GenerationConfig,
    biomes: Sequence[BiomeDefinition],
    terrain_origin: Vec3,
) -> WaterPlaneConfig:
    """Match a water plane to a terrain's grid and water biome.

    Args:
        terrain_config: Configuration of the linked terrain.
        biomes: The terrain's biome table.
        terrain_origin: World location of the terrain.

    Returns:
        WaterPlaneConfig with the terrain's grid and the world-space
        height of its water level.
    """
    level = water_height01(biomes)
    world_height_z = terrain_origin[2] + level * terrain_config.height_multiplier

    logger.debug(
        "water_plane_synced",
        water_height01=level,
        world_height_z=world_height_z,
    )

    return WaterPlaneConfig(
        width=terrain_config.width,
        height=terrain_config.height,
        cell_size=terrain_config.cell_size,
        world_height_z=world_height_z,
    )


def build_water_mesh(plane: WaterPlaneConfig) -> MeshBuffers:
    """Build a flat, upward-facing grid at the plane's height.

    Uses the same centering, UVs and triangulation as terrain meshes.
    Water buffers never request collision.
    """
    vertex_count = plane.width * plane.height

    return MeshBuffers(
        positions=grid_positions(
            plane.width, plane.height, plane.cell_size, plane.world_height_z
        ),
        normals=np.tile(UP, (vertex_count, 1)),
        uvs=grid_uvs(plane.width, plane.height),
        colors=np.tile(np.asarray(WHITE, dtype=np.float64), (vertex_count, 1)),
        tangents=np.tile(TANGENT_X, (vertex_count, 1)),
        indices=grid_indices(plane.width, plane.height),
        width=plane.width,
        height=plane.height,
        create_collision=False,
    )
