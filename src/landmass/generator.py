"""Main terrain and water generation orchestration."""

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import structlog

from .biomes import BiomeClassifier
from .config import (
    BiomeDefinition,
    GenerationConfig,
    LandmassConfig,
    Vec3,
    WaterSettings,
    default_biome_table,
)
from .exceptions import InvalidDimensionsError, LandmassError
from .heightmap import build_height_map
from .mesh import MeshBuffers, assemble_mesh, empty_mesh
from .surface import compute_surface
from .water import WaterPlaneConfig, build_water_mesh, derive_water_plane

logger = structlog.get_logger()


def _check_dimensions(width: int, height: int) -> None:
    if width < 2 or height < 2:
        raise InvalidDimensionsError(width, height)


def generate_terrain(
    config: GenerationConfig,
    biomes: Sequence[BiomeDefinition] | None = None,
) -> MeshBuffers:
    """Generate terrain mesh buffers from configuration.

    Args:
        config: Terrain generation configuration.
        biomes: Ordered biome table. None selects the default table; an
            empty table colors vertices by height in grayscale.

    Returns:
        MeshBuffers with biome-colored vertices.

    Raises:
        InvalidDimensionsError: If the grid is smaller than 2x2. Nothing
            is allocated before this check.
    """
    _check_dimensions(config.width, config.height)
    if biomes is None:
        biomes = default_biome_table()

    start = time.perf_counter()

    height_map = build_height_map(config)
    surface = compute_surface(height_map, config)

    classifier = BiomeClassifier(biomes, config.height_blend_range)
    colors = classifier.colors_for(height_map, surface.slopes)

    mesh = assemble_mesh(surface, colors, config.width, config.height)

    logger.info(
        "terrain_generated",
        width=config.width,
        height=config.height,
        seed=config.seed,
        vertices=mesh.vertex_count,
        triangles=mesh.triangle_count,
        mean_height=round(float(np.mean(height_map)), 4),
        max_slope=round(float(np.max(surface.slopes)), 4),
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return mesh


def generate_water_plane(
    config: GenerationConfig,
    biomes: Sequence[BiomeDefinition],
    terrain_origin: Vec3,
    auto_sync: bool = True,
    settings: WaterSettings | None = None,
) -> tuple[WaterPlaneConfig, MeshBuffers]:
    """Generate a flat water plane for a terrain.

    Args:
        config: Configuration of the terrain the water belongs to.
        biomes: The terrain's biome table.
        terrain_origin: World location of the terrain.
        auto_sync: Derive grid and height from the terrain snapshot.
            When False the manual values in ``settings`` are used.
        settings: Water options; defaults to WaterSettings().

    Returns:
        Tuple of (WaterPlaneConfig, MeshBuffers). The buffers are empty
        when ``settings.generate_mesh`` is off.

    Raises:
        InvalidDimensionsError: If the water grid is smaller than 2x2.
    """
    if settings is None:
        settings = WaterSettings()

    if auto_sync:
        plane = derive_water_plane(config, biomes, terrain_origin)
    else:
        plane = WaterPlaneConfig(
            width=settings.width,
            height=settings.height,
            cell_size=settings.cell_size,
            world_height_z=settings.world_height_z,
        )

    if not settings.generate_mesh:
        logger.info("water_mesh_disabled")
        return plane, empty_mesh()

    _check_dimensions(plane.width, plane.height)
    mesh = build_water_mesh(plane)

    logger.info(
        "water_generated",
        width=plane.width,
        height=plane.height,
        world_height_z=plane.world_height_z,
        auto_sync=auto_sync,
    )
    return plane, mesh


@dataclass(frozen=True)
class RegenerationResult:
    """Outcome of a regeneration request."""

    accepted: bool
    error: LandmassError | None = None


class TerrainGenerator:
    """Holds a landmass configuration and its most recent buffers.

    The hosting application calls :meth:`regenerate` (or one of the
    ``update_*`` helpers) whenever it decides an edit warrants a rebuild.
    New buffers replace the old ones only when the whole rebuild
    succeeds; a rejected request leaves the previous buffers in place.
    """

    def __init__(self, config: LandmassConfig | None = None):
        self.config = config or LandmassConfig()
        self.terrain: MeshBuffers | None = None
        self.water: MeshBuffers | None = None
        self.water_plane: WaterPlaneConfig | None = None

    def regenerate(self) -> RegenerationResult:
        """Rebuild terrain and water from the current configuration.

        Terrain is published as soon as it builds. A water plane that is
        then rejected leaves the previous water buffers in place and is
        reported in the result.
        """
        try:
            terrain = generate_terrain(self.config.terrain, self.config.biomes)
        except InvalidDimensionsError as e:
            logger.warning("regeneration_rejected", reason=str(e))
            return RegenerationResult(accepted=False, error=e)

        self.terrain = terrain
        return self.refresh_water()

    def refresh_water(self) -> RegenerationResult:
        """Rebuild only the water plane, e.g. after a water setting edit."""
        try:
            water_plane, water = self._build_water()
        except InvalidDimensionsError as e:
            logger.warning("water_refresh_rejected", reason=str(e))
            return RegenerationResult(accepted=False, error=e)

        self.water_plane = water_plane
        self.water = water
        return RegenerationResult(accepted=True)

    def update_terrain(self, **changes: Any) -> RegenerationResult:
        """Apply terrain parameter edits and regenerate.

        Raises:
            pydantic.ValidationError: If an edited value is out of range.
        """
        terrain = GenerationConfig.model_validate(
            {**self.config.terrain.model_dump(), **changes}
        )
        self.config = self.config.model_copy(update={"terrain": terrain})
        return self.regenerate()

    def update_biomes(self, biomes: Sequence[BiomeDefinition]) -> RegenerationResult:
        """Replace the biome table and regenerate."""
        self.config = self.config.model_copy(update={"biomes": list(biomes)})
        return self.regenerate()

    def update_water(self, **changes: Any) -> RegenerationResult:
        """Apply water setting edits and rebuild the water plane.

        A rejected edit is not kept, so later terrain edits still
        rebuild the water from the last accepted settings.
        """
        water = WaterSettings.model_validate(
            {**self.config.water.model_dump(), **changes}
        )
        previous = self.config
        self.config = self.config.model_copy(update={"water": water})
        result = self.refresh_water()
        if not result.accepted:
            self.config = previous
        return result

    def _build_water(self) -> tuple[WaterPlaneConfig, MeshBuffers]:
        return generate_water_plane(
            self.config.terrain,
            self.config.biomes,
            self.config.origin,
            auto_sync=self.config.water.auto_sync,
            settings=self.config.water,
        )
