"""Command-line interface for terrain generation."""

import argparse
import logging
import time
from pathlib import Path

import structlog


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for terrain generation."""
    parser = argparse.ArgumentParser(
        description="Generate a procedural terrain mesh and its water plane"
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Path to a TOML config file"
    )
    parser.add_argument(
        "--width", type=int, default=None, help="Vertex count along X (overrides config)"
    )
    parser.add_argument(
        "--height", type=int, default=None, help="Vertex count along Y (overrides config)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed (overrides config)"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="terrain.npz",
        help="Terrain output path (default: terrain.npz)",
    )
    parser.add_argument(
        "--water-output",
        type=str,
        default=None,
        help="Water plane output path (optional)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    # Import here to avoid slow startup for --help
    from .config import LandmassConfig, load_config
    from .exceptions import InvalidDimensionsError
    from .generator import generate_terrain, generate_water_plane
    from .persistence import save_mesh
    from .validation import validate_mesh

    config = load_config(Path(args.config)) if args.config else LandmassConfig()

    overrides = {
        name: value
        for name, value in (
            ("width", args.width),
            ("height", args.height),
            ("seed", args.seed),
        )
        if value is not None
    }
    if overrides:
        terrain = config.terrain.model_copy(update=overrides)
        config = config.model_copy(update={"terrain": terrain})

    print(
        f"Generating {config.terrain.width}x{config.terrain.height} terrain "
        f"with seed {config.terrain.seed}"
    )

    start_time = time.time()
    try:
        terrain_mesh = generate_terrain(config.terrain, config.biomes)
        plane, water_mesh = generate_water_plane(
            config.terrain,
            config.biomes,
            config.origin,
            auto_sync=config.water.auto_sync,
            settings=config.water,
        )
    except InvalidDimensionsError as e:
        print(f"Rejected: {e}")
        return 2
    gen_time = time.time() - start_time

    print(f"Generation complete in {gen_time:.2f}s")
    print(
        f"Terrain: {terrain_mesh.vertex_count:,} vertices, "
        f"{terrain_mesh.triangle_count:,} triangles"
    )
    print(f"Water surface at z={plane.world_height_z:.2f}")

    validation = validate_mesh(terrain_mesh)
    if not validation.passed:
        for error in validation.errors:
            print(f"  - {error}")
        return 1

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_mesh(output_path, terrain_mesh, config.terrain)
    print(f"Saved terrain to {output_path}")

    if args.water_output:
        water_path = Path(args.water_output)
        water_path.parent.mkdir(parents=True, exist_ok=True)
        save_mesh(water_path, water_mesh)
        print(f"Saved water to {water_path}")

    return 0
