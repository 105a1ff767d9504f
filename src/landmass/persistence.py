"""Mesh persistence: save and load generated buffers."""

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog

from .config import GenerationConfig
from .mesh import MeshBuffers

logger = structlog.get_logger()

FORMAT_VERSION = 1

_ARRAYS = ("positions", "normals", "uvs", "colors", "tangents", "indices")


def save_mesh(
    path: Path,
    mesh: MeshBuffers,
    config: GenerationConfig | None = None,
) -> None:
    """Save mesh buffers to disk.

    Uses numpy's compressed .npz format for efficient storage.

    Args:
        path: Output path (should end with .npz).
        mesh: Buffers to save.
        config: Generation configuration used, recorded in the metadata.
    """
    metadata = {
        "version": FORMAT_VERSION,
        "width": mesh.width,
        "height": mesh.height,
        "create_collision": mesh.create_collision,
        "config": config.model_dump(mode="json") if config is not None else None,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        **{name: getattr(mesh, name) for name in _ARRAYS},
        metadata=json.dumps(metadata).encode("utf-8"),
    )

    file_size = path.stat().st_size / 1024
    logger.info("mesh_saved", path=str(path), size_kb=round(file_size, 1))


def load_mesh(path: Path) -> tuple[MeshBuffers, dict]:
    """Load mesh buffers from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (MeshBuffers, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    with np.load(path) as data:
        missing = [name for name in (*_ARRAYS, "metadata") if name not in data]
        if missing:
            raise ValueError(f"Invalid mesh file: missing {', '.join(missing)}")

        arrays = {name: data[name] for name in _ARRAYS}
        metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))

    if metadata.get("version") != FORMAT_VERSION:
        raise ValueError(f"Unsupported mesh file version: {metadata.get('version')}")

    mesh = MeshBuffers(
        **arrays,
        width=metadata["width"],
        height=metadata["height"],
        create_collision=metadata["create_collision"],
    )

    logger.info("mesh_loaded", path=str(path), width=mesh.width, height=mesh.height)
    return mesh, metadata
