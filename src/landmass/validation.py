"""Post-generation mesh validation."""

from dataclasses import dataclass, field

import numpy as np
import structlog

from .mesh import MeshBuffers

logger = structlog.get_logger()

NORMAL_LENGTH_TOLERANCE = 1e-6


@dataclass
class ValidationResult:
    """Structural defects and soft issues found in one set of buffers.

    Errors mean a consumer cannot use the buffers as they are; warnings
    are reported but do not fail the mesh.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


def validate_mesh(mesh: MeshBuffers) -> ValidationResult:
    """Check generated buffers against their structural invariants.

    Args:
        mesh: Buffers to check.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    _check_counts(mesh, result)
    _check_indices(mesh, result)
    _check_finite(mesh, result)
    _check_normals(mesh, result)
    _check_ranges(mesh, result)

    if result.passed:
        logger.debug("mesh_validation_passed", vertices=mesh.vertex_count)
    else:
        logger.warning("mesh_validation_failed", errors=result.errors)

    for warning in result.warnings:
        logger.warning("mesh_validation_warning", warning=warning)

    return result


def _check_counts(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check buffer lengths agree with the grid size."""
    expected_vertices = mesh.width * mesh.height
    expected_indices = max(mesh.width - 1, 0) * max(mesh.height - 1, 0) * 6

    for name in ("positions", "normals", "uvs", "colors", "tangents"):
        length = len(getattr(mesh, name))
        if length != expected_vertices:
            result.add_error(
                f"{name} has {length} rows, expected {expected_vertices}"
            )

    if len(mesh.indices) != expected_indices:
        result.add_error(
            f"indices has {len(mesh.indices)} entries, expected {expected_indices}"
        )


def _check_indices(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check every index refers to an existing vertex."""
    if len(mesh.indices) == 0:
        return
    if mesh.indices.min() < 0 or mesh.indices.max() >= mesh.vertex_count:
        result.add_error("indices reference vertices outside the buffer")


def _check_finite(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check no attribute holds NaN or infinity."""
    for name in ("positions", "normals", "uvs", "colors", "tangents"):
        if not np.all(np.isfinite(getattr(mesh, name))):
            result.add_error(f"{name} contains non-finite values")


def _check_normals(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check normals have unit length."""
    if mesh.vertex_count == 0:
        return
    lengths = np.linalg.norm(mesh.normals, axis=1)
    bad = int(np.sum(np.abs(lengths - 1.0) > NORMAL_LENGTH_TOLERANCE))
    if bad > 0:
        result.add_error(f"{bad} normals are not unit length")


def _check_ranges(mesh: MeshBuffers, result: ValidationResult) -> None:
    """Check UVs and colors stay inside [0, 1]."""
    if mesh.vertex_count == 0:
        return
    if mesh.uvs.min() < 0.0 or mesh.uvs.max() > 1.0:
        result.add_error("uvs outside [0, 1]")
    if mesh.colors.min() < 0.0 or mesh.colors.max() > 1.0:
        result.add_warning("colors outside [0, 1]")
