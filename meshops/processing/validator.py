"""Mesh validation and analysis functionality."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from meshops.core.mesh import Mesh


@dataclass
class ValidationReport:
    """Report containing mesh validation results."""

    is_valid: bool
    is_watertight: bool
    vertex_count: int
    triangle_count: int
    surface_area: float
    volume: Optional[float]
    bounds_min: np.ndarray
    bounds_max: np.ndarray
    extents: np.ndarray

    # Normal quality
    degenerate_triangles: int
    unreferenced_vertices: int
    zero_vertex_normals: int

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class MeshValidator:
    """Validates and analyzes finished meshes."""

    def validate(self, mesh: Mesh) -> ValidationReport:
        """Perform mesh validation.

        Args:
            mesh: Mesh to validate

        Returns:
            ValidationReport with results
        """
        errors = []
        warnings = []

        if mesh.vertex_count == 0:
            errors.append("Mesh has no vertices")
        if mesh.triangle_count == 0:
            errors.append("Mesh has no triangles")

        if mesh.triangle_count > 0 and (
            mesh.triangles.min() < 0 or mesh.triangles.max() >= mesh.vertex_count
        ):
            errors.append("Mesh has triangle indices out of range")

        # Zero normals mark degenerate triangles and vertices with no usable
        # incident normal
        degenerate = int(np.sum(~np.any(mesh.triangle_normals, axis=1)))
        if degenerate > 0:
            warnings.append(f"{degenerate} degenerate triangles")

        referenced = np.zeros(mesh.vertex_count, dtype=bool)
        if not errors:
            referenced[mesh.triangles.reshape(-1)] = True
        unreferenced = int(np.sum(~referenced))
        if unreferenced > 0:
            warnings.append(f"{unreferenced} unreferenced vertices")

        zero_vertex_normals = int(np.sum(~np.any(mesh.vertex_normals, axis=1)))

        bounds = mesh.bounds
        surface_area = 0.0
        is_watertight = False
        volume = None
        if mesh.triangle_count > 0 and not errors:
            tm = mesh.to_trimesh()
            surface_area = float(tm.area)
            is_watertight = bool(tm.is_watertight)
            if is_watertight:
                volume = float(tm.volume)

        return ValidationReport(
            is_valid=len(errors) == 0,
            is_watertight=is_watertight,
            vertex_count=mesh.vertex_count,
            triangle_count=mesh.triangle_count,
            surface_area=surface_area,
            volume=volume,
            bounds_min=bounds[0],
            bounds_max=bounds[1],
            extents=bounds[1] - bounds[0],
            degenerate_triangles=degenerate,
            unreferenced_vertices=unreferenced,
            zero_vertex_normals=zero_vertex_normals,
            errors=errors,
            warnings=warnings,
        )


def validate_mesh(mesh: Mesh) -> ValidationReport:
    """Convenience function to validate a mesh."""
    return MeshValidator().validate(mesh)
