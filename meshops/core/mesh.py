"""Canonical indexed triangle mesh."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import trimesh

# Default per-axis scale: no scaling.
IDENTITY_SCALE: Tuple[float, float, float] = (1.0, 1.0, 1.0)


@dataclass(frozen=True, eq=False)
class Mesh:
    """Indexed triangle mesh with per-triangle and per-vertex normals.

    Instances are only created fully populated (see
    :func:`meshops.processing.assembler.assemble_mesh`) and every array is
    read-only afterwards.
    """

    vertices: np.ndarray
    triangles: np.ndarray
    triangle_normals: np.ndarray
    vertex_normals: np.ndarray

    def __post_init__(self) -> None:
        for array in (
            self.vertices,
            self.triangles,
            self.triangle_normals,
            self.vertex_normals,
        ):
            array.flags.writeable = False

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def bounds(self) -> np.ndarray:
        """Axis-aligned bounds as a (2, 3) array of [min, max].

        Returns zeros for a mesh without vertices.
        """
        if self.vertex_count == 0:
            return np.zeros((2, 3))
        return np.array([self.vertices.min(axis=0), self.vertices.max(axis=0)])

    def copy(self) -> "Mesh":
        """Return an independent mesh with its own buffers."""
        return Mesh(
            vertices=self.vertices.copy(),
            triangles=self.triangles.copy(),
            triangle_normals=self.triangle_normals.copy(),
            vertex_normals=self.vertex_normals.copy(),
        )

    def to_trimesh(self) -> trimesh.Trimesh:
        """Convert to a trimesh object for export and analysis.

        The geometry is passed through unprocessed so vertex order and
        indices are preserved.
        """
        return trimesh.Trimesh(
            vertices=np.array(self.vertices),
            faces=np.array(self.triangles),
            process=False,
        )

    def __repr__(self) -> str:
        return f"Mesh(vertices={self.vertex_count}, triangles={self.triangle_count})"
