"""Allocation of finished meshes from position and index buffers."""

import numpy as np

from meshops.core.exceptions import InvalidIndicesError
from meshops.core.mesh import Mesh
from meshops.processing.normals import compute_triangle_normals, compute_vertex_normals


def assemble_mesh(vertices: np.ndarray, triangles: np.ndarray) -> Mesh:
    """Build a mesh from final buffers and compute its normals.

    The buffers are copied, so the returned mesh shares no memory with the
    caller's arrays.

    Args:
        vertices: Vertex positions (N, 3)
        triangles: Vertex indices (M, 3)

    Returns:
        Fully populated Mesh

    Raises:
        InvalidIndicesError: If an index falls outside [0, N)
    """
    vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3)
    triangles = np.array(triangles, dtype=np.int64).reshape(-1, 3)

    if len(triangles) > 0:
        low, high = int(triangles.min()), int(triangles.max())
        if low < 0 or high >= len(vertices):
            raise InvalidIndicesError(
                f"indices must lie in [0, {len(vertices)}), got range [{low}, {high}]",
                len(vertices),
            )

    triangle_normals = compute_triangle_normals(vertices, triangles)
    vertex_normals = compute_vertex_normals(len(vertices), triangles, triangle_normals)

    return Mesh(
        vertices=vertices,
        triangles=triangles,
        triangle_normals=triangle_normals,
        vertex_normals=vertex_normals,
    )
