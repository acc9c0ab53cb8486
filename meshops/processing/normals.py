"""Per-triangle and per-vertex normal computation."""

import numpy as np


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Scale each row to unit length.

    Rows with zero or non-finite length come back as exact zero vectors
    instead of NaN.
    """
    vectors = np.asarray(vectors, dtype=np.float64)
    result = np.zeros_like(vectors)
    if len(vectors) == 0:
        return result

    lengths = np.linalg.norm(vectors, axis=1)
    valid = np.isfinite(lengths) & (lengths > 0.0)
    result[valid] = vectors[valid] / lengths[valid, np.newaxis]
    return result


def compute_triangle_normals(
    vertices: np.ndarray,
    triangles: np.ndarray,
) -> np.ndarray:
    """Compute unit normals ``normalize((b - a) x (c - a))`` per triangle.

    Degenerate (zero-area) triangles get a zero normal.

    Args:
        vertices: Vertex positions (N, 3)
        triangles: Vertex indices (M, 3)

    Returns:
        Normals of shape (M, 3)
    """
    if len(triangles) == 0:
        return np.zeros((0, 3), dtype=np.float64)

    a = vertices[triangles[:, 0]]
    b = vertices[triangles[:, 1]]
    c = vertices[triangles[:, 2]]
    return normalize_rows(np.cross(b - a, c - a))


def compute_vertex_normals(
    vertex_count: int,
    triangles: np.ndarray,
    triangle_normals: np.ndarray,
) -> np.ndarray:
    """Average the unit normals of the triangles around each vertex.

    Every incident triangle contributes equally (no area weighting). A
    vertex that no triangle references, or whose incident normals cancel,
    gets a zero normal.

    Args:
        vertex_count: Number of vertices N
        triangles: Vertex indices (M, 3)
        triangle_normals: Unit triangle normals (M, 3)

    Returns:
        Normals of shape (N, 3)
    """
    sums = np.zeros((vertex_count, 3), dtype=np.float64)
    if len(triangles) > 0:
        # A vertex repeated inside one triangle receives that normal per corner
        for corner in range(3):
            np.add.at(sums, triangles[:, corner], triangle_normals)
    return normalize_rows(sums)
