"""Triangle soup entry points into mesh assembly."""

from typing import Optional, Sequence, Union

import numpy as np

from meshops.core.exceptions import InvalidIndicesError
from meshops.core.mesh import Mesh
from meshops.processing.assembler import assemble_mesh
from meshops.processing.welder import PointsLike, as_points, weld_vertices
from meshops.utils.logging import get_logger

logger = get_logger(__name__)

IndicesLike = Union[np.ndarray, Sequence[int], Sequence[Sequence[int]]]


def as_indices(indices: IndicesLike, vertex_count: Optional[int] = None) -> np.ndarray:
    """Coerce indices to a flat int64 array.

    Floating point indices are accepted only when they hold whole numbers.

    Raises:
        InvalidIndicesError: If the indices are unreadable or not whole numbers
    """
    try:
        raw = np.asarray(indices)
    except (TypeError, ValueError) as e:
        raise InvalidIndicesError(str(e), vertex_count)

    if raw.size > 0 and not np.issubdtype(raw.dtype, np.integer):
        whole = np.issubdtype(raw.dtype, np.floating) and bool(
            np.all(np.isfinite(raw) & (raw == np.round(raw)))
        )
        if not whole:
            raise InvalidIndicesError(
                f"indices must be whole numbers, got dtype {raw.dtype}",
                vertex_count,
            )
    return raw.astype(np.int64).reshape(-1)


def build_from_points(points: PointsLike) -> Mesh:
    """Build a mesh from raw triangle triples, welding coincident vertices.

    Raises:
        InsufficientInputError: If fewer than three usable points are given
    """
    welded = weld_vertices(points)
    return assemble_mesh(welded.vertices, welded.triangles)


def build_from_indexed(vertices: PointsLike, triangles: IndicesLike) -> Mesh:
    """Build a mesh from an already indexed vertex/triangle pair.

    No welding is done. ``triangles`` may be an (M, 3) array or a flat
    sequence of 3M indices. Floating point indices are accepted only when
    they hold whole numbers.

    Raises:
        InvalidIndicesError: If an index is not a whole number or does not
            address a vertex
    """
    vertices = as_points(vertices)
    flat = as_indices(triangles, len(vertices))

    if len(flat) % 3 != 0:
        logger.warning(
            "index_count_not_divisible_by_three",
            count=len(flat),
            used=len(flat) - len(flat) % 3,
        )
        flat = flat[: len(flat) - len(flat) % 3]

    return assemble_mesh(vertices, flat.reshape(-1, 3))
