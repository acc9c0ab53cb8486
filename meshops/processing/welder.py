"""Exact vertex welding for raw triangle soups."""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from meshops.core.exceptions import InsufficientInputError, InvalidPointsError
from meshops.utils.logging import get_logger

logger = get_logger(__name__)

PointsLike = Union[np.ndarray, Sequence[Sequence[float]]]


@dataclass
class WeldResult:
    """Output of :func:`weld_vertices`.

    Attributes:
        vertices: Distinct positions ordered by assigned index, shape (N, 3)
        triangles: One index triple per input triple, shape (M, 3)
    """

    vertices: np.ndarray
    triangles: np.ndarray

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)


def as_points(points: PointsLike) -> np.ndarray:
    """Coerce input to a float64 (n, 3) array.

    Raises:
        InvalidPointsError: If the input is not a list of 3-D points
    """
    try:
        array = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidPointsError(f"Cannot read points: {e}")
    if array.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    if array.ndim != 2 or array.shape[1] != 3:
        raise InvalidPointsError(
            f"Expected points of shape (n, 3), got {array.shape}"
        )
    return array


def weld_vertices(points: PointsLike) -> WeldResult:
    """Merge exactly coincident points and index them in discovery order.

    Consecutive triples of ``points`` form triangles. A point equal to one
    already seen (component-wise, no tolerance) reuses that point's index;
    any other point receives the next sequential index.

    Args:
        points: Positions of shape (n, 3), three per triangle

    Returns:
        WeldResult with the distinct vertex table and triangle indices

    Raises:
        InsufficientInputError: If fewer than three points remain
    """
    points = as_points(points)
    count = len(points)

    if count % 3 != 0:
        logger.warning(
            "vertex_count_not_divisible_by_three",
            count=count,
            used=count - count % 3,
        )
        points = points[: count - count % 3]

    if len(points) < 3:
        raise InsufficientInputError(len(points))

    # -0.0 and 0.0 compare equal; give them one bit pattern before sorting
    keys = points + 0.0

    # Lexicographic unique table: first occurrence and table slot per point
    _, first_seen, slot = np.unique(
        keys, axis=0, return_index=True, return_inverse=True
    )
    slot = slot.reshape(-1)

    # Re-rank table slots by first occurrence to get discovery-order indices
    discovery_order = np.argsort(first_seen, kind="stable")
    index_of_slot = np.empty_like(discovery_order)
    index_of_slot[discovery_order] = np.arange(len(discovery_order))

    vertices = points[first_seen[discovery_order]]
    triangles = index_of_slot[slot].astype(np.int64).reshape(-1, 3)

    logger.debug(
        "vertices_welded",
        points=len(points),
        vertices=len(vertices),
        triangles=len(triangles),
    )
    return WeldResult(vertices=vertices, triangles=triangles)
