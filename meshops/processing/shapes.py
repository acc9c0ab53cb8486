"""Analytic primitive meshes."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from meshops.core.exceptions import ShapeError
from meshops.core.mesh import Mesh
from meshops.processing.assembler import assemble_mesh

# Corner signs of the box, matched to BOX_TRIANGLES
BOX_CORNERS = np.array(
    [
        [-1, -1, -1],
        [1, -1, -1],
        [1, -1, 1],
        [-1, -1, 1],
        [-1, 1, 1],
        [-1, 1, -1],
        [1, 1, 1],
        [1, 1, -1],
    ],
    dtype=np.float64,
)

# Outward-facing (counter-clockwise) triangulation, two triangles per face
BOX_TRIANGLES = np.array(
    [
        [0, 1, 2],
        [2, 3, 0],
        [4, 3, 2],
        [2, 6, 4],
        [7, 6, 2],
        [2, 1, 7],
        [3, 4, 5],
        [5, 0, 3],
        [0, 5, 7],
        [7, 1, 0],
        [7, 5, 4],
        [4, 6, 7],
    ],
    dtype=np.int64,
)


@dataclass(frozen=True)
class Box:
    """Axis-aligned box centered at the origin."""

    size: Tuple[float, float, float]


def create_box_mesh(size: Tuple[float, float, float]) -> Mesh:
    """Create an 8-vertex, 12-triangle box mesh.

    Args:
        size: Full extents along x, y and z

    Returns:
        Box mesh centered at the origin

    Raises:
        ShapeError: If any extent is not a positive finite number
    """
    extents = np.asarray(size, dtype=np.float64).reshape(-1)
    if extents.shape != (3,):
        raise ShapeError(f"Box needs three extents, got {extents.shape[0]}")
    if not np.all(np.isfinite(extents)) or np.any(extents <= 0):
        raise ShapeError(f"Box extents must be positive, got {extents.tolist()}")

    return assemble_mesh(BOX_CORNERS * (extents / 2.0), BOX_TRIANGLES)
