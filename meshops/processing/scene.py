"""Scene graph model and flattening into a single triangle list."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from meshops.core.exceptions import (
    EmptySceneError,
    InvalidIndicesError,
    InvalidTransformError,
    NoTrianglesError,
    NoVerticesError,
    SceneTraversalError,
)
from meshops.core.mesh import IDENTITY_SCALE, Mesh
from meshops.processing.soup import as_indices, build_from_indexed
from meshops.processing.welder import PointsLike, as_points
from meshops.utils.logging import get_logger

logger = get_logger(__name__)

FacesLike = Union[np.ndarray, Sequence[Sequence[int]]]

DEFAULT_MAX_NODES = 100_000


@dataclass(eq=False)
class PrimitiveMesh:
    """Geometry attached to a scene node.

    Attributes:
        vertices: Positions in the node's frame, shape (K, 3)
        faces: Index lists into ``vertices``; faces may have any length
    """

    vertices: np.ndarray
    faces: FacesLike = field(default_factory=list)


@dataclass(eq=False)
class SceneNode:
    """Node of an imported scene graph.

    Attributes:
        name: Node name
        transform: 4x4 affine transform from this node's frame to its parent's
        meshes: Geometry attached to the node
        children: Child nodes, in traversal order
    """

    name: str = ""
    transform: np.ndarray = field(default_factory=lambda: np.eye(4))
    meshes: List[PrimitiveMesh] = field(default_factory=list)
    children: List["SceneNode"] = field(default_factory=list)


@dataclass
class FlatGeometry:
    """Unwelded geometry collected from a whole scene."""

    vertices: np.ndarray
    triangles: np.ndarray
    mesh_count: int
    node_count: int


def triangular_faces(faces: FacesLike) -> np.ndarray:
    """Keep only faces with exactly three indices.

    Returns:
        Array of shape (T, 3)

    Raises:
        InvalidIndicesError: If a kept face holds indices that are not whole
            numbers
    """
    if isinstance(faces, np.ndarray) and faces.ndim == 2:
        kept = faces if faces.shape[1] == 3 else faces[:0, :3]
    else:
        kept = [face for face in faces if np.ndim(face) == 1 and len(face) == 3]

    return as_indices(kept).reshape(-1, 3)


def node_transform(node: "SceneNode", resource_name: str = "") -> np.ndarray:
    """Read a node's local transform as a float64 4x4 matrix.

    Raises:
        InvalidTransformError: If the transform is not a numeric 4x4 matrix
    """
    try:
        matrix = np.asarray(node.transform, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidTransformError(resource_name, node.name, str(e))
    if matrix.shape != (4, 4):
        raise InvalidTransformError(
            resource_name, node.name, f"expected shape (4, 4), got {matrix.shape}"
        )
    return matrix


def transform_points(
    points: PointsLike,
    matrix: np.ndarray,
    scale: Sequence[float] = IDENTITY_SCALE,
) -> np.ndarray:
    """Apply an affine 4x4 transform, then a per-axis scale.

    Raises:
        InvalidPointsError: If ``points`` is not an (n, 3) array
    """
    points = as_points(points)
    moved = points @ matrix[:3, :3].T + matrix[:3, 3]
    return moved * np.asarray(scale, dtype=np.float64)


class SceneFlattener:
    """Collects the geometry of a scene graph in world coordinates."""

    def __init__(self, max_nodes: int = DEFAULT_MAX_NODES):
        """Initialize scene flattener.

        Args:
            max_nodes: Upper bound on visited nodes; guards against cyclic
                or runaway graphs
        """
        self.max_nodes = max_nodes

    def collect(
        self,
        root: SceneNode,
        scale: Sequence[float] = IDENTITY_SCALE,
        resource_name: str = "",
    ) -> FlatGeometry:
        """Walk the scene depth-first and gather transformed geometry.

        Nodes are visited in pre-order with children in their given order.
        The cumulative transform of a node is its parent's cumulative
        transform times its own local transform.

        Args:
            root: Root node of the scene
            scale: Per-axis multipliers applied after the transform
            resource_name: Name used in diagnostics

        Returns:
            FlatGeometry with offset-adjusted triangle indices

        Raises:
            SceneTraversalError: If more than ``max_nodes`` nodes are visited
            InvalidTransformError: If a node transform is not 4x4
            InvalidPointsError: If mesh vertices are not (n, 3)
            InvalidIndicesError: If a face addresses a vertex outside its mesh
            EmptySceneError: If no node carries a mesh
            NoVerticesError: If the meshes carry no vertices
            NoTrianglesError: If no face is a triangle
        """
        scale = tuple(float(s) for s in scale)
        vertex_chunks: List[np.ndarray] = []
        triangle_chunks: List[np.ndarray] = []
        vertex_total = 0
        mesh_count = 0
        visited = 0

        stack: List[Tuple[SceneNode, np.ndarray]] = [(root, np.eye(4))]
        while stack:
            node, parent_transform = stack.pop()
            visited += 1
            if visited > self.max_nodes:
                raise SceneTraversalError(resource_name, self.max_nodes)

            transform = parent_transform @ node_transform(node, resource_name)

            for primitive in node.meshes:
                mesh_count += 1
                points = transform_points(primitive.vertices, transform, scale)
                faces = triangular_faces(primitive.faces)
                if len(faces) > 0 and (faces.min() < 0 or faces.max() >= len(points)):
                    raise InvalidIndicesError(
                        f"face of mesh on node '{node.name}' addresses a vertex "
                        f"outside [0, {len(points)})",
                        len(points),
                    )

                vertex_chunks.append(points)
                triangle_chunks.append(faces + vertex_total)
                vertex_total += len(points)

            stack.extend((child, transform) for child in reversed(node.children))

        if mesh_count == 0:
            raise EmptySceneError(resource_name)

        vertices = np.concatenate(vertex_chunks)
        triangles = np.concatenate(triangle_chunks).reshape(-1, 3)

        if len(vertices) == 0:
            raise NoVerticesError(resource_name)
        if len(triangles) == 0:
            raise NoTrianglesError(resource_name)

        logger.debug(
            "scene_flattened",
            resource=resource_name,
            nodes=visited,
            meshes=mesh_count,
            vertices=len(vertices),
            triangles=len(triangles),
        )
        return FlatGeometry(
            vertices=vertices,
            triangles=triangles,
            mesh_count=mesh_count,
            node_count=visited,
        )

    def flatten(
        self,
        root: SceneNode,
        scale: Sequence[float] = IDENTITY_SCALE,
        resource_name: str = "",
    ) -> Mesh:
        """Flatten a scene into one mesh.

        Geometry from different nodes is not welded, so positions shared at
        sub-mesh seams stay separate vertices.
        """
        flat = self.collect(root, scale=scale, resource_name=resource_name)
        return build_from_indexed(flat.vertices, flat.triangles)


def flatten_scene(
    root: SceneNode,
    scale: Sequence[float] = IDENTITY_SCALE,
    resource_name: str = "",
    max_nodes: Optional[int] = None,
) -> Mesh:
    """Convenience function to flatten a scene graph into a mesh.

    Args:
        root: Root node of the scene
        scale: Per-axis multipliers applied after the transform
        resource_name: Name used in diagnostics
        max_nodes: Optional override of the node visit limit

    Returns:
        Flattened Mesh
    """
    flattener = SceneFlattener(
        max_nodes=DEFAULT_MAX_NODES if max_nodes is None else max_nodes
    )
    return flattener.flatten(root, scale=scale, resource_name=resource_name)
