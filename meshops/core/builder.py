"""Mesh construction entry points.

Every entry point returns a finished :class:`~meshops.core.mesh.Mesh`, or
``None`` after logging why no mesh could be produced.
"""

from typing import Any, Callable, Optional, Sequence, Union

import trimesh

from meshops.core.config import Config
from meshops.core.exceptions import EmptyPayloadError, MeshOpsError, RetrievalError
from meshops.core.mesh import IDENTITY_SCALE, Mesh
from meshops.processing.importer import SceneImporter
from meshops.processing.retriever import ResourceRetriever, Retriever
from meshops.processing.scene import SceneFlattener, SceneNode
from meshops.processing.shapes import Box, create_box_mesh
from meshops.processing.soup import IndicesLike, build_from_indexed, build_from_points
from meshops.processing.welder import PointsLike
from meshops.utils.logging import OperationLog, get_logger

logger = get_logger(__name__)


class MeshBuilder:
    """Builds canonical meshes from vertices, scenes, buffers and resources."""

    def __init__(
        self,
        config: Optional[Config] = None,
        retriever: Optional[Retriever] = None,
    ):
        """Initialize mesh builder.

        Args:
            config: Configuration object
            retriever: Callable returning the bytes of a resource (defaults
                to a ResourceRetriever for local files)
        """
        self.config = config or Config()
        self.retriever = retriever or ResourceRetriever(self.config.retrieval).get
        self.importer = SceneImporter(self.config.importing)
        self.flattener = SceneFlattener(max_nodes=self.config.importing.max_scene_nodes)

    def from_vertices(
        self,
        vertices: PointsLike,
        triangles: Optional[IndicesLike] = None,
    ) -> Optional[Mesh]:
        """Build a mesh from raw triples, or from an indexed pair.

        Without ``triangles``, consecutive vertex triples form triangles and
        exactly coincident vertices are welded. With ``triangles`` the data
        is used as given.

        Args:
            vertices: Vertex positions (n, 3)
            triangles: Optional triangle indices, (M, 3) or flat

        Returns:
            Mesh, or None if no mesh could be built
        """
        if triangles is None:
            return self._run("mesh_from_points", build_from_points, vertices)
        return self._run("mesh_from_indexed", build_from_indexed, vertices, triangles)

    def from_scene(
        self,
        scene: Union[SceneNode, trimesh.Scene],
        scale: Sequence[float] = IDENTITY_SCALE,
        resource_name: str = "",
    ) -> Optional[Mesh]:
        """Flatten a scene graph into a mesh.

        Args:
            scene: Root SceneNode, or a trimesh Scene to convert first
            scale: Per-axis multipliers applied after node transforms
            resource_name: Name used in diagnostics

        Returns:
            Mesh, or None if the scene holds no usable geometry
        """

        def flatten() -> Mesh:
            root = scene
            if isinstance(root, trimesh.Scene):
                root = self.importer.convert(root)
            return self.flattener.flatten(root, scale=scale, resource_name=resource_name)

        return self._run("mesh_from_scene", flatten, resource=resource_name)

    def from_binary(
        self,
        buffer: bytes,
        scale: Sequence[float] = IDENTITY_SCALE,
        hint: str = "",
    ) -> Optional[Mesh]:
        """Import a mesh file held in memory.

        Args:
            buffer: Raw file contents
            scale: Per-axis multipliers applied after node transforms
            hint: File name or extension identifying the format

        Returns:
            Mesh, or None if the buffer cannot be imported
        """

        def load() -> Mesh:
            root = self.importer.load(buffer, hint)
            return self.flattener.flatten(root, scale=scale, resource_name=hint)

        return self._run("mesh_from_binary", load, hint=hint)

    def from_resource(
        self,
        resource: str,
        scale: Sequence[float] = IDENTITY_SCALE,
    ) -> Optional[Mesh]:
        """Retrieve and import a mesh resource.

        Args:
            resource: Path or ``file://`` URI (or whatever the configured
                retriever understands)
            scale: Per-axis multipliers applied after node transforms

        Returns:
            Mesh, or None if retrieval or import fails
        """

        def load() -> Mesh:
            data = self._retrieve(resource)
            if not data:
                raise EmptyPayloadError(resource)
            root = self.importer.load(data, resource)
            return self.flattener.flatten(root, scale=scale, resource_name=resource)

        return self._run("mesh_from_resource", load, resource=resource)

    def from_box(self, box: Union[Box, Sequence[float]]) -> Optional[Mesh]:
        """Create a box mesh from its three extents."""
        size = box.size if isinstance(box, Box) else tuple(box)
        return self._run("mesh_from_box", create_box_mesh, size)

    def _retrieve(self, resource: str) -> bytes:
        """Fetch resource bytes, wrapping retriever failures."""
        try:
            return self.retriever(resource)
        except MeshOpsError:
            raise
        except Exception as e:
            raise RetrievalError(resource, str(e))

    def _run(
        self,
        operation: str,
        func: Callable[..., Mesh],
        *args: Any,
        **context: Any,
    ) -> Optional[Mesh]:
        """Run a construction step, turning failures into None."""
        op = OperationLog(logger, operation, suppress=(MeshOpsError,), **context)
        with op:
            mesh = func(*args)
            op.record(vertices=mesh.vertex_count, triangles=mesh.triangle_count)
            return mesh
        return None


def create_mesh_from_vertices(
    vertices: PointsLike,
    triangles: Optional[IndicesLike] = None,
) -> Optional[Mesh]:
    """Convenience function to build a mesh from vertices.

    Raw triples are welded; an indexed pair is used as given.
    """
    return MeshBuilder().from_vertices(vertices, triangles)


def create_mesh_from_scene(
    scene: Union[SceneNode, trimesh.Scene],
    scale: Sequence[float] = IDENTITY_SCALE,
    resource_name: str = "",
) -> Optional[Mesh]:
    """Convenience function to flatten a scene graph into a mesh."""
    return MeshBuilder().from_scene(scene, scale=scale, resource_name=resource_name)


def create_mesh_from_binary(
    buffer: bytes,
    scale: Sequence[float] = IDENTITY_SCALE,
    hint: str = "",
) -> Optional[Mesh]:
    """Convenience function to import a mesh file held in memory."""
    return MeshBuilder().from_binary(buffer, scale=scale, hint=hint)


def create_mesh_from_resource(
    resource: str,
    scale: Sequence[float] = IDENTITY_SCALE,
    config: Optional[Config] = None,
) -> Optional[Mesh]:
    """Convenience function to retrieve and import a mesh resource."""
    return MeshBuilder(config).from_resource(resource, scale=scale)


def create_mesh_from_box(box: Union[Box, Sequence[float]]) -> Optional[Mesh]:
    """Convenience function to create a box mesh."""
    return MeshBuilder().from_box(box)
