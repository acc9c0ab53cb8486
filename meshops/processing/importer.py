"""Import of binary mesh data into scene graphs using trimesh."""

import io
from typing import Optional

import numpy as np
import trimesh

from meshops.core.config import ImportConfig
from meshops.core.exceptions import EmptyPayloadError, ImportFailureError
from meshops.processing.scene import PrimitiveMesh, SceneNode
from meshops.processing.welder import weld_vertices
from meshops.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_file_type(hint: str) -> str:
    """Derive a trimesh file type from a file name or extension hint.

    The text after the last dot is used, lower-cased; anything mentioning
    ``stl`` is treated as STL. A hint without a dot is used as is.
    """
    hint = hint.strip()
    if "." in hint:
        hint = hint.rsplit(".", 1)[1]
    file_type = hint.lower()
    if "stl" in file_type:
        file_type = "stl"
    return file_type


class SceneImporter:
    """Parses mesh files held in memory into :class:`SceneNode` trees."""

    def __init__(self, config: Optional[ImportConfig] = None):
        """Initialize scene importer.

        Args:
            config: Import configuration
        """
        self.config = config or ImportConfig()

    def load(self, buffer: bytes, hint: str) -> SceneNode:
        """Parse a buffer into a scene graph.

        Args:
            buffer: Raw file contents
            hint: File name or extension identifying the format

        Returns:
            Root SceneNode

        Raises:
            EmptyPayloadError: If the buffer is empty
            ImportFailureError: If the data cannot be parsed
        """
        if not buffer:
            raise EmptyPayloadError()

        file_type = resolve_file_type(hint)
        if not file_type:
            raise ImportFailureError(hint, "no file type could be derived from hint")

        try:
            scene = trimesh.load(
                io.BytesIO(bytes(buffer)),
                file_type=file_type,
                force="scene",
                process=False,
            )
        except Exception as e:
            raise ImportFailureError(hint, str(e))

        if not isinstance(scene, trimesh.Scene):
            raise ImportFailureError(
                hint, f"Expected Scene object, got {type(scene).__name__}"
            )

        return self.convert(scene)

    def convert(self, scene: trimesh.Scene) -> SceneNode:
        """Convert a trimesh scene into a SceneNode tree.

        Each child node keeps the transform of its edge from the parent, so
        the hierarchy is preserved rather than pre-multiplied.
        """
        graph = scene.graph
        children = graph.transforms.children
        base = graph.base_frame

        root = SceneNode(name=str(base))
        stack = [(base, root)]
        while stack:
            name, node = stack.pop()
            for child_name in children.get(name, []):
                matrix, geometry_name = graph.get(frame_to=child_name, frame_from=name)
                child = SceneNode(
                    name=str(child_name),
                    transform=np.array(matrix, dtype=np.float64),
                )
                primitive = self._primitive(scene, geometry_name)
                if primitive is not None:
                    child.meshes.append(primitive)
                node.children.append(child)
                stack.append((child_name, child))

        return root

    def _primitive(
        self,
        scene: trimesh.Scene,
        geometry_name: Optional[str],
    ) -> Optional[PrimitiveMesh]:
        """Build the primitive for a named scene geometry, if it has points."""
        if geometry_name is None or geometry_name not in scene.geometry:
            return None
        geometry = scene.geometry[geometry_name]

        if isinstance(geometry, trimesh.Trimesh):
            vertices = np.asarray(geometry.vertices, dtype=np.float64)
            faces = np.asarray(geometry.faces, dtype=np.int64)
            if self.config.join_identical_vertices and len(faces) > 0:
                welded = weld_vertices(vertices[faces].reshape(-1, 3))
                return PrimitiveMesh(vertices=welded.vertices, faces=welded.triangles)
            return PrimitiveMesh(vertices=vertices, faces=faces)

        if isinstance(geometry, trimesh.PointCloud):
            return PrimitiveMesh(
                vertices=np.asarray(geometry.vertices, dtype=np.float64)
            )

        logger.debug(
            "geometry_skipped",
            geometry=geometry_name,
            geometry_type=type(geometry).__name__,
        )
        return None


def load_scene(
    buffer: bytes,
    hint: str,
    config: Optional[ImportConfig] = None,
) -> SceneNode:
    """Convenience function to import a buffer as a scene graph.

    Raises:
        EmptyPayloadError: If the buffer is empty
        ImportFailureError: If the data cannot be parsed
    """
    return SceneImporter(config).load(buffer, hint)
