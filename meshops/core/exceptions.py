"""Custom exceptions for meshops."""

from typing import Any, Optional


class MeshOpsError(Exception):
    """Base exception for meshops.

    ``log_level`` names the diagnostics severity used when a facade turns the
    exception into a "no mesh produced" result.
    """

    log_level = "warning"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(MeshOpsError):
    """Raised when configuration is invalid."""

    pass


class InsufficientInputError(MeshOpsError):
    """Raised when fewer than three usable points are supplied."""

    def __init__(self, available: int):
        super().__init__(
            f"At least 3 points are required to build a mesh, got {available}"
        )
        self.available = available


class InvalidPointsError(MeshOpsError):
    """Raised when point data cannot be read as (n, 3) coordinates."""

    log_level = "error"


class InvalidIndicesError(MeshOpsError):
    """Raised when triangle indices are unreadable or address missing vertices."""

    log_level = "error"

    def __init__(self, reason: str, vertex_count: Optional[int] = None):
        super().__init__(f"Invalid triangle indices: {reason}")
        self.reason = reason
        self.vertex_count = vertex_count


class SceneError(MeshOpsError):
    """Raised when a scene graph yields no usable geometry."""

    def __init__(self, resource: str, reason: str):
        name = resource or "<scene>"
        super().__init__(f"Scene '{name}': {reason}")
        self.resource = resource
        self.reason = reason


class EmptySceneError(SceneError):
    """Raised when a scene holds no meshes at all."""

    def __init__(self, resource: str = ""):
        super().__init__(resource, "scene has no meshes")


class NoVerticesError(SceneError):
    """Raised when scene traversal collects no vertices."""

    def __init__(self, resource: str = ""):
        super().__init__(resource, "there are no vertices in the scene")


class NoTrianglesError(SceneError):
    """Raised when scene traversal collects vertices but no triangles."""

    def __init__(self, resource: str = ""):
        super().__init__(resource, "there are no triangles in the scene")


class SceneTraversalError(SceneError):
    """Raised when a scene graph exceeds the node visit limit."""

    log_level = "error"

    def __init__(self, resource: str, max_nodes: int):
        super().__init__(
            resource,
            f"more than {max_nodes} nodes visited; graph is cyclic or too large",
        )
        self.max_nodes = max_nodes


class InvalidTransformError(SceneError):
    """Raised when a scene node transform is not a 4x4 numeric matrix."""

    log_level = "error"

    def __init__(self, resource: str, node_name: str, reason: str):
        super().__init__(
            resource, f"node '{node_name}' has an invalid transform: {reason}"
        )
        self.node_name = node_name


class ImportFailureError(MeshOpsError):
    """Raised when a mesh buffer cannot be parsed into a scene."""

    def __init__(self, hint: str, reason: str):
        super().__init__(f"Failed to import mesh data (hint '{hint}'): {reason}")
        self.hint = hint
        self.reason = reason


class EmptyPayloadError(MeshOpsError):
    """Raised when a mesh buffer or retrieved resource is empty."""

    def __init__(self, resource: str = ""):
        if resource:
            message = f"Retrieved empty mesh for resource '{resource}'"
        else:
            message = "Cannot construct mesh from empty binary buffer"
        super().__init__(message)
        self.resource = resource


class RetrievalError(MeshOpsError):
    """Raised when the bytes of a resource cannot be fetched."""

    log_level = "error"

    def __init__(self, resource: str, reason: str):
        super().__init__(f"Failed to retrieve resource '{resource}': {reason}")
        self.resource = resource
        self.reason = reason


class ShapeError(MeshOpsError):
    """Raised when an analytic shape has invalid dimensions."""

    pass
