"""Core functionality for meshops."""

from meshops.core.config import (
    Config,
    ImportConfig,
    LoggingConfig,
    RetrievalConfig,
    get_default_config,
    load_config,
)
from meshops.core.exceptions import (
    ConfigurationError,
    EmptyPayloadError,
    EmptySceneError,
    ImportFailureError,
    InsufficientInputError,
    InvalidIndicesError,
    InvalidPointsError,
    InvalidTransformError,
    MeshOpsError,
    NoTrianglesError,
    NoVerticesError,
    RetrievalError,
    SceneError,
    SceneTraversalError,
    ShapeError,
)
from meshops.core.mesh import IDENTITY_SCALE, Mesh

__all__ = [
    # Config classes
    "Config",
    "ImportConfig",
    "RetrievalConfig",
    "LoggingConfig",
    # Config functions
    "get_default_config",
    "load_config",
    # Mesh
    "Mesh",
    "IDENTITY_SCALE",
    # Exceptions
    "MeshOpsError",
    "ConfigurationError",
    "InsufficientInputError",
    "InvalidPointsError",
    "InvalidIndicesError",
    "InvalidTransformError",
    "SceneError",
    "EmptySceneError",
    "NoVerticesError",
    "NoTrianglesError",
    "SceneTraversalError",
    "ImportFailureError",
    "EmptyPayloadError",
    "RetrievalError",
    "ShapeError",
]
