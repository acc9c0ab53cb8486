"""meshops - Consolidate raw geometry into canonical indexed triangle meshes."""

from meshops.core import IDENTITY_SCALE, Config, Mesh, MeshOpsError
from meshops.core.builder import (
    MeshBuilder,
    create_mesh_from_binary,
    create_mesh_from_box,
    create_mesh_from_resource,
    create_mesh_from_scene,
    create_mesh_from_vertices,
)
from meshops.processing import Box, PrimitiveMesh, SceneNode

__version__ = "0.1.0"

__all__ = [
    "Mesh",
    "MeshBuilder",
    "Config",
    "MeshOpsError",
    "IDENTITY_SCALE",
    "SceneNode",
    "PrimitiveMesh",
    "Box",
    "create_mesh_from_vertices",
    "create_mesh_from_scene",
    "create_mesh_from_binary",
    "create_mesh_from_resource",
    "create_mesh_from_box",
]
