"""Mesh processing functionality for meshops."""

from meshops.processing.assembler import assemble_mesh
from meshops.processing.importer import SceneImporter, load_scene, resolve_file_type
from meshops.processing.normals import (
    compute_triangle_normals,
    compute_vertex_normals,
    normalize_rows,
)
from meshops.processing.retriever import ResourceRetriever, retrieve
from meshops.processing.scene import (
    PrimitiveMesh,
    SceneFlattener,
    SceneNode,
    flatten_scene,
)
from meshops.processing.shapes import Box, create_box_mesh
from meshops.processing.soup import build_from_indexed, build_from_points
from meshops.processing.validator import MeshValidator, ValidationReport, validate_mesh
from meshops.processing.welder import WeldResult, weld_vertices

__all__ = [
    "weld_vertices",
    "WeldResult",
    "compute_triangle_normals",
    "compute_vertex_normals",
    "normalize_rows",
    "assemble_mesh",
    "build_from_points",
    "build_from_indexed",
    "SceneNode",
    "PrimitiveMesh",
    "SceneFlattener",
    "flatten_scene",
    "SceneImporter",
    "load_scene",
    "resolve_file_type",
    "ResourceRetriever",
    "retrieve",
    "Box",
    "create_box_mesh",
    "MeshValidator",
    "ValidationReport",
    "validate_mesh",
]
