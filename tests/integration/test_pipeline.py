"""Integration tests for consolidating mesh files end to end."""

from pathlib import Path

import numpy as np
import pytest
import trimesh

from meshops import Config, MeshBuilder, create_mesh_from_resource
from meshops.processing import validate_mesh


def translation(x: float, y: float, z: float) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, 3] = [x, y, z]
    return matrix


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create temporary output directory."""
    output = tmp_path / "output"
    output.mkdir(exist_ok=True)
    return output


@pytest.fixture
def two_box_glb(tmp_path: Path) -> Path:
    """GLB scene with one box under a nested node and one at the root."""
    scene = trimesh.Scene()
    scene.graph.update(
        frame_from=scene.graph.base_frame,
        frame_to="arm",
        matrix=translation(0.0, 0.0, 5.0),
    )
    scene.add_geometry(
        trimesh.creation.box(extents=[1, 1, 1]),
        node_name="hand",
        geom_name="hand_box",
        parent_node_name="arm",
        transform=translation(2.0, 0.0, 0.0),
    )
    scene.add_geometry(
        trimesh.creation.box(extents=[2, 2, 2]),
        node_name="base",
        geom_name="base_box",
    )

    path = tmp_path / "robot.glb"
    path.write_bytes(scene.export(file_type="glb"))
    return path


@pytest.mark.integration
def test_stl_round_trip(sample_stl_path: Path, output_dir: Path):
    """An STL triangle soup comes back as a watertight indexed box."""
    mesh = create_mesh_from_resource(str(sample_stl_path), scale=(1.0, 2.0, 3.0))

    assert mesh is not None
    assert mesh.vertex_count == 8
    assert mesh.triangle_count == 12
    np.testing.assert_allclose(mesh.bounds[1] - mesh.bounds[0], [1.0, 2.0, 3.0])

    report = validate_mesh(mesh)
    assert report.is_watertight
    assert report.volume == pytest.approx(6.0)

    output = output_dir / "box.stl"
    mesh.to_trimesh().export(output)
    again = create_mesh_from_resource(output.as_uri())

    assert again.vertex_count == 8
    np.testing.assert_allclose(again.bounds, mesh.bounds)


@pytest.mark.integration
def test_glb_scene_hierarchy(two_box_glb: Path, test_config: Config):
    """Nested node transforms are composed and sub-meshes stay separate."""
    mesh = MeshBuilder(test_config).from_resource(str(two_box_glb))

    assert mesh is not None
    assert mesh.vertex_count == 16
    assert mesh.triangle_count == 24
    np.testing.assert_allclose(mesh.bounds, [[-1.0, -1.0, -1.0], [2.5, 1.0, 5.5]])

    hand = mesh.vertices[mesh.vertices[:, 2] > 4.0]
    np.testing.assert_allclose(hand.min(axis=0), [1.5, -0.5, 4.5])
    np.testing.assert_allclose(hand.max(axis=0), [2.5, 0.5, 5.5])


@pytest.mark.integration
def test_normals_survive_pipeline(sample_stl_path: Path):
    mesh = MeshBuilder().from_resource(str(sample_stl_path))

    np.testing.assert_allclose(np.linalg.norm(mesh.triangle_normals, axis=1), 1.0)
    centroids = mesh.vertices[mesh.triangles].mean(axis=1)
    assert np.all(np.sum(mesh.triangle_normals * centroids, axis=1) > 0)
    assert np.all(np.sum(mesh.vertex_normals * mesh.vertices, axis=1) > 0)
