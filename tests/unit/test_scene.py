"""Unit tests for scene graph flattening."""

import numpy as np
import pytest

from meshops.core.exceptions import (
    EmptySceneError,
    InvalidIndicesError,
    InvalidPointsError,
    InvalidTransformError,
    NoTrianglesError,
    NoVerticesError,
    SceneTraversalError,
)
from meshops.core.mesh import IDENTITY_SCALE
from meshops.processing.scene import (
    PrimitiveMesh,
    SceneFlattener,
    SceneNode,
    flatten_scene,
    transform_points,
    triangular_faces,
)


def translation(x: float, y: float, z: float) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, 3] = [x, y, z]
    return matrix


def rotation_z_90() -> np.ndarray:
    matrix = np.eye(4)
    matrix[:2, :2] = [[0.0, -1.0], [1.0, 0.0]]
    return matrix


class TestHelpers:
    """Test face filtering and point transforms."""

    def test_triangular_faces_drops_other_sizes(self):
        faces = [[0, 1, 2], [0, 1], [0, 1, 2, 3], [3, 4, 5], [7]]

        assert triangular_faces(faces).tolist() == [[0, 1, 2], [3, 4, 5]]

    def test_triangular_faces_array(self):
        assert triangular_faces(np.array([[0, 1, 2]])).tolist() == [[0, 1, 2]]
        assert triangular_faces(np.array([[0, 1, 2, 3]])).shape == (0, 3)

    def test_transform_then_scale(self):
        """Scale multiplies the already transformed coordinates."""
        points = np.array([[1.0, 0.0, 0.0]])
        result = transform_points(points, translation(2.0, 1.0, 0.0), (2.0, 3.0, 4.0))

        np.testing.assert_allclose(result, [[6.0, 3.0, 0.0]])

    def test_identity(self):
        points = np.array([[1.5, -2.0, 3.25]])

        np.testing.assert_array_equal(
            transform_points(points, np.eye(4), IDENTITY_SCALE), points
        )


class TestSceneFlattener:
    """Test scene traversal and geometry collection."""

    def test_child_translation(self, translated_child_scene: SceneNode):
        """Vertex (1, 0, 0) under a (2, 0, 0) translation lands at (3, 0, 0)."""
        flat = SceneFlattener().collect(translated_child_scene)

        np.testing.assert_allclose(flat.vertices[0], [3.0, 0.0, 0.0])
        assert flat.node_count == 2
        assert flat.mesh_count == 1

    def test_composition_order(self, triangle_primitive: PrimitiveMesh):
        """The local transform applies first, then the parent's."""
        child = SceneNode(transform=translation(1.0, 0.0, 0.0), meshes=[triangle_primitive])
        root = SceneNode(transform=rotation_z_90(), children=[child])

        flat = SceneFlattener().collect(root)

        # (0,0,0) -> translate (1,0,0) -> rotate 90 about z -> (0,1,0)
        np.testing.assert_allclose(flat.vertices[0], [0.0, 1.0, 0.0], atol=1e-12)
        # (1,0,0) -> (2,0,0) -> (0,2,0)
        np.testing.assert_allclose(flat.vertices[1], [0.0, 2.0, 0.0], atol=1e-12)

    def test_accumulates_over_depth(self, triangle_primitive: PrimitiveMesh):
        leaf = SceneNode(transform=translation(0.0, 0.0, 1.0), meshes=[triangle_primitive])
        middle = SceneNode(transform=translation(0.0, 2.0, 0.0), children=[leaf])
        root = SceneNode(transform=translation(3.0, 0.0, 0.0), children=[middle])

        flat = SceneFlattener().collect(root)

        np.testing.assert_allclose(flat.vertices[0], [3.0, 2.0, 1.0])

    def test_pre_order_and_offsets(self):
        """Geometry is appended in pre-order with offset indices."""

        def marker(x: float) -> PrimitiveMesh:
            return PrimitiveMesh(
                vertices=np.array([[x, 0.0, 0.0], [x, 1.0, 0.0], [x, 0.0, 1.0]]),
                faces=[[0, 1, 2]],
            )

        grandchild = SceneNode(name="a1", meshes=[marker(2.0)])
        first = SceneNode(name="a", meshes=[marker(1.0)], children=[grandchild])
        second = SceneNode(name="b", meshes=[marker(3.0)])
        root = SceneNode(name="root", meshes=[marker(0.0)], children=[first, second])

        flat = SceneFlattener().collect(root)

        assert flat.vertices[::3, 0].tolist() == [0.0, 1.0, 2.0, 3.0]
        assert flat.triangles.tolist() == [
            [0, 1, 2],
            [3, 4, 5],
            [6, 7, 8],
            [9, 10, 11],
        ]

    def test_multiple_meshes_on_one_node(self, triangle_primitive):
        quad = PrimitiveMesh(
            vertices=np.array([[0, 0, 5], [1, 0, 5], [1, 1, 5], [0, 1, 5]], dtype=float),
            faces=[[0, 1, 2, 3], [0, 1, 2]],
        )
        root = SceneNode(meshes=[triangle_primitive, quad])

        flat = SceneFlattener().collect(root)

        assert len(flat.vertices) == 7
        assert flat.triangles.tolist() == [[0, 1, 2], [3, 4, 5]]

    def test_scale_applied_per_axis(self, translated_child_scene):
        flat = SceneFlattener().collect(translated_child_scene, scale=(2.0, 1.0, 0.5))

        np.testing.assert_allclose(flat.vertices[0], [6.0, 0.0, 0.0])
        np.testing.assert_allclose(flat.vertices[2], [6.0, 0.0, 0.5])

    def test_seams_are_not_welded(self, triangle_primitive):
        """Identical sub-meshes keep separate vertices."""
        root = SceneNode(
            children=[
                SceneNode(meshes=[triangle_primitive]),
                SceneNode(meshes=[triangle_primitive]),
            ]
        )
        mesh = SceneFlattener().flatten(root)

        assert mesh.vertex_count == 6
        assert mesh.triangle_count == 2

    def test_empty_scene(self):
        root = SceneNode(children=[SceneNode(), SceneNode()])

        with pytest.raises(EmptySceneError):
            SceneFlattener().collect(root, resource_name="empty.dae")

    def test_no_vertices(self):
        root = SceneNode(meshes=[PrimitiveMesh(vertices=np.empty((0, 3)))])

        with pytest.raises(NoVerticesError):
            SceneFlattener().collect(root)

    def test_no_triangles(self):
        lines = PrimitiveMesh(
            vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]),
            faces=[[0, 1]],
        )

        with pytest.raises(NoTrianglesError) as exc_info:
            SceneFlattener().collect(SceneNode(meshes=[lines]), resource_name="lines.obj")

        assert "lines.obj" in str(exc_info.value)

    def test_cyclic_graph_is_bounded(self, triangle_primitive):
        root = SceneNode(meshes=[triangle_primitive])
        root.children.append(root)

        with pytest.raises(SceneTraversalError):
            SceneFlattener(max_nodes=50).collect(root)

    def test_deep_hierarchy(self, triangle_primitive):
        """Depth far beyond the recursion limit is handled."""
        leaf = SceneNode(meshes=[triangle_primitive])
        node = leaf
        for _ in range(5000):
            node = SceneNode(transform=translation(0.001, 0.0, 0.0), children=[node])

        flat = SceneFlattener().collect(node)

        np.testing.assert_allclose(flat.vertices[0], [5.0, 0.0, 0.0], atol=1e-9)

    def test_flatten_scene_function(self, translated_child_scene):
        mesh = flatten_scene(translated_child_scene)

        assert mesh.vertex_count == 3
        assert mesh.triangle_count == 1
        np.testing.assert_allclose(mesh.triangle_normals[0], [1.0, 0.0, 0.0])

    def test_max_nodes_zero_is_honored(self, translated_child_scene):
        with pytest.raises(SceneTraversalError) as exc_info:
            flatten_scene(translated_child_scene, max_nodes=0)

        assert exc_info.value.max_nodes == 0


class TestMalformedScenes:
    """Test rejection of scene nodes with unusable data."""

    @pytest.mark.parametrize(
        "transform",
        [np.eye(3), np.eye(4)[:3], "not a matrix"],
    )
    def test_invalid_transform(self, triangle_primitive, transform):
        child = SceneNode(name="arm", transform=transform, meshes=[triangle_primitive])

        with pytest.raises(InvalidTransformError) as exc_info:
            SceneFlattener().collect(SceneNode(children=[child]), resource_name="arm.glb")

        assert exc_info.value.node_name == "arm"
        assert "arm.glb" in str(exc_info.value)

    @pytest.mark.parametrize("shape", [(3, 2), (4, 2), (2, 4)])
    def test_vertices_not_three_dimensional(self, shape):
        primitive = PrimitiveMesh(vertices=np.zeros(shape), faces=[[0, 1, 2]])

        with pytest.raises(InvalidPointsError):
            SceneFlattener().collect(SceneNode(meshes=[primitive]))

    def test_face_outside_its_own_mesh(self, triangle_primitive):
        """An index that would land in the next mesh's vertices is rejected."""
        overreaching = PrimitiveMesh(
            vertices=np.array([[0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [0.0, 1.0, 1.0]]),
            faces=[[0, 1, 4]],
        )
        root = SceneNode(meshes=[overreaching, triangle_primitive])

        with pytest.raises(InvalidIndicesError) as exc_info:
            SceneFlattener().collect(root)

        assert exc_info.value.vertex_count == 3

    def test_fractional_face_indices(self):
        primitive = PrimitiveMesh(
            vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
            faces=[[0, 1, 1.5]],
        )

        with pytest.raises(InvalidIndicesError):
            SceneFlattener().collect(SceneNode(meshes=[primitive]))

    def test_whole_float_face_indices(self):
        primitive = PrimitiveMesh(
            vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
            faces=np.array([[0.0, 1.0, 2.0]]),
        )

        flat = SceneFlattener().collect(SceneNode(meshes=[primitive]))

        assert flat.triangles.tolist() == [[0, 1, 2]]
