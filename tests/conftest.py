"""Shared test fixtures and configuration."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import numpy as np
import pytest
import structlog
import trimesh

from meshops.core import Config
from meshops.processing import PrimitiveMesh, SceneNode


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo logging configuration done by a test."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration."""
    return Config(
        importing={"max_scene_nodes": 1000},
        logging={"level": "DEBUG", "format": "plain", "colorize": False},
    )


@pytest.fixture
def cube_vertices() -> np.ndarray:
    """Eight distinct corners of the unit cube."""
    return np.array(
        [
            [0, 0, 0],
            [1, 0, 0],
            [1, 1, 0],
            [0, 1, 0],
            [0, 0, 1],
            [1, 0, 1],
            [1, 1, 1],
            [0, 1, 1],
        ],
        dtype=np.float64,
    )


@pytest.fixture
def cube_triangles() -> np.ndarray:
    """Outward-facing triangulation of the unit cube."""
    return np.array(
        [
            [0, 2, 1], [0, 3, 2],  # bottom (z=0)
            [4, 5, 6], [4, 6, 7],  # top (z=1)
            [0, 1, 5], [0, 5, 4],  # front (y=0)
            [2, 3, 7], [2, 7, 6],  # back (y=1)
            [1, 2, 6], [1, 6, 5],  # right (x=1)
            [0, 4, 7], [0, 7, 3],  # left (x=0)
        ],
        dtype=np.int64,
    )


@pytest.fixture
def cube_soup(cube_vertices: np.ndarray, cube_triangles: np.ndarray) -> np.ndarray:
    """The cube as 36 raw points, three per triangle."""
    return cube_vertices[cube_triangles].reshape(-1, 3)


@pytest.fixture
def triangle_primitive() -> PrimitiveMesh:
    """A single right triangle in the XY plane."""
    return PrimitiveMesh(
        vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
        faces=[[0, 1, 2]],
    )


@pytest.fixture
def translated_child_scene() -> SceneNode:
    """Empty identity root with one child translated by (2, 0, 0)."""
    transform = np.eye(4)
    transform[:3, 3] = [2.0, 0.0, 0.0]
    child = SceneNode(
        name="child",
        transform=transform,
        meshes=[
            PrimitiveMesh(
                vertices=np.array([[1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [1.0, 0.0, 1.0]]),
                faces=[[0, 1, 2]],
            )
        ],
    )
    return SceneNode(name="root", children=[child])


@pytest.fixture
def simple_box_mesh() -> trimesh.Trimesh:
    """Create a simple box mesh for testing."""
    return trimesh.creation.box(extents=[1, 1, 1])


@pytest.fixture
def sample_stl_path(temp_dir: Path, simple_box_mesh: trimesh.Trimesh) -> Path:
    """Create a sample STL file."""
    stl_path = temp_dir / "test_box.stl"
    simple_box_mesh.export(stl_path)
    return stl_path


# Markers for different test categories
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 1 second"
    )
