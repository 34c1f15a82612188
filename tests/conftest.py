"""Pytest fixtures for sparse_octree tests."""

import pytest

from sparse_octree import Octree


@pytest.fixture
def tree():
    """An empty octree of dimension 32 without auto-simplify."""
    return Octree(32)


@pytest.fixture
def auto_tree():
    """An empty octree of dimension 32 with auto-simplify enabled."""
    return Octree(32).with_auto_simplify(True)


@pytest.fixture
def size2_cells():
    """All 8 unit cells of a size-2 cube."""
    return [(x, y, z) for z in range(2) for y in range(2) for x in range(2)]
