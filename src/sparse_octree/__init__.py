"""
sparse-octree: Bounded cubic sparse spatial index.

This package stores values at integer (x, y, z) positions inside a fixed
cube whose side is a power of two, using an octree so that empty or uniform
regions take a single node instead of one entry per cell.
"""

__version__ = "0.1.0"

from .errors import OctreeError, InvalidDimensionError, OutOfBoundsError
from .geometry import Cube, is_power_of_two, octant_index, octant_path
from .node import OctreeNode, EmptyNode, LeafNode, InternalNode
from .octree import Octree, OctreeConfig, OctreeStats

__all__ = [
    "OctreeError",
    "InvalidDimensionError",
    "OutOfBoundsError",
    "Cube",
    "is_power_of_two",
    "octant_index",
    "octant_path",
    "OctreeNode",
    "EmptyNode",
    "LeafNode",
    "InternalNode",
    "Octree",
    "OctreeConfig",
    "OctreeStats",
]
