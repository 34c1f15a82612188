"""
Exception hierarchy for the sparse octree.

All errors derive from ValueError so callers that only care about bad input
can catch the builtin.
"""

from typing import Tuple


class OctreeError(ValueError):
    """Base class for all octree errors."""


class InvalidDimensionError(OctreeError):
    """The requested dimension is zero or not a power of two."""

    def __init__(self, dimension: int):
        self.dimension = dimension
        super().__init__(f"Invalid dimension: {dimension}. Must be a power of 2.")


class OutOfBoundsError(OctreeError):
    """A position lies outside [0, dimension) on at least one axis."""

    def __init__(self, position: Tuple[int, int, int], dimension: int):
        self.position = tuple(position)
        self.dimension = dimension
        super().__init__(
            f"Position {self.position} does not exist in octree of dimension {dimension}."
        )
