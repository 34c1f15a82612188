"""
Bounded sparse octree.

The Octree owns the root node and the fixed grid dimension. Every positional
operation validates the coordinate first, turns it into an octant path and
hands the path to the root node, so an out-of-bounds request never touches
the tree.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple
import logging
import operator

from .geometry import (
    Cube,
    Position,
    depth_for_dimension,
    octant_path,
    validate_position,
)
from .node import EmptyNode, OctreeNode

logger = logging.getLogger(__name__)


@dataclass
class OctreeConfig:
    """Configuration for building an Octree."""

    dimension: int
    """Side length of the cube in unit cells; a power of two."""

    auto_simplify: bool = False
    """Merge uniform regions after every mutation."""

    lod_level: int = 0
    """Initial level of detail; writable cells have side 2 ** lod_level."""

    def __post_init__(self):
        # Raises InvalidDimensionError
        depth = depth_for_dimension(self.dimension)
        if not 0 <= self.lod_level <= depth:
            raise ValueError(f"lod_level must be between 0 and {depth}")


@dataclass
class OctreeStats:
    """Structural statistics for an Octree."""

    node_count: int = 0
    leaf_count: int = 0
    empty_count: int = 0
    internal_count: int = 0
    max_depth: int = 0


class Octree:
    """
    A sparse octree over the grid [0, dimension)^3.

    Stores arbitrary values at integer (x, y, z) positions. Regions where all
    cells are empty, or all hold equal values, can be represented by a single
    node. None is reserved to mean "no data" and cannot be stored.

    Not safe for concurrent mutation; callers must serialize writes.
    """

    def __init__(self, dimension: int, lod_level: int = 0):
        """
        Initialize an empty octree.

        Args:
            dimension: Side length of the grid, a power of two
            lod_level: Initial level of detail; writes address blocks of
                side 2 ** lod_level

        Raises:
            InvalidDimensionError: if dimension is zero or not a power of two
            ValueError: if lod_level is outside [0, depth]
        """
        self._depth = depth_for_dimension(dimension)
        if not 0 <= lod_level <= self._depth:
            raise ValueError(f"lod_level must be between 0 and {self._depth}")
        self._dimension = dimension
        self._auto_simplify = False
        self._lod_level = lod_level
        self.root: OctreeNode = EmptyNode()
        logger.debug("Created octree of dimension %d (depth %d)", dimension, self._depth)

    @classmethod
    def from_config(cls, config: OctreeConfig) -> Octree:
        """Build an octree from an OctreeConfig."""
        return cls(config.dimension, lod_level=config.lod_level).with_auto_simplify(
            config.auto_simplify
        )

    def with_auto_simplify(self, enabled: bool = True) -> Octree:
        """
        Set the auto-simplify flag.

        Existing content is left as is; only later mutations are affected.

        Returns:
            This octree, for chaining after construction
        """
        self._auto_simplify = enabled
        return self

    @property
    def dimension(self) -> int:
        """Side length of the grid."""
        return self._dimension

    @property
    def depth(self) -> int:
        """Number of levels below the root, log2(dimension)."""
        return self._depth

    @property
    def auto_simplify(self) -> bool:
        """Whether mutations merge uniform regions as they go."""
        return self._auto_simplify

    @property
    def lod_level(self) -> int:
        """Current level of detail; 0 is full resolution."""
        return self._lod_level

    @property
    def bounds(self) -> Cube:
        """The cube covered by the root."""
        return Cube(0, 0, 0, self._dimension)

    def contains(self, position: Sequence[int]) -> bool:
        """Check if a position lies inside the grid without raising."""
        try:
            x, y, z = (operator.index(c) for c in position)
        except (TypeError, ValueError):
            return False
        return self.bounds.contains(x, y, z)

    def _write_path(self, position: Sequence[int]) -> Tuple[Position, Tuple[int, ...]]:
        pos = validate_position(position, self._dimension)
        # Writes stop at the block size of the current level of detail
        path = octant_path(pos, self._depth)[: self._depth - self._lod_level]
        return pos, path

    def insert(self, position: Sequence[int], value: Any) -> Optional[Any]:
        """
        Store a value at a position.

        A coarser leaf covering the position is split first, so only the
        addressed cell changes.

        Args:
            position: (x, y, z) grid coordinates
            value: Value to store, must not be None

        Returns:
            The value previously read at that position, or None

        Raises:
            OutOfBoundsError: if the position is outside the grid
        """
        if value is None:
            raise ValueError("Cannot insert None; use clear_at to remove a value")
        _, path = self._write_path(position)
        self.root, previous = self.root.insert(path, value, self._auto_simplify)
        return previous

    def get(self, position: Sequence[int]) -> Optional[Any]:
        """
        Look up the value at a position.

        Returns:
            The stored value, or None if the cell is empty

        Raises:
            OutOfBoundsError: if the position is outside the grid
        """
        pos = validate_position(position, self._dimension)
        return self.root.lookup(octant_path(pos, self._depth))

    def clear_at(self, position: Sequence[int]) -> Optional[Any]:
        """
        Remove the value at a position.

        Internal nodes left with 8 empty children collapse to a single empty
        node whether or not auto-simplify is on.

        Returns:
            The removed value, or None if the cell was already empty

        Raises:
            OutOfBoundsError: if the position is outside the grid
        """
        _, path = self._write_path(position)
        self.root, removed = self.root.clear(path, self._auto_simplify)
        return removed

    def clear(self) -> None:
        """Remove all values from the octree."""
        self.root = EmptyNode()
        logger.debug("Cleared octree of dimension %d", self._dimension)

    def simplify(self) -> None:
        """
        Merge uniform regions over the whole tree.

        Bottom-up: an internal node whose 8 children are all empty becomes
        empty, and one whose 8 children are leaves with equal values becomes
        a single leaf.
        """
        before = self.root.node_count()
        self.root = self.root.simplified()
        logger.debug("Simplified octree: %d -> %d nodes", before, self.root.node_count())

    def lod_down(self) -> None:
        """
        Coarsen the level of detail by one step.

        Every block of side 2 ** lod_level (after the step) collapses to the
        value covering most of its cells. Capped at the root.
        """
        level = min(self._lod_level + 1, self._depth)
        self._lod_level = level
        self.root = self.root.condensed(self._dimension, 1 << level)
        logger.debug("Level of detail lowered to %d", level)

    def lod_up(self) -> None:
        """
        Refine the level of detail by one step.

        Condensed regions are not restored; finer writes become possible.
        """
        self._lod_level = max(self._lod_level - 1, 0)
        logger.debug("Level of detail raised to %d", self._lod_level)

    def stats(self) -> OctreeStats:
        """Collect structural statistics for the current tree."""
        node_count = self.root.node_count()
        leaf_count = self.root.leaf_count()
        empty_count = self.root.empty_count()
        return OctreeStats(
            node_count=node_count,
            leaf_count=leaf_count,
            empty_count=empty_count,
            internal_count=node_count - leaf_count - empty_count,
            max_depth=self.root.max_depth(),
        )

    def __contains__(self, position: Sequence[int]) -> bool:
        return self.contains(position) and self.get(position) is not None

    def __getitem__(self, position: Sequence[int]) -> Optional[Any]:
        return self.get(position)

    def __setitem__(self, position: Sequence[int], value: Any) -> None:
        self.insert(position, value)

    def __delitem__(self, position: Sequence[int]) -> None:
        self.clear_at(position)

    def __repr__(self) -> str:
        return (
            f"Octree(dimension={self._dimension}, "
            f"auto_simplify={self._auto_simplify}, lod_level={self._lod_level})"
        )
