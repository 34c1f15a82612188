"""
Octree node variants.

A node is one of three things:
- EmptyNode: no data anywhere in the covered cube
- LeafNode: one value valid over the whole covered cube
- InternalNode: exactly 8 children, one per octant

Nodes never store their own bounds. Operations receive the octant path
(see geometry.octant_path) still left to walk, and mutating operations
return the node that should take the caller's slot, since a mutation can
change a node's variant.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple
import copy

from .geometry import OCTANT_COUNT

# (value, voxel count) pairs; None stands for empty space
Tally = List[Tuple[Any, int]]


def _add_to_tally(tally: Tally, value: Any, count: int) -> None:
    # Linear scan so values only need __eq__, not __hash__
    for i, (existing, existing_count) in enumerate(tally):
        if (existing is None) != (value is None):
            continue
        if existing is None or existing == value:
            tally[i] = (existing, existing_count + count)
            return
    tally.append((value, count))


class OctreeNode(ABC):
    """Abstract base class for octree nodes."""

    @abstractmethod
    def is_leaf(self) -> bool:
        """Return True if this is a leaf node."""
        pass

    def is_empty(self) -> bool:
        """Return True if this node holds no data."""
        return False

    @abstractmethod
    def lookup(self, path: Sequence[int]) -> Optional[Any]:
        """
        Look up the value for the cell addressed by path.

        Args:
            path: Octant indices from this node down to the target cell

        Returns:
            The value of the first leaf on the path, or None
        """
        pass

    @abstractmethod
    def insert(
        self, path: Sequence[int], value: Any, auto_simplify: bool = False
    ) -> Tuple[OctreeNode, Optional[Any]]:
        """
        Store value in the cell addressed by path.

        Args:
            path: Octant indices from this node down to the target cell
            value: Value to store
            auto_simplify: Merge uniform internal nodes on the way back up

        Returns:
            Tuple of (replacement node for this slot, previous value or None)
        """
        pass

    @abstractmethod
    def clear(
        self, path: Sequence[int], auto_simplify: bool = False
    ) -> Tuple[OctreeNode, Optional[Any]]:
        """
        Remove the value from the cell addressed by path.

        Returns:
            Tuple of (replacement node for this slot, removed value or None)
        """
        pass

    def merged(self) -> OctreeNode:
        """Apply the merge rule to this node only."""
        return self

    def simplified(self) -> OctreeNode:
        """Apply the merge rule bottom-up over the whole subtree."""
        return self

    @abstractmethod
    def tally(self, side: int) -> Tally:
        """
        Count voxels per value in this subtree.

        Args:
            side: Side length of the cube this node covers

        Returns:
            List of (value, voxel count), None meaning empty, in octant order
        """
        pass

    def condensed(self, side: int, block_side: int) -> OctreeNode:
        """
        Reduce detail so no subtree finer than block_side remains.

        Args:
            side: Side length of the cube this node covers
            block_side: Smallest cube side that may still be subdivided

        Returns:
            Replacement node for this slot
        """
        return self

    @abstractmethod
    def node_count(self) -> int:
        """Return total number of nodes in this subtree."""
        pass

    @abstractmethod
    def leaf_count(self) -> int:
        """Return number of leaf nodes in this subtree."""
        pass

    @abstractmethod
    def empty_count(self) -> int:
        """Return number of empty nodes in this subtree."""
        pass

    @abstractmethod
    def max_depth(self) -> int:
        """Return maximum depth of this subtree."""
        pass


class EmptyNode(OctreeNode):
    """A node covering a cube with no data in it."""

    def is_leaf(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return True

    def lookup(self, path: Sequence[int]) -> Optional[Any]:
        return None

    def insert(self, path, value, auto_simplify=False):
        if not path:
            return LeafNode(value), None
        return InternalNode.filled(EmptyNode).insert(path, value, auto_simplify)

    def clear(self, path, auto_simplify=False):
        return self, None

    def tally(self, side: int) -> Tally:
        return [(None, side ** 3)]

    def node_count(self) -> int:
        return 1

    def leaf_count(self) -> int:
        return 0

    def empty_count(self) -> int:
        return 1

    def max_depth(self) -> int:
        return 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyNode)

    def __hash__(self) -> int:
        return hash(EmptyNode)

    def __repr__(self) -> str:
        return "EmptyNode()"


@dataclass(eq=True)
class LeafNode(OctreeNode):
    """
    A leaf node representing a uniform region.

    Every cell in the covered cube reads as `value`. At unit scale this is a
    single voxel; above it the region has been condensed.
    """
    value: Any

    def is_leaf(self) -> bool:
        return True

    def lookup(self, path: Sequence[int]) -> Optional[Any]:
        return self.value

    def insert(self, path, value, auto_simplify=False):
        if not path:
            return LeafNode(value), self.value
        if value == self.value:
            # Overwriting part of a uniform region with its own value
            return self, self.value
        return self.exploded().insert(path, value, auto_simplify)

    def clear(self, path, auto_simplify=False):
        if not path:
            return EmptyNode(), self.value
        return self.exploded().clear(path, auto_simplify)

    def exploded(self) -> InternalNode:
        """
        Push the value down one level into 8 equal children.

        Each child gets its own shallow copy so mutating one cell's value in
        place does not leak into the rest of the former region.
        """
        return InternalNode(
            [LeafNode(copy.copy(self.value)) for _ in range(OCTANT_COUNT)]
        )

    def tally(self, side: int) -> Tally:
        return [(self.value, side ** 3)]

    def node_count(self) -> int:
        return 1

    def leaf_count(self) -> int:
        return 1

    def empty_count(self) -> int:
        return 0

    def max_depth(self) -> int:
        return 0


@dataclass(eq=True)
class InternalNode(OctreeNode):
    """
    An internal node with exactly 8 children.

    Children are ordered by octant index (x bit 0, y bit 1, z bit 2).
    """
    children: List[OctreeNode]

    def __post_init__(self):
        if len(self.children) != OCTANT_COUNT:
            raise ValueError("InternalNode must have exactly 8 children")

    @classmethod
    def filled(cls, factory) -> InternalNode:
        """Create an internal node whose children are all factory()."""
        return cls([factory() for _ in range(OCTANT_COUNT)])

    def is_leaf(self) -> bool:
        return False

    def lookup(self, path: Sequence[int]) -> Optional[Any]:
        if not path:
            # A subdivided cell addressed as a whole has no single value
            return None
        return self.children[path[0]].lookup(path[1:])

    def insert(self, path, value, auto_simplify=False):
        if not path:
            return LeafNode(value), None

        octant = path[0]
        child, previous = self.children[octant].insert(path[1:], value, auto_simplify)
        self.children[octant] = child

        if auto_simplify:
            return self.merged(), previous
        return self, previous

    def clear(self, path, auto_simplify=False):
        if not path:
            return EmptyNode(), None

        octant = path[0]
        child, removed = self.children[octant].clear(path[1:], auto_simplify)
        self.children[octant] = child

        # Collapsing an all-empty node does not depend on auto_simplify
        if all(c.is_empty() for c in self.children):
            return EmptyNode(), removed
        if auto_simplify:
            return self.merged(), removed
        return self, removed

    def merged(self) -> OctreeNode:
        first = self.children[0]
        if first.is_empty():
            if all(c.is_empty() for c in self.children):
                return EmptyNode()
            return self
        if first.is_leaf():
            value = first.value
            if all(c.is_leaf() and c.value == value for c in self.children):
                return LeafNode(value)
        return self

    def simplified(self) -> OctreeNode:
        self.children = [c.simplified() for c in self.children]
        return self.merged()

    def tally(self, side: int) -> Tally:
        half = side // 2
        result: Tally = []
        for child in self.children:
            for value, count in child.tally(half):
                _add_to_tally(result, value, count)
        return result

    def majority(self, side: int) -> OctreeNode:
        """
        Collapse this subtree to the value covering the most voxels.

        Ties go to the value seen first in octant order. Empty space competes
        like any value and wins by producing an EmptyNode.
        """
        best_value, best_count = None, -1
        for value, count in self.tally(side):
            if count > best_count:
                best_value, best_count = value, count
        if best_value is None:
            return EmptyNode()
        return LeafNode(best_value)

    def condensed(self, side: int, block_side: int) -> OctreeNode:
        if side <= block_side:
            return self.majority(side)
        half = side // 2
        self.children = [c.condensed(half, block_side) for c in self.children]
        return self.merged()

    def node_count(self) -> int:
        count = 1  # This node
        for child in self.children:
            count += child.node_count()
        return count

    def leaf_count(self) -> int:
        return sum(child.leaf_count() for child in self.children)

    def empty_count(self) -> int:
        return sum(child.empty_count() for child in self.children)

    def max_depth(self) -> int:
        return 1 + max(child.max_depth() for child in self.children)
