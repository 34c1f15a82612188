"""
Coordinate and bounds arithmetic for the octree.

Positions are integer (x, y, z) triples on a cubic grid whose side is a power
of two. Every level of the tree halves the side, so the octant a position
falls into at a given level is read straight off one bit of each coordinate.

Octant bit order (fixed): x in bit 0, y in bit 1, z in bit 2.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple
import operator

from .errors import InvalidDimensionError, OutOfBoundsError

Position = Tuple[int, int, int]

OCTANT_COUNT = 8


def is_power_of_two(n: int) -> bool:
    """Check if n is a positive power of two (1 included)."""
    return isinstance(n, int) and n > 0 and (n & (n - 1)) == 0


def depth_for_dimension(dimension: int) -> int:
    """
    Get the tree depth for a cube of the given side.

    Args:
        dimension: Side length, must be a power of two

    Returns:
        log2(dimension)
    """
    if isinstance(dimension, bool) or not is_power_of_two(dimension):
        raise InvalidDimensionError(dimension)
    return dimension.bit_length() - 1


def validate_position(position: Sequence[int], dimension: int) -> Position:
    """
    Normalize a position to a tuple and check it against the grid.

    Args:
        position: Any 3-sequence of integer-like values (anything with
            __index__, e.g. numpy integers)
        dimension: Side length of the grid

    Returns:
        The position as an (x, y, z) tuple of plain ints

    Raises:
        ValueError: if the position does not have 3 components
        OutOfBoundsError: if any coordinate is not an integer or is
            outside [0, dimension)
    """
    raw = tuple(position)
    if len(raw) != 3:
        raise ValueError(f"Position must have 3 coordinates, got {len(raw)}")
    try:
        coords = tuple(operator.index(c) for c in raw)
    except TypeError:
        raise OutOfBoundsError(raw, dimension) from None
    if not all(0 <= c < dimension for c in coords):
        raise OutOfBoundsError(coords, dimension)
    return coords


def octant_index(position: Position, shift: int) -> int:
    """
    Compute the octant containing a position from one bit of each axis.

    Args:
        position: (x, y, z) tuple
        shift: Bit to read, i.e. log2 of half the current cell side

    Returns:
        Octant index in 0..7
    """
    x, y, z = position
    return ((x >> shift) & 1) | (((y >> shift) & 1) << 1) | (((z >> shift) & 1) << 2)


def octant_path(position: Position, depth: int) -> Tuple[int, ...]:
    """
    Compute the octant indices from the root down to the unit cell.

    At recursion depth d (root = 0) the index uses bit (depth - d - 1).

    Args:
        position: Validated (x, y, z) tuple
        depth: Tree depth, log2(dimension)

    Returns:
        Tuple of `depth` octant indices
    """
    return tuple(octant_index(position, depth - d - 1) for d in range(depth))


@dataclass(frozen=True)
class Cube:
    """
    An axis-aligned cube of grid cells.

    Covers [x0, x0 + side) x [y0, y0 + side) x [z0, z0 + side).
    """
    x0: int
    y0: int
    z0: int
    side: int

    def __post_init__(self):
        if not is_power_of_two(self.side):
            raise InvalidDimensionError(self.side)
        if self.x0 < 0 or self.y0 < 0 or self.z0 < 0:
            raise ValueError(
                f"Invalid cube origin: ({self.x0}, {self.y0}, {self.z0})"
            )

    def contains(self, x: int, y: int, z: int) -> bool:
        """Check if cell (x, y, z) is within this cube."""
        return (
            self.x0 <= x < self.x0 + self.side
            and self.y0 <= y < self.y0 + self.side
            and self.z0 <= z < self.z0 + self.side
        )
