"""
Common types for octree construction.

This module provides the payload types stored in the tree:
- Point: Location in 3D space
- Body: Point mass (mass + location)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Point:
    """A location in 3D space."""

    x: float
    y: float
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        """Return coordinates as an (x, y, z) tuple."""
        return (self.x, self.y, self.z)

    @classmethod
    def from_sequence(cls, coords: Sequence[float]) -> Point:
        """Build a point from any 3-element sequence (tuple, list, ndarray)."""
        if len(coords) != 3:
            raise ValueError(f"Point needs 3 coordinates, got {len(coords)}")
        return cls(float(coords[0]), float(coords[1]), float(coords[2]))


@dataclass(frozen=True)
class Body:
    """
    A point mass stored in the octree.

    Attributes:
        mass: Scalar mass, kept at 32-bit float precision
        location: Position of the body
    """

    mass: float
    location: Point

    def __post_init__(self) -> None:
        # Masses are single precision; locations stay double
        object.__setattr__(self, "mass", float(np.float32(self.mass)))

    @classmethod
    def at(cls, x: float, y: float, z: float, mass: float = 1.0) -> Body:
        """Shorthand for a body of the given mass at (x, y, z)."""
        return cls(mass, Point(float(x), float(y), float(z)))


PointLike = Union[Point, Sequence[float]]


__all__ = ["Point", "Body", "PointLike"]
