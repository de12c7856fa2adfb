"""
Axis-aligned bounding volumes for octree subdivision.

A BoundingVolume is three Intervals, one per axis. Splitting a volume at
the midpoint of every axis gives 8 octants, indexed by

    index = x_sign + 2 * y_sign + 4 * z_sign

where a sign of 0 selects the lower half of that axis and 1 the upper half.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..types import Point, PointLike

OCTANT_COUNT = 8


@dataclass(frozen=True)
class Interval:
    """A closed 1D range [start, end]. start <= end is assumed."""

    start: float
    end: float

    @property
    def length(self) -> float:
        """Width of the interval."""
        return self.end - self.start

    def midpoint(self) -> float:
        """Arithmetic mean of the endpoints."""
        return (self.start + self.end) / 2

    def contains(self, value: float) -> bool:
        """Check if value lies within the closed interval."""
        return self.start <= value <= self.end

    def halves(self) -> Tuple[Interval, Interval]:
        """Split at the midpoint into (lower, upper) halves sharing the midpoint."""
        mid = self.midpoint()
        return Interval(self.start, mid), Interval(mid, self.end)

    def half(self, sign: int) -> Interval:
        """Lower half for sign 0, upper half for sign 1."""
        mid = self.midpoint()
        if sign:
            return Interval(mid, self.end)
        return Interval(self.start, mid)


@dataclass(frozen=True)
class BoundingVolume:
    """
    An axis-aligned cuboid.

    Attributes:
        x, y, z: Extent along each axis
    """

    x: Interval
    y: Interval
    z: Interval

    @property
    def center(self) -> Point:
        """Midpoint of the cuboid."""
        return Point(self.x.midpoint(), self.y.midpoint(), self.z.midpoint())

    def contains(self, point: Point) -> bool:
        """Check if point lies within the volume (boundary faces included)."""
        return (
            self.x.contains(point.x)
            and self.y.contains(point.y)
            and self.z.contains(point.z)
        )

    def classify_octant(self, point: Point) -> int:
        """
        Get octant index for a point.

        Classification compares each coordinate against the axis midpoint
        only, so points outside the volume still map to exactly one octant.

        Returns:
            Index in 0..7
        """
        x_sign = 0 if point.x < self.x.midpoint() else 1
        y_sign = 0 if point.y < self.y.midpoint() else 1
        z_sign = 0 if point.z < self.z.midpoint() else 1
        return x_sign + 2 * y_sign + 4 * z_sign

    def octant(self, index: int) -> BoundingVolume:
        """Sub-volume for a single octant index (same as split()[index])."""
        if not 0 <= index < OCTANT_COUNT:
            raise IndexError(f"octant index must be in [0, 7], got {index}")
        return BoundingVolume(
            self.x.half(index & 1),
            self.y.half((index >> 1) & 1),
            self.z.half((index >> 2) & 1),
        )

    def split(self) -> List[BoundingVolume]:
        """Subdivide into 8 octants, ordered by octant index."""
        x_halves = self.x.halves()
        y_halves = self.y.halves()
        z_halves = self.z.halves()
        return [
            BoundingVolume(x_halves[i & 1], y_halves[(i >> 1) & 1], z_halves[(i >> 2) & 1])
            for i in range(OCTANT_COUNT)
        ]

    @classmethod
    def cube(cls, start: float, end: float) -> BoundingVolume:
        """Cube with the same [start, end] range on every axis."""
        axis = Interval(float(start), float(end))
        return cls(axis, axis, axis)

    @classmethod
    def from_points(cls, points: Iterable[PointLike], padding: float = 0.0) -> BoundingVolume:
        """
        Smallest volume enclosing all points, grown by padding on every side.

        Args:
            points: Point objects or (x, y, z) sequences
            padding: Margin added around the tight box

        Raises:
            ValueError: If points is empty
        """
        pts = [p if isinstance(p, Point) else Point.from_sequence(p) for p in points]
        if not pts:
            raise ValueError("Cannot derive a bounding volume from no points")

        return cls(
            Interval(min(p.x for p in pts) - padding, max(p.x for p in pts) + padding),
            Interval(min(p.y for p in pts) - padding, max(p.y for p in pts) + padding),
            Interval(min(p.z for p in pts) - padding, max(p.z for p in pts) + padding),
        )

    def __str__(self) -> str:
        return (
            f"[{self.x.start}, {self.x.end}] x "
            f"[{self.y.start}, {self.y.end}] x "
            f"[{self.z.start}, {self.z.end}]"
        )


__all__ = ["OCTANT_COUNT", "Interval", "BoundingVolume"]
