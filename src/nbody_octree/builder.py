"""
Tree construction from a sequence of bodies.

TreeBuilder holds insertion configuration and builds one Octree per call,
inserting bodies strictly in input order.
"""

from __future__ import annotations

from typing import Iterable, List

from .spatial.bounds import BoundingVolume
from .spatial.octree import Octree
from .types import Body
from .validation import DEFAULT_MAX_DEPTH, validate_max_depth


class TreeBuilder:
    """
    Builds octrees from a bounding volume and a sequence of bodies.

    Example:
        builder = TreeBuilder(max_depth=32)
        tree = builder.build(BoundingVolume.cube(0, 1024), bodies)

        # Depth each body came to rest at, in input order
        print(builder.last_depths)
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        relocate_resident: bool = False,
        strict_bounds: bool = False,
    ) -> None:
        """
        Initialize builder with configuration.

        Args:
            max_depth: Maximum node depth (root = 0)
            relocate_resident: Push residents down on subdivision
                (one body per leaf)
            strict_bounds: Raise OutOfBoundsError for bodies outside the
                root volume instead of warning
        """
        self._max_depth: int = validate_max_depth(max_depth)
        self._relocate_resident: bool = bool(relocate_resident)
        self._strict_bounds: bool = bool(strict_bounds)
        self.last_depths: List[int] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def max_depth(self) -> int:
        """Get maximum node depth."""
        return self._max_depth

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        """Set maximum node depth, in [1, MAX_DEPTH_LIMIT]."""
        self._max_depth = validate_max_depth(value)

    @property
    def relocate_resident(self) -> bool:
        """Get whether residents are pushed down on subdivision."""
        return self._relocate_resident

    @relocate_resident.setter
    def relocate_resident(self, value: bool) -> None:
        """Set whether residents are pushed down on subdivision."""
        self._relocate_resident = bool(value)

    @property
    def strict_bounds(self) -> bool:
        """Get whether out-of-bounds bodies are rejected."""
        return self._strict_bounds

    @strict_bounds.setter
    def strict_bounds(self, value: bool) -> None:
        """Set whether out-of-bounds bodies are rejected."""
        self._strict_bounds = bool(value)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def build(self, bounds: BoundingVolume, bodies: Iterable[Body]) -> Octree:
        """
        Create a root over bounds and insert every body in order.

        Args:
            bounds: Root bounding volume
            bodies: Bodies to insert

        Returns:
            The constructed Octree

        Raises:
            MaxDepthExceededError: If coincident bodies exhaust max_depth
            OutOfBoundsError: If strict_bounds is set and a body is outside
        """
        tree = Octree(
            bounds,
            max_depth=self._max_depth,
            relocate_resident=self._relocate_resident,
            strict_bounds=self._strict_bounds,
        )
        self.last_depths = []
        for body in bodies:
            self.last_depths.append(tree.insert(body))
        return tree


def build_tree(
    bounds: BoundingVolume,
    bodies: Iterable[Body],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    relocate_resident: bool = False,
    strict_bounds: bool = False,
) -> Octree:
    """
    Build an octree over bounds from bodies.

    Convenience wrapper around TreeBuilder(...).build(bounds, bodies).
    """
    builder = TreeBuilder(
        max_depth=max_depth,
        relocate_resident=relocate_resident,
        strict_bounds=strict_bounds,
    )
    return builder.build(bounds, bodies)


__all__ = ["TreeBuilder", "build_tree"]
