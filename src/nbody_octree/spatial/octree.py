"""
Octree implementation for N-body spatial indexing.

The octree recursively subdivides 3D space into octants. Each node holds
at most one resident body and up to 8 lazily created children, each scoped
to one octant of the parent's bounding volume.

Two insertion disciplines are supported:

- Resident retention (default): the first body routed to a node stays
  there for good. Later bodies descend into the child octant that contains
  them, so a node can hold a body while also having children.
- Resident relocation: when an occupied leaf receives a second body, the
  resident is pushed down into its child octant first. Every body ends up
  in a leaf and internal nodes hold none (the classical Barnes-Hut layout).

Insertion order matters in both modes: inserting A then B may give a
different tree than B then A.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from typing_extensions import Self

from ..types import Body, Point
from ..validation import (
    DEFAULT_MAX_DEPTH,
    MaxDepthExceededError,
    OutOfBoundsError,
    OutOfBoundsWarning,
    validate_body,
    validate_bounds,
    validate_max_depth,
)
from .bounds import OCTANT_COUNT, BoundingVolume


def _empty_children() -> List[Optional[SpatialNode]]:
    return [None] * OCTANT_COUNT


@dataclass
class SpatialNode:
    """
    A node in the octree.

    Attributes:
        bounding_volume: Region of space this node covers
        body: Resident body, if any
        children: Eight child slots indexed by octant, None where absent
    """

    bounding_volume: BoundingVolume
    body: Optional[Body] = None
    children: List[Optional[SpatialNode]] = field(default_factory=_empty_children)

    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return all(child is None for child in self.children)

    def is_empty(self) -> bool:
        """True if this node holds no body and has no children."""
        return self.body is None and self.is_leaf()

    def child_count(self) -> int:
        """Number of materialized children."""
        return sum(1 for child in self.children if child is not None)

    def iter_children(self) -> Iterator[Tuple[int, SpatialNode]]:
        """Yield (octant index, child) for every materialized child."""
        for index, child in enumerate(self.children):
            if child is not None:
                yield index, child

    def _child_for(self, location: Point) -> Tuple[int, Optional[SpatialNode]]:
        index = self.bounding_volume.classify_octant(location)
        return index, self.children[index]

    def _make_child(self, index: int) -> SpatialNode:
        child = SpatialNode(self.bounding_volume.octant(index))
        self.children[index] = child
        return child

    def insert(
        self,
        body: Body,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        relocate_resident: bool = False,
    ) -> int:
        """
        Insert a body into the subtree rooted at this node.

        Args:
            body: Body to insert
            max_depth: Deepest level (this node = 0) a node may be created at
            relocate_resident: Push the resident of an occupied leaf down
                before routing the new body

        Returns:
            Depth below this node at which the body came to rest

        Raises:
            MaxDepthExceededError: If the body would need a node deeper than
                max_depth. The subtree is left unchanged.
        """
        if relocate_resident:
            return self._insert_relocating(body, max_depth)
        return self._insert_retaining(body, max_depth)

    def _insert_retaining(self, body: Body, max_depth: int) -> int:
        node = self
        depth = 0
        while node.body is not None:
            index, child = node._child_for(body.location)
            if child is None:
                # Every node on the path so far is occupied, so raising
                # here leaves the tree untouched
                if depth + 1 > max_depth:
                    raise MaxDepthExceededError(body, depth + 1, max_depth)
                child = node._make_child(index)
            node = child
            depth += 1

        node.body = body
        return depth

    def _insert_relocating(self, body: Body, max_depth: int) -> int:
        node = self
        depth = 0
        while True:
            if node.is_empty():
                node.body = body
                return depth

            existing = node.body
            if existing is not None and node.is_leaf():
                # Occupied leaf - make sure both bodies fit before subdividing
                _separation_depth(node.bounding_volume, existing, body, depth, max_depth)
                node.body = None
                resident_index = node.bounding_volume.classify_octant(existing.location)
                node._make_child(resident_index).body = existing

            index, child = node._child_for(body.location)
            if child is None:
                if depth + 1 > max_depth:
                    raise MaxDepthExceededError(body, depth + 1, max_depth)
                child = node._make_child(index)
            node = child
            depth += 1


def _separation_depth(
    volume: BoundingVolume, resident: Body, incoming: Body, depth: int, max_depth: int
) -> int:
    """
    Depth at which two bodies sharing a node at depth end up in different nodes.

    Raises:
        MaxDepthExceededError: If they cannot be separated within max_depth
    """
    while True:
        a = volume.classify_octant(resident.location)
        b = volume.classify_octant(incoming.location)
        depth += 1
        if depth > max_depth:
            raise MaxDepthExceededError(incoming, depth, max_depth)
        if a != b:
            return depth
        volume = volume.octant(a)


class Octree:
    """
    Octree over point masses for N-body algorithms.

    The tree is build-once / append-only: bodies are inserted one at a time
    and never removed or moved afterwards (except for resident relocation,
    which happens during the insertion that triggers it).

    Usage:
        tree = Octree(BoundingVolume.cube(0.0, 1024.0))
        for body in bodies:
            tree.insert(body)

        for depth, node in tree.iter_nodes():
            ...

    Configuration:
    - max_depth: Insertions that would create a node deeper than this raise
      MaxDepthExceededError (coincident bodies hit this)
    - relocate_resident: Use the one-body-per-leaf discipline
    - strict_bounds: Reject bodies outside the root volume instead of
      placing them by midpoint classification with a warning
    """

    def __init__(
        self,
        bounds: BoundingVolume,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        relocate_resident: bool = False,
        strict_bounds: bool = False,
    ) -> None:
        """
        Initialize an empty octree.

        Args:
            bounds: Root bounding volume
            max_depth: Maximum node depth (root = 0)
            relocate_resident: Push residents down on subdivision
            strict_bounds: Raise OutOfBoundsError for bodies outside bounds

        Raises:
            InvalidIntervalError: If an axis of bounds is invalid
            ValidationError: If max_depth is out of range
        """
        self.root = SpatialNode(validate_bounds(bounds))
        self.body_count = 0
        self._max_depth: int = validate_max_depth(max_depth)
        self._relocate_resident: bool = bool(relocate_resident)
        self._strict_bounds: bool = bool(strict_bounds)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def bounds(self) -> BoundingVolume:
        """Get the root bounding volume."""
        return self.root.bounding_volume

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
        """Whether residents are pushed down on subdivision (fixed at creation)."""
        return self._relocate_resident

    @property
    def strict_bounds(self) -> bool:
        """Get whether out-of-bounds bodies are rejected."""
        return self._strict_bounds

    @strict_bounds.setter
    def strict_bounds(self, value: bool) -> None:
        """Set whether out-of-bounds bodies are rejected."""
        self._strict_bounds = bool(value)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def insert(self, body: Body) -> int:
        """
        Insert a body into the octree.

        Returns:
            Depth (root = 0) of the node the body came to rest in

        Raises:
            InvalidBodyError: If the body has non-finite values
            OutOfBoundsError: If strict_bounds is set and the body is outside
            MaxDepthExceededError: If the depth limit is hit
        """
        validate_body(body)

        if not self.root.bounding_volume.contains(body.location):
            if self._strict_bounds:
                raise OutOfBoundsError(body, self.root.bounding_volume)
            warnings.warn(
                f"Body at {body.location.as_tuple()} lies outside the root volume "
                f"{self.root.bounding_volume}; it is placed by midpoint classification.",
                OutOfBoundsWarning,
                stacklevel=2,
            )

        depth = self.root.insert(
            body,
            max_depth=self._max_depth,
            relocate_resident=self._relocate_resident,
        )
        self.body_count += 1
        return depth

    def extend(self, bodies: Iterable[Body]) -> Self:
        """
        Insert bodies in iteration order.

        Returns:
            self (for chaining)
        """
        for body in bodies:
            self.insert(body)
        return self

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def iter_nodes(self) -> Iterator[Tuple[int, SpatialNode]]:
        """Yield (depth, node) for every node in pre-order, children by octant index."""
        stack: List[Tuple[int, SpatialNode]] = [(0, self.root)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            for _, child in reversed(list(node.iter_children())):
                stack.append((depth + 1, child))

    def bodies(self) -> List[Body]:
        """All resident bodies, in pre-order."""
        return [node.body for _, node in self.iter_nodes() if node.body is not None]

    def node_count(self) -> int:
        """Number of materialized nodes, root included."""
        return sum(1 for _ in self.iter_nodes())

    def depth(self) -> int:
        """Depth of the deepest node (0 for a root-only tree)."""
        return max(depth for depth, _ in self.iter_nodes())

    def find(self, body: Body) -> Optional[Tuple[int, SpatialNode]]:
        """
        Locate the node holding a body by following its octant path.

        Returns:
            (depth, node) or None if the body is not in the tree
        """
        node: Optional[SpatialNode] = self.root
        depth = 0
        while node is not None:
            if node.body is body:
                return depth, node
            node = node.children[node.bounding_volume.classify_octant(body.location)]
            depth += 1
        return None

    @classmethod
    def from_bodies(
        cls,
        bodies: Iterable[Body],
        padding: float = 1.0,
        **kwargs: Any,
    ) -> Octree:
        """
        Build an octree whose root volume encloses the given bodies.

        Args:
            bodies: Bodies to insert, in order
            padding: Margin around the tight bounding box
            **kwargs: Octree configuration (max_depth, relocate_resident,
                strict_bounds)

        Returns:
            Octree with all bodies inserted
        """
        items = list(bodies)
        if not items:
            return cls(BoundingVolume.cube(0.0, 1.0), **kwargs)

        bounds = BoundingVolume.from_points((b.location for b in items), padding=padding)
        tree = cls(bounds, **kwargs)
        return tree.extend(items)


__all__ = ["SpatialNode", "Octree"]
