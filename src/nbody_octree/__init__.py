"""
nbody-octree: An adaptive octree over point masses for N-body algorithms.

This package builds a spatial index over bodies in 3D space, intended as
the geometric substructure for force-approximation algorithms.

Available modules:
- spatial: Interval/BoundingVolume geometry and the Octree itself
- builder: TreeBuilder for one-shot construction from a body sequence
- metrics: Depth and shape statistics of a built tree
- generation: Seeded random body generation
- validation: Error types and input checks
"""

__version__ = "0.1.0"

# Tree construction
from .builder import TreeBuilder, build_tree

# Random bodies
from .generation import iter_random_bodies, random_bodies

# Tree shape metrics
from .metrics import (
    depth_histogram,
    insertion_depths,
    leaf_count,
    mean_depth,
    occupied_internal_count,
    tree_summary,
)

# Spatial data structures
from .spatial import OCTANT_COUNT, BoundingVolume, Interval, Octree, SpatialNode
from .types import Body, Point

# Errors and validation
from .validation import (
    DEFAULT_MAX_DEPTH,
    MAX_DEPTH_LIMIT,
    InvalidBodyError,
    InvalidIntervalError,
    MaxDepthExceededError,
    OctreeError,
    OutOfBoundsError,
    OutOfBoundsWarning,
    ValidationError,
    validate_body,
    validate_bounds,
    validate_interval,
    validate_max_depth,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Point",
    "Body",
    # Spatial data structures
    "OCTANT_COUNT",
    "Interval",
    "BoundingVolume",
    "SpatialNode",
    "Octree",
    # Construction
    "TreeBuilder",
    "build_tree",
    # Generation
    "random_bodies",
    "iter_random_bodies",
    # Metrics
    "insertion_depths",
    "mean_depth",
    "depth_histogram",
    "leaf_count",
    "occupied_internal_count",
    "tree_summary",
    # Validation
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "OctreeError",
    "ValidationError",
    "InvalidIntervalError",
    "InvalidBodyError",
    "MaxDepthExceededError",
    "OutOfBoundsError",
    "OutOfBoundsWarning",
    "validate_interval",
    "validate_bounds",
    "validate_body",
    "validate_max_depth",
]
