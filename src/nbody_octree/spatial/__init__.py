"""
Spatial data structures for N-body algorithms.

Provides the bounding-volume geometry and the octree built on top of it.
"""

from .bounds import OCTANT_COUNT, BoundingVolume, Interval
from .octree import Octree, SpatialNode

__all__ = ["OCTANT_COUNT", "Interval", "BoundingVolume", "SpatialNode", "Octree"]
