"""
Octree shape metrics.

Provides quantitative measures of a built tree:
- Insertion depths: Depth of every resident body
- Depth histogram: Body count per level
- Leaf count and node count
- Summary dict combining the above

For uniformly distributed bodies the mean insertion depth grows roughly
with log8(n), which these helpers make easy to check.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

import numpy as np

from .spatial.octree import Octree


def insertion_depths(tree: Octree) -> List[int]:
    """
    Depth of every node holding a body, in pre-order.

    Args:
        tree: Built octree

    Returns:
        List of depths (root = 0), one per resident body
    """
    return [depth for depth, node in tree.iter_nodes() if node.body is not None]


def mean_depth(tree: Octree) -> float:
    """Mean resident depth, 0.0 for an empty tree."""
    depths = insertion_depths(tree)
    if not depths:
        return 0.0
    return float(np.mean(depths))


def depth_histogram(tree: Octree) -> Dict[int, int]:
    """Number of resident bodies at each depth."""
    return dict(sorted(Counter(insertion_depths(tree)).items()))


def leaf_count(tree: Octree) -> int:
    """Number of nodes without children."""
    return sum(1 for _, node in tree.iter_nodes() if node.is_leaf())


def occupied_internal_count(tree: Octree) -> int:
    """
    Number of nodes holding a body while also having children.

    Always 0 for trees built with relocate_resident=True.
    """
    return sum(
        1 for _, node in tree.iter_nodes() if node.body is not None and not node.is_leaf()
    )


def tree_summary(tree: Octree) -> dict[str, Any]:
    """
    Compute all shape metrics for a tree.

    Args:
        tree: Built octree

    Returns:
        Dict with keys: bodies, nodes, leaves, occupied_internal,
        max_depth, mean_depth, depth_std
    """
    depths = insertion_depths(tree)
    return {
        "bodies": tree.body_count,
        "nodes": tree.node_count(),
        "leaves": leaf_count(tree),
        "occupied_internal": occupied_internal_count(tree),
        "max_depth": tree.depth(),
        "mean_depth": float(np.mean(depths)) if depths else 0.0,
        "depth_std": float(np.std(depths)) if depths else 0.0,
    }


__all__ = [
    "insertion_depths",
    "mean_depth",
    "depth_histogram",
    "leaf_count",
    "occupied_internal_count",
    "tree_summary",
]
