"""
Random body generation.

Produces bodies with uniformly distributed locations inside a bounding
volume and uniformly distributed masses. Useful as input for benchmarks
and for checking the depth statistics of the tree. Pass a seed (or a
numpy Generator) for reproducible sequences.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .spatial.bounds import BoundingVolume
from .types import Body, Point

UNIT_CUBE = BoundingVolume.cube(0.0, 1.0)


def _resolve_rng(seed: Optional[int], rng: Optional[np.random.Generator]) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def _sample(
    count: int,
    bounds: BoundingVolume,
    mass_range: Tuple[float, float],
    gen: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    lows = np.array([bounds.x.start, bounds.y.start, bounds.z.start])
    highs = np.array([bounds.x.end, bounds.y.end, bounds.z.end])
    locations = gen.uniform(lows, highs, size=(count, 3))
    masses = gen.uniform(mass_range[0], mass_range[1], size=count).astype(np.float32)
    return locations, masses


def random_bodies(
    count: int,
    bounds: Optional[BoundingVolume] = None,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    mass_range: Tuple[float, float] = (0.0, 1.0),
) -> List[Body]:
    """
    Generate bodies uniformly distributed in a volume.

    Args:
        count: Number of bodies
        bounds: Volume to sample locations from (default: unit cube)
        seed: Seed for a fresh numpy Generator
        rng: Generator to draw from (takes precedence over seed)
        mass_range: (low, high) range for masses

    Returns:
        List of bodies

    Raises:
        ValueError: If count is negative or mass_range is reversed
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if mass_range[0] > mass_range[1]:
        raise ValueError(f"mass_range low must be <= high, got {mass_range}")
    if count == 0:
        return []

    gen = _resolve_rng(seed, rng)
    locations, masses = _sample(count, bounds or UNIT_CUBE, mass_range, gen)
    return [
        Body(float(mass), Point(float(loc[0]), float(loc[1]), float(loc[2])))
        for loc, mass in zip(locations, masses)
    ]


def iter_random_bodies(
    bounds: Optional[BoundingVolume] = None,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    mass_range: Tuple[float, float] = (0.0, 1.0),
    batch_size: int = 1024,
) -> Iterator[Body]:
    """
    Endless stream of random bodies, drawn in batches.

    Same distribution as random_bodies(); combine with itertools.islice to
    take a finite number.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    gen = _resolve_rng(seed, rng)
    while True:
        yield from random_bodies(batch_size, bounds, rng=gen, mass_range=mass_range)


__all__ = ["UNIT_CUBE", "random_bodies", "iter_random_bodies"]
