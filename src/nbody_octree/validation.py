"""
Error types and input validation for octree construction.

Provides centralized validation functions for intervals, bounding volumes,
bodies and tree configuration. Raises descriptive exceptions on invalid input.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .spatial.bounds import BoundingVolume, Interval
    from .types import Body

DEFAULT_MAX_DEPTH = 64
MAX_DEPTH_LIMIT = 1024


class OctreeError(ValueError):
    """Base exception for octree errors."""

    pass


class ValidationError(OctreeError):
    """Raised when tree inputs or configuration are invalid."""

    pass


class InvalidIntervalError(ValidationError):
    """Raised when an interval is reversed or not finite."""

    pass


class InvalidBodyError(ValidationError):
    """Raised when a body has a non-finite location or a bad mass."""

    pass


class MaxDepthExceededError(OctreeError):
    """
    Raised when an insertion would descend past the configured depth.

    This happens for coincident bodies (or bodies closer together than the
    floating point resolution of the region), whose octant paths never
    diverge.
    """

    def __init__(self, body: Body, depth: int, max_depth: int) -> None:
        self.body = body
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"max-depth-exceeded: inserting body at {body.location.as_tuple()} "
            f"needs depth {depth}, limit is {max_depth}"
        )


class OutOfBoundsError(OctreeError):
    """Raised in strict mode when a body lies outside the root volume."""

    def __init__(self, body: Body, bounds: BoundingVolume) -> None:
        self.body = body
        self.bounds = bounds
        super().__init__(
            f"out-of-bounds: body at {body.location.as_tuple()} is outside {bounds}"
        )


class OutOfBoundsWarning(UserWarning):
    """Warning for a body inserted outside the root volume in permissive mode."""

    pass


def validate_interval(interval: Interval, name: str = "interval") -> Interval:
    """
    Validate an interval is finite and ordered.

    Args:
        interval: Interval to check
        name: Label used in the error message

    Returns:
        The same interval

    Raises:
        InvalidIntervalError: If an endpoint is not finite or start > end
    """
    if not (math.isfinite(interval.start) and math.isfinite(interval.end)):
        raise InvalidIntervalError(
            f"{name} endpoints must be finite, got [{interval.start}, {interval.end}]"
        )
    if interval.start > interval.end:
        raise InvalidIntervalError(
            f"{name} start must be <= end, got [{interval.start}, {interval.end}]"
        )
    return interval


def validate_bounds(bounds: BoundingVolume) -> BoundingVolume:
    """
    Validate all three axes of a bounding volume.

    Raises:
        InvalidIntervalError: If any axis is invalid
    """
    validate_interval(bounds.x, "x")
    validate_interval(bounds.y, "y")
    validate_interval(bounds.z, "z")
    return bounds


def validate_body(body: Any) -> Body:
    """
    Validate a body has a finite location and a finite, non-negative mass.

    Args:
        body: Body to check

    Returns:
        The same body

    Raises:
        InvalidBodyError: If the body is malformed
    """
    location = getattr(body, "location", None)
    mass: Optional[float] = getattr(body, "mass", None)
    if location is None or mass is None:
        raise InvalidBodyError(f"Expected a Body with mass and location, got {body!r}")

    coords = (location.x, location.y, location.z)
    if not all(math.isfinite(c) for c in coords):
        raise InvalidBodyError(f"Body location must be finite, got {coords}")
    if not math.isfinite(mass):
        raise InvalidBodyError(f"Body mass must be finite, got {mass}")
    if mass < 0:
        raise InvalidBodyError(f"Body mass must be non-negative, got {mass}")
    return body


def validate_max_depth(max_depth: int) -> int:
    """
    Validate the depth limit is an integer in [1, MAX_DEPTH_LIMIT].

    Raises:
        ValidationError: If out of range
    """
    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        raise ValidationError(f"max_depth must be an integer, got {max_depth!r}")
    if max_depth < 1 or max_depth > MAX_DEPTH_LIMIT:
        raise ValidationError(
            f"max_depth must be in [1, {MAX_DEPTH_LIMIT}], got {max_depth}"
        )
    return max_depth


__all__ = [
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
