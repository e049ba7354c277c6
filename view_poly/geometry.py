"""
Geometry primitives: 2D vectors, tolerance-aware comparisons, orientation,
line segments and ray/segment intersection.

All predicates route through strictly_less/approx_equal so that every
comparison in the sweep shares the same relative tolerance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from view_poly.config import EPSILON


@dataclass(frozen=True)
class Vector2:
    """
    Immutable 2D vector with float coordinates.

    Used both for points and for direction vectors. Equality is exact
    (component-wise ==); use points_approx_equal for tolerant comparison.
    """
    x: float
    y: float

    def add(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def subtract(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def multiply(self, other: Vector2) -> Vector2:
        """Component-wise product."""
        return Vector2(self.x * other.x, self.y * other.y)

    def divide(self, other: Vector2) -> Vector2:
        """Component-wise quotient."""
        return Vector2(self.x / other.x, self.y / other.y)

    def scale(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def negate(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __add__(self, other: Vector2) -> Vector2:
        return self.add(other)

    def __sub__(self, other: Vector2) -> Vector2:
        return self.subtract(other)

    def __mul__(self, other: Union[Vector2, float]) -> Vector2:
        if isinstance(other, Vector2):
            return self.multiply(other)
        return self.scale(other)

    def __rmul__(self, scalar: float) -> Vector2:
        return self.scale(scalar)

    def __truediv__(self, other: Union[Vector2, float]) -> Vector2:
        if isinstance(other, Vector2):
            return self.divide(other)
        return Vector2(self.x / other, self.y / other)

    def __neg__(self) -> Vector2:
        return self.negate()

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}]"

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def to_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y], dtype=np.float64)


PointLike = Union[Vector2, Sequence[float], NDArray[np.floating[Any]]]


def as_point(value: PointLike) -> Vector2:
    """
    Convert a point-like value to a Vector2.

    Parameters:
        value: Vector2, (x, y) sequence or numpy array of shape (2,)

    Returns:
        Vector2 with float coordinates

    Raises:
        ValueError: If value does not have exactly 2 components
    """
    if isinstance(value, Vector2):
        return value
    coords = np.asarray(value, dtype=np.float64)
    if coords.shape != (2,):
        raise ValueError(f"point must have shape (2,), got {coords.shape}")
    return Vector2(float(coords[0]), float(coords[1]))


def dot(a: Vector2, b: Vector2) -> float:
    """Standard dot product of two vectors."""
    return a.x * b.x + a.y * b.y


def cross(a: Vector2, b: Vector2) -> float:
    """Determinant det([a.x, b.x; a.y, b.y])."""
    return a.x * b.y - a.y * b.x


def length_squared(vector: Vector2) -> float:
    return dot(vector, vector)


def distance_squared(a: Vector2, b: Vector2) -> float:
    return length_squared(a - b)


def normal(vector: Vector2) -> Vector2:
    """Vector orthogonal to the argument, rotated 90° counter-clockwise."""
    return Vector2(-vector.y, vector.x)


def normalize(vector: Vector2, epsilon: float = EPSILON) -> Vector2:
    """
    Scale a vector to unit length.

    Parameters:
        vector: Vector to normalize
        epsilon: Magnitudes below this are treated as zero

    Returns:
        Unit vector with the same direction, or the zero vector if the
        magnitude is below epsilon
    """
    length = math.sqrt(dot(vector, vector))
    if length < epsilon:
        return Vector2(0.0, 0.0)
    return vector / length


# =============================================================================
# Tolerance-aware comparisons
# =============================================================================

def approx_equal(a: float, b: float, epsilon: float = EPSILON) -> bool:
    """Check |a - b| <= max(|a|, |b|) * epsilon."""
    return abs(a - b) <= max(abs(a), abs(b)) * epsilon


def strictly_less(a: float, b: float, epsilon: float = EPSILON) -> bool:
    """Check a < b by more than the relative tolerance."""
    return (b - a) > max(abs(a), abs(b)) * epsilon


def points_approx_equal(a: Vector2, b: Vector2, epsilon: float = EPSILON) -> bool:
    return approx_equal(a.x, b.x, epsilon) and approx_equal(a.y, b.y, epsilon)


class Orientation(IntEnum):
    """Orientation of an ordered triple of points in the plane."""
    LEFT_TURN = 1
    RIGHT_TURN = -1
    COLLINEAR = 0


def compute_orientation(
    a: Vector2,
    b: Vector2,
    c: Vector2,
    epsilon: float = EPSILON
) -> Orientation:
    """
    Compute orientation of 3 points in a plane.

    Parameters:
        a: First point
        b: Second point
        c: Third point
        epsilon: Relative tolerance for the sign test

    Returns:
        LEFT_TURN if c is left of the directed line a->b, RIGHT_TURN if it
        is right of it, COLLINEAR otherwise
    """
    det = cross(b - a, c - a)
    return Orientation(
        int(strictly_less(0.0, det, epsilon)) - int(strictly_less(det, 0.0, epsilon))
    )


# =============================================================================
# Segments and rays
# =============================================================================

@dataclass(frozen=True)
class Segment:
    """
    Oriented line segment from a to b.

    Two segments are equal only if both endpoints match in order.
    """
    a: Vector2
    b: Vector2

    def reversed(self) -> Segment:
        return Segment(self.b, self.a)

    def __iter__(self) -> Iterator[Vector2]:
        yield self.a
        yield self.b

    def __str__(self) -> str:
        return f"{self.a} -> {self.b}"


SegmentLike = Union[Segment, Sequence[PointLike], NDArray[np.floating[Any]]]


def as_segment(value: SegmentLike) -> Segment:
    """
    Convert a segment-like value to a Segment.

    Parameters:
        value: Segment, pair of point-likes, or numpy array of shape (2, 2)

    Returns:
        Segment with Vector2 endpoints

    Raises:
        ValueError: If value does not describe exactly 2 points
    """
    if isinstance(value, Segment):
        return value
    if isinstance(value, np.ndarray):
        if value.shape != (2, 2):
            raise ValueError(f"segment must have shape (2, 2), got {value.shape}")
        return Segment(as_point(value[0]), as_point(value[1]))
    endpoints = list(value)
    if len(endpoints) != 2:
        raise ValueError(f"segment must have exactly 2 endpoints, got {len(endpoints)}")
    return Segment(as_point(endpoints[0]), as_point(endpoints[1]))


@dataclass(frozen=True)
class Ray:
    """
    Half-line starting at origin and extending along direction.

    The direction does not need to be normalized.
    """
    origin: Vector2
    direction: Vector2

    def intersects(
        self,
        segment: Segment,
        epsilon: float = EPSILON
    ) -> Optional[Vector2]:
        """Find the nearest intersection point with a segment, if any."""
        return intersect_ray_segment(self, segment, epsilon)


def intersect_ray_segment(
    ray: Ray,
    segment: Segment,
    epsilon: float = EPSILON
) -> Optional[Vector2]:
    """
    Find the nearest intersection point of a ray and a line segment.

    Parameters:
        ray: Ray to cast
        segment: Segment to intersect
        epsilon: Relative tolerance for parallel and bounds checks

    Returns:
        Nearest intersection point, or None if the ray misses the segment.
        When the ray runs along a collinear segment, the result is the ray
        origin if it lies on the segment, otherwise the nearer endpoint.
    """
    origin, direction = ray.origin, ray.direction
    ao = origin - segment.a
    ab = segment.b - segment.a
    det = cross(ab, direction)

    if approx_equal(det, 0.0, epsilon):
        # Parallel: only a collinear segment can be hit
        abo = compute_orientation(segment.a, segment.b, origin, epsilon)
        if abo != Orientation.COLLINEAR:
            return None
        dist_a = dot(ao, direction)
        dist_b = dot(origin - segment.b, direction)

        if dist_a > 0 and dist_b > 0:
            # Both endpoints behind the origin
            return None
        elif (dist_a > 0) != (dist_b > 0):
            return origin
        elif dist_a > dist_b:
            # Both distances are negative here, so a is nearer
            return segment.a
        else:
            return segment.b

    u = cross(ao, direction) / det
    if strictly_less(u, 0.0, epsilon) or strictly_less(1.0, u, epsilon):
        return None

    t = -cross(ab, ao) / det
    if approx_equal(t, 0.0, epsilon) or t > 0:
        return origin + direction.scale(t)
    return None
