"""
Input validation and opt-in precondition checks.

The sweep assumes obstacles only touch at shared endpoints. Nothing in
the sweep verifies this; the helpers here do, at O(n²) cost, for callers
that want to catch bad level data before it silently corrupts a polygon.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from view_poly.config import EPSILON
from view_poly.errors import PreconditionError, ValidationError
from view_poly.geometry import (
    Orientation,
    Segment,
    Vector2,
    compute_orientation,
    dot,
    points_approx_equal,
)

SegmentsInput = Union[NDArray[np.floating[Any]], Sequence[NDArray[np.floating[Any]]]]


def validate_point(point: Any, name: str = "observer_point") -> NDArray[np.float64]:
    """Validate a (2,) point and return it as float64.

    Args:
        point: Point-like input
        name: Argument name used in error messages

    Raises:
        ValidationError: If point does not have shape (2,) or is not finite
    """
    try:
        array = np.asarray(point, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric, got {type(point).__name__}") from e

    if array.shape != (2,):
        raise ValidationError(f"{name} must have shape (2,), got {array.shape}")
    if not np.all(np.isfinite(array)):
        raise ValidationError(f"{name} must be finite, got {array.tolist()}")
    return array


def validate_segments(segments: SegmentsInput) -> NDArray[np.float64]:
    """Validate obstacle segments and return them as an (M, 2, 2) float64 array.

    Args:
        segments: Array of shape (M, 2, 2), or a list of (2, 2) arrays

    Raises:
        ValidationError: If the input is malformed or contains non-finite values
    """
    if isinstance(segments, np.ndarray):
        array = segments.astype(np.float64)
    else:
        if not isinstance(segments, (list, tuple)):
            raise ValidationError(
                f"obstacle_segments must be a numpy array or list, got {type(segments).__name__}"
            )
        if len(segments) == 0:
            return np.empty((0, 2, 2), dtype=np.float64)
        for i, segment in enumerate(segments):
            shape = np.shape(segment)
            if shape != (2, 2):
                raise ValidationError(
                    f"obstacle_segments[{i}] must have shape (2, 2), got {shape}"
                )
        array = np.asarray(segments, dtype=np.float64)

    if array.size == 0:
        return np.empty((0, 2, 2), dtype=np.float64)
    if array.ndim != 3 or array.shape[1:] != (2, 2):
        raise ValidationError(
            f"obstacle_segments must have shape (M, 2, 2), got {array.shape}"
        )
    if not np.all(np.isfinite(array)):
        raise ValidationError("obstacle_segments must contain only finite values")
    return array


def _strictly_inside(point: Vector2, segment: Segment, epsilon: float) -> bool:
    """Check whether a point known to be collinear with segment lies strictly between its endpoints."""
    if points_approx_equal(point, segment.a, epsilon) or points_approx_equal(point, segment.b, epsilon):
        return False
    ab = segment.b - segment.a
    t = dot(point - segment.a, ab)
    return 0.0 < t < dot(ab, ab)


def segments_conflict(s: Segment, t: Segment, epsilon: float = EPSILON) -> bool:
    """
    Check whether two segments touch anywhere other than a shared endpoint.

    Covers proper crossings, an endpoint lying on the other segment's
    interior, and collinear overlap.
    """
    o1 = compute_orientation(s.a, s.b, t.a, epsilon)
    o2 = compute_orientation(s.a, s.b, t.b, epsilon)
    o3 = compute_orientation(t.a, t.b, s.a, epsilon)
    o4 = compute_orientation(t.a, t.b, s.b, epsilon)

    collinear = Orientation.COLLINEAR
    if o1 != collinear and o2 != collinear and o3 != collinear and o4 != collinear:
        return o1 != o2 and o3 != o4

    if o1 == collinear and _strictly_inside(t.a, s, epsilon):
        return True
    if o2 == collinear and _strictly_inside(t.b, s, epsilon):
        return True
    if o3 == collinear and _strictly_inside(s.a, t, epsilon):
        return True
    if o4 == collinear and _strictly_inside(s.b, t, epsilon):
        return True

    # Identical segments overlap entirely
    if o1 == collinear and o2 == collinear:
        same = points_approx_equal(s.a, t.a, epsilon) and points_approx_equal(s.b, t.b, epsilon)
        flipped = points_approx_equal(s.a, t.b, epsilon) and points_approx_equal(s.b, t.a, epsilon)
        return same or flipped
    return False


def find_crossing_pairs(
    segments: Sequence[Segment],
    epsilon: float = EPSILON
) -> List[Tuple[int, int]]:
    """
    Find pairs of segments that violate the no-crossing precondition.

    Parameters:
        segments: Obstacle segments
        epsilon: Relative tolerance for orientation tests

    Returns:
        Sorted list of index pairs (i, j) with i < j
    """
    pairs: List[Tuple[int, int]] = []
    n = len(segments)
    for i in range(n):
        for j in range(i + 1, n):
            if segments_conflict(segments[i], segments[j], epsilon):
                pairs.append((i, j))
    return pairs


def find_collinear_segments(
    observer: Vector2,
    segments: Sequence[Segment],
    epsilon: float = EPSILON
) -> List[int]:
    """Return indices of segments collinear with the observer (ignored by the sweep)."""
    return [
        i for i, segment in enumerate(segments)
        if compute_orientation(observer, segment.a, segment.b, epsilon) == Orientation.COLLINEAR
    ]


def check_obstacles(
    observer: Vector2,
    segments: Sequence[Segment],
    epsilon: float = EPSILON,
    max_reported: int = 5
) -> None:
    """
    Verify the sweep preconditions for a set of obstacles.

    Segments collinear with the observer are excluded before checking,
    since the sweep ignores them.

    Raises:
        PreconditionError: If any two relevant segments cross
    """
    ignored = set(find_collinear_segments(observer, segments, epsilon))
    relevant = [i for i in range(len(segments)) if i not in ignored]
    crossing = find_crossing_pairs([segments[i] for i in relevant], epsilon)
    if crossing:
        pairs = [(relevant[i], relevant[j]) for i, j in crossing]
        shown = ", ".join(f"{i}/{j}" for i, j in pairs[:max_reported])
        if len(pairs) > max_reported:
            shown += f" (+{len(pairs) - max_reported} more)"
        raise PreconditionError(
            f"{len(pairs)} obstacle segment pair(s) cross other than at shared endpoints: {shown}"
        )
