"""
Orderings used by the visibility sweep.

SegmentDistanceComparator orders segments by distance from the observer
along a common ray, using orientation predicates only. AngleComparator
orders points clockwise around the observer starting at the +y axis.
"""

from __future__ import annotations

from view_poly.config import EPSILON
from view_poly.geometry import (
    Orientation,
    Segment,
    Vector2,
    approx_equal,
    compute_orientation,
    cross,
    distance_squared,
    length_squared,
    points_approx_equal,
    strictly_less,
)


class SegmentDistanceComparator:
    """
    Strict "nearer than" order on segments as seen from an origin point.

    Assumes:
        1. both segments are intersected by some common ray from the origin
        2. the segments do not intersect except at their endpoints
        3. neither segment is collinear with the origin

    Outside these assumptions the result is unspecified.
    """

    def __init__(self, origin: Vector2, epsilon: float = EPSILON):
        self.origin = origin
        self.epsilon = epsilon

    def _orient(self, a: Vector2, b: Vector2, c: Vector2) -> Orientation:
        return compute_orientation(a, b, c, self.epsilon)

    def _same(self, p: Vector2, q: Vector2) -> bool:
        return points_approx_equal(p, q, self.epsilon)

    def less(self, x: Segment, y: Segment) -> bool:
        """
        Check whether segment x is closer to the origin than segment y.

        Parameters:
            x: Left hand side of the comparison
            y: Right hand side of the comparison

        Returns:
            True iff x is strictly nearer than y
        """
        origin = self.origin
        a, b = x.a, x.b
        c, d = y.a, y.b

        # Relabel endpoints so that a shared endpoint, if any, is a == c
        if self._same(b, c) or self._same(b, d):
            a, b = b, a
        if self._same(a, d):
            c, d = d, c

        if self._same(a, c):
            oad = self._orient(origin, a, d)
            oab = self._orient(origin, a, b)
            if self._same(b, d) or oad != oab:
                return False
            return self._orient(a, b, d) != self._orient(a, b, origin)

        cda = self._orient(c, d, a)
        cdb = self._orient(c, d, b)
        if cda == Orientation.COLLINEAR and cdb == Orientation.COLLINEAR:
            return distance_squared(origin, a) < distance_squared(origin, c)
        elif cda == cdb or cda == Orientation.COLLINEAR or cdb == Orientation.COLLINEAR:
            cdo = self._orient(c, d, origin)
            return cdo == cda or cdo == cdb
        else:
            abo = self._orient(a, b, origin)
            return abo != self._orient(a, b, c)

    def __call__(self, x: Segment, y: Segment) -> bool:
        return self.less(x, y)


class AngleComparator:
    """
    Clockwise angular order of points around a vertex.

    The ray from the vertex in the +y direction is angle zero. Points at
    the same angle are ordered nearest first.
    """

    def __init__(self, vertex: Vector2, epsilon: float = EPSILON):
        self.vertex = vertex
        self.epsilon = epsilon

    def less(self, a: Vector2, b: Vector2) -> bool:
        """Check whether a comes strictly before b going clockwise."""
        eps = self.epsilon
        vertex = self.vertex

        # Left half-plane comes after the right one
        is_a_left = strictly_less(a.x, vertex.x, eps)
        is_b_left = strictly_less(b.x, vertex.x, eps)
        if is_a_left != is_b_left:
            return is_b_left

        # Both on the vertical line through the vertex
        if approx_equal(a.x, vertex.x, eps) and approx_equal(b.x, vertex.x, eps):
            if not strictly_less(a.y, vertex.y, eps) or not strictly_less(b.y, vertex.y, eps):
                return strictly_less(b.y, a.y, eps)
            return strictly_less(a.y, b.y, eps)

        oa = a - vertex
        ob = b - vertex
        det = cross(oa, ob)
        if approx_equal(det, 0.0, eps):
            return length_squared(oa) < length_squared(ob)
        return det < 0

    def __call__(self, a: Vector2, b: Vector2) -> bool:
        return self.less(a, b)
