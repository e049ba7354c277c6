"""
Rotational sweep computing the visibility polygon of a point among
line-segment obstacles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Iterable, Iterator, List, Literal, Optional, Tuple

from view_poly.config import DEFAULT_CONFIG, VisibilityConfig
from view_poly.debug import format_point, format_segment, log_events, log_result, log_sweep_step
from view_poly.errors import InconsistentStateError
from view_poly.geometry import (
    Orientation,
    Ray,
    Segment,
    SegmentLike,
    Vector2,
    PointLike,
    approx_equal,
    as_point,
    as_segment,
    compute_orientation,
    points_approx_equal,
)
from view_poly.ordering import AngleComparator, SegmentDistanceComparator

logger = logging.getLogger(__name__)

EventType = Literal["start", "end"]


@dataclass(frozen=True)
class VisibilityEvent:
    """
    Event at which a segment starts or stops being crossed by the sweep ray.

    Attributes:
        event_type: 'start' or 'end'
        segment: Oriented segment whose first endpoint is the event point.
            Start events carry the segment in clockwise order, end events
            carry it reversed.
    """
    event_type: EventType
    segment: Segment

    @property
    def point(self) -> Vector2:
        return self.segment.a

    @property
    def is_start(self) -> bool:
        return self.event_type == "start"


class ActiveSet:
    """
    Segments crossed by the sweep ray, ordered nearest first.

    Kept as a sorted list searched with the distance comparator. Like an
    ordered set, elements equivalent under the comparator (neither is
    less than the other) are treated as the same element: inserting an
    equivalent segment is a no-op and discard removes the equivalent
    element, which is how an end event's reversed segment finds the
    segment inserted by its start event.
    """

    def __init__(self, less: Callable[[Segment, Segment], bool]):
        self._less = less
        self._segments: List[Segment] = []

    def _lower_bound(self, segment: Segment) -> int:
        lo, hi = 0, len(self._segments)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._less(self._segments[mid], segment):
                lo = mid + 1
            else:
                hi = mid
        return lo

    def _find(self, segment: Segment) -> Optional[int]:
        index = self._lower_bound(segment)
        if index < len(self._segments) and not self._less(segment, self._segments[index]):
            return index
        return None

    def insert(self, segment: Segment) -> bool:
        """Insert a segment; returns False if an equivalent one is present."""
        index = self._lower_bound(segment)
        if index < len(self._segments) and not self._less(segment, self._segments[index]):
            return False
        self._segments.insert(index, segment)
        return True

    def discard(self, segment: Segment) -> bool:
        """Remove the element equivalent to segment; returns False if none."""
        index = self._find(segment)
        if index is None:
            return False
        del self._segments[index]
        return True

    def nearest(self) -> Segment:
        """Return the segment nearest to the observer."""
        if not self._segments:
            raise IndexError("nearest() called on an empty active set")
        return self._segments[0]

    def __contains__(self, segment: object) -> bool:
        return isinstance(segment, Segment) and self._find(segment) is not None

    def __len__(self) -> int:
        return len(self._segments)

    def __bool__(self) -> bool:
        return bool(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)


def build_events(
    observer: Vector2,
    segments: Iterable[Segment],
    config: VisibilityConfig = DEFAULT_CONFIG
) -> Tuple[List[VisibilityEvent], List[Segment]]:
    """
    Construct unsorted sweep events and the initially active segments.

    Segments collinear with the observer are skipped. Every start event
    point is the endpoint met first when sweeping clockwise.

    Parameters:
        observer: Observer position
        segments: Obstacle segments in any endpoint order
        config: Tolerance settings

    Returns:
        Tuple of (events, initial_active) where initial_active holds the
        segments crossed by the vertical ray above the observer, i.e. the
        segments already active at sweep angle zero
    """
    eps = config.epsilon
    events: List[VisibilityEvent] = []
    initial_active: List[Segment] = []

    for segment in segments:
        pab = compute_orientation(observer, segment.a, segment.b, eps)
        if pab == Orientation.COLLINEAR:
            continue
        elif pab == Orientation.RIGHT_TURN:
            events.append(VisibilityEvent("start", segment))
            events.append(VisibilityEvent("end", segment.reversed()))
        else:
            events.append(VisibilityEvent("start", segment.reversed()))
            events.append(VisibilityEvent("end", segment))

        a, b = segment.a, segment.b
        if a.x > b.x:
            a, b = b, a

        abp = compute_orientation(a, b, observer, eps)
        if abp == Orientation.RIGHT_TURN and (
            approx_equal(b.x, observer.x, eps) or (a.x < observer.x < b.x)
        ):
            initial_active.append(segment)

    return events, initial_active


def sort_events(
    observer: Vector2,
    events: List[VisibilityEvent],
    config: VisibilityConfig = DEFAULT_CONFIG
) -> List[VisibilityEvent]:
    """
    Sort events clockwise around the observer, starting at the +y axis.

    Events at the same point are ordered end before start, so a segment
    ending where another begins does not open a gap.
    """
    eps = config.epsilon
    angle_less = AngleComparator(observer, eps)

    def event_less(x: VisibilityEvent, y: VisibilityEvent) -> bool:
        if points_approx_equal(x.point, y.point, eps):
            return x.event_type == "end" and y.event_type == "start"
        return angle_less(x.point, y.point)

    def compare(x: VisibilityEvent, y: VisibilityEvent) -> int:
        if event_less(x, y):
            return -1
        if event_less(y, x):
            return 1
        return 0

    return sorted(events, key=cmp_to_key(compare))


def remove_collinear_vertices(
    vertices: List[Vector2],
    epsilon: float = DEFAULT_CONFIG.epsilon
) -> List[Vector2]:
    """
    Drop vertices collinear with their neighbours, walking the polygon cyclically.

    Each vertex is tested against the last kept vertex and the next input
    vertex. Sequences of fewer than 3 vertices are returned unchanged, since
    a lone edge has no interior vertex to remove.

    Parameters:
        vertices: Polygon vertices, not explicitly closed
        epsilon: Relative tolerance for the collinearity test

    Returns:
        New list with the collinear vertices removed
    """
    n = len(vertices)
    if n < 3:
        return list(vertices)

    kept: List[Vector2] = []
    for i, vertex in enumerate(vertices):
        prev = kept[-1] if kept else vertices[-1]
        if i + 1 < n:
            following = vertices[i + 1]
        else:
            following = kept[0] if kept else vertices[0]
        if compute_orientation(prev, vertex, following, epsilon) != Orientation.COLLINEAR:
            kept.append(vertex)
    return kept


def visibility_polygon(
    observer: PointLike,
    obstacles: Iterable[SegmentLike],
    config: Optional[VisibilityConfig] = None
) -> List[Vector2]:
    """
    Calculate visibility polygon vertices in clockwise order.

    Endpoints of the obstacle segments can be ordered arbitrarily. Segments
    collinear with the observer are ignored. Obstacles must not cross each
    other except at shared endpoints; otherwise the result is unspecified.

    Parameters:
        observer: Position of the observer
        obstacles: Iterable of line segments blocking the line of sight
        config: Tolerance and failure-mode settings (DEFAULT_CONFIG if None)

    Returns:
        Vertices of the visibility polygon, clockwise, first vertex not repeated

    Raises:
        InconsistentStateError: If config.strict and an intersection that the
            sweep invariants guarantee is not found (crossing obstacles)

    Example:
        >>> visibility_polygon((0.0, 0.0), [((5.0, 5.0), (5.0, -5.0))])
        [Vector2(x=5.0, y=5.0), Vector2(x=5.0, y=-5.0)]
    """
    if config is None:
        config = DEFAULT_CONFIG
    eps = config.epsilon
    point = as_point(observer)
    segments = [as_segment(s) for s in obstacles]

    # -------------------------------------------------------------------------
    # Step 1: Build events and seed the active set
    # -------------------------------------------------------------------------
    cmp_dist = SegmentDistanceComparator(point, eps)
    state = ActiveSet(cmp_dist.less)

    events, initial_active = build_events(point, segments, config)
    for segment in initial_active:
        state.insert(segment)

    events = sort_events(point, events, config)
    log_events(events)

    # -------------------------------------------------------------------------
    # Step 2: Sweep
    # -------------------------------------------------------------------------
    vertices: List[Vector2] = []
    for event in events:
        if event.event_type == "end":
            state.discard(event.segment)

        if not state:
            vertices.append(event.point)
        elif cmp_dist.less(event.segment, state.nearest()):
            # Nearest segment has changed: project the event point onto
            # the previous nearest segment
            nearest = state.nearest()
            ray = Ray(point, event.point - point)
            intersection = ray.intersects(nearest, eps)

            if intersection is None:
                message = (
                    f"Ray through {format_point(event.point)} does not intersect "
                    f"active segment {format_segment(nearest)}; "
                    "obstacles probably cross each other"
                )
                if config.strict:
                    raise InconsistentStateError(message)
                logger.warning(message + " (vertex pair skipped)")
            else:
                if event.is_start:
                    emitted = [intersection, event.point]
                else:
                    emitted = [event.point, intersection]
                vertices.extend(emitted)
                log_sweep_step(event, nearest, emitted)

        if event.is_start:
            state.insert(event.segment)

    # -------------------------------------------------------------------------
    # Step 3: Remove collinear vertices
    # -------------------------------------------------------------------------
    if config.remove_collinear:
        vertices = remove_collinear_vertices(vertices, eps)

    log_result(vertices, len(segments), len(segments) - len(events) // 2)
    return vertices
