"""
Public numpy-facing API for visibility polygon computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from view_poly.config import DEFAULT_CONFIG, VisibilityConfig
from view_poly.errors import ValidationError
from view_poly.geometry import Segment, Vector2, as_segment
from view_poly.sweep import visibility_polygon
from view_poly.validation import (
    SegmentsInput,
    check_obstacles,
    find_collinear_segments,
    validate_point,
    validate_segments,
)


@dataclass
class VisibilityResult:
    """
    Visibility polygon computed for one observer position.

    Attributes:
        observer: Observer position, shape (2,)
        vertices: Polygon vertices in clockwise order, shape (N, 2).
            The first vertex is not repeated at the end.
        num_segments: Number of obstacle segments considered (including bounds)
        num_ignored: Number of segments skipped for being collinear with the observer
    """
    observer: NDArray[np.float64]
    vertices: NDArray[np.float64]
    num_segments: int = 0
    num_ignored: int = 0

    def __bool__(self) -> bool:
        """Returns True if the polygon has any vertex."""
        return self.num_vertices > 0

    @property
    def num_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def signed_area(self) -> float:
        """Shoelace area; negative for clockwise polygons."""
        return polygon_signed_area(self.vertices)

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def is_clockwise(self) -> bool:
        return self.signed_area < 0

    def contains(self, point: NDArray[np.floating[Any]] | Sequence[float]) -> bool:
        """
        Check whether a point lies inside the visibility polygon.

        Uses even-odd ray casting; points exactly on the boundary may go
        either way. Polygons with fewer than 3 vertices contain nothing.
        """
        query = validate_point(point, name="point")
        if self.num_vertices < 3:
            return False

        x, y = query
        xs = self.vertices[:, 0]
        ys = self.vertices[:, 1]
        xs_next = np.roll(xs, -1)
        ys_next = np.roll(ys, -1)

        # Edges straddling the horizontal line through the query point
        straddles = (ys > y) != (ys_next > y)
        with np.errstate(divide="ignore", invalid="ignore"):
            x_cross = xs + (y - ys) * (xs_next - xs) / (ys_next - ys)
        crossings = np.count_nonzero(straddles & (x < x_cross))
        return bool(crossings % 2 == 1)


def polygon_signed_area(vertices: NDArray[np.floating[Any]]) -> float:
    """
    Compute the signed area of a polygon with the shoelace formula.

    Parameters:
        vertices: Polygon vertices (N, 2), not explicitly closed

    Returns:
        Signed area; positive for counter-clockwise, negative for clockwise,
        0.0 for fewer than 3 vertices
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if vertices.shape[0] < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))


def segments_from_contours(
    contours: List[NDArray[np.floating[Any]]]
) -> NDArray[np.float64]:
    """
    Convert closed polygon contours into their edge segments.

    Parameters:
        contours: List of polygons, each an (N, 2) array of vertices

    Returns:
        Edges array (M, 2, 2) where each edge is [[x1, y1], [x2, y2]]

    Raises:
        ValidationError: If a contour does not have shape (N, 2) with N >= 2
    """
    edges: List[NDArray[np.float64]] = []
    for i, contour in enumerate(contours):
        contour = np.asarray(contour, dtype=np.float64)
        if contour.ndim != 2 or contour.shape[1] != 2:
            raise ValidationError(
                f"contours[{i}] must have shape (N, 2), got {contour.shape}"
            )
        n_verts = contour.shape[0]
        if n_verts < 2:
            raise ValidationError(
                f"contours[{i}] must have at least 2 vertices, got {n_verts}"
            )
        if n_verts == 2:
            # A two-vertex contour is a single wall, not a degenerate polygon
            edges.append(contour.reshape(1, 2, 2))
            continue
        contour_edges = np.zeros((n_verts, 2, 2), dtype=np.float64)
        contour_edges[:, 0] = contour
        contour_edges[:, 1] = np.roll(contour, -1, axis=0)
        edges.append(contour_edges)

    if not edges:
        return np.empty((0, 2, 2), dtype=np.float64)
    return np.concatenate(edges, axis=0)


def bounding_box_segments(
    min_point: NDArray[np.floating[Any]] | Sequence[float],
    max_point: NDArray[np.floating[Any]] | Sequence[float]
) -> NDArray[np.float64]:
    """
    Build the four walls of an axis-aligned box.

    Parameters:
        min_point: Lower-left corner (2,)
        max_point: Upper-right corner (2,)

    Returns:
        Edges array (4, 2, 2) in the order top, right, bottom, left

    Raises:
        ValidationError: If the box is empty or inverted
    """
    (x0, y0) = validate_point(min_point, name="min_point")
    (x1, y1) = validate_point(max_point, name="max_point")
    if not (x0 < x1 and y0 < y1):
        raise ValidationError(
            f"bounds must satisfy min < max on both axes, got min=({x0}, {y0}) max=({x1}, {y1})"
        )
    return np.array([
        [[x0, y1], [x1, y1]],
        [[x1, y1], [x1, y0]],
        [[x1, y0], [x0, y0]],
        [[x0, y0], [x0, y1]],
    ], dtype=np.float64)


def compute_visibility(
    observer_point: NDArray[np.floating[Any]] | Sequence[float],
    obstacle_segments: SegmentsInput,
    bounds: Optional[Tuple[Sequence[float], Sequence[float]]] = None,
    config: Optional[VisibilityConfig] = None,
    check_preconditions: bool = False
) -> VisibilityResult:
    """
    Compute the region visible from a point among segment obstacles.

    Parameters:
        observer_point: (x, y) coordinates of the observer, shape (2,)
        obstacle_segments: Obstacle segments, shape (M, 2, 2), or a list of
                           (2, 2) arrays. Endpoint order does not matter.
        bounds: Optional (min_point, max_point) of an enclosing box. Its walls
                are added as obstacles so the polygon is closed even where
                no obstacle blocks the view. The observer must lie strictly
                inside the box.
        config: Tolerance and failure-mode settings
        check_preconditions: If True, verify that no two obstacles cross
                             before running the sweep (O(M²))

    Returns:
        VisibilityResult with clockwise polygon vertices

    Raises:
        ValidationError: If inputs have invalid shapes or values
        PreconditionError: If check_preconditions and obstacles cross
        InconsistentStateError: If config.strict and the sweep detects
                                crossing obstacles

    Example:
        >>> observer = np.array([0.0, 0.0])
        >>> walls = np.array([[[2.0, 1.0], [2.0, -1.0]]])
        >>> result = compute_visibility(observer, walls, bounds=((-5, -5), (5, 5)))
        >>> result.is_clockwise
        True
    """
    # -------------------------------------------------------------------------
    # Step 1: Input validation
    # -------------------------------------------------------------------------
    if config is None:
        config = DEFAULT_CONFIG
    if not isinstance(config, VisibilityConfig):
        raise ValidationError(
            f"config must be a VisibilityConfig, got {type(config).__name__}"
        )

    observer = validate_point(observer_point)
    segments_array = validate_segments(obstacle_segments)

    if bounds is not None:
        if len(bounds) != 2:
            raise ValidationError("bounds must be a (min_point, max_point) pair")
        box = bounding_box_segments(bounds[0], bounds[1])
        (x0, y0), (x1, y1) = box[3, 0], box[0, 1]
        if not (x0 < observer[0] < x1 and y0 < observer[1] < y1):
            raise ValidationError(
                f"observer_point {observer.tolist()} must lie strictly inside bounds"
            )
        segments_array = np.concatenate([segments_array, box], axis=0)

    # -------------------------------------------------------------------------
    # Step 2: Convert to geometry types and optionally check preconditions
    # -------------------------------------------------------------------------
    point = Vector2(float(observer[0]), float(observer[1]))
    segments: List[Segment] = [as_segment(s) for s in segments_array]

    if check_preconditions:
        check_obstacles(point, segments, config.epsilon)

    num_ignored = len(find_collinear_segments(point, segments, config.epsilon))

    # -------------------------------------------------------------------------
    # Step 3: Sweep
    # -------------------------------------------------------------------------
    vertices = visibility_polygon(point, segments, config)

    if vertices:
        vertex_array = np.array([v.to_tuple() for v in vertices], dtype=np.float64)
    else:
        vertex_array = np.empty((0, 2), dtype=np.float64)

    return VisibilityResult(
        observer=observer,
        vertices=vertex_array,
        num_segments=len(segments),
        num_ignored=num_ignored,
    )
