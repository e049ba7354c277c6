"""
Tests for the numpy-facing API: compute_visibility and its helpers.
"""

import numpy as np
import pytest
from numpy.typing import NDArray
from numpy.testing import assert_allclose, assert_array_equal

from view_poly.api import (
    VisibilityResult,
    bounding_box_segments,
    compute_visibility,
    polygon_signed_area,
    segments_from_contours,
)
from view_poly.config import VisibilityConfig
from view_poly.errors import PreconditionError, ValidationError


# =============================================================================
# Helper functions for creating test fixtures
# =============================================================================

def make_square(center: tuple, half_size: float = 1.0) -> NDArray[np.float32]:
    """Create a square contour centered at given point."""
    cx, cy = center
    return np.array([
        [cx - half_size, cy - half_size],  # bottom-left
        [cx + half_size, cy - half_size],  # bottom-right
        [cx + half_size, cy + half_size],  # top-right
        [cx - half_size, cy + half_size],  # top-left
    ], dtype=np.float32)


ORIGIN = np.array([0.0, 0.0])
BOUNDS = ((-5.0, -5.0), (5.0, 5.0))
SHORT_WALL = np.array([[[2.0, 1.0], [2.0, -1.0]]])

# Box of half-size 5 with a wall at x=2 spanning y in [-1, 1]
SHORT_WALL_POLYGON = np.array([
    [5.0, 5.0],
    [5.0, 2.5],
    [2.0, 1.0],
    [2.0, -1.0],
    [5.0, -2.5],
    [5.0, -5.0],
    [-5.0, -5.0],
    [-5.0, 5.0],
])


# =============================================================================
# Test: compute_visibility scenarios
# =============================================================================

class TestComputeVisibility:
    """End-to-end tests for compute_visibility()."""

    def test_no_obstacles_without_bounds(self):
        result = compute_visibility(ORIGIN, np.empty((0, 2, 2)))
        assert isinstance(result, VisibilityResult)
        assert result.vertices.shape == (0, 2)
        assert not result
        assert result.area == 0.0

    def test_bounds_only(self):
        result = compute_visibility(ORIGIN, [], bounds=BOUNDS)
        assert_allclose(result.vertices, [[5, 5], [5, -5], [-5, -5], [-5, 5]])
        assert result.num_segments == 4
        assert result.area == pytest.approx(100.0)
        assert result.is_clockwise

    def test_short_wall_in_box(self):
        result = compute_visibility(ORIGIN, SHORT_WALL, bounds=BOUNDS)
        assert_allclose(result.vertices, SHORT_WALL_POLYGON)
        assert result.num_vertices == 8
        assert result.num_segments == 5
        assert result.num_ignored == 0
        assert result.area == pytest.approx(89.5)
        assert result.signed_area == pytest.approx(-89.5)

    def test_observer_copied_into_result(self):
        result = compute_visibility([0, 0], SHORT_WALL, bounds=BOUNDS)
        assert result.observer.dtype == np.float64
        assert_array_equal(result.observer, [0.0, 0.0])

    def test_contains(self):
        result = compute_visibility(ORIGIN, SHORT_WALL, bounds=BOUNDS)
        assert result.contains((1.0, 0.0))
        assert result.contains(np.array([4.0, 4.0]))
        # Behind the wall
        assert not result.contains((4.0, 0.0))
        # Outside the box
        assert not result.contains((6.0, 0.0))

    def test_contains_on_degenerate_polygon(self):
        result = compute_visibility(ORIGIN, np.array([[[5.0, 5.0], [5.0, -5.0]]]))
        assert result.num_vertices == 2
        assert not result.contains((1.0, 0.0))

    def test_contains_rejects_bad_point(self):
        result = compute_visibility(ORIGIN, [], bounds=BOUNDS)
        with pytest.raises(ValidationError, match="point"):
            result.contains((1.0, 2.0, 3.0))

    def test_square_obstacle_from_contour(self):
        """The front face of a square hides it like a single wall."""
        segments = segments_from_contours([make_square((3.0, 0.0))])
        result = compute_visibility(ORIGIN, segments, bounds=BOUNDS)
        assert_allclose(result.vertices, SHORT_WALL_POLYGON)
        assert result.area == pytest.approx(89.5)

    def test_collinear_segments_counted_as_ignored(self):
        segments = np.concatenate([SHORT_WALL, [[[-1.0, -1.0], [-3.0, -3.0]]]])
        result = compute_visibility(ORIGIN, segments, bounds=BOUNDS)
        assert result.num_segments == 6
        assert result.num_ignored == 1
        assert_allclose(result.vertices, SHORT_WALL_POLYGON)

    def test_observer_away_from_origin(self):
        observer = np.array([1.0, 2.0])
        result = compute_visibility(observer, [], bounds=((0, 0), (10, 10)))
        assert_allclose(result.vertices, [[10, 10], [10, 0], [0, 0], [0, 10]])
        assert result.area == pytest.approx(100.0)

    def test_list_of_segments_and_float32(self):
        walls = [np.array([[2.0, 1.0], [2.0, -1.0]], dtype=np.float32)]
        result = compute_visibility(ORIGIN.astype(np.float32), walls, bounds=BOUNDS)
        assert result.vertices.dtype == np.float64
        assert_allclose(result.vertices, SHORT_WALL_POLYGON)

    def test_config_without_cleanup(self):
        config = VisibilityConfig(remove_collinear=False)
        result = compute_visibility(ORIGIN, [], bounds=BOUNDS, config=config)
        # Each corner is emitted once by the ending wall and once by the next
        assert result.num_vertices == 8
        assert result.area == pytest.approx(100.0)

    def test_check_preconditions_passes_for_valid_input(self):
        segments = segments_from_contours([make_square((3.0, 0.0))])
        result = compute_visibility(ORIGIN, segments, bounds=BOUNDS, check_preconditions=True)
        assert result.area == pytest.approx(89.5)


# =============================================================================
# Test: compute_visibility input validation
# =============================================================================

class TestComputeVisibilityValidation:
    """Invalid inputs raise ValidationError before any sweeping."""

    def test_observer_wrong_shape(self):
        with pytest.raises(ValidationError, match="shape"):
            compute_visibility(np.array([0.0, 0.0, 0.0]), SHORT_WALL)

    def test_observer_not_finite(self):
        with pytest.raises(ValidationError, match="finite"):
            compute_visibility(np.array([np.nan, 0.0]), SHORT_WALL)

    def test_observer_not_numeric(self):
        with pytest.raises(ValidationError, match="numeric"):
            compute_visibility("origin", SHORT_WALL)

    def test_segments_wrong_shape(self):
        with pytest.raises(ValidationError, match="shape"):
            compute_visibility(ORIGIN, np.zeros((3, 2)))

    def test_segment_list_item_wrong_shape(self):
        with pytest.raises(ValidationError, match=r"obstacle_segments\[1\]"):
            compute_visibility(ORIGIN, [np.zeros((2, 2)), np.zeros((3, 2))])

    def test_segments_not_finite(self):
        walls = SHORT_WALL.copy()
        walls[0, 0, 0] = np.inf
        with pytest.raises(ValidationError, match="finite"):
            compute_visibility(ORIGIN, walls)

    def test_observer_outside_bounds(self):
        with pytest.raises(ValidationError, match="strictly inside"):
            compute_visibility(np.array([6.0, 0.0]), SHORT_WALL, bounds=BOUNDS)

    def test_observer_on_bounds(self):
        with pytest.raises(ValidationError, match="strictly inside"):
            compute_visibility(np.array([5.0, 0.0]), SHORT_WALL, bounds=BOUNDS)

    def test_inverted_bounds(self):
        with pytest.raises(ValidationError, match="min < max"):
            compute_visibility(ORIGIN, SHORT_WALL, bounds=((5, 5), (-5, -5)))

    def test_bounds_not_a_pair(self):
        with pytest.raises(ValidationError, match="pair"):
            compute_visibility(ORIGIN, SHORT_WALL, bounds=((0, 0), (1, 1), (2, 2)))

    def test_config_wrong_type(self):
        with pytest.raises(ValidationError, match="VisibilityConfig"):
            compute_visibility(ORIGIN, SHORT_WALL, config={"strict": False})

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            compute_visibility(np.array([0.0]), SHORT_WALL)

    def test_check_preconditions_detects_crossing(self):
        crossing = np.array([
            [[2.0, -1.0], [4.0, 1.0]],
            [[2.0, 1.0], [4.0, -1.0]],
        ])
        with pytest.raises(PreconditionError, match="0/1"):
            compute_visibility(ORIGIN, crossing, bounds=BOUNDS, check_preconditions=True)


# =============================================================================
# Test: helpers
# =============================================================================

class TestPolygonSignedArea:
    """Tests for polygon_signed_area()."""

    def test_counter_clockwise_positive(self):
        square = np.array([[0, 0], [2, 0], [2, 2], [0, 2]], dtype=np.float64)
        assert polygon_signed_area(square) == pytest.approx(4.0)

    def test_clockwise_negative(self):
        square = np.array([[0, 0], [0, 2], [2, 2], [2, 0]], dtype=np.float64)
        assert polygon_signed_area(square) == pytest.approx(-4.0)

    def test_degenerate(self):
        assert polygon_signed_area(np.empty((0, 2))) == 0.0
        assert polygon_signed_area(np.array([[0.0, 0.0], [1.0, 1.0]])) == 0.0


class TestSegmentsFromContours:
    """Tests for segments_from_contours()."""

    def test_square_edges_are_closed(self):
        edges = segments_from_contours([make_square((0.0, 0.0))])
        assert edges.shape == (4, 2, 2)
        assert edges.dtype == np.float64
        assert_array_equal(edges[0], [[-1, -1], [1, -1]])
        assert_array_equal(edges[3], [[-1, 1], [-1, -1]])

    def test_two_vertex_contour_is_single_wall(self):
        edges = segments_from_contours([np.array([[0.0, 0.0], [3.0, 4.0]])])
        assert edges.shape == (1, 2, 2)
        assert_array_equal(edges[0], [[0, 0], [3, 4]])

    def test_multiple_contours_concatenated(self):
        edges = segments_from_contours([
            make_square((0.0, 0.0)),
            np.array([[5.0, 5.0], [6.0, 5.0], [6.0, 6.0]]),
        ])
        assert edges.shape == (7, 2, 2)
        assert_array_equal(edges[6], [[6, 6], [5, 5]])

    def test_empty(self):
        assert segments_from_contours([]).shape == (0, 2, 2)

    def test_rejects_bad_contours(self):
        with pytest.raises(ValidationError, match=r"contours\[0\]"):
            segments_from_contours([np.zeros((3, 3))])
        with pytest.raises(ValidationError, match="at least 2 vertices"):
            segments_from_contours([np.zeros((1, 2))])


class TestBoundingBoxSegments:
    """Tests for bounding_box_segments()."""

    def test_walls_in_order(self):
        walls = bounding_box_segments((0, 0), (4, 2))
        assert walls.shape == (4, 2, 2)
        assert_array_equal(walls[0], [[0, 2], [4, 2]])  # top
        assert_array_equal(walls[1], [[4, 2], [4, 0]])  # right
        assert_array_equal(walls[2], [[4, 0], [0, 0]])  # bottom
        assert_array_equal(walls[3], [[0, 0], [0, 2]])  # left

    def test_walls_form_closed_loop(self):
        walls = bounding_box_segments((-1, -1), (1, 1))
        assert_array_equal(walls[:, 1], np.roll(walls[:, 0], -1, axis=0))

    @pytest.mark.parametrize("min_point, max_point", [
        ((0, 0), (0, 1)),
        ((0, 0), (1, 0)),
        ((1, 1), (0, 0)),
    ])
    def test_rejects_empty_box(self, min_point, max_point):
        with pytest.raises(ValidationError):
            bounding_box_segments(min_point, max_point)
