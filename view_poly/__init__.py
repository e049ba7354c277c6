"""
View Polygon
============

Public API for computing the visibility polygon of an observer point
among opaque line-segment obstacles.
"""

from view_poly.api import (
    VisibilityResult,
    compute_visibility,
    segments_from_contours,
    bounding_box_segments,
    polygon_signed_area,
)
from view_poly.config import EPSILON, DEFAULT_CONFIG, VisibilityConfig
from view_poly.debug import (
    format_point,
    format_segment,
    format_polygon,
    setup_debug_logging,
    disable_debug_logging,
)
from view_poly.errors import (
    VisibilityError,
    ValidationError,
    PreconditionError,
    InconsistentStateError,
)
from view_poly.geometry import (
    Vector2,
    Segment,
    Ray,
    Orientation,
    compute_orientation,
    intersect_ray_segment,
)
from view_poly.ordering import SegmentDistanceComparator, AngleComparator
from view_poly.sweep import visibility_polygon
from view_poly.validation import check_obstacles, find_crossing_pairs

__all__ = [
    # Main API
    'visibility_polygon',
    'compute_visibility',
    'VisibilityResult',
    'segments_from_contours',
    'bounding_box_segments',
    'polygon_signed_area',
    # Configuration
    'EPSILON',
    'DEFAULT_CONFIG',
    'VisibilityConfig',
    # Geometry
    'Vector2',
    'Segment',
    'Ray',
    'Orientation',
    'compute_orientation',
    'intersect_ray_segment',
    'SegmentDistanceComparator',
    'AngleComparator',
    # Validation and errors
    'check_obstacles',
    'find_crossing_pairs',
    'VisibilityError',
    'ValidationError',
    'PreconditionError',
    'InconsistentStateError',
    # Debug utilities
    'format_point',
    'format_segment',
    'format_polygon',
    'setup_debug_logging',
    'disable_debug_logging',
]
__version__ = '0.1.0'
