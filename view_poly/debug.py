"""
Debug logging utilities for the visibility sweep.

All view_poly modules log under the "view_poly" logger namespace and are
silent unless the application configures logging. setup_debug_logging()
is a convenience for scripts and interactive sessions.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, TYPE_CHECKING

from view_poly.geometry import Segment, Vector2

if TYPE_CHECKING:
    from view_poly.sweep import VisibilityEvent

LOGGER_NAME = "view_poly"
DEBUG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"

logger = logging.getLogger(__name__)

# Handler installed by setup_debug_logging, if any
_debug_handler: Optional[logging.Handler] = None


def format_point(point: Vector2, precision: int = 3) -> str:
    """Format a point as '(x, y)' with fixed precision."""
    return f"({point.x:.{precision}f}, {point.y:.{precision}f})"


def format_segment(segment: Segment, precision: int = 3) -> str:
    return f"{format_point(segment.a, precision)} -> {format_point(segment.b, precision)}"


def format_polygon(
    vertices: Sequence[Vector2],
    precision: int = 3,
    max_vertices: int = 8
) -> str:
    """
    Format a vertex list, truncating long polygons.

    Parameters:
        vertices: Polygon vertices
        precision: Decimal places per coordinate
        max_vertices: Number of vertices printed before truncating

    Returns:
        String such as '[(0.000, 1.000), (1.000, 0.000), ... (+3 more)]'
    """
    shown = [format_point(v, precision) for v in vertices[:max_vertices]]
    if len(vertices) > max_vertices:
        shown.append(f"... (+{len(vertices) - max_vertices} more)")
    return "[" + ", ".join(shown) + "]"


def log_events(events: Iterable[VisibilityEvent]) -> None:
    """Log the sorted sweep events, one per line."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    events = list(events)
    logger.debug(f"Sweep events ({len(events)}):")
    for i, event in enumerate(events):
        logger.debug(
            f"  [{i}] {event.event_type:<5} at {format_point(event.point)} "
            f"segment {format_segment(event.segment)}"
        )


def log_sweep_step(
    event: VisibilityEvent,
    nearest: Segment,
    emitted: Sequence[Vector2]
) -> None:
    """Log a change of the nearest active segment."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        f"Nearest segment changed at {event.event_type} {format_point(event.point)}: "
        f"previous nearest {format_segment(nearest)}, emitted {format_polygon(emitted)}"
    )


def log_result(
    vertices: Sequence[Vector2],
    num_segments: int,
    num_ignored: int
) -> None:
    """Log a summary of a finished visibility computation."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        f"Visibility polygon: {len(vertices)} vertices from {num_segments} segments "
        f"({num_ignored} collinear with observer ignored): {format_polygon(vertices)}"
    )


def setup_debug_logging(
    level: int = logging.DEBUG,
    handler: Optional[logging.Handler] = None
) -> logging.Logger:
    """
    Route view_poly log records to a handler.

    Calling this repeatedly replaces the previously installed handler.

    Parameters:
        level: Level for the view_poly logger
        handler: Handler to attach; defaults to a stderr StreamHandler

    Returns:
        The configured view_poly package logger
    """
    global _debug_handler

    package_logger = logging.getLogger(LOGGER_NAME)
    disable_debug_logging()

    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT))

    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    _debug_handler = handler
    return package_logger


def disable_debug_logging() -> None:
    """Remove the handler installed by setup_debug_logging and reset the level."""
    global _debug_handler

    package_logger = logging.getLogger(LOGGER_NAME)
    if _debug_handler is not None:
        package_logger.removeHandler(_debug_handler)
        _debug_handler = None
    package_logger.setLevel(logging.NOTSET)
