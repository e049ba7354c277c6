"""
Tests for debug formatting and logging helpers.
"""

import io
import logging

import pytest

from view_poly.debug import (
    DEBUG_FORMAT,
    LOGGER_NAME,
    disable_debug_logging,
    format_point,
    format_polygon,
    format_segment,
    setup_debug_logging,
)
from view_poly.geometry import Segment, Vector2
from view_poly.sweep import visibility_polygon


ORIGIN = Vector2(0.0, 0.0)
WALL = Segment(Vector2(5.0, 5.0), Vector2(5.0, -5.0))


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    disable_debug_logging()


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:
    """Tests for format_point, format_segment and format_polygon."""

    def test_format_point(self):
        assert format_point(Vector2(1.0, -2.5)) == "(1.000, -2.500)"
        assert format_point(Vector2(1.0, -2.5), precision=1) == "(1.0, -2.5)"

    def test_format_segment(self):
        assert format_segment(WALL) == "(5.000, 5.000) -> (5.000, -5.000)"

    def test_format_polygon(self):
        vertices = [Vector2(0.0, 1.0), Vector2(1.0, 0.0)]
        assert format_polygon(vertices) == "[(0.000, 1.000), (1.000, 0.000)]"
        assert format_polygon([]) == "[]"

    def test_format_polygon_truncates(self):
        vertices = [Vector2(float(i), 0.0) for i in range(10)]
        text = format_polygon(vertices, precision=0, max_vertices=3)
        assert text == "[(0, 0), (1, 0), (2, 0), ... (+7 more)]"


# =============================================================================
# Sweep logging
# =============================================================================

class TestSweepLogging:
    """The sweep logs events and its result at DEBUG level."""

    def test_silent_by_default(self, caplog):
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            visibility_polygon(ORIGIN, [WALL])
        assert caplog.records == []

    def test_logs_events_and_result(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            visibility_polygon(ORIGIN, [WALL])
        messages = [r.getMessage() for r in caplog.records]
        assert "Sweep events (2):" in messages
        assert any(m.startswith("  [0] start at (5.000, 5.000)") for m in messages)
        assert any(
            m.startswith("Visibility polygon: 2 vertices from 1 segments (0 collinear with observer ignored)")
            for m in messages
        )

    def test_logs_nearest_segment_changes(self, caplog):
        room = [
            Segment(Vector2(-10.0, 10.0), Vector2(10.0, 10.0)),
            Segment(Vector2(10.0, 10.0), Vector2(10.0, -10.0)),
            Segment(Vector2(10.0, -10.0), Vector2(-10.0, -10.0)),
            Segment(Vector2(-10.0, -10.0), Vector2(-10.0, 10.0)),
        ]
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            visibility_polygon(ORIGIN, room + [WALL])
        changes = [r for r in caplog.records if r.getMessage().startswith("Nearest segment changed")]
        assert len(changes) == 2
        assert "start (5.000, 5.000)" in changes[0].getMessage()
        assert "end (5.000, -5.000)" in changes[1].getMessage()

    def test_ignored_segments_counted(self, caplog):
        collinear = Segment(Vector2(1.0, 1.0), Vector2(2.0, 2.0))
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            visibility_polygon(ORIGIN, [WALL, collinear])
        assert any("from 2 segments (1 collinear" in r.getMessage() for r in caplog.records)


# =============================================================================
# setup_debug_logging / disable_debug_logging
# =============================================================================

class TestSetupDebugLogging:
    """Tests for setup_debug_logging and disable_debug_logging."""

    def test_custom_handler_receives_records(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(DEBUG_FORMAT))

        package_logger = setup_debug_logging(handler=handler)
        assert package_logger.name == LOGGER_NAME
        assert handler in package_logger.handlers

        visibility_polygon(ORIGIN, [WALL])
        output = stream.getvalue()
        assert "[DEBUG] view_poly.debug - Visibility polygon: 2 vertices" in output

    def test_default_handler_uses_debug_format(self):
        package_logger = setup_debug_logging()
        installed = package_logger.handlers[-1]
        assert isinstance(installed, logging.StreamHandler)
        assert installed.formatter._fmt == DEBUG_FORMAT
        assert package_logger.level == logging.DEBUG

    def test_setup_replaces_previous_handler(self):
        first = logging.NullHandler()
        second = logging.NullHandler()
        setup_debug_logging(handler=first)
        package_logger = setup_debug_logging(level=logging.WARNING, handler=second)
        assert first not in package_logger.handlers
        assert second in package_logger.handlers
        assert package_logger.level == logging.WARNING

    def test_disable_removes_handler(self):
        handler = logging.NullHandler()
        package_logger = setup_debug_logging(handler=handler)
        disable_debug_logging()
        assert handler not in package_logger.handlers
        assert package_logger.level == logging.NOTSET
