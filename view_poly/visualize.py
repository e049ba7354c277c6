"""
Visualization utilities for debugging and validation.

Draws visibility polygons, obstacle segments and the observer onto BGR
images with OpenCV. Coordinates are used as pixel positions directly.
"""

from __future__ import annotations

from typing import Any, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from view_poly.geometry import Vector2

# Try to import cv2, set flag if not available
try:
    import cv2

    HAS_CV2 = True
except ImportError:
    HAS_CV2 = False

VerticesInput = Union[NDArray[np.floating[Any]], Sequence[Vector2]]


def _ensure_cv2() -> None:
    """Raise an error if cv2 is not available."""
    if not HAS_CV2:
        raise ImportError(
            "OpenCV (cv2) is required for visualization functions. "
            "Install with: pip install opencv-python"
        )


def _to_pixels(points: VerticesInput) -> NDArray[np.int32]:
    """Round (N, 2) points, or a list of Vector2, to int32 pixel coordinates."""
    if len(points) > 0 and isinstance(points[0], Vector2):
        points = [p.to_tuple() for p in points]
    array = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return np.round(array).astype(np.int32)


def draw_visibility_polygon(
    image: NDArray[np.uint8],
    vertices: VerticesInput,
    fill_color: tuple[int, int, int] = (0, 255, 255),
    outline_color: tuple[int, int, int] = (0, 200, 200),
    fill_alpha: float = 0.4,
    thickness: int = 1
) -> NDArray[np.uint8]:
    """
    Draw a visibility polygon with a translucent fill.

    Parameters:
        image: Input image (H, W, 3) BGR format
        vertices: Polygon vertices (N, 2) or list of Vector2
        fill_color: BGR color for the fill
        outline_color: BGR color for the outline
        fill_alpha: Fill opacity in [0, 1]
        thickness: Outline thickness; 0 disables the outline

    Returns:
        New image with the polygon overlay. The input is not modified.
        Polygons with fewer than 3 vertices are drawn as an open polyline.
    """
    _ensure_cv2()
    if not 0.0 <= fill_alpha <= 1.0:
        raise ValueError(f"fill_alpha must be in [0, 1], got {fill_alpha}")

    output = image.copy()
    pixels = _to_pixels(vertices)
    if pixels.shape[0] == 0:
        return output

    if pixels.shape[0] >= 3 and fill_alpha > 0:
        overlay = output.copy()
        cv2.fillPoly(overlay, [pixels], fill_color)
        output = cv2.addWeighted(overlay, fill_alpha, output, 1.0 - fill_alpha, 0)

    if thickness > 0:
        closed = pixels.shape[0] >= 3
        cv2.polylines(output, [pixels], closed, outline_color, thickness, cv2.LINE_AA)
    return output


def draw_obstacle_segments(
    image: NDArray[np.uint8],
    segments: NDArray[np.floating[Any]],
    color: tuple[int, int, int] = (255, 0, 0),
    thickness: int = 2
) -> NDArray[np.uint8]:
    """
    Draw obstacle segments.

    Parameters:
        image: Input image (H, W, 3) BGR format
        segments: Segments array (M, 2, 2)
        color: BGR color tuple
        thickness: Line thickness

    Returns:
        New image with the segments drawn
    """
    _ensure_cv2()
    output = image.copy()
    segments = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 2)
    for segment in np.round(segments).astype(np.int32):
        start = (int(segment[0, 0]), int(segment[0, 1]))
        end = (int(segment[1, 0]), int(segment[1, 1]))
        cv2.line(output, start, end, color, thickness, cv2.LINE_AA)
    return output


def draw_observer(
    image: NDArray[np.uint8],
    observer: NDArray[np.floating[Any]] | Sequence[float],
    color: tuple[int, int, int] = (0, 0, 255),
    radius: int = 4
) -> NDArray[np.uint8]:
    """
    Draw the observer position as a filled circle.

    Parameters:
        image: Input image (H, W, 3) BGR format
        observer: Observer position (2,)
        color: BGR color tuple
        radius: Circle radius in pixels

    Returns:
        New image with the observer marker
    """
    _ensure_cv2()
    output = image.copy()
    x, y = np.round(np.asarray(observer, dtype=np.float64)).astype(int)
    cv2.circle(output, (int(x), int(y)), radius, color, -1, cv2.LINE_AA)
    return output
