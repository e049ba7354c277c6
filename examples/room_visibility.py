"""Visibility polygon example for a small floor plan.

Builds a room with a few walls and furniture blocks, computes what an
observer standing at a given position can see, prints a summary and, if
OpenCV is installed, renders the result to ``examples/output``.

Run with::

    uv run python examples/room_visibility.py --observer 120 200 --debug
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from view_poly import (
    VisibilityConfig,
    VisibilityResult,
    compute_visibility,
    segments_from_contours,
)
from view_poly.visualize import (
    HAS_CV2,
    draw_observer,
    draw_obstacle_segments,
    draw_visibility_polygon,
)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

EXAMPLES_DIR = Path(__file__).resolve().parent
OUTPUT_DIR = EXAMPLES_DIR / "output"

ROOM_SIZE = (480.0, 360.0)


def create_floor_plan() -> NDArray[np.float64]:
    """Interior walls plus rectangular furniture, as (M, 2, 2) segments."""
    walls = [
        np.array([[160.0, 10.0], [160.0, 140.0]]),
        np.array([[160.0, 220.0], [160.0, 350.0]]),
        np.array([[320.0, 180.0], [470.0, 180.0]]),
    ]
    furniture = [
        np.array([[60.0, 60.0], [110.0, 60.0], [110.0, 100.0], [60.0, 100.0]]),
        np.array([[240.0, 260.0], [290.0, 260.0], [290.0, 300.0], [240.0, 300.0]]),
        np.array([[360.0, 60.0], [420.0, 60.0], [390.0, 110.0]]),
    ]
    return segments_from_contours(walls + furniture)


def summarise_result(result: VisibilityResult) -> None:
    """Log the main figures of a visibility computation."""
    total_area = ROOM_SIZE[0] * ROOM_SIZE[1]
    logger.info(
        f"Observer at {result.observer.tolist()} sees {result.area:.1f} of "
        f"{total_area:.1f} square units ({100.0 * result.area / total_area:.1f}%)"
    )
    logger.info(
        f"Polygon has {result.num_vertices} vertices from {result.num_segments} segments "
        f"({result.num_ignored} collinear with the observer)"
    )


def render(result: VisibilityResult, segments: NDArray[np.float64]) -> None:
    """Draw the floor plan and the visible region to a PNG file."""
    import cv2  # Imported lazily to keep dependency optional at module import time

    width, height = int(ROOM_SIZE[0]), int(ROOM_SIZE[1])
    image = np.full((height + 1, width + 1, 3), 255, dtype=np.uint8)
    image = draw_visibility_polygon(image, result.vertices)
    image = draw_obstacle_segments(image, segments, color=(60, 60, 60))
    image = draw_observer(image, result.observer)

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    output_path = OUTPUT_DIR / "room_visibility.png"
    cv2.imwrite(str(output_path), image)
    logger.info(f"Saved visualization to {output_path}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compute the region visible from a point in a floor plan"
    )
    parser.add_argument(
        "--observer",
        type=float,
        nargs=2,
        default=[120.0, 200.0],
        metavar=("X", "Y"),
        help="Observer position (default: 120 200)"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Log sweep inconsistencies instead of raising"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log sweep events and nearest-segment changes"
    )
    args = parser.parse_args()

    if args.debug:
        logging.getLogger("view_poly").setLevel(logging.DEBUG)

    segments = create_floor_plan()
    result = compute_visibility(
        np.array(args.observer),
        segments,
        bounds=((0.0, 0.0), ROOM_SIZE),
        config=VisibilityConfig(strict=not args.lenient),
        check_preconditions=True,
    )
    summarise_result(result)

    if not HAS_CV2:
        logger.warning("OpenCV not installed; skipping visualization output.")
        return
    render(result, segments)


if __name__ == "__main__":
    main()
