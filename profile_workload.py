#!/usr/bin/env python3
"""
Profile script for view_poly module to identify performance bottlenecks.
"""

import cProfile
import pstats
import io
import numpy as np
from numpy.typing import NDArray
import time
from typing import List
from view_poly.api import compute_visibility, segments_from_contours


def generate_random_polygon(
    center: NDArray[np.float64],
    radius: float,
    n_vertices: int = 5
) -> NDArray[np.float64]:
    """Generate a random star-shaped polygon roughly centered at center."""
    angles = np.sort(np.random.uniform(0, 2 * np.pi, n_vertices))
    radii = np.random.uniform(0.5 * radius, 1.5 * radius, n_vertices)
    x = center[0] + radii * np.cos(angles)
    y = center[1] + radii * np.sin(angles)
    return np.column_stack([x, y])


def generate_room_workload(
    grid_size: int = 3,
    vertices_per_obstacle: int = 5,
    cell_size: float = 100.0
) -> tuple[NDArray[np.float64], NDArray[np.float64], tuple]:
    """
    Generate a room with one random obstacle per grid cell.

    Each obstacle stays inside its own cell, so obstacles never cross.
    The observer stands in the center cell, which is left empty.
    """
    obstacles: List[NDArray[np.float64]] = []
    center_cell = grid_size // 2
    for row in range(grid_size):
        for col in range(grid_size):
            if row == center_cell and col == center_cell:
                continue
            center = np.array([(col + 0.5) * cell_size, (row + 0.5) * cell_size])
            obstacles.append(generate_random_polygon(center, 0.3 * cell_size, vertices_per_obstacle))

    observer = np.array([(center_cell + 0.5) * cell_size, (center_cell + 0.5) * cell_size])
    observer += np.random.uniform(-0.25 * cell_size, 0.25 * cell_size, 2)
    bounds = ((0.0, 0.0), (grid_size * cell_size, grid_size * cell_size))
    return observer, segments_from_contours(obstacles), bounds


def run_typical_workload(n_iterations: int = 100) -> None:
    """Run typical workload multiple times for profiling."""
    np.random.seed(42)  # For reproducibility

    for _ in range(n_iterations):
        observer, segments, bounds = generate_room_workload(
            grid_size=3, vertices_per_obstacle=5
        )
        compute_visibility(observer, segments, bounds=bounds)


def run_many_obstacles_workload(n_iterations: int = 10) -> None:
    """Run workload with many obstacles for profiling."""
    np.random.seed(42)

    for _ in range(n_iterations):
        observer, segments, bounds = generate_room_workload(
            grid_size=9, vertices_per_obstacle=8
        )
        compute_visibility(observer, segments, bounds=bounds)


def profile_function(func, description: str) -> None:
    """Profile a function and print statistics."""
    print(f"\n{'=' * 60}")
    print(f"Profiling: {description}")
    print('=' * 60)

    # Time the execution
    start = time.perf_counter()

    profiler = cProfile.Profile()
    profiler.enable()
    func()
    profiler.disable()

    elapsed = time.perf_counter() - start

    # Get stats
    s = io.StringIO()
    ps = pstats.Stats(profiler, stream=s).sort_stats('cumulative')
    ps.print_stats(30)
    print(s.getvalue())

    print(f"\nTotal time: {elapsed:.3f}s")


if __name__ == "__main__":
    print("View Poly Performance Profiling")
    print("=" * 60)

    # Profile typical workload (8 obstacles, 5 vertices each)
    profile_function(
        lambda: run_typical_workload(100),
        "Typical workload (8 obstacles x 5 vertices, 100 iterations)"
    )

    # Profile many obstacles workload
    profile_function(
        lambda: run_many_obstacles_workload(10),
        "Many obstacles (80 obstacles x 8 vertices, 10 iterations)"
    )
