"""
Layout validator — pure-function checks on a finished placement list.

Checks:
  1. Bounds   — every rect lies inside [0, width] x [0, height]
  2. Overlap  — no two rects share interior area

The coverage map rasterizes a layout onto a grid (one cell per
``resolution`` units) so occupancy can be cross-checked numerically.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from maxrects.core.errors import OutOfBoundsError, OverlapError
from maxrects.core.models import Rect


def validate_layout(rects: Sequence[Rect], width: float, height: float) -> bool:
    """
    Validate a list of placed rects against a ``width x height`` container.

    Args:
        rects: Placed rects.
        width, height: Container size.

    Returns:
        True if all checks pass.

    Raises:
        OutOfBoundsError: A rect extends outside the container.
        OverlapError: Two rects overlap.
    """
    for rect in rects:
        if rect.x < 0 or rect.y < 0 or rect.right > width or rect.bottom > height:
            raise OutOfBoundsError(
                f"{rect!r} is outside the {width}x{height} container"
            )

    for i, a in enumerate(rects):
        for b in rects[i + 1:]:
            if a.intersects(b):
                raise OverlapError(f"{a!r} overlaps {b!r}")

    return True


def _to_grid(value: float, resolution: float) -> int:
    return int(round(value / resolution))


def coverage_map(
    rects: Sequence[Rect],
    width: float,
    height: float,
    resolution: float = 1.0,
) -> np.ndarray:
    """
    Count how many rects cover each grid cell.

    Returns:
        Integer array of shape (grid_h, grid_w); a valid layout has no cell
        above 1.
    """
    grid_w = math.ceil(width / resolution)
    grid_h = math.ceil(height / resolution)
    grid = np.zeros((grid_h, grid_w), dtype=np.int32)

    for rect in rects:
        gx = _to_grid(rect.x, resolution)
        gy = _to_grid(rect.y, resolution)
        gx_end = min(_to_grid(rect.right, resolution), grid_w)
        gy_end = min(_to_grid(rect.bottom, resolution), grid_h)
        if gx >= gx_end or gy >= gy_end:
            continue
        grid[gy:gy_end, gx:gx_end] += 1

    return grid


def coverage_occupancy(
    rects: Sequence[Rect],
    width: float,
    height: float,
    resolution: float = 1.0,
) -> float:
    """Fraction of grid cells covered by at least one rect."""
    grid = coverage_map(rects, width, height, resolution)
    if grid.size == 0:
        return 0.0
    return float(np.count_nonzero(grid)) / grid.size
