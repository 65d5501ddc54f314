"""Leaf-node geometry helpers for pixel grids. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def circle_mask(
    width: int,
    height: int,
    center_x: float,
    center_y: float,
    radius: float,
) -> NDArray[np.bool_]:
    """Pixels whose Euclidean distance to the center is ≤ radius.

    The center may lie outside the grid; the result is simply clipped.
    """
    ys, xs = np.ogrid[:height, :width]
    return np.hypot(xs - center_x, ys - center_y) <= radius


def circle_grid_samples(
    width: int,
    height: int,
    center_x: float,
    center_y: float,
    radius: float,
    step: int,
) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """Strided (x, y) sample points inside a circle, clipped to the grid.

    Walks the circle's bounding square from floor(center - r) to
    floor(center + r) inclusive, keeping points with dx² + dy² ≤ r².
    Returned in row-major order.
    """
    x0 = max(0, math.floor(center_x - radius))
    x1 = min(width - 1, math.floor(center_x + radius))
    y0 = max(0, math.floor(center_y - radius))
    y1 = min(height - 1, math.floor(center_y + radius))
    if x1 < x0 or y1 < y0:
        empty = np.empty(0, dtype=np.intp)
        return empty, empty

    ys, xs = np.meshgrid(
        np.arange(y0, y1 + 1, step), np.arange(x0, x1 + 1, step), indexing="ij"
    )
    dx = xs - center_x
    dy = ys - center_y
    inside = dx * dx + dy * dy <= radius * radius
    return xs[inside], ys[inside]


def isoperimetric_ratio(area: float, perimeter: float) -> float:
    """C = 4π·area/perimeter². Circle=1.0. Zero perimeter yields 0."""
    if perimeter <= 0:
        return 0.0
    return 4 * math.pi * area / (perimeter * perimeter)
