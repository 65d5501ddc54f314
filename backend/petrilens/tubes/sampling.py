"""Central-patch sampling shared by the tube classifiers."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.context import RasterImage


def central_patch(raster: RasterImage, fraction: float) -> NDArray[np.uint8]:
    """Square patch around the image center, clipped to the image.

    Half-side is floor(fraction × min(W, H)); the patch spans
    [max(0, c − s), max(0, c − s) + min(dim − origin, 2s)) on each axis.
    May be empty when the half-side rounds to 0.
    """
    width, height = raster.width, raster.height
    half = math.floor(min(width, height) * fraction)
    cx, cy = width // 2, height // 2
    x0 = max(0, cx - half)
    y0 = max(0, cy - half)
    w = min(width - x0, half * 2)
    h = min(height - y0, half * 2)
    return raster.pixels[y0 : y0 + h, x0 : x0 + w]


def center_pixel(raster: RasterImage) -> NDArray[np.uint8]:
    """The single center pixel as a (1, 1, 4) patch."""
    cx, cy = raster.width // 2, raster.height // 2
    return raster.pixels[cy : cy + 1, cx : cx + 1]


def mean_color(patch: NDArray[np.uint8]) -> tuple[float, float, float]:
    """Arithmetic mean RGB over every pixel of a non-empty patch."""
    flat = patch.reshape(-1, 4)[:, :3].astype(np.float64)
    if flat.shape[0] == 0:
        raise ValueError("cannot average an empty patch")
    sums = flat.sum(axis=0)
    n = flat.shape[0]
    return (float(sums[0] / n), float(sums[1] / n), float(sums[2] / n))


def strided_samples(patch: NDArray[np.uint8], step: int = 3) -> NDArray[np.uint8]:
    """Every ``step``-th pixel of the patch in row-major order, as (N, 4)."""
    return patch.reshape(-1, 4)[::step]
