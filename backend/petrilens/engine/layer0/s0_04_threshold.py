"""S0.04 — Threshold + Binarize.

Otsu's method over the 256-bin luma histogram, shifted toward the counted
polarity, then a per-pixel on/off decision restricted to the region.

The Otsu scan keeps the first strictly greater between-class variance,
so ties resolve to the lowest candidate and a single-valued histogram
yields 0.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.context import AnalysisContext, CircleRegion
from petrilens.engine.registry import Layer, stage
from petrilens.utils.geometry import circle_mask

logger = logging.getLogger(__name__)


def otsu_threshold_from_histogram(hist: NDArray | list[int]) -> int:
    """Candidate t maximizing w_B·w_F·(μ_B − μ_F)², background = bins ≤ t."""
    hist = np.asarray(hist, dtype=np.float64)
    if hist.shape != (256,):
        raise ValueError(f"expected a 256-bin histogram, got shape {hist.shape}")

    levels = np.arange(256, dtype=np.float64)
    total = hist.sum()
    w_b = np.cumsum(hist)
    w_f = total - w_b
    sum_b = np.cumsum(levels * hist)
    sum_all = sum_b[-1]

    valid = (w_b > 0) & (w_f > 0)
    if not valid.any():
        return 0

    between = np.zeros(256, dtype=np.float64)
    wb = w_b[valid]
    wf = w_f[valid]
    mean_b = sum_b[valid] / wb
    mean_f = (sum_all - sum_b[valid]) / wf
    between[valid] = wb * wf * (mean_b - mean_f) ** 2

    best = int(np.argmax(between))
    # argmax of an all-zero array is 0, and a zero variance never beats the
    # initial maximum of 0 either
    return best if between[best] > 0 else 0


def otsu_threshold(gray: NDArray[np.uint8]) -> int:
    """Otsu threshold of a uint8 grayscale image."""
    hist = np.bincount(np.asarray(gray, dtype=np.uint8).ravel(), minlength=256)
    return otsu_threshold_from_histogram(hist)


def shift_threshold(otsu: int, count_dark: bool, shift: int = 20) -> int:
    """Move the threshold toward the counted side, clamped to [0, 255]."""
    if count_dark:
        return max(otsu - shift, 0)
    return min(otsu + shift, 255)


def binarize(
    gray: NDArray[np.uint8],
    threshold: int,
    count_dark: bool,
    region: CircleRegion | None = None,
) -> NDArray[np.uint8]:
    """On iff past the threshold on the counted side and inside the region."""
    on = gray < threshold if count_dark else gray > threshold
    if region is not None:
        height, width = gray.shape
        on &= circle_mask(width, height, region.center_x, region.center_y, region.radius)
    return on.astype(np.uint8)


@stage(
    id="S0.04",
    layer=Layer.THRESHOLD,
    dependencies=["S0.01", "S0.03"],
    description="Otsu threshold and binary mask",
)
def threshold(ctx: AnalysisContext) -> None:
    ctx.otsu_threshold = otsu_threshold(ctx.gray)
    ctx.threshold = shift_threshold(
        ctx.otsu_threshold, ctx.count_dark, ctx.config.threshold_shift
    )
    mask = binarize(ctx.gray, ctx.threshold, ctx.count_dark, ctx.region)
    ctx.mask = mask
    logger.debug(
        "Threshold: otsu=%d → %d (count %s), %d pixels on",
        ctx.otsu_threshold,
        ctx.threshold,
        "dark" if ctx.count_dark else "light",
        int(mask.sum(dtype=np.int64)),
    )
