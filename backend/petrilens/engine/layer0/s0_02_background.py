"""S0.02 — Background Detection.

Decides whether the plate background is dark or light from the median
luma of a sparse sample grid. With a region of interest only points
inside the circle are sampled.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.context import AnalysisContext, Background, BackgroundMode, CircleRegion
from petrilens.engine.registry import Layer, stage
from petrilens.utils.geometry import circle_grid_samples
from petrilens.utils.math_helpers import upper_median

logger = logging.getLogger(__name__)


def sample_background(
    gray: NDArray[np.uint8],
    region: CircleRegion | None = None,
    *,
    budget: int = 2500,
    region_divisions: int = 20,
) -> NDArray[np.uint8]:
    """Luma samples used for the background decision.

    Full frame: a regular grid whose stride keeps the sample count at or
    under ``budget``. Region: stride floor(radius / region_divisions) over
    the circle's clipped bounding square.
    """
    height, width = gray.shape
    if region is None:
        step = max(1, math.ceil(math.sqrt(width * height / budget)))
        return gray[::step, ::step].ravel()

    step = max(1, math.floor(region.radius / region_divisions))
    xs, ys = circle_grid_samples(
        width, height, region.center_x, region.center_y, region.radius, step
    )
    return gray[ys, xs]


def detect_background(samples: NDArray, split: int = 127) -> Background:
    """Dark iff the upper median sample is below ``split``. No samples → light."""
    if len(samples) == 0:
        return Background.LIGHT
    return Background.DARK if upper_median(samples) < split else Background.LIGHT


@stage(
    id="S0.02",
    layer=Layer.THRESHOLD,
    dependencies=["S0.01"],
    description="Decide dark or light plate background",
)
def background(ctx: AnalysisContext) -> None:
    mode = ctx.background_mode
    if mode == BackgroundMode.LIGHT:
        ctx.background = Background.LIGHT
    elif mode == BackgroundMode.DARK:
        ctx.background = Background.DARK
    else:
        cfg = ctx.config
        samples = sample_background(
            ctx.gray,
            ctx.region,
            budget=cfg.background_sample_budget,
            region_divisions=cfg.region_sample_divisions,
        )
        ctx.background = detect_background(samples, cfg.background_split)
        logger.debug(
            "Background: %s from %d samples", ctx.background.value, len(samples)
        )
