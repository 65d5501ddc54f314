"""S0.01 — Grayscale.

Per-pixel BT.601 luma, rounded half up to uint8. Alpha is ignored.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.context import AnalysisContext
from petrilens.engine.registry import Layer, stage
from petrilens.utils.color import luma_array
from petrilens.utils.math_helpers import round_half_up_array


def to_grayscale(pixels: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """(H, W, 3|4) RGB(A) → (H, W) uint8 luma."""
    return round_half_up_array(luma_array(pixels[..., :3])).astype(np.uint8)


@stage(
    id="S0.01",
    layer=Layer.THRESHOLD,
    description="Convert RGBA raster to rounded luma",
)
def grayscale(ctx: AnalysisContext) -> None:
    ctx.gray = to_grayscale(ctx.raster.pixels)
