"""S3.02 — Mask Render. White-on-black opaque PNG as a data URL."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.context import AnalysisContext
from petrilens.engine.raster import encode_png, mask_to_rgba, to_data_url
from petrilens.engine.registry import Layer, stage


def render_mask(mask: NDArray[np.uint8]) -> str:
    return to_data_url(encode_png(mask_to_rgba(mask)))


@stage(
    id="S3.02",
    layer=Layer.AGGREGATION,
    dependencies=["S0.04"],
    description="Render binary mask as PNG data URL",
)
def mask_render(ctx: AnalysisContext) -> None:
    ctx.mask_image = render_mask(ctx.mask)
