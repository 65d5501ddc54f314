"""S1.01 — Connected Components.

4-connected labeling of the binary mask. Blobs come out in raster scan
order of their first pixel; no size filtering happens here.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from petrilens.engine.context import AnalysisContext, RawBlob
from petrilens.engine.registry import Layer, stage
from petrilens.utils.morphology import components_in_scan_order, label_components

logger = logging.getLogger(__name__)


def extract_blobs(mask: NDArray[np.uint8]) -> list[RawBlob]:
    """Every maximal 4-connected set of on pixels, in discovery order."""
    labels, count = label_components(mask)
    if count == 0:
        return []
    groups = components_in_scan_order(labels)
    return [RawBlob(discovery_index=i, pixels=g) for i, g in enumerate(groups)]


@stage(
    id="S1.01",
    layer=Layer.EXTRACTION,
    dependencies=["S0.04"],
    description="Label 4-connected blobs in scan order",
)
def components(ctx: AnalysisContext) -> None:
    ctx.blobs = extract_blobs(ctx.mask)
    logger.debug("Components: %d blobs", len(ctx.blobs))
