"""S1.02 — Features + Acceptance.

Per-blob geometry, perimeter, circularity, density and mean color,
followed by the two acceptance gates (minimum size, thin filament).
Colony ids count accepted blobs only, so a rejected blob never consumes
an id.

Per-blob sums are computed in one pass over a discovery-order label
image with scipy.ndimage, then gated blob by blob.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from petrilens.engine.config import PipelineConfig
from petrilens.engine.context import AnalysisContext, Colony, RasterImage, RawBlob
from petrilens.engine.registry import Layer, stage
from petrilens.utils.geometry import isoperimetric_ratio
from petrilens.utils.math_helpers import round_half_up
from petrilens.utils.morphology import boundary_exposure

logger = logging.getLogger(__name__)


@dataclass
class FeatureResult:
    colonies: list[Colony] = field(default_factory=list)
    rejected_small: int = 0
    rejected_filaments: int = 0


def is_thin_filament(
    width: int,
    height: int,
    density: float,
    circularity: float,
    config: PipelineConfig | None = None,
) -> bool:
    """Elongated sparse or hair-thin shapes: scratches, fibers, plate edges.

    ``circularity`` is the raw isoperimetric ratio, before clamping.
    """
    cfg = config or PipelineConfig()
    ar = max(width, height) / (min(width, height) + 1)
    if ar > cfg.filament_aspect_ratio and (
        density < cfg.filament_min_density or circularity < cfg.filament_min_circularity
    ):
        return True
    return min(width, height) < cfg.filament_min_extent and ar > cfg.filament_narrow_aspect_ratio


def _label_image(blobs: list[RawBlob], shape: tuple[int, int]) -> NDArray[np.int32]:
    """Label image where blob i (discovery order) carries label i + 1."""
    order = np.zeros(shape[0] * shape[1], dtype=np.int32)
    for i, blob in enumerate(blobs):
        order[blob.pixels] = i + 1
    return order.reshape(shape)


def extract_features(
    blobs: list[RawBlob],
    raster: RasterImage,
    mask: NDArray[np.uint8],
    config: PipelineConfig | None = None,
) -> FeatureResult:
    """Turn candidate blobs into accepted colonies with sequential ids.

    Classification fields are left at their placeholders for the layer-2
    pass.
    """
    cfg = config or PipelineConfig()
    result = FeatureResult()
    if not blobs:
        return result

    n = len(blobs)
    labels = _label_image(blobs, mask.shape)
    index = np.arange(1, n + 1)

    ys, xs = np.indices(mask.shape)
    sum_x = ndimage.sum_labels(xs, labels, index)
    sum_y = ndimage.sum_labels(ys, labels, index)
    perimeters = ndimage.sum_labels(boundary_exposure(mask), labels, index)
    channel_sums = [
        ndimage.sum_labels(raster.pixels[..., c], labels, index) for c in range(3)
    ]
    boxes = ndimage.find_objects(labels, max_label=n)

    for i, blob in enumerate(blobs):
        size = blob.size
        if size < cfg.min_colony_size:
            result.rejected_small += 1
            continue

        rows, cols = boxes[i]
        min_x, max_x = cols.start, cols.stop - 1
        min_y, max_y = rows.start, rows.stop - 1
        width = max_x - min_x + 1
        height = max_y - min_y + 1
        bounding = width * height
        density = size / bounding if bounding > 0 else 0.0
        circularity = isoperimetric_ratio(size, float(perimeters[i]))

        if is_thin_filament(width, height, density, circularity, cfg):
            result.rejected_filaments += 1
            continue

        result.colonies.append(
            Colony(
                id=len(result.colonies) + 1,
                size_px=size,
                centroid_x=float(sum_x[i]) / size,
                centroid_y=float(sum_y[i]) / size,
                min_x=int(min_x),
                max_x=int(max_x),
                min_y=int(min_y),
                max_y=int(max_y),
                width=int(width),
                height=int(height),
                circularity=min(1.0, circularity),
                density=density,
                color_r=round_half_up(float(channel_sums[0][i]) / size),
                color_g=round_half_up(float(channel_sums[1][i]) / size),
                color_b=round_half_up(float(channel_sums[2][i]) / size),
            )
        )

    return result


@stage(
    id="S1.02",
    layer=Layer.EXTRACTION,
    dependencies=["S1.01"],
    description="Blob features, size floor and filament rejection",
)
def features(ctx: AnalysisContext) -> None:
    result = extract_features(ctx.blobs, ctx.raster, ctx.mask, ctx.config)
    ctx.colonies = result.colonies
    ctx.rejected_small = result.rejected_small
    ctx.rejected_filaments = result.rejected_filaments
    logger.debug(
        "Features: %d accepted, %d below size floor, %d filaments",
        len(ctx.colonies),
        ctx.rejected_small,
        ctx.rejected_filaments,
    )
