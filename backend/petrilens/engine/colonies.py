"""Colony analysis entry points.

analyze_image() decodes then runs the full pipeline; analyze_raster() skips
the decode. classify_colonies() exposes the layer-2 pass on its own for
callers that already hold a colony list.
"""

from __future__ import annotations

import logging

from petrilens.engine.config import PipelineConfig
from petrilens.engine.context import (
    AnalysisContext,
    AnalysisResult,
    BackgroundMode,
    CircleRegion,
    Colony,
    CountTarget,
    RasterImage,
)
from petrilens.engine.layer2.s2_01_nesting import detect_nesting
from petrilens.engine.layer2.s2_02_size_buckets import bucket_sizes, median_size
from petrilens.engine.layer2.s2_03_shape_labels import label_shapes
from petrilens.engine.layer3.s3_01_summary import effective_count
from petrilens.engine.pipeline import create_pipeline
from petrilens.engine.raster import decode_image

logger = logging.getLogger(__name__)

__all__ = [
    "analyze_image",
    "analyze_raster",
    "build_context",
    "classify_colonies",
    "effective_count",
]


def build_context(
    raster: RasterImage,
    region: CircleRegion | None = None,
    background_mode: BackgroundMode | str = BackgroundMode.AUTO,
    count_target: CountTarget | str = CountTarget.AUTO,
    invert: bool = False,
) -> AnalysisContext:
    return AnalysisContext(
        raster=raster,
        region=region,
        background_mode=BackgroundMode(background_mode),
        count_target=CountTarget(count_target),
        invert=invert,
    )


def analyze_raster(
    raster: RasterImage,
    region: CircleRegion | None = None,
    background_mode: BackgroundMode | str = BackgroundMode.AUTO,
    count_target: CountTarget | str = CountTarget.AUTO,
    invert: bool = False,
    config: PipelineConfig | None = None,
) -> AnalysisResult:
    ctx = build_context(raster, region, background_mode, count_target, invert)
    create_pipeline(config).run(ctx)
    return ctx.to_result()


def analyze_image(
    source: str | bytes,
    region: CircleRegion | None = None,
    background_mode: BackgroundMode | str = BackgroundMode.AUTO,
    count_target: CountTarget | str = CountTarget.AUTO,
    invert: bool = False,
    config: PipelineConfig | None = None,
    max_pixels: int | None = None,
) -> AnalysisResult:
    """Decode an encoded image and count the colonies in it.

    Args:
        source: ``data:`` URL, bare base64 string or raw encoded bytes.
        region: Optional circular region of interest; pixels outside it
            are never on.
        background_mode: auto / light / dark ("unsure" is treated as auto).
        count_target: auto / dark / light.
        invert: Flip the counted polarity after it has been decided.
        config: Pipeline tunables; defaults reproduce the reference counts.
        max_pixels: Reject rasters larger than this.

    Raises:
        ImageDecodeError: The source is not a decodable image.
        StageError: A pipeline stage failed. No partial result is returned.
    """
    raster = decode_image(source, max_pixels=max_pixels)
    return analyze_raster(raster, region, background_mode, count_target, invert, config)


def classify_colonies(colonies: list[Colony], config: PipelineConfig | None = None) -> list[Colony]:
    """Nesting, size buckets and shape labels, in place. Returns the same list."""
    cfg = config or PipelineConfig()
    if not colonies:
        return colonies
    detect_nesting(colonies, cfg.nesting_size_ratio)
    bucket_sizes(colonies, median_size(colonies), cfg)
    label_shapes(colonies, cfg)
    return colonies
