"""S2.02 — Size Buckets.

Buckets every colony against the upper median size and assigns the
count multiplier. Nested colonies never reach the Large buckets; they fall
through to Below Average or Average like any other colony.
"""

from __future__ import annotations

import logging

from petrilens.engine.config import PipelineConfig
from petrilens.engine.context import AnalysisContext, Colony, SizeCategory
from petrilens.engine.registry import Layer, stage
from petrilens.utils.math_helpers import upper_median

logger = logging.getLogger(__name__)


def median_size(colonies: list[Colony]) -> int:
    if not colonies:
        return 0
    return int(upper_median([c.size_px for c in colonies]))


def bucket_sizes(colonies: list[Colony], median: int, config: PipelineConfig | None = None) -> None:
    cfg = config or PipelineConfig()
    for col in colonies:
        # Only the nesting pass ever sets the flag, and only to True
        top_level = col.is_nested_in_parent is None
        if top_level and col.size_px >= median * cfg.large_4x_factor:
            col.count_multiplier = 4
            col.size_category = SizeCategory.LARGE_4X
        elif top_level and col.size_px >= median * cfg.large_2x_factor:
            col.count_multiplier = 2
            col.size_category = SizeCategory.LARGE_2X
        else:
            col.count_multiplier = 1
            col.size_category = (
                SizeCategory.BELOW_AVERAGE if col.size_px < median else SizeCategory.AVERAGE
            )


@stage(
    id="S2.02",
    layer=Layer.CLASSIFICATION,
    dependencies=["S2.01"],
    description="Median-relative size buckets and count multipliers",
)
def size_buckets(ctx: AnalysisContext) -> None:
    ctx.median_size = median_size(ctx.colonies)
    bucket_sizes(ctx.colonies, ctx.median_size, ctx.config)
    logger.debug("Size buckets: median %d px", ctx.median_size)
