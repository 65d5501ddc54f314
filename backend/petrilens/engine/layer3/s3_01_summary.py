"""S3.01 — Summary Statistics.

avg_size: mean colony size rounded half up, 0 with no colonies.
effective_count: count multipliers summed over colonies that are nobody's
parent. This is a different rule from the nested flag used for bucketing:
a parent drops out of the count entirely while its children still count.
"""

from __future__ import annotations

import logging

from petrilens.engine.context import AnalysisContext, Colony
from petrilens.engine.registry import Layer, stage
from petrilens.utils.math_helpers import round_half_up

logger = logging.getLogger(__name__)


def average_size(colonies: list[Colony]) -> int:
    if not colonies:
        return 0
    return round_half_up(sum(c.size_px for c in colonies) / len(colonies))


def effective_count(colonies: list[Colony]) -> int:
    parent_ids = {c.parent_id for c in colonies if c.parent_id is not None}
    return sum(c.count_multiplier for c in colonies if c.id not in parent_ids)


@stage(
    id="S3.01",
    layer=Layer.AGGREGATION,
    dependencies=["S2.02"],
    description="Average size and effective colony count",
)
def summary(ctx: AnalysisContext) -> None:
    ctx.avg_size = average_size(ctx.colonies)
    ctx.effective_count = effective_count(ctx.colonies)
    logger.debug(
        "Summary: %d colonies, avg %d px, effective count %d",
        len(ctx.colonies),
        ctx.avg_size,
        ctx.effective_count,
    )
