"""S2.01 — Nesting Detection.

B is nested in A when B's bounding box lies inside A's and B is under half
A's size. Candidates are scanned with A as the outer loop, so each child
is claimed by the lowest-index containing parent and never re-flagged.
"""

from __future__ import annotations

import logging

import numpy as np

from petrilens.engine.context import AnalysisContext, Colony
from petrilens.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


def detect_nesting(colonies: list[Colony], size_ratio: float = 0.5) -> int:
    """Flag nested colonies in place. Returns how many were flagged."""
    if len(colonies) < 2:
        return 0

    min_x = np.array([c.min_x for c in colonies])
    max_x = np.array([c.max_x for c in colonies])
    min_y = np.array([c.min_y for c in colonies])
    max_y = np.array([c.max_y for c in colonies])
    sizes = np.array([c.size_px for c in colonies], dtype=np.float64)

    flagged = 0
    for j, child in enumerate(colonies):
        if child.is_nested_in_parent:
            continue
        contains = (
            (min_x <= child.min_x)
            & (max_x >= child.max_x)
            & (min_y <= child.min_y)
            & (max_y >= child.max_y)
            & (child.size_px < sizes * size_ratio)
        )
        contains[j] = False
        parents = np.flatnonzero(contains)
        if parents.size:
            child.is_nested_in_parent = True
            child.parent_id = colonies[int(parents[0])].id
            flagged += 1
    return flagged


@stage(
    id="S2.01",
    layer=Layer.CLASSIFICATION,
    dependencies=["S1.02"],
    description="Flag colonies nested inside larger ones",
)
def nesting(ctx: AnalysisContext) -> None:
    flagged = detect_nesting(ctx.colonies, ctx.config.nesting_size_ratio)
    logger.debug("Nesting: %d of %d colonies nested", flagged, len(ctx.colonies))
