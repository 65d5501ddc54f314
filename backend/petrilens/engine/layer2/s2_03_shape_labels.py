"""S2.03 — Shape Labels. Applies to every colony, nested or not."""

from __future__ import annotations

from petrilens.engine.config import PipelineConfig
from petrilens.engine.context import AnalysisContext, Colony, ShapeType
from petrilens.engine.registry import Layer, stage


def classify_shape(circularity: float, density: float, config: PipelineConfig | None = None) -> ShapeType:
    cfg = config or PipelineConfig()
    if circularity > cfg.round_circularity:
        return ShapeType.ROUND
    if circularity > cfg.oval_circularity:
        return ShapeType.OVAL
    if density > cfg.compact_density:
        return ShapeType.IRREGULAR_COMPACT
    return ShapeType.IRREGULAR_SPARSE


def label_shapes(colonies: list[Colony], config: PipelineConfig | None = None) -> None:
    for col in colonies:
        col.shape_type = classify_shape(col.circularity, col.density, config)


@stage(
    id="S2.03",
    layer=Layer.CLASSIFICATION,
    dependencies=["S1.02"],
    description="Round / oval / irregular shape labels",
)
def shape_labels(ctx: AnalysisContext) -> None:
    label_shapes(ctx.colonies, ctx.config)
