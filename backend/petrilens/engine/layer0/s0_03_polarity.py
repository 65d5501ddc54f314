"""S0.03 — Count Polarity.

Colonies are assumed to contrast with the background unless the caller
names a target explicitly. The invert flag flips whatever was decided.
"""

from __future__ import annotations

from petrilens.engine.context import AnalysisContext, Background, CountTarget
from petrilens.engine.registry import Layer, stage


def resolve_count_dark(background: Background, target: CountTarget, invert: bool) -> bool:
    if target == CountTarget.AUTO:
        count_dark = background == Background.LIGHT
    else:
        count_dark = target == CountTarget.DARK
    return not count_dark if invert else count_dark


@stage(
    id="S0.03",
    layer=Layer.THRESHOLD,
    dependencies=["S0.02"],
    description="Decide whether dark or light pixels are counted",
)
def polarity(ctx: AnalysisContext) -> None:
    ctx.count_dark = resolve_count_dark(ctx.background, ctx.count_target, ctx.invert)
