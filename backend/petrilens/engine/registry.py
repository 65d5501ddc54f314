"""Stage registry — each colony-pipeline stage registers itself with ``@stage``.

Usage:
    @stage(id="S1.02", layer=Layer.EXTRACTION, dependencies=["S1.01"])
    def features(ctx: AnalysisContext) -> None:
        ctx.colonies = extract_features(ctx.blobs, ...)

Stage ids read ``S<layer>.<nn>``. A stage may only depend on stages that are
registered and not skipped for the run; anything else is a wiring mistake
and fails ordering with ValueError.
"""

from __future__ import annotations

import enum
import heapq
import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from petrilens.engine.context import AnalysisContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    THRESHOLD = 0
    EXTRACTION = 1
    CLASSIFICATION = 2
    AGGREGATION = 3


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["AnalysisContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""

    @property
    def sort_key(self) -> tuple[int, str]:
        return (int(self.layer), self.id)


class StageRegistry:
    """Registry of colony-pipeline stages, keyed by stage id."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        if spec.id in spec.dependencies:
            raise ValueError(f"Stage {spec.id} depends on itself")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        specs = [s for s in self._stages.values() if s.layer == layer]
        return sorted(specs, key=lambda s: s.id)

    def resolve_order(self, skip: Collection[str] = ()) -> list[StageSpec]:
        """Dependency order of every registered stage not in ``skip``.

        Ready stages run lowest layer first, then by id. Raises ValueError
        when a stage depends on an unknown or skipped stage, or when the
        dependencies form a cycle.
        """
        active = {sid: spec for sid, spec in self._stages.items() if sid not in skip}

        dependents: dict[str, list[str]] = {sid: [] for sid in active}
        waiting: dict[str, int] = {}
        for sid, spec in active.items():
            deps = list(dict.fromkeys(spec.dependencies))
            for dep in deps:
                if dep not in self._stages:
                    raise ValueError(f"Stage {sid} depends on unknown stage {dep!r}")
                if dep not in active:
                    raise ValueError(f"Stage {sid} depends on skipped stage {dep!r}")
                dependents[dep].append(sid)
            waiting[sid] = len(deps)

        ready = [spec.sort_key for spec in active.values() if waiting[spec.id] == 0]
        heapq.heapify(ready)
        ordered: list[StageSpec] = []
        while ready:
            _, sid = heapq.heappop(ready)
            ordered.append(active[sid])
            for child in dependents[sid]:
                waiting[child] -= 1
                if waiting[child] == 0:
                    heapq.heappush(ready, active[child].sort_key)

        if len(ordered) != len(active):
            stuck = sorted(sid for sid, n in waiting.items() if n > 0)
            raise ValueError(f"Circular dependency detected among: {stuck}")
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Register the decorated function as a pipeline stage."""

    def decorator(fn: Callable[["AnalysisContext"], None]):
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=list(dependencies or []),
                description=description,
            )
        )
        return fn

    return decorator
