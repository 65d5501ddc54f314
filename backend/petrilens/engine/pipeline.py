"""Pipeline orchestrator — runs stages in dependency order.

Unlike an enrichment pipeline, a failing stage is fatal: every later stage
depends on the one before it, so the error is re-raised as StageError and
no partial result is returned.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time
from collections.abc import Generator
from typing import Any

from petrilens.engine.config import PipelineConfig
from petrilens.engine.context import AnalysisContext
from petrilens.engine.registry import Layer, StageRegistry, StageSpec, get_registry
from petrilens.errors import StageError

logger = logging.getLogger(__name__)

_LAYER_PACKAGES = ["layer0", "layer1", "layer2", "layer3"]

# Stages that only produce caller-facing artifacts
_RENDER_STAGES = {"S3.02"}


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire. Idempotent."""
    for layer_name in _LAYER_PACKAGES:
        package_name = f"petrilens.engine.{layer_name}"
        package = importlib.import_module(package_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{module_name}")


class Pipeline:
    """Orchestrates the colony pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or PipelineConfig()

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        """Run the full pipeline on the given context."""
        ctx.config = self.config
        start = time.perf_counter()
        ordered = self._ordered_stages()

        logger.info(
            "Pipeline: %d stages queued for %d×%d raster",
            len(ordered),
            ctx.width,
            ctx.height,
        )

        for spec in ordered:
            t0 = time.perf_counter()
            self._run_stage(spec, ctx)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", spec.id, elapsed)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d colonies, effective count %d in %.0fms",
            len(ctx.colonies),
            ctx.effective_count,
            total,
        )
        return ctx

    def run_streaming(self, ctx: AnalysisContext) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict before and after each stage.

        The caller's ``ctx`` is mutated in-place. On failure an ``error``
        record is yielded and StageError is raised from the generator.
        """
        ctx.config = self.config
        ordered = self._ordered_stages()
        total = len(ordered)

        for i, spec in enumerate(ordered):
            yield self._progress(spec, i, total, status="running")

            t0 = time.perf_counter()
            try:
                self._run_stage(spec, ctx)
            except StageError as e:
                yield self._progress(spec, i, total, status="error", error=str(e.__cause__ or e))
                raise
            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)

            yield self._progress(spec, i, total, status="ok", elapsed_ms=elapsed_ms)

    def run_layer(self, ctx: AnalysisContext, layer: Layer) -> AnalysisContext:
        """Run only stages in a specific layer."""
        ctx.config = self.config
        for spec in self.registry.get_layer(layer):
            self._run_stage(spec, ctx)
        return ctx

    def _ordered_stages(self) -> list[StageSpec]:
        return self.registry.resolve_order(skip=self._gate())

    def _run_stage(self, spec: StageSpec, ctx: AnalysisContext) -> None:
        try:
            spec.fn(ctx)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.id, e)
            raise StageError(spec.id, str(e)) from e
        ctx.completed_stages.add(spec.id)

    def _gate(self) -> set[str]:
        """Stages to skip for this configuration."""
        skip: set[str] = set()
        if not self.config.render_mask:
            skip.update(_RENDER_STAGES)
        return skip

    @staticmethod
    def _progress(
        spec: StageSpec,
        index: int,
        total: int,
        *,
        status: str,
        elapsed_ms: float = 0.0,
        error: str = "",
    ) -> dict[str, Any]:
        return {
            "stage_id": spec.id,
            "description": spec.description,
            "layer": spec.layer.name,
            "index": index,
            "total": total,
            "elapsed_ms": elapsed_ms,
            "status": status,
            "error": error,
        }


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance with all stages loaded."""
    register_stages()
    return Pipeline(config=config)
