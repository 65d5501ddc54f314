"""PetriLens colony segmentation engine."""

from petrilens.engine.registry import stage, Layer, get_registry
from petrilens.engine.context import AnalysisContext, AnalysisResult, Colony, RasterImage, CircleRegion
from petrilens.engine.pipeline import Pipeline, create_pipeline
from petrilens.engine.colonies import analyze_image, analyze_raster, classify_colonies, effective_count

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "AnalysisContext",
    "AnalysisResult",
    "Colony",
    "RasterImage",
    "CircleRegion",
    "Pipeline",
    "create_pipeline",
    "analyze_image",
    "analyze_raster",
    "classify_colonies",
    "effective_count",
]
