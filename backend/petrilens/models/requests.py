"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from petrilens.engine.context import BackgroundMode, CircleRegion, CountTarget
from petrilens.identify.panel import PanelResults
from petrilens.identify.rules import BiochemicalPanel, ColonyStats, Observations
from petrilens.models.responses import ColonyModel


class RegionModel(BaseModel):
    center_x: float = Field(..., description="Circle center x, image pixels")
    center_y: float = Field(..., description="Circle center y, image pixels")
    radius: float = Field(..., gt=0, description="Circle radius, image pixels")

    def to_region(self) -> CircleRegion:
        return CircleRegion(center_x=self.center_x, center_y=self.center_y, radius=self.radius)


class ColonyAnalyzeRequest(BaseModel):
    image: str = Field(..., description="Image as a data URL or bare base64")
    region: RegionModel | None = Field(default=None, description="Optional circular region of interest")
    background_mode: BackgroundMode = Field(
        default=BackgroundMode.AUTO,
        description="auto, light or dark ('unsure' is accepted as auto)",
    )
    count_target: CountTarget = Field(default=CountTarget.AUTO, description="auto, dark or light")
    invert: bool = Field(default=False, description="Flip the counted polarity")

    @field_validator("background_mode", mode="before")
    @classmethod
    def _coerce_background_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return BackgroundMode(value)
        return value


class ColonyExportRequest(BaseModel):
    colonies: list[ColonyModel] = Field(default_factory=list)


class TubeImageRequest(BaseModel):
    image: str = Field(..., description="Tube photo as a data URL or bare base64")


class TubeClassifyRequest(TubeImageRequest):
    test: str | None = Field(default=None, description="Catalog test key, e.g. 'catalase'")
    positive_color: str | None = Field(default=None, description="Hex color of a positive result")
    negative_color: str | None = Field(default=None, description="Hex color of a negative result")

    @model_validator(mode="after")
    def _require_test_or_colors(self) -> TubeClassifyRequest:
        if self.test is None and (self.positive_color is None or self.negative_color is None):
            raise ValueError("Provide either 'test' or both 'positive_color' and 'negative_color'")
        return self


class IdentifyRequest(BaseModel):
    biochemical: BiochemicalPanel = Field(default_factory=BiochemicalPanel)
    observations: Observations = Field(default_factory=Observations)
    colonies: list[ColonyModel] = Field(
        default_factory=list,
        description="Colonies from an analysis; used when colony_stats is absent",
    )
    colony_stats: ColonyStats | None = Field(default=None, description="Precomputed colony statistics")

    def resolve_stats(self) -> ColonyStats:
        if self.colony_stats is not None:
            return self.colony_stats
        return ColonyStats.from_colonies([c.to_colony() for c in self.colonies])


class PanelRequest(BaseModel):
    results: PanelResults = Field(default_factory=PanelResults)
