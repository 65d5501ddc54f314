"""API response models."""

from __future__ import annotations

from dataclasses import asdict

from pydantic import BaseModel, ConfigDict, Field

from petrilens.engine.context import Background, Colony, ShapeType, SizeCategory
from petrilens.identify.rules import ColonyStats


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0


class ColonyModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    size_px: int
    centroid_x: float
    centroid_y: float
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    width: int
    height: int
    circularity: float
    density: float
    color_r: int
    color_g: int
    color_b: int
    size_category: SizeCategory = SizeCategory.AVERAGE
    shape_type: ShapeType = ShapeType.UNKNOWN
    count_multiplier: int = 1
    is_nested_in_parent: bool | None = None
    parent_id: int | None = None

    @classmethod
    def from_colony(cls, colony: Colony) -> ColonyModel:
        return cls.model_validate(asdict(colony))

    def to_colony(self) -> Colony:
        return Colony(**self.model_dump())


class ColonyAnalyzeResponse(BaseModel):
    mask_image: str = ""
    colonies: list[ColonyModel] = Field(default_factory=list)
    avg_size: int = 0
    effective_count: int = 0
    colony_count: int = 0
    width: int = 0
    height: int = 0
    background: Background = Background.LIGHT
    count_dark: bool = False
    threshold: int = 0
    processing_time_ms: float = 0.0


class TubeTestInfo(BaseModel):
    key: str
    name: str
    short_name: str
    positive_color: str
    negative_color: str
    positive_description: str
    negative_description: str
    has_detector: bool = False


class TubeClassifyResponse(BaseModel):
    test: str | None = None
    result: str
    mean_color: tuple[float, float, float]
    distance_positive: float
    distance_negative: float


class TubeClassifyAllResponse(BaseModel):
    results: dict[str, TubeClassifyResponse] = Field(default_factory=dict)


class DetectionResponse(BaseModel):
    test: str
    result: str
    matched: int
    considered: int


class CandidateModel(BaseModel):
    name: str
    confidence: int
    reasons: list[str] = Field(default_factory=list)


class IdentifyResponse(BaseModel):
    candidates: list[CandidateModel] = Field(default_factory=list)
    colony_stats: ColonyStats


class SpeciesMatchModel(BaseModel):
    key: str
    name: str
    confidence: int
    characteristics: list[str] = Field(default_factory=list)
    explanation: str = ""
    common_in: str = ""
    scores: dict[str, float] = Field(default_factory=dict)


class PanelMatchResponse(BaseModel):
    match: SpeciesMatchModel | None = None
