"""Tube-test endpoints — reference-color classification and heuristic detectors."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from petrilens.dependencies import load_raster
from petrilens.models.requests import TubeClassifyRequest, TubeImageRequest
from petrilens.models.responses import (
    DetectionResponse,
    TubeClassifyAllResponse,
    TubeClassifyResponse,
    TubeTestInfo,
)
from petrilens.tubes.catalog import TUBE_TESTS, get_test
from petrilens.tubes.detectors import DETECTORS, detect
from petrilens.tubes.reference import ReferenceMatch, classify_all, classify_by_reference

router = APIRouter(prefix="/tubes")


def _match_response(test: str | None, match: ReferenceMatch) -> TubeClassifyResponse:
    return TubeClassifyResponse(
        test=test,
        result=match.result.value,
        mean_color=match.mean_color,
        distance_positive=match.distance_positive,
        distance_negative=match.distance_negative,
    )


@router.get("/tests", response_model=list[TubeTestInfo])
async def list_tests() -> list[TubeTestInfo]:
    return [
        TubeTestInfo(
            key=t.key,
            name=t.name,
            short_name=t.short_name,
            positive_color=t.positive_color,
            negative_color=t.negative_color,
            positive_description=t.positive_description,
            negative_description=t.negative_description,
            has_detector=t.key in DETECTORS,
        )
        for t in TUBE_TESTS.values()
    ]


@router.post("/classify", response_model=TubeClassifyResponse)
def classify(req: TubeClassifyRequest) -> TubeClassifyResponse:
    positive, negative = req.positive_color, req.negative_color
    if req.test is not None:
        try:
            test = get_test(req.test)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e.args[0])) from e
        # Explicit colors override the catalog entry
        positive = positive or test.positive_color
        negative = negative or test.negative_color

    raster = load_raster(req.image)
    return _match_response(req.test, classify_by_reference(raster, positive, negative))


@router.post("/classify-all", response_model=TubeClassifyAllResponse)
def classify_every_test(req: TubeImageRequest) -> TubeClassifyAllResponse:
    raster = load_raster(req.image)
    matches = classify_all(raster)
    return TubeClassifyAllResponse(
        results={key: _match_response(key, m) for key, m in matches.items()}
    )


@router.post("/detect/{test}", response_model=DetectionResponse)
def detect_test(test: str, req: TubeImageRequest) -> DetectionResponse:
    if test not in DETECTORS:
        raise HTTPException(status_code=404, detail=f"No automatic detector for {test!r}")
    raster = load_raster(req.image)
    found = detect(test, raster)
    return DetectionResponse(
        test=found.test,
        result=found.result.value,
        matched=found.matched,
        considered=found.considered,
    )
