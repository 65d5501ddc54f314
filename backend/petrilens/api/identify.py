"""POST /api/identify — rule-based species scoring and tube-panel matching."""

from __future__ import annotations

from fastapi import APIRouter

from petrilens.identify.panel import match_panel
from petrilens.identify.rules import identify
from petrilens.models.requests import IdentifyRequest, PanelRequest
from petrilens.models.responses import (
    CandidateModel,
    IdentifyResponse,
    PanelMatchResponse,
    SpeciesMatchModel,
)

router = APIRouter(prefix="/identify")


@router.post("", response_model=IdentifyResponse)
async def identify_species(req: IdentifyRequest) -> IdentifyResponse:
    """Top-5 candidates. An empty list means insufficient evidence."""
    stats = req.resolve_stats()
    candidates = identify(req.biochemical, req.observations, stats)
    return IdentifyResponse(
        candidates=[
            CandidateModel(name=c.name, confidence=c.confidence, reasons=c.reasons)
            for c in candidates
        ],
        colony_stats=stats,
    )


@router.post("/panel", response_model=PanelMatchResponse)
async def identify_panel(req: PanelRequest) -> PanelMatchResponse:
    match = match_panel(req.results)
    if match is None:
        return PanelMatchResponse(match=None)
    profile = match.profile
    return PanelMatchResponse(
        match=SpeciesMatchModel(
            key=profile.key,
            name=profile.name,
            confidence=match.confidence,
            characteristics=list(profile.characteristics),
            explanation=profile.explanation,
            common_in=profile.common_in,
            scores=match.scores,
        )
    )
