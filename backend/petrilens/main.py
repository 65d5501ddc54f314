"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from petrilens.config import settings
from petrilens.errors import PetriLensError, StageError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.petrilens_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


async def _stage_error_handler(request: Request, exc: StageError) -> JSONResponse:
    logger.error("Pipeline failed at %s: %s", exc.stage_id, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc), "stage_id": exc.stage_id})


async def _input_error_handler(request: Request, exc: PetriLensError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="PetriLens",
        description="Petri-dish colony counting and colorimetric tube classification",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Handlers resolve by MRO, so StageError never reaches the 422 handler
    app.add_exception_handler(StageError, _stage_error_handler)
    app.add_exception_handler(PetriLensError, _input_error_handler)

    # Import all stage modules to trigger registration
    from petrilens.engine.pipeline import register_stages

    register_stages()

    from petrilens.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
