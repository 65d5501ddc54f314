"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from petrilens.api import colonies, health, identify, tubes

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(colonies.router)
api_router.include_router(tubes.router)
api_router.include_router(identify.router)
