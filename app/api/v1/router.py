"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    health,
    rooms,
    sites,
    statistics,
    websocket as ws_endpoint,
    workers,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(sites.router, prefix="/sites", tags=["sites"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(workers.router, prefix="/workers", tags=["workers"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
api_router.include_router(ws_endpoint.router, tags=["websocket"])
