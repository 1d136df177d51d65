"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import STORE_NOT_CONFIGURED
from app.core.config import get_settings
from app.infrastructure.firebase import check_connection, get_firestore_client
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Store not configured or unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 if the document store answers; 503 otherwise.

    Runs one minimal read against the store. Use for orchestrator
    readiness probes.
    """
    client = get_firestore_client()
    if client is None:
        message = STORE_NOT_CONFIGURED
    else:
        ok, message = await check_connection(client)
        if ok:
            return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            status="not_ready",
            message=message or "Store unreachable",
        ).model_dump(),
    )
