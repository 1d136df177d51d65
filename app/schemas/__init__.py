"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.room import (
    RoomCapacityUpdate,
    RoomCreateRequest,
    RoomMutationResponse,
    RoomResponse,
    RoomUpdate,
    RoomWithOccupantsResponse,
)
from app.schemas.site import (
    RecalculationResponse,
    RoomPlanRequest,
    SiteCreateRequest,
    SiteCreateResponse,
    SiteDeleteResponse,
    SiteResponse,
    SiteStatsResponse,
    SiteUpdate,
)
from app.schemas.statistics import (
    DashboardResponse,
    IntegrityReportResponse,
    StatisticsResponse,
)
from app.schemas.websocket import SnapshotMessage, WebSocketStatusResponse
from app.schemas.worker import WorkerListResponse, WorkerResponse, WorkerWriteRequest

__all__ = [
    "DashboardResponse",
    "HealthResponse",
    "IntegrityReportResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "RecalculationResponse",
    "RoomCapacityUpdate",
    "RoomCreateRequest",
    "RoomMutationResponse",
    "RoomPlanRequest",
    "RoomResponse",
    "RoomUpdate",
    "RoomWithOccupantsResponse",
    "SiteCreateRequest",
    "SiteCreateResponse",
    "SiteDeleteResponse",
    "SiteResponse",
    "SiteStatsResponse",
    "SiteUpdate",
    "SnapshotMessage",
    "StatisticsResponse",
    "WebSocketStatusResponse",
    "WorkerListResponse",
    "WorkerResponse",
    "WorkerWriteRequest",
]
