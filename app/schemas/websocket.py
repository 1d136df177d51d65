"""WebSocket API schemas."""

from typing import Any

from pydantic import BaseModel, Field


class WebSocketStatusResponse(BaseModel):
    """Response for GET /ws/status (connection count)."""

    total_connections: int = Field(..., description="Number of active WebSocket connections")
    channels: dict[str, int] = Field(
        default_factory=dict, description="Connections per collection channel"
    )


class SnapshotMessage(BaseModel):
    """Message pushed to subscribers: the full current collection."""

    type: str = "snapshot"
    collection: str
    documents: list[dict[str, Any]]


class SnapshotErrorMessage(BaseModel):
    type: str = "error"
    collection: str
    error: str
    message: str
