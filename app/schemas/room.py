"""Room API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import OccupancyStatus, RoomGender


class RoomCreateRequest(BaseModel):
    site_id: str = Field(..., min_length=1)
    number: str = Field(..., min_length=1, max_length=20)
    gender: RoomGender
    capacity: int = Field(..., ge=1, le=100)


class RoomUpdate(BaseModel):
    """Request body for editing a room (partial). Occupants cannot be edited here."""

    number: str | None = Field(default=None, min_length=1, max_length=20)
    gender: RoomGender | None = None
    capacity: int | None = Field(default=None, ge=1, le=100)


class RoomCapacityUpdate(BaseModel):
    """Request body for PATCH /rooms/{id}/capacity."""

    capacity: int = Field(..., ge=1, le=100)


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    number: str
    site_id: str
    gender: RoomGender
    capacity: int
    current_occupancy: int
    occupant_refs: list[str]
    available_places: int
    occupancy_status: OccupancyStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoomWithOccupantsResponse(RoomResponse):
    """Room with occupant names resolved from occupant national ids."""

    occupant_names: list[str] = Field(default_factory=list)


class RoomMutationResponse(BaseModel):
    """Result of a room write. warnings is non-empty when the site recalculation failed."""

    room: RoomResponse | None = None
    room_id: str
    capacity_changed: bool = False
    site_total_rooms: int | None = None
    site_total_capacity: int | None = None
    warnings: list[str] = Field(default_factory=list)
    recalculation_error: dict[str, Any] | None = None
