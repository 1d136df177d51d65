"""Site API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.value_objects import RoomPlan
from app.schemas.room import RoomResponse


class RoomPlanRequest(BaseModel):
    """Rooms generated with a new site (defaults: 10 + 10 rooms of 4, from 101 and 201)."""

    auto_create_rooms: bool = True
    men_count: int = Field(default=10, ge=0, le=500)
    men_capacity: int = Field(default=4, ge=1, le=100)
    men_start: int = Field(default=101, ge=0)
    women_count: int = Field(default=10, ge=0, le=500)
    women_capacity: int = Field(default=4, ge=1, le=100)
    women_start: int = Field(default=201, ge=0)

    def to_room_plan(self) -> RoomPlan:
        return RoomPlan(**self.model_dump())


class SiteCreateRequest(BaseModel):
    """Request body for creating a site.

    total_rooms/total_capacity are only used when auto_create_rooms is off;
    otherwise the site totals come from the room plan.
    """

    name: str = Field(..., min_length=1, max_length=255)
    admin_ids: list[str] = Field(default_factory=list)
    room_plan: RoomPlanRequest = Field(default_factory=RoomPlanRequest)
    total_rooms: int = Field(default=0, ge=0)
    total_capacity: int = Field(default=0, ge=0)


class SiteUpdate(BaseModel):
    """Request body for updating a site (partial). Totals are not editable."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    admin_ids: list[str] | None = None


class SiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    total_rooms: int
    total_capacity: int
    admin_ids: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SiteCreateResponse(BaseModel):
    """Created site with the rooms that were generated."""

    site: SiteResponse
    rooms_created: int
    rooms: list[RoomResponse]
    failed_room_numbers: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class SiteDeleteResponse(BaseModel):
    site_id: str
    deleted_room_ids: list[str]


class RecalculationResponse(BaseModel):
    """Totals written by a recalculation."""

    model_config = ConfigDict(from_attributes=True)

    site_id: str
    total_rooms: int
    total_capacity: int


class SiteStatsResponse(BaseModel):
    """Per-site statistics. occupancy_rate is by room count, place_occupancy_rate by beds."""

    model_config = ConfigDict(from_attributes=True)

    site_id: str
    site_name: str
    active_workers: int
    total_rooms: int
    occupied_rooms: int
    occupancy_rate: int
    place_occupancy_rate: int
