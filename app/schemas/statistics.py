"""Dashboard, statistics and integrity API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.site import SiteStatsResponse
from app.schemas.worker import WorkerResponse


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    active_workers: int
    men: int
    women: int
    total_rooms: int
    occupied_rooms: int
    remaining_places: int
    average_age_men: int
    average_age_women: int
    recent_workers: list[WorkerResponse]


class StatisticsResponse(BaseModel):
    """Detailed statistics. occupancy_rate is occupied places over capacity."""

    model_config = ConfigDict(from_attributes=True)

    active_workers: int
    men: int
    women: int
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    total_capacity: int
    occupied_places: int
    available_places: int
    occupancy_rate: int
    average_age: int
    recent_arrivals: int
    age_groups: dict[str, int]
    sites: list[SiteStatsResponse] = Field(default_factory=list)


class IntegrityIssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    site_id: str
    message: str
    room_id: str | None = None
    room_number: str | None = None
    worker_id: str | None = None
    national_id: str | None = None


class IntegrityReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rooms_checked: int
    workers_checked: int
    is_consistent: bool
    issues: list[IntegrityIssueResponse]
