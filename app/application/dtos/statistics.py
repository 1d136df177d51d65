"""Read-models for dashboard and statistics views."""

from dataclasses import dataclass, field

from app.domain.entities import WorkerEntity

AGE_GROUPS = ("18-25", "26-35", "36-45", "46+")


@dataclass(frozen=True)
class SiteStats:
    """Per-site summary.

    occupancy_rate is occupied rooms over rooms; place_occupancy_rate is
    occupants over capacity. Both are whole percents, 0 when the site has
    no rooms.
    """

    site_id: str
    site_name: str
    active_workers: int
    total_rooms: int
    occupied_rooms: int
    occupancy_rate: int
    place_occupancy_rate: int


@dataclass(frozen=True)
class DashboardStats:
    """Dashboard summary over the filtered workers and rooms."""

    active_workers: int
    men: int
    women: int
    total_rooms: int
    occupied_rooms: int
    remaining_places: int
    average_age_men: int
    average_age_women: int
    recent_workers: list[WorkerEntity] = field(default_factory=list)


@dataclass(frozen=True)
class DetailedStats:
    """Detailed statistics; worker counts only include active workers."""

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
    age_groups: dict[str, int] = field(default_factory=dict)
    sites: list[SiteStats] = field(default_factory=list)
