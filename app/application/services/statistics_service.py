"""Dashboard and statistics aggregation over sites, rooms and workers.

Everything is computed by iterating the (small) collections in memory.
Worker counts and ages only include active workers; percentages and
averages are whole numbers rounded half up, 0 when there is nothing to
divide by.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import date, timedelta

from app.application.dtos.statistics import (
    AGE_GROUPS,
    DashboardStats,
    DetailedStats,
    SiteStats,
)
from app.application.interfaces.repositories import (
    IRoomRepository,
    ISiteRepository,
    IWorkerRepository,
)
from app.domain.entities import RoomEntity, SiteEntity, WorkerEntity
from app.domain.enums import EntryDateFilter, WorkerGender
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_today

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
MONTH_DAYS = 30


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    """part/whole as a whole percent; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def average_age(workers: Iterable[WorkerEntity]) -> int:
    ages = [w.age for w in workers]
    if not ages:
        return 0
    return round_half_up(sum(ages) / len(ages))


def average_ages_by_gender(workers: Iterable[WorkerEntity]) -> tuple[int, int]:
    """(men, women) average age of the active workers."""
    active = [w for w in workers if w.is_active]
    return (
        average_age(w for w in active if w.gender == WorkerGender.MAN),
        average_age(w for w in active if w.gender == WorkerGender.WOMAN),
    )


def age_group(age: int) -> str | None:
    """Bucket of AGE_GROUPS for an age; None under 18."""
    if 18 <= age <= 25:
        return "18-25"
    if 26 <= age <= 35:
        return "26-35"
    if 36 <= age <= 45:
        return "36-45"
    if age >= 46:
        return "46+"
    return None


def site_stats(
    site: SiteEntity,
    rooms: Iterable[RoomEntity],
    workers: Iterable[WorkerEntity],
) -> SiteStats:
    """Summary of one site from all rooms and workers (filtered here by site id)."""
    site_rooms = [r for r in rooms if r.site_id == site.id]
    occupied = [r for r in site_rooms if r.is_occupied]
    capacity = sum(r.capacity for r in site_rooms)
    occupants = sum(r.current_occupancy for r in site_rooms)
    return SiteStats(
        site_id=site.id,
        site_name=site.name,
        active_workers=sum(1 for w in workers if w.site_id == site.id and w.is_active),
        total_rooms=len(site_rooms),
        occupied_rooms=len(occupied),
        occupancy_rate=percent(len(occupied), len(site_rooms)),
        place_occupancy_rate=percent(occupants, capacity),
    )


def entry_date_window(
    entry_filter: EntryDateFilter,
    today: date,
    start: date | None = None,
    end: date | None = None,
) -> tuple[date | None, date | None]:
    """Inclusive (from, to) bounds on entry dates for a dashboard filter.

    A custom filter without both bounds does not filter.
    """
    if entry_filter == EntryDateFilter.TODAY:
        return today, None
    if entry_filter == EntryDateFilter.WEEK:
        return today - timedelta(days=WEEK_DAYS), None
    if entry_filter == EntryDateFilter.MONTH:
        return today - timedelta(days=MONTH_DAYS), None
    if entry_filter == EntryDateFilter.CUSTOM and start and end:
        if start > end:
            raise ValidationException("Start date must not be after end date", field="start")
        return start, end
    return None, None


def _in_window(value: date, lower: date | None, upper: date | None) -> bool:
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


class StatisticsService:
    """Builds dashboard and detailed statistics for one site or all sites."""

    def __init__(
        self,
        site_repo: ISiteRepository,
        room_repo: IRoomRepository,
        worker_repo: IWorkerRepository,
        recent_arrivals_days: int = 30,
        recent_workers_limit: int = 5,
    ) -> None:
        self.site_repo = site_repo
        self.room_repo = room_repo
        self.worker_repo = worker_repo
        self.recent_arrivals_days = recent_arrivals_days
        self.recent_workers_limit = recent_workers_limit

    async def _load(
        self, site_id: str | None
    ) -> tuple[list[RoomEntity], list[WorkerEntity]]:
        if site_id is None:
            return await self.room_repo.list_all(), await self.worker_repo.list_all()
        return (
            await self.room_repo.list_by_site(site_id),
            await self.worker_repo.list_by_site(site_id),
        )

    async def dashboard(
        self,
        site_id: str | None = None,
        entry_filter: EntryDateFilter = EntryDateFilter.ALL,
        start: date | None = None,
        end: date | None = None,
        today: date | None = None,
    ) -> DashboardStats:
        """Dashboard summary; the entry-date filter applies to workers only."""
        lower, upper = entry_date_window(entry_filter, today or utc_today(), start, end)
        rooms, workers = await self._load(site_id)
        workers = [w for w in workers if _in_window(w.entry_date, lower, upper)]
        active = [w for w in workers if w.is_active]
        men_age, women_age = average_ages_by_gender(active)
        recent = sorted(workers, key=lambda w: w.entry_date, reverse=True)
        return DashboardStats(
            active_workers=len(active),
            men=sum(1 for w in active if w.gender == WorkerGender.MAN),
            women=sum(1 for w in active if w.gender == WorkerGender.WOMAN),
            total_rooms=len(rooms),
            occupied_rooms=sum(1 for r in rooms if r.is_occupied),
            remaining_places=sum(r.capacity - r.current_occupancy for r in rooms),
            average_age_men=men_age,
            average_age_women=women_age,
            recent_workers=recent[: self.recent_workers_limit],
        )

    async def detailed(
        self,
        site_id: str | None = None,
        include_sites: bool = True,
        today: date | None = None,
    ) -> DetailedStats:
        """Detailed statistics; include_sites adds the per-site breakdown."""
        rooms, workers = await self._load(site_id)
        active = [w for w in workers if w.is_active]
        total_capacity = sum(r.capacity for r in rooms)
        occupied_places = sum(r.current_occupancy for r in rooms)
        occupied_rooms = sum(1 for r in rooms if r.is_occupied)
        since = (today or utc_today()) - timedelta(days=self.recent_arrivals_days)

        groups = dict.fromkeys(AGE_GROUPS, 0)
        for worker in active:
            group = age_group(worker.age)
            if group is not None:
                groups[group] += 1

        breakdown: list[SiteStats] = []
        if include_sites:
            sites = await self.site_repo.list_all()
            if site_id is not None:
                sites = [s for s in sites if s.id == site_id]
            breakdown = [site_stats(site, rooms, workers) for site in sites]

        logger.debug(
            "Statistics over %d room(s) and %d worker(s) (site=%s)",
            len(rooms),
            len(workers),
            site_id or "all",
        )
        return DetailedStats(
            active_workers=len(active),
            men=sum(1 for w in active if w.gender == WorkerGender.MAN),
            women=sum(1 for w in active if w.gender == WorkerGender.WOMAN),
            total_rooms=len(rooms),
            occupied_rooms=occupied_rooms,
            available_rooms=len(rooms) - occupied_rooms,
            total_capacity=total_capacity,
            occupied_places=occupied_places,
            available_places=total_capacity - occupied_places,
            occupancy_rate=percent(occupied_places, total_capacity),
            average_age=average_age(active),
            recent_arrivals=sum(1 for w in active if w.entry_date >= since),
            age_groups=groups,
            sites=breakdown,
        )
