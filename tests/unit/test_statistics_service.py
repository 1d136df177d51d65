"""Dashboard and detailed statistics."""

from datetime import date

import pytest

from app.application.services import StatisticsService
from app.application.services.statistics_service import (
    age_group,
    entry_date_window,
    percent,
    round_half_up,
)
from app.domain.enums import EntryDateFilter
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import current_year
from tests.fakes import seed_room, seed_site, seed_worker

TODAY = date(2024, 6, 30)


def _seed(collections) -> None:
    seed_site(collections.sites, "s1", "North")
    seed_site(collections.sites, "s2", "South")
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4, occupants=["M1", "M2"])
    seed_room(collections.rooms, "r2", "s1", "201", gender="women", capacity=2)
    seed_room(collections.rooms, "r3", "s2", "101", capacity=4, occupants=["W1"])
    year = current_year()
    seed_worker(collections.workers, "w1", "s1", "M1", birth_year=year - 20, entry_date=date(2024, 6, 30))
    seed_worker(collections.workers, "w2", "s1", "M2", birth_year=year - 31, entry_date=date(2024, 6, 25))
    seed_worker(
        collections.workers, "w3", "s2", "W1", gender="woman", birth_year=year - 40,
        entry_date=date(2024, 1, 10),
    )
    seed_worker(
        collections.workers, "w4", "s2", "W2", gender="woman", birth_year=year - 50,
        status="inactive", entry_date=date(2023, 1, 10),
    )


def test_rounding_helpers() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(5, 0) == 0


@pytest.mark.parametrize(
    "age,group",
    [(17, None), (18, "18-25"), (25, "18-25"), (26, "26-35"), (45, "36-45"), (46, "46+")],
)
def test_age_group(age, group) -> None:
    assert age_group(age) == group


def test_entry_date_windows() -> None:
    assert entry_date_window(EntryDateFilter.ALL, TODAY) == (None, None)
    assert entry_date_window(EntryDateFilter.TODAY, TODAY) == (TODAY, None)
    assert entry_date_window(EntryDateFilter.WEEK, TODAY) == (date(2024, 6, 23), None)
    assert entry_date_window(EntryDateFilter.MONTH, TODAY) == (date(2024, 5, 31), None)
    assert entry_date_window(
        EntryDateFilter.CUSTOM, TODAY, date(2024, 1, 1), date(2024, 2, 1)
    ) == (date(2024, 1, 1), date(2024, 2, 1))
    assert entry_date_window(EntryDateFilter.CUSTOM, TODAY, date(2024, 1, 1)) == (None, None)


def test_custom_window_rejects_reversed_bounds() -> None:
    with pytest.raises(ValidationException):
        entry_date_window(EntryDateFilter.CUSTOM, TODAY, date(2024, 3, 1), date(2024, 2, 1))


async def test_dashboard_all_sites(collections, statistics_service) -> None:
    _seed(collections)
    stats = await statistics_service.dashboard(today=TODAY)

    assert stats.active_workers == 3
    assert (stats.men, stats.women) == (2, 1)
    assert stats.total_rooms == 3
    assert stats.occupied_rooms == 2
    assert stats.remaining_places == (4 - 2) + 2 + (4 - 1)
    assert stats.average_age_men == round_half_up((20 + 31) / 2)
    assert stats.average_age_women == 40
    assert [w.id for w in stats.recent_workers] == ["w1", "w2", "w3", "w4"]


async def test_dashboard_site_and_week_filter(collections, statistics_service) -> None:
    _seed(collections)
    stats = await statistics_service.dashboard(
        site_id="s1", entry_filter=EntryDateFilter.TODAY, today=TODAY
    )
    assert stats.active_workers == 1
    assert stats.total_rooms == 2
    assert [w.id for w in stats.recent_workers] == ["w1"]


async def test_recent_workers_limited(collections, site_repo, room_repo, worker_repo) -> None:
    _seed(collections)
    service = StatisticsService(site_repo, room_repo, worker_repo, recent_workers_limit=2)
    stats = await service.dashboard(today=TODAY)
    assert len(stats.recent_workers) == 2


async def test_detailed_statistics(collections, statistics_service) -> None:
    _seed(collections)
    stats = await statistics_service.detailed(today=TODAY)

    assert stats.total_capacity == 10
    assert stats.occupied_places == 3
    assert stats.available_places == 7
    assert stats.occupancy_rate == 30
    assert stats.available_rooms == 1
    assert stats.average_age == round_half_up((20 + 31 + 40) / 3)
    assert stats.recent_arrivals == 2
    assert stats.age_groups == {"18-25": 1, "26-35": 1, "36-45": 1, "46+": 0}
    by_site = {s.site_id: s for s in stats.sites}
    assert by_site["s1"].occupancy_rate == 50
    assert by_site["s1"].place_occupancy_rate == 33
    assert by_site["s2"].active_workers == 1


async def test_detailed_statistics_for_one_site_without_breakdown(
    collections, statistics_service
) -> None:
    _seed(collections)
    stats = await statistics_service.detailed(site_id="s2", include_sites=False, today=TODAY)
    assert stats.total_rooms == 1
    assert stats.active_workers == 1
    assert stats.sites == []


async def test_empty_store_gives_zeros(statistics_service) -> None:
    stats = await statistics_service.detailed(today=TODAY)
    assert stats.occupancy_rate == 0
    assert stats.average_age == 0
    assert stats.sites == []
