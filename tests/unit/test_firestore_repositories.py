"""Firestore repositories over an in-memory collection: document mapping rules."""

import logging
from datetime import date

import pytest

from app.domain.entities import WorkerEntity
from app.domain.enums import ExitReason, RoomGender, WorkerGender, WorkerStatus
from app.domain.exceptions import MalformedDocumentException
from app.shared.utils.datetime import current_year
from tests.fakes import seed_room, seed_site, seed_worker


async def test_site_totals_tolerate_numeric_strings(collections, site_repo) -> None:
    collections.sites.seed("s1", name="North", totalRooms="3", totalCapacity=12.0)
    site = await site_repo.get_by_id("s1")
    assert (site.total_rooms, site.total_capacity) == (3, 12)
    assert site.admin_ids == []


async def test_site_get_missing_returns_none(site_repo) -> None:
    assert await site_repo.get_by_id("nope") is None


async def test_malformed_documents_are_skipped(collections, site_repo, caplog) -> None:
    seed_site(collections.sites, "s1", "North")
    collections.sites.seed("broken", totalRooms=1)
    with caplog.at_level(logging.WARNING):
        sites = await site_repo.list_all()
    assert [s.id for s in sites] == ["s1"]
    assert "broken" in caplog.text


async def test_site_create_writes_document(collections, site_repo) -> None:
    site = await site_repo.create(" North ", 2, 8, ["u1"])
    doc = collections.sites.docs[site.id]
    assert doc["name"] == "North"
    assert (doc["totalRooms"], doc["totalCapacity"], doc["adminIds"]) == (2, 8, ["u1"])
    assert "createdAt" in doc


async def test_site_update_unknown_attribute_is_refused(collections, site_repo) -> None:
    seed_site(collections.sites, "s1", "North")
    with pytest.raises(ValueError):
        await site_repo.update("s1", colour="red")


async def test_room_create_starts_empty(collections, room_repo) -> None:
    room = await room_repo.create("s1", "101", RoomGender.WOMEN, 3)
    doc = collections.rooms.docs[room.id]
    assert doc["gender"] == "women"
    assert doc["roomCapacity"] == 3
    assert doc["currentOccupancy"] == 0
    assert doc["occupantRefs"] == []


async def test_room_list_by_site_and_gender(collections, room_repo) -> None:
    seed_room(collections.rooms, "r1", "s1", "101", gender="men")
    seed_room(collections.rooms, "r2", "s1", "201", gender="women")
    seed_room(collections.rooms, "r3", "s2", "202", gender="women")
    rooms = await room_repo.list_by_site_and_gender("s1", RoomGender.WOMEN)
    assert [r.id for r in rooms] == ["r2"]


async def test_room_site_cannot_be_updated(collections, room_repo) -> None:
    seed_room(collections.rooms, "r1", "s1", "101")
    with pytest.raises(ValueError):
        await room_repo.update("r1", site_id="s2")


async def test_room_ids_include_malformed_rooms(collections, room_repo) -> None:
    seed_room(collections.rooms, "r1", "s1", "101")
    collections.rooms.seed("bad", siteId="s1", gender="unknown")
    assert await room_repo.list_by_site("s1") != []
    assert await room_repo.list_ids_by_site("s1") == ["r1", "bad"]


async def test_worker_stored_age_is_ignored(collections, worker_repo) -> None:
    seed_worker(collections.workers, "w1", "s1", "N1", birth_year=current_year() - 30, age=99)
    worker = await worker_repo.get_by_id("w1")
    assert worker.age == 30


async def test_worker_entry_date_accepts_iso_timestamp(collections, worker_repo) -> None:
    collections.workers.seed(
        "w1",
        fullName="A",
        nationalId="N1",
        gender="man",
        birthYear=1990,
        siteId="s1",
        entryDate="2024-05-01T00:00:00.000Z",
    )
    worker = await worker_repo.get_by_id("w1")
    assert worker.entry_date == date(2024, 5, 1)
    assert worker.status == WorkerStatus.ACTIVE


async def test_worker_without_entry_date_is_skipped(collections, worker_repo) -> None:
    seed_worker(collections.workers, "w1", "s1", "N1")
    collections.workers.seed(
        "w2", fullName="B", nationalId="N2", gender="man", birthYear=1990, siteId="s1"
    )
    assert [w.id for w in await worker_repo.list_all()] == ["w1"]


async def test_worker_exit_fields_written_only_when_set(collections, worker_repo) -> None:
    worker = WorkerEntity(
        id="unsaved",
        full_name="A",
        national_id="N1",
        gender=WorkerGender.MAN,
        birth_year=1990,
        site_id="s1",
        entry_date=date(2024, 1, 1),
    )
    created = await worker_repo.create(worker)
    doc = collections.workers.docs[created.id]
    assert "exitDate" not in doc
    assert "exitReason" not in doc
    assert doc["age"] == worker.age

    leaving = WorkerEntity(
        id=created.id,
        full_name="A",
        national_id="N1",
        gender=WorkerGender.MAN,
        birth_year=1990,
        site_id="s1",
        entry_date=date(2024, 1, 1),
        status=WorkerStatus.INACTIVE,
        exit_date=date(2024, 6, 1),
        exit_reason=ExitReason.END_OF_CONTRACT,
    )
    await worker_repo.save(leaving)
    doc = collections.workers.docs[created.id]
    assert doc["exitReason"] == "end_of_contract"
    assert doc["status"] == "inactive"


async def test_find_by_national_id(collections, worker_repo) -> None:
    seed_worker(collections.workers, "w1", "s1", "N1")
    seed_worker(collections.workers, "w2", "s1", "N2")
    assert (await worker_repo.find_by_national_id("N2")).id == "w2"
    assert await worker_repo.find_by_national_id("N3") is None


async def test_room_get_by_id_reports_malformed_document(collections, room_repo) -> None:
    collections.rooms.seed("bad", siteId="s1", number="101", gender="hommes")
    with pytest.raises(MalformedDocumentException) as exc_info:
        await room_repo.get_by_id("bad")
    assert exc_info.value.error_code == "MALFORMED_DOCUMENT"
    assert exc_info.value.details["resource_type"] == "room"


async def test_room_capacities_read_raw_documents(collections, room_repo, caplog) -> None:
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4)
    collections.rooms.seed("r2", siteId="s1", gender="hommes", roomCapacity="3")
    collections.rooms.seed("r3", siteId="s1", gender="men", roomCapacity="four")
    seed_room(collections.rooms, "r4", "s2", "101", capacity=6)

    with caplog.at_level(logging.WARNING):
        capacities = await room_repo.list_capacities_by_site("s1")

    assert sorted(capacities) == [0, 3, 4]
    assert "r3" in caplog.text


async def test_room_site_id_of_malformed_and_missing_rooms(collections, room_repo) -> None:
    collections.rooms.seed("bad", siteId="s1", gender="hommes")
    assert await room_repo.get_site_id("bad") == "s1"
    assert await room_repo.get_site_id("missing") is None
