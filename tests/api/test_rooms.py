"""Room endpoints: occupant names, capacity rules and site recalculation."""

from httpx import AsyncClient

from app.application.dtos.capacity import RECALCULATION_WARNING
from app.infrastructure.exceptions import UnavailableError
from tests.fakes import SITE_HEADER, USER_HEADER, seed_room, seed_site, seed_worker


def _site_updates(collections) -> list:
    return [call for call in collections.sites.calls if call[0] == "update"]


async def test_list_rooms_resolves_occupant_names(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r2", "s1", "110", occupants=["AB1", "ZZ9"])
    seed_room(collections.rooms, "r1", "s1", "99")
    seed_worker(collections.workers, "w1", "s1", "AB1", full_name="Amina Haddad")

    response = await client.get("/api/v1/rooms", params={"site_id": "s1"})

    assert response.status_code == 200
    rooms = response.json()
    assert [r["number"] for r in rooms] == ["99", "110"]
    assert rooms[1]["occupant_names"] == ["Amina Haddad", "ZZ9"]
    assert rooms[1]["occupancy_status"] == "partial"
    assert rooms[1]["available_places"] == 2


async def test_list_rooms_filters(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r1", "s1", "101", occupants=["A", "B", "C", "D"])
    seed_room(collections.rooms, "r2", "s1", "102")
    seed_room(collections.rooms, "r3", "s1", "201", gender="women")
    seed_room(collections.rooms, "r4", "s2", "101")

    async def ids(**params) -> list[str]:
        return [r["id"] for r in (await client.get("/api/v1/rooms", params=params)).json()]

    assert await ids(status="full") == ["r1"]
    assert await ids(status="free", gender="men") == ["r2", "r4"]
    assert await ids(gender="women") == ["r3"]
    assert await ids(search="10", site_id="s1") == ["r1", "r2"]


async def test_scoped_caller_lists_own_rooms_only(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r1", "s1", "101")
    seed_room(collections.rooms, "r2", "s2", "101")
    headers = {SITE_HEADER: "s1", USER_HEADER: "u1"}

    response = await client.get("/api/v1/rooms", headers=headers)
    assert [r["id"] for r in response.json()] == ["r1"]

    response = await client.get("/api/v1/rooms", params={"site_id": "s2"}, headers=headers)
    assert response.status_code == 403


async def test_create_room_recalculates_site(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North")
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4)

    response = await client.post(
        "/api/v1/rooms", json={"site_id": "s1", "number": "102", "gender": "men", "capacity": 3}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["room"]["number"] == "102"
    assert data["room"]["current_occupancy"] == 0
    assert (data["site_total_rooms"], data["site_total_capacity"]) == (2, 7)
    assert collections.sites.docs["s1"]["totalCapacity"] == 7


async def test_create_room_on_missing_site(client: AsyncClient, collections) -> None:
    response = await client.post(
        "/api/v1/rooms", json={"site_id": "nope", "number": "1", "gender": "men", "capacity": 3}
    )
    assert response.status_code == 404
    assert collections.rooms.docs == {}


async def test_capacity_below_occupants_is_refused(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North")
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4, occupants=["A", "B", "C"])

    response = await client.patch("/api/v1/rooms/r1/capacity", json={"capacity": 2})

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert response.json()["details"]["field"] == "roomCapacity"
    assert collections.rooms.docs["r1"]["roomCapacity"] == 4
    assert ("update", "r1") not in collections.rooms.calls
    assert _site_updates(collections) == []


async def test_capacity_change_updates_site_once(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North", total_rooms=1, total_capacity=4)
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4, occupants=["A"])

    response = await client.patch("/api/v1/rooms/r1/capacity", json={"capacity": 6})

    assert response.status_code == 200
    assert response.json()["capacity_changed"] is True
    assert response.json()["site_total_capacity"] == 6
    assert _site_updates(collections) == [("update", "s1")]


async def test_same_capacity_does_not_touch_site(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North")
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4)

    response = await client.patch("/api/v1/rooms/r1/capacity", json={"capacity": 4})

    assert response.status_code == 200
    assert response.json()["capacity_changed"] is False
    assert response.json()["site_total_capacity"] is None
    assert _site_updates(collections) == []


async def test_failed_recalculation_is_a_warning(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North")
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4)
    collections.sites.fail("update", UnavailableError())

    response = await client.patch("/api/v1/rooms/r1/capacity", json={"capacity": 5})

    assert response.status_code == 200
    assert response.json()["warnings"] == [RECALCULATION_WARNING]
    assert response.json()["recalculation_error"]["error"] == "RECALCULATION_FAILED"
    assert collections.rooms.docs["r1"]["roomCapacity"] == 5


async def test_update_room_number_and_gender(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North")
    seed_room(collections.rooms, "r1", "s1", "101")

    response = await client.put("/api/v1/rooms/r1", json={"number": "301", "gender": "women"})

    assert response.status_code == 200
    assert response.json()["room"]["number"] == "301"
    assert collections.rooms.docs["r1"]["gender"] == "women"
    assert _site_updates(collections) == []


async def test_scoped_caller_cannot_edit_other_site_room(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r1", "s2", "101")
    response = await client.patch(
        "/api/v1/rooms/r1/capacity",
        json={"capacity": 5},
        headers={SITE_HEADER: "s1", USER_HEADER: "u1"},
    )
    assert response.status_code == 403


async def test_delete_room_twice(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North", total_rooms=2, total_capacity=8)
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4)
    seed_room(collections.rooms, "r2", "s1", "102", capacity=4)

    first = await client.delete("/api/v1/rooms/r1")
    assert first.status_code == 200
    assert (first.json()["site_total_rooms"], first.json()["site_total_capacity"]) == (1, 4)

    second = await client.delete("/api/v1/rooms/r1")
    assert second.status_code == 200
    assert second.json()["capacity_changed"] is False
    assert list(collections.rooms.docs) == ["r2"]


async def test_delete_malformed_room(client: AsyncClient, collections) -> None:
    seed_site(collections.sites, "s1", "North", total_rooms=2, total_capacity=8)
    seed_room(collections.rooms, "r1", "s1", "101", capacity=4)
    seed_room(collections.rooms, "r2", "s1", "102", gender="hommes", capacity=4)

    response = await client.delete("/api/v1/rooms/r2")

    assert response.status_code == 200
    assert (response.json()["site_total_rooms"], response.json()["site_total_capacity"]) == (1, 4)
    assert list(collections.rooms.docs) == ["r1"]


async def test_scoped_caller_cannot_delete_other_site_malformed_room(
    client: AsyncClient, collections
) -> None:
    seed_room(collections.rooms, "r2", "s2", "102", gender="hommes")
    response = await client.delete(
        "/api/v1/rooms/r2", headers={SITE_HEADER: "s1", USER_HEADER: "u1"}
    )
    assert response.status_code == 403
    assert "r2" in collections.rooms.docs


async def test_malformed_room_read_and_edit_are_unprocessable(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r2", "s1", "102", gender="hommes")

    read = await client.get("/api/v1/rooms/r2")
    edit = await client.patch("/api/v1/rooms/r2/capacity", json={"capacity": 5})

    for response in (read, edit):
        assert response.status_code == 422
        assert response.json()["error"] == "MALFORMED_DOCUMENT"
        assert response.json()["details"]["resource_id"] == "r2"

async def test_get_room(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r1", "s1", "101", occupants=["AB1"])
    seed_worker(collections.workers, "w1", "s1", "AB1", full_name="Omar")

    response = await client.get("/api/v1/rooms/r1")
    assert response.json()["occupant_names"] == ["Omar"]
    assert (await client.get("/api/v1/rooms/missing")).status_code == 404


async def test_invalid_capacity_is_rejected_by_schema(client: AsyncClient, collections) -> None:
    seed_room(collections.rooms, "r1", "s1", "101")
    response = await client.patch("/api/v1/rooms/r1/capacity", json={"capacity": 0})
    assert response.status_code == 422
