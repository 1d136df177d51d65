"""ConnectionManager channels and the shared snapshot feed."""

import asyncio

from app.api.websocket import ConnectionManager, SnapshotFeed, channel_name
from app.api.websocket.feed import filter_for_site
from app.api.websocket.manager import parse_channel
from app.infrastructure.exceptions import UnavailableError
from tests.fakes import InMemoryCollection, seed_room, seed_site


class FakeWebSocket:
    """Records what the manager sends; can be made to fail."""

    def __init__(self, broken: bool = False) -> None:
        self.accepted = False
        self.sent: list = []
        self.broken = broken

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data) -> None:
        if self.broken:
            raise RuntimeError("connection closed")
        self.sent.append(data)

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("connection closed")
        self.sent.append(data)


class ControlledCollection(InMemoryCollection):
    """Keeps the subscription callbacks so tests push snapshots by hand."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.on_snapshot = None
        self.on_error = None
        self.subscriptions = 0
        self.unsubscriptions = 0

    def subscribe(self, on_snapshot, on_error=None):
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.subscriptions += 1

        def unsubscribe() -> None:
            self.unsubscriptions += 1

        return unsubscribe


def test_channel_names() -> None:
    assert channel_name("rooms") == "rooms"
    assert channel_name("rooms", "s1") == "rooms@s1"
    assert parse_channel("rooms@s1") == ("rooms", "s1")
    assert parse_channel("workers") == ("workers", None)


def test_filter_for_site() -> None:
    sites = [{"id": "s1"}, {"id": "s2"}]
    rooms = [{"id": "r1", "siteId": "s1"}, {"id": "r2", "siteId": "s2"}]
    assert filter_for_site("sites", sites, "s2") == [{"id": "s2"}]
    assert filter_for_site("rooms", rooms, "s1") == [{"id": "r1", "siteId": "s1"}]
    assert filter_for_site("rooms", rooms, None) == rooms


async def test_manager_broadcasts_per_channel_and_drops_dead_connections() -> None:
    manager = ConnectionManager()
    alive, dead, other = FakeWebSocket(), FakeWebSocket(broken=True), FakeWebSocket()
    await manager.connect(alive, "rooms")
    await manager.connect(dead, "rooms")
    await manager.connect(other, "rooms@s1")

    await manager.broadcast_to_channel("rooms", {"hello": 1})

    assert alive.accepted
    assert alive.sent == [{"hello": 1}]
    assert other.sent == []
    assert await manager.get_channel_counts() == {"rooms": 1, "rooms@s1": 1}
    assert await manager.get_connection_count("rooms") == 2
    assert await manager.disconnect(other) == "rooms@s1"
    assert await manager.get_connection_count() == 1


async def test_feed_pushes_filtered_snapshots() -> None:
    manager = ConnectionManager()
    rooms = ControlledCollection("rooms")
    seed_room(rooms, "r1", "s1", "101")
    seed_room(rooms, "r2", "s2", "101")
    feed = SnapshotFeed(manager, {"rooms": rooms})
    everyone, site_admin = FakeWebSocket(), FakeWebSocket()
    await manager.connect(everyone, channel_name("rooms"))
    await manager.connect(site_admin, channel_name("rooms", "s1"))

    await feed.start("rooms")
    await feed.start("rooms")
    assert rooms.subscriptions == 1

    await rooms.on_snapshot(await rooms.list())

    assert [d["id"] for d in everyone.sent[0]["documents"]] == ["r1", "r2"]
    assert site_admin.sent[0]["type"] == "snapshot"
    assert [d["id"] for d in site_admin.sent[0]["documents"]] == ["r1"]
    assert [d["id"] for d in await feed.current("rooms", "s2")] == ["r2"]


async def test_feed_current_reads_when_nothing_pushed_yet() -> None:
    sites = ControlledCollection("sites")
    seed_site(sites, "s1", "North")
    seed_site(sites, "s2", "South")
    feed = SnapshotFeed(ConnectionManager(), {"sites": sites})

    assert await feed.current("sites", "s1") == [
        {"id": "s1", "name": "North", "totalRooms": 0, "totalCapacity": 0, "adminIds": []}
    ]
    assert feed.knows("sites")
    assert not feed.knows("invoices")


async def test_feed_forwards_errors() -> None:
    manager = ConnectionManager()
    workers = ControlledCollection("workers")
    feed = SnapshotFeed(manager, {"workers": workers})
    ws = FakeWebSocket()
    await manager.connect(ws, "workers")
    await feed.start("workers")

    await workers.on_error(UnavailableError("store down"))

    assert ws.sent == [
        {"type": "error", "collection": "workers", "error": "UNAVAILABLE", "message": "store down"}
    ]


async def test_feed_released_with_last_client() -> None:
    manager = ConnectionManager()
    rooms = ControlledCollection("rooms")
    feed = SnapshotFeed(manager, {"rooms": rooms})
    first, second = FakeWebSocket(), FakeWebSocket()
    await manager.connect(first, "rooms")
    await manager.connect(second, "rooms@s1")
    await feed.start("rooms")

    await manager.disconnect(first)
    await feed.release("rooms")
    assert rooms.unsubscriptions == 0

    await manager.disconnect(second)
    await feed.release("rooms")
    assert rooms.unsubscriptions == 1

    await feed.start("rooms")
    assert rooms.subscriptions == 2
    await feed.stop_all()
    assert rooms.unsubscriptions == 2


async def test_client_connecting_during_release_keeps_subscription() -> None:
    manager = ConnectionManager()
    rooms = ControlledCollection("rooms")
    feed = SnapshotFeed(manager, {"rooms": rooms})
    first = FakeWebSocket()
    await manager.connect(first, "rooms")
    await feed.start("rooms")
    await manager.disconnect(first)

    await feed._lock.acquire()
    release = asyncio.create_task(feed.release("rooms"))
    await asyncio.sleep(0)
    await manager.connect(FakeWebSocket(), "rooms")
    feed._lock.release()
    await release

    assert rooms.unsubscriptions == 0
    await feed.start("rooms")
    assert rooms.subscriptions == 1


async def test_in_memory_subscription_pushes_once() -> None:
    rooms = InMemoryCollection("rooms")
    seed_room(rooms, "r1", "s1", "101")
    received = []

    async def on_snapshot(documents) -> None:
        received.append(documents)

    rooms.subscribe(on_snapshot)
    await asyncio.sleep(0.01)

    assert [[d["id"] for d in docs] for docs in received] == [["r1"]]
