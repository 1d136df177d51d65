"""Pytest configuration and fixtures for the worker housing service.

HTTP tests run app.main:app over ASGI with get_collections overridden by
in-memory collections, so no Firestore project is needed. The in-memory
collection honours the accessor contract (filters, idempotent delete,
update of a missing document fails) and can be told to fail.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies import StoreCollections, get_collections
from app.api.websocket import ConnectionManager
from app.application.services import CapacityService, StatisticsService, WorkerService
from app.core.limiter import limiter
from app.infrastructure.firebase.repositories import (
    FirestoreRoomRepository,
    FirestoreSiteRepository,
    FirestoreWorkerRepository,
)
from app.main import app
from tests.fakes import InMemoryCollection


@pytest.fixture
def collections() -> StoreCollections:
    return StoreCollections(
        sites=InMemoryCollection("sites"),
        rooms=InMemoryCollection("rooms"),
        workers=InMemoryCollection("workers"),
    )


@pytest.fixture
def site_repo(collections: StoreCollections) -> FirestoreSiteRepository:
    return FirestoreSiteRepository(collections.sites)


@pytest.fixture
def room_repo(collections: StoreCollections) -> FirestoreRoomRepository:
    return FirestoreRoomRepository(collections.rooms)


@pytest.fixture
def worker_repo(collections: StoreCollections) -> FirestoreWorkerRepository:
    return FirestoreWorkerRepository(collections.workers)


@pytest.fixture
def capacity_service(site_repo, room_repo) -> CapacityService:
    return CapacityService(site_repo, room_repo)


@pytest.fixture
def worker_service(worker_repo, room_repo, site_repo) -> WorkerService:
    return WorkerService(worker_repo, room_repo, site_repo)


@pytest.fixture
def statistics_service(site_repo, room_repo, worker_repo) -> StatisticsService:
    return StatisticsService(site_repo, room_repo, worker_repo)


@pytest.fixture
async def client(collections: StoreCollections) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) over in-memory collections."""
    app.dependency_overrides[get_collections] = lambda: collections
    app.state.ws_manager = ConnectionManager()
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def unconfigured_client() -> AsyncClient:
    """Client with no store override: data endpoints see an unconfigured store."""
    app.dependency_overrides.clear()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
