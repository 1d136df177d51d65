"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
IDocumentCollection is the per-collection store accessor; the typed
repositories sit on top of it and speak domain entities.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.entities import RoomEntity, SiteEntity, WorkerEntity
    from app.domain.enums import RoomGender

# A document is its fields plus "id"; a filter is (field, op, value), op as in Firestore ("==", "in", ...).
Document = dict[str, Any]
QueryFilter = tuple[str, str, Any]
SnapshotCallback = Callable[[list[Document]], Awaitable[None] | None]
ErrorCallback = Callable[[Exception], Awaitable[None] | None]
Unsubscribe = Callable[[], None]


class IDocumentCollection(Protocol):
    """Protocol for one named collection of the document store."""

    name: str

    async def list(self, *filters: QueryFilter) -> list[Document]:
        """Return documents matching all filters (every document when none)."""

    async def get(self, doc_id: str) -> Document | None:
        """Return the document or None when absent."""

    async def create(self, fields: dict[str, Any]) -> str:
        """Store a new document (stamps createdAt/updatedAt) and return its id."""

    async def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document (stamps updatedAt)."""

    async def delete(self, doc_id: str) -> None:
        """Delete the document; deleting a missing id succeeds."""

    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Push the full collection on every change until unsubscribed."""


class ISiteRepository(Protocol):
    """Protocol for site repository (DIP)."""

    async def get_by_id(self, site_id: str) -> SiteEntity | None:
        """Return site by ID."""

    async def list_all(self) -> list[SiteEntity]:
        """Return every site."""

    async def create(
        self,
        name: str,
        total_rooms: int,
        total_capacity: int,
        admin_ids: list[str],
    ) -> SiteEntity:
        """Create a site and return it with its assigned id."""

    async def update(self, site_id: str, **fields: Any) -> None:
        """Write the given site attributes (snake_case names)."""

    async def update_totals(
        self, site_id: str, total_rooms: int, total_capacity: int
    ) -> None:
        """Write the cache fields totalRooms/totalCapacity."""

    async def delete(self, site_id: str) -> None:
        """Delete the site document (idempotent)."""


class IRoomRepository(Protocol):
    """Protocol for room repository (DIP)."""

    async def get_by_id(self, room_id: str) -> RoomEntity | None:
        """Return room by ID."""

    async def list_all(self) -> list[RoomEntity]:
        """Return every room."""

    async def list_by_site(self, site_id: str) -> list[RoomEntity]:
        """Return rooms whose siteId is site_id."""

    async def list_ids_by_site(self, site_id: str) -> list[str]:
        """Return ids of every room document under the site, malformed ones included."""

    async def list_capacities_by_site(self, site_id: str) -> list[int]:
        """Return the capacity of every room document under the site, malformed ones included."""

    async def get_site_id(self, room_id: str) -> str | None:
        """Return the stored siteId of a room, even a malformed one; None if it does not exist."""

    async def list_by_site_and_gender(
        self, site_id: str, gender: RoomGender
    ) -> list[RoomEntity]:
        """Return the site's rooms of one dormitory."""

    async def create(
        self,
        site_id: str,
        number: str,
        gender: RoomGender,
        capacity: int,
    ) -> RoomEntity:
        """Create an empty room and return it."""

    async def update(self, room_id: str, **fields: Any) -> None:
        """Write the given room attributes (snake_case names)."""

    async def delete(self, room_id: str) -> None:
        """Delete the room document (idempotent)."""


class IWorkerRepository(Protocol):
    """Protocol for worker repository (DIP)."""

    async def get_by_id(self, worker_id: str) -> WorkerEntity | None:
        """Return worker by ID."""

    async def list_all(self) -> list[WorkerEntity]:
        """Return every worker."""

    async def list_by_site(self, site_id: str) -> list[WorkerEntity]:
        """Return workers whose siteId is site_id."""

    async def find_by_national_id(self, national_id: str) -> WorkerEntity | None:
        """Return the first worker with this national id."""

    async def create(self, worker: WorkerEntity) -> WorkerEntity:
        """Store a new worker (the entity id is ignored) and return it with its id."""

    async def save(self, worker: WorkerEntity) -> None:
        """Write every attribute of an existing worker."""

    async def delete(self, worker_id: str) -> None:
        """Delete the worker document (idempotent)."""
