"""In-memory document collection and document seeding helpers for tests."""

import asyncio
import inspect
from collections.abc import Callable
from datetime import date
from typing import Any

from app.infrastructure.exceptions import DocumentNotFoundError
from app.shared.utils.datetime import utc_now

SITE_HEADER = "X-Site-ID"
USER_HEADER = "X-User-ID"


def _matches(doc: dict[str, Any], field: str, op: str, value: Any) -> bool:
    current = doc.get(field)
    if op == "==":
        return current == value
    if op == "in":
        return current in value
    raise AssertionError(f"Unsupported operator in fake collection: {op}")


class InMemoryCollection:
    """IDocumentCollection kept in a dict; failures are injected per operation."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str | None]] = []
        self._failures: dict[tuple[str, str | None], Exception] = {}
        self._create_failure: tuple[Callable[[dict], bool], Exception] | None = None
        self._counter = 0

    def seed(self, doc_id: str, **fields: Any) -> str:
        self.docs[doc_id] = dict(fields)
        return doc_id

    def fail(self, op: str, exc: Exception, doc_id: str | None = None) -> None:
        """Make op (list/get/create/update/delete) raise exc, for one id or all."""
        self._failures[(op, doc_id)] = exc

    def clear_failures(self) -> None:
        self._failures.clear()
        self._create_failure = None

    def fail_create_if(self, predicate: Callable[[dict], bool], exc: Exception) -> None:
        self._create_failure = (predicate, exc)

    def _check(self, op: str, doc_id: str | None = None) -> None:
        self.calls.append((op, doc_id))
        for key in ((op, doc_id), (op, None)):
            if key in self._failures:
                raise self._failures[key]

    async def list(self, *filters: tuple[str, str, Any]) -> list[dict[str, Any]]:
        self._check("list")
        docs = [{"id": doc_id, **fields} for doc_id, fields in self.docs.items()]
        return [d for d in docs if all(_matches(d, *f) for f in filters)]

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        self._check("get", doc_id)
        fields = self.docs.get(doc_id)
        return {"id": doc_id, **fields} if fields is not None else None

    async def create(self, fields: dict[str, Any]) -> str:
        self._check("create")
        if self._create_failure and self._create_failure[0](fields):
            raise self._create_failure[1]
        self._counter += 1
        doc_id = f"{self.name}-{self._counter}"
        now = utc_now()
        self.docs[doc_id] = {**fields, "createdAt": now, "updatedAt": now}
        return doc_id

    async def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        self._check("update", doc_id)
        if doc_id not in self.docs:
            raise DocumentNotFoundError(f"{self.name}/{doc_id}")
        self.docs[doc_id].update(fields, updatedAt=utc_now())

    async def delete(self, doc_id: str) -> None:
        self._check("delete", doc_id)
        self.docs.pop(doc_id, None)

    def subscribe(self, on_snapshot, on_error=None) -> Callable[[], None]:
        """Push the current documents once (or the read error to on_error)."""

        async def push() -> None:
            try:
                documents = await self.list()
            except Exception as e:
                if on_error is None:
                    raise
                result = on_error(e)
            else:
                result = on_snapshot(documents)
            if inspect.isawaitable(result):
                await result

        task = asyncio.get_running_loop().create_task(push())
        return task.cancel


def seed_site(coll: InMemoryCollection, site_id: str, name: str, **fields: Any) -> str:
    return coll.seed(
        site_id,
        name=name,
        totalRooms=fields.get("total_rooms", 0),
        totalCapacity=fields.get("total_capacity", 0),
        adminIds=fields.get("admin_ids", []),
    )


def seed_room(
    coll: InMemoryCollection,
    room_id: str,
    site_id: str,
    number: str,
    gender: str = "men",
    capacity: int = 4,
    occupants: list[str] | None = None,
    current_occupancy: int | None = None,
) -> str:
    occupants = occupants or []
    return coll.seed(
        room_id,
        number=number,
        siteId=site_id,
        gender=gender,
        roomCapacity=capacity,
        currentOccupancy=len(occupants) if current_occupancy is None else current_occupancy,
        occupantRefs=occupants,
    )


def seed_worker(
    coll: InMemoryCollection,
    worker_id: str,
    site_id: str,
    national_id: str,
    full_name: str = "Test Worker",
    gender: str = "man",
    birth_year: int = 1990,
    room_number: str = "",
    status: str = "active",
    entry_date: date = date(2024, 1, 15),
    **extra: Any,
) -> str:
    return coll.seed(
        worker_id,
        fullName=full_name,
        nationalId=national_id,
        phone="",
        gender=gender,
        birthYear=birth_year,
        siteId=site_id,
        roomNumber=room_number,
        dormitoryLabel="",
        status=status,
        entryDate=entry_date.isoformat(),
        **extra,
    )

