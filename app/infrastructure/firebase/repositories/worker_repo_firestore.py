"""Firestore-backed worker repository (implements IWorkerRepository)."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from app.application.interfaces.repositories import Document, IDocumentCollection
from app.domain.entities import WorkerEntity
from app.domain.enums import ExitReason, WorkerGender, WorkerStatus
from app.infrastructure.firebase.collections import CREATED_AT, UPDATED_AT, WorkerFields
from app.infrastructure.firebase.repositories._mapping import to_entities, to_entity, to_int
from app.shared.utils.datetime import parse_date


def _to_entity(doc: Document) -> WorkerEntity:
    """Build a worker from a document; a stored age is ignored (re-derived)."""
    exit_reason = doc.get(WorkerFields.EXIT_REASON)
    entry_date = parse_date(doc.get(WorkerFields.ENTRY_DATE))
    if entry_date is None:
        raise ValueError("entryDate is missing")
    return WorkerEntity(
        id=doc["id"],
        full_name=doc.get(WorkerFields.FULL_NAME, ""),
        national_id=str(doc.get(WorkerFields.NATIONAL_ID, "")),
        gender=WorkerGender(doc.get(WorkerFields.GENDER)),
        birth_year=to_int(doc.get(WorkerFields.BIRTH_YEAR)),
        site_id=doc.get(WorkerFields.SITE_ID, ""),
        entry_date=entry_date,
        phone=doc.get(WorkerFields.PHONE) or "",
        room_number=str(doc.get(WorkerFields.ROOM_NUMBER) or ""),
        dormitory_label=doc.get(WorkerFields.DORMITORY_LABEL) or "",
        status=WorkerStatus(doc.get(WorkerFields.STATUS, WorkerStatus.ACTIVE.value)),
        exit_date=parse_date(doc.get(WorkerFields.EXIT_DATE)),
        exit_reason=ExitReason(exit_reason) if exit_reason else None,
        created_at=doc.get(CREATED_AT),
        updated_at=doc.get(UPDATED_AT),
    )


def _to_fields(worker: WorkerEntity) -> dict[str, Any]:
    """Document fields of a worker. exitDate/exitReason only when set."""
    fields: dict[str, Any] = {
        WorkerFields.FULL_NAME: worker.full_name,
        WorkerFields.NATIONAL_ID: worker.national_id,
        WorkerFields.PHONE: worker.phone,
        WorkerFields.GENDER: worker.gender.value,
        WorkerFields.AGE: worker.age,
        WorkerFields.BIRTH_YEAR: worker.birth_year,
        WorkerFields.SITE_ID: worker.site_id,
        WorkerFields.ROOM_NUMBER: worker.room_number,
        WorkerFields.DORMITORY_LABEL: worker.dormitory_label,
        WorkerFields.STATUS: worker.status.value,
        WorkerFields.ENTRY_DATE: worker.entry_date,
    }
    if worker.exit_date is not None:
        fields[WorkerFields.EXIT_DATE] = worker.exit_date
    if worker.exit_reason is not None:
        fields[WorkerFields.EXIT_REASON] = worker.exit_reason.value
    return fields


class FirestoreWorkerRepository:
    """Worker repository over the workers collection accessor."""

    def __init__(self, collection: IDocumentCollection) -> None:
        self._coll = collection

    async def get_by_id(self, worker_id: str) -> WorkerEntity | None:
        doc = await self._coll.get(worker_id)
        return to_entity(doc, _to_entity, "worker") if doc else None

    async def list_all(self) -> list[WorkerEntity]:
        return to_entities(await self._coll.list(), _to_entity, "worker")

    async def list_by_site(self, site_id: str) -> list[WorkerEntity]:
        docs = await self._coll.list((WorkerFields.SITE_ID, "==", site_id))
        return to_entities(docs, _to_entity, "worker")

    async def find_by_national_id(self, national_id: str) -> WorkerEntity | None:
        docs = await self._coll.list((WorkerFields.NATIONAL_ID, "==", national_id))
        workers = to_entities(docs, _to_entity, "worker")
        return workers[0] if workers else None

    async def create(self, worker: WorkerEntity) -> WorkerEntity:
        worker_id = await self._coll.create(_to_fields(worker))
        return replace(worker, id=worker_id)

    async def save(self, worker: WorkerEntity) -> None:
        """Write every attribute; age is always the freshly derived value."""
        await self._coll.update(worker.id, _to_fields(worker))

    async def delete(self, worker_id: str) -> None:
        await self._coll.delete(worker_id)
