"""Firestore-backed room repository (implements IRoomRepository)."""

from __future__ import annotations

import logging
from typing import Any

from app.application.interfaces.repositories import Document, IDocumentCollection
from app.domain.entities import UNSAVED_ID, RoomEntity
from app.domain.enums import RoomGender
from app.infrastructure.firebase.collections import CREATED_AT, UPDATED_AT, RoomFields
from app.infrastructure.firebase.repositories._mapping import (
    rename_fields,
    to_entities,
    to_entity,
    to_int,
)

logger = logging.getLogger(__name__)

_ATTRIBUTE_FIELDS = {
    "number": RoomFields.NUMBER,
    "gender": RoomFields.GENDER,
    "capacity": RoomFields.CAPACITY,
    "current_occupancy": RoomFields.CURRENT_OCCUPANCY,
    "occupant_refs": RoomFields.OCCUPANT_REFS,
}


def _to_entity(doc: Document) -> RoomEntity:
    return RoomEntity(
        id=doc["id"],
        number=str(doc.get(RoomFields.NUMBER, "")),
        site_id=doc.get(RoomFields.SITE_ID, ""),
        gender=RoomGender(doc.get(RoomFields.GENDER)),
        capacity=to_int(doc.get(RoomFields.CAPACITY)),
        current_occupancy=to_int(doc.get(RoomFields.CURRENT_OCCUPANCY)),
        occupant_refs=[str(ref) for ref in doc.get(RoomFields.OCCUPANT_REFS) or []],
        created_at=doc.get(CREATED_AT),
        updated_at=doc.get(UPDATED_AT),
    )


def _raw_capacity(doc: Document) -> int:
    try:
        return to_int(doc.get(RoomFields.CAPACITY))
    except (TypeError, ValueError):
        logger.warning(
            "Room %s has an unreadable capacity %r, counted as 0",
            doc.get("id"),
            doc.get(RoomFields.CAPACITY),
        )
        return 0


class FirestoreRoomRepository:
    """Room repository over the rooms collection accessor.

    siteId is written only on creation; update() refuses it.
    """

    def __init__(self, collection: IDocumentCollection) -> None:
        self._coll = collection

    async def get_by_id(self, room_id: str) -> RoomEntity | None:
        doc = await self._coll.get(room_id)
        return to_entity(doc, _to_entity, "room") if doc else None

    async def list_all(self) -> list[RoomEntity]:
        return to_entities(await self._coll.list(), _to_entity, "room")

    async def list_by_site(self, site_id: str) -> list[RoomEntity]:
        docs = await self._coll.list((RoomFields.SITE_ID, "==", site_id))
        return to_entities(docs, _to_entity, "room")

    async def list_ids_by_site(self, site_id: str) -> list[str]:
        docs = await self._coll.list((RoomFields.SITE_ID, "==", site_id))
        return [doc["id"] for doc in docs]

    async def list_capacities_by_site(self, site_id: str) -> list[int]:
        """Capacity of every room document under the site, read without validation."""
        docs = await self._coll.list((RoomFields.SITE_ID, "==", site_id))
        return [_raw_capacity(doc) for doc in docs]

    async def get_site_id(self, room_id: str) -> str | None:
        """siteId of the raw room document; None when the room does not exist."""
        doc = await self._coll.get(room_id)
        if doc is None:
            return None
        return str(doc.get(RoomFields.SITE_ID) or "")

    async def list_by_site_and_gender(
        self, site_id: str, gender: RoomGender
    ) -> list[RoomEntity]:
        docs = await self._coll.list(
            (RoomFields.SITE_ID, "==", site_id),
            (RoomFields.GENDER, "==", gender.value),
        )
        return to_entities(docs, _to_entity, "room")

    async def create(
        self,
        site_id: str,
        number: str,
        gender: RoomGender,
        capacity: int,
    ) -> RoomEntity:
        """Validate, then add an empty room; returns the entity with its new id."""
        draft = RoomEntity(
            id=UNSAVED_ID,
            number=number.strip(),
            site_id=site_id,
            gender=gender,
            capacity=capacity,
        )
        room_id = await self._coll.create(
            {
                RoomFields.NUMBER: draft.number,
                RoomFields.SITE_ID: draft.site_id,
                RoomFields.GENDER: draft.gender.value,
                RoomFields.CAPACITY: draft.capacity,
                RoomFields.CURRENT_OCCUPANCY: 0,
                RoomFields.OCCUPANT_REFS: [],
            }
        )
        draft.id = room_id
        return draft

    async def update(self, room_id: str, **fields: Any) -> None:
        await self._coll.update(room_id, rename_fields(fields, _ATTRIBUTE_FIELDS, "room"))

    async def delete(self, room_id: str) -> None:
        await self._coll.delete(room_id)
