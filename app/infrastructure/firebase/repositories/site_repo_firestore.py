"""Firestore-backed site repository (implements ISiteRepository)."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.repositories import Document, IDocumentCollection
from app.domain.entities import UNSAVED_ID, SiteEntity
from app.infrastructure.firebase.collections import CREATED_AT, UPDATED_AT, SiteFields
from app.infrastructure.firebase.repositories._mapping import (
    rename_fields,
    to_entities,
    to_entity,
    to_int,
)

_ATTRIBUTE_FIELDS = {
    "name": SiteFields.NAME,
    "total_rooms": SiteFields.TOTAL_ROOMS,
    "total_capacity": SiteFields.TOTAL_CAPACITY,
    "admin_ids": SiteFields.ADMIN_IDS,
}


def _to_entity(doc: Document) -> SiteEntity:
    return SiteEntity(
        id=doc["id"],
        name=doc.get(SiteFields.NAME, ""),
        total_rooms=to_int(doc.get(SiteFields.TOTAL_ROOMS)),
        total_capacity=to_int(doc.get(SiteFields.TOTAL_CAPACITY)),
        admin_ids=list(doc.get(SiteFields.ADMIN_IDS) or []),
        created_at=doc.get(CREATED_AT),
        updated_at=doc.get(UPDATED_AT),
    )


class FirestoreSiteRepository:
    """Site repository over the sites collection accessor."""

    def __init__(self, collection: IDocumentCollection) -> None:
        self._coll = collection

    async def get_by_id(self, site_id: str) -> SiteEntity | None:
        doc = await self._coll.get(site_id)
        return to_entity(doc, _to_entity, "site") if doc else None

    async def list_all(self) -> list[SiteEntity]:
        return to_entities(await self._coll.list(), _to_entity, "site")

    async def create(
        self,
        name: str,
        total_rooms: int,
        total_capacity: int,
        admin_ids: list[str],
    ) -> SiteEntity:
        """Validate, then add the site document; returns the entity with its new id."""
        draft = SiteEntity(
            id=UNSAVED_ID,
            name=name.strip(),
            total_rooms=total_rooms,
            total_capacity=total_capacity,
            admin_ids=list(admin_ids),
        )
        site_id = await self._coll.create(
            {
                SiteFields.NAME: draft.name,
                SiteFields.TOTAL_ROOMS: draft.total_rooms,
                SiteFields.TOTAL_CAPACITY: draft.total_capacity,
                SiteFields.ADMIN_IDS: draft.admin_ids,
            }
        )
        draft.id = site_id
        return draft

    async def update(self, site_id: str, **fields: Any) -> None:
        await self._coll.update(site_id, rename_fields(fields, _ATTRIBUTE_FIELDS, "site"))

    async def update_totals(
        self, site_id: str, total_rooms: int, total_capacity: int
    ) -> None:
        await self._coll.update(
            site_id,
            {
                SiteFields.TOTAL_ROOMS: total_rooms,
                SiteFields.TOTAL_CAPACITY: total_capacity,
            },
        )

    async def delete(self, site_id: str) -> None:
        await self._coll.delete(site_id)
