"""Per-collection document accessor on top of the Firestore REST client.

FirestoreCollection implements IDocumentCollection: one-shot list/get,
create/update stamping createdAt/updatedAt, idempotent delete, and a
polling subscription that pushes the full collection whenever it changes.
It also keeps the last fetched array with loading/error status so
long-lived consumers (the WebSocket feed) can read the current state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from app.application.interfaces.repositories import (
    Document,
    ErrorCallback,
    QueryFilter,
    SnapshotCallback,
    Unsubscribe,
)
from app.infrastructure.exceptions import StoreException
from app.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
)
from app.infrastructure.firebase.collections import CREATED_AT, UPDATED_AT
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0


def _to_document(snapshot: DocumentSnapshot) -> Document:
    return {"id": snapshot.id, **snapshot.to_dict()}


def _without_id(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if k != "id"}


async def _notify(callback, payload) -> None:
    """Call a listener that may be sync or async."""
    result = callback(payload)
    if inspect.isawaitable(result):
        await result


class FirestoreCollection:
    """Accessor for one named Firestore collection."""

    def __init__(
        self,
        client: FirestoreRESTClient,
        name: str,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self._client = client
        self._coll = client.collection(name)
        self.name = name
        self.poll_interval = poll_interval
        self.data: list[Document] = []
        self.loading = False
        self.error: str | None = None

    async def list(self, *filters: QueryFilter) -> list[Document]:
        """Return documents matching every (field, op, value) filter.

        An unfiltered read also refreshes ``data``.
        """
        self.loading = True
        try:
            if filters:
                query = self._coll.query()
                for field_path, op, value in filters:
                    query = query.where(field_path, op, value)
                docs = [_to_document(s) async for s in query.stream()]
            else:
                docs = [_to_document(s) async for s in self._coll.stream()]
        except StoreException as e:
            self.error = e.message
            logger.warning("Fetching %s failed: %s", self.name, e.message)
            raise
        finally:
            self.loading = False
        self.error = None
        if not filters:
            self.data = docs
        logger.debug("Fetched %d document(s) from %s", len(docs), self.name)
        return docs

    async def get(self, doc_id: str) -> Document | None:
        snapshot = await self._coll.document(doc_id).get()
        if snapshot is None:
            return None
        return _to_document(snapshot)

    async def create(self, fields: dict[str, Any]) -> str:
        """Add a document under a new id; createdAt and updatedAt are stamped."""
        now = utc_now()
        data = {**_without_id(fields), CREATED_AT: now, UPDATED_AT: now}
        doc_id = await self._coll.add(data)
        logger.debug("Created %s/%s", self.name, doc_id)
        return doc_id

    async def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document and stamp updatedAt."""
        data = {**_without_id(fields), UPDATED_AT: utc_now()}
        await self._coll.document(doc_id).update(data)

    async def delete(self, doc_id: str) -> None:
        await self._coll.document(doc_id).delete()

    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
        interval: float | None = None,
    ) -> Unsubscribe:
        """Poll the collection and push the full array whenever it changes.

        The first successful read is always pushed. Store errors go to
        on_error and polling continues. Must be called from a running event
        loop; the returned callable cancels the polling task.
        """
        task = asyncio.create_task(
            self._poll(on_snapshot, on_error, interval or self.poll_interval),
            name=f"subscription:{self.name}",
        )

        def unsubscribe() -> None:
            task.cancel()

        return unsubscribe

    async def _poll(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None,
        interval: float,
    ) -> None:
        previous: list[Document] | None = None
        while True:
            try:
                docs = await self.list()
            except StoreException as e:
                if on_error is not None:
                    await _notify(on_error, e)
            else:
                if docs != previous:
                    previous = docs
                    try:
                        await _notify(on_snapshot, docs)
                    except Exception:
                        logger.exception("Snapshot listener for %s failed", self.name)
            await asyncio.sleep(interval)
