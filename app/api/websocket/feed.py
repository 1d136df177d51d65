"""Snapshot feed: one store subscription per collection, fanned out to WebSockets.

The first client on a collection starts the accessor subscription; when the
last client of that collection leaves it is cancelled. Every snapshot is
filtered per channel (site-scoped channels only get that site's documents)
and broadcast through the ConnectionManager.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from fastapi.encoders import jsonable_encoder

from app.api.websocket.manager import ConnectionManager, parse_channel
from app.application.interfaces.repositories import (
    Document,
    IDocumentCollection,
    Unsubscribe,
)
from app.domain.exceptions import HousingException
from app.schemas.websocket import SnapshotErrorMessage, SnapshotMessage

logger = logging.getLogger(__name__)

SITES = "sites"


def filter_for_site(collection: str, documents: list[Document], site_id: str | None) -> list[Document]:
    """Documents of one site: the site itself for sites, siteId matches otherwise."""
    if site_id is None:
        return documents
    if collection == SITES:
        return [doc for doc in documents if doc.get("id") == site_id]
    return [doc for doc in documents if doc.get("siteId") == site_id]


def snapshot_message(collection: str, documents: list[Document]) -> dict:
    return SnapshotMessage(
        collection=collection, documents=jsonable_encoder(documents)
    ).model_dump()


class SnapshotFeed:
    """Shares one subscription per collection between all its WebSocket clients.

    accessors maps the public collection name (sites, rooms, workers) to its
    accessor.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        accessors: Mapping[str, IDocumentCollection],
    ) -> None:
        self.manager = manager
        self.accessors = dict(accessors)
        self._subscriptions: dict[str, Unsubscribe] = {}
        self._latest: dict[str, list[Document]] = {}
        self._lock = asyncio.Lock()

    def knows(self, collection: str) -> bool:
        return collection in self.accessors

    async def start(self, collection: str) -> None:
        """Start the collection's subscription unless already running."""
        async with self._lock:
            if collection in self._subscriptions:
                return
            accessor = self.accessors[collection]

            async def on_snapshot(documents: list[Document]) -> None:
                await self._publish(collection, documents)

            async def on_error(exc: Exception) -> None:
                await self._publish_error(collection, exc)

            self._subscriptions[collection] = accessor.subscribe(on_snapshot, on_error)
            logger.info("Snapshot feed started for %s", collection)

    async def release(self, collection: str) -> None:
        """Stop the subscription when no client of the collection is left.

        The count is read under the feed lock: a client registered before
        the check keeps the subscription, one registered after it waits in
        start() and subscribes again.
        """
        async with self._lock:
            if await self.manager.get_connection_count(collection):
                return
            unsubscribe = self._subscriptions.pop(collection, None)
            self._latest.pop(collection, None)
        if unsubscribe is not None:
            unsubscribe()
            logger.info("Snapshot feed stopped for %s", collection)

    async def current(self, collection: str, site_id: str | None = None) -> list[Document]:
        """Last pushed snapshot, or a fresh read when none has arrived yet."""
        documents = self._latest.get(collection)
        if documents is None:
            documents = await self.accessors[collection].list()
        return filter_for_site(collection, documents, site_id)

    async def _publish(self, collection: str, documents: list[Document]) -> None:
        self._latest[collection] = documents
        for channel in await self.manager.channels():
            name, site_id = parse_channel(channel)
            if name != collection:
                continue
            await self.manager.broadcast_to_channel(
                channel,
                snapshot_message(collection, filter_for_site(collection, documents, site_id)),
            )

    async def _publish_error(self, collection: str, exc: Exception) -> None:
        code = exc.error_code if isinstance(exc, HousingException) else "STORE_ERROR"
        logger.warning("Snapshot feed for %s failed: %s", collection, exc)
        for channel in await self.manager.channels():
            if parse_channel(channel)[0] == collection:
                await self.manager.broadcast_to_channel(
                    channel,
                    SnapshotErrorMessage(
                        collection=collection, error=code, message=str(exc)
                    ).model_dump(),
                )

    async def stop_all(self) -> None:
        async with self._lock:
            subscriptions = list(self._subscriptions.values())
            self._subscriptions.clear()
            self._latest.clear()
        for unsubscribe in subscriptions:
            unsubscribe()
