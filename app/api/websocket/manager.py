"""WebSocket connection manager.

Holds active connections per channel and provides channel-scoped broadcast.
A channel is a collection name, optionally narrowed to one site
("rooms@<site_id>"). Use via app.state.ws_manager (set in lifespan).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def channel_name(collection: str, site_id: str | None = None) -> str:
    """Channel key for a collection, narrowed to a site when site_id is set."""
    return f"{collection}@{site_id}" if site_id else collection


def parse_channel(channel: str) -> tuple[str, str | None]:
    """Inverse of channel_name: (collection, site_id or None)."""
    collection, _, site_id = channel.partition("@")
    return collection, site_id or None


class ConnectionManager:
    """Manages WebSocket connections grouped by channel.

    - connect() registers a connection on one channel.
    - broadcast_to_channel() sends to that channel only; dead connections
      are dropped.
    - Counts are lock-protected for concurrent access.
    """

    def __init__(self) -> None:
        self._connections_by_channel: dict[str, set[WebSocket]] = {}
        self._websocket_to_channel: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, channel: str) -> None:
        """Accept and register a new connection on the given channel."""
        await websocket.accept()
        async with self._lock:
            self._connections_by_channel.setdefault(channel, set()).add(websocket)
            self._websocket_to_channel[websocket] = channel

    async def disconnect(self, websocket: WebSocket) -> str | None:
        """Remove a connection; returns the channel it was on."""
        async with self._lock:
            return self._forget(websocket)

    def _forget(self, websocket: WebSocket) -> str | None:
        channel = self._websocket_to_channel.pop(websocket, None)
        if channel and channel in self._connections_by_channel:
            conns = self._connections_by_channel[channel]
            conns.discard(websocket)
            if not conns:
                del self._connections_by_channel[channel]
        return channel

    async def channels(self) -> list[str]:
        """Channels with at least one connection."""
        async with self._lock:
            return list(self._connections_by_channel)

    async def broadcast_to_channel(
        self, channel: str, message: str | dict[str, Any]
    ) -> None:
        """Send a message to all connections on the given channel."""
        async with self._lock:
            snapshot = list(self._connections_by_channel.get(channel, set()))
        await self._send_to_list(snapshot, message)

    async def _send_to_list(
        self,
        connections: list[WebSocket],
        message: str | dict[str, Any],
    ) -> None:
        """Send message to a list of connections; remove dead ones under lock."""
        dead: list[WebSocket] = []
        for ws in connections:
            try:
                if isinstance(message, dict):
                    await ws.send_json(message)
                else:
                    await ws.send_text(message)
            except Exception as e:
                logger.debug("Dropping WebSocket connection after send failure: %s", e)
                dead.append(ws)
        if dead:
            async with self._lock:
                for ws in dead:
                    self._forget(ws)

    async def get_connection_count(self, collection: str | None = None) -> int:
        """Total number of active connections, or those of one collection (lock-safe)."""
        async with self._lock:
            return sum(
                len(conns)
                for channel, conns in self._connections_by_channel.items()
                if collection is None or parse_channel(channel)[0] == collection
            )

    async def get_channel_counts(self) -> dict[str, int]:
        async with self._lock:
            return {channel: len(c) for channel, c in self._connections_by_channel.items()}
