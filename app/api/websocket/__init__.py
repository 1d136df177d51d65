"""WebSocket connection manager and snapshot feed.

Used by the WebSocket endpoint to push collection snapshots to clients.
"""

from app.api.websocket.feed import SnapshotFeed
from app.api.websocket.manager import ConnectionManager, channel_name

__all__ = ["ConnectionManager", "SnapshotFeed", "channel_name"]
