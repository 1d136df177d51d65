"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (logging, Firestore client,
WebSocket manager and snapshot feed).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.v1.dependencies import build_collections
from app.api.websocket import ConnectionManager, SnapshotFeed
from app.infrastructure.firebase import close_firebase, get_firestore_client, init_firebase
from app.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, Firestore client (skipped when credentials are
    missing), WebSocket manager, snapshot feed. Shutdown order: snapshot
    subscriptions, Firestore client.
    """
    setup_logging()

    # ---- Startup ----
    init_firebase()

    app.state.ws_manager = ConnectionManager()
    client = get_firestore_client()
    if client is not None:
        collections = build_collections(client)
        app.state.ws_feed = SnapshotFeed(
            app.state.ws_manager,
            {
                "sites": collections.sites,
                "rooms": collections.rooms,
                "workers": collections.workers,
            },
        )
    else:
        app.state.ws_feed = None

    yield

    # ---- Shutdown ----
    if getattr(app.state, "ws_feed", None) is not None:
        await app.state.ws_feed.stop_all()
        app.state.ws_feed = None
        logger.info("Snapshot subscriptions stopped")

    await close_firebase()
    logger.info("Firestore client closed")
