"""WebSocket snapshot feed: /ws/{collection} pushes the live collection.

Uses the ConnectionManager and SnapshotFeed from app.state (set in
lifespan). The site restriction comes from the gateway header, or the
site_id query param for browsers that cannot set headers; a header scope
always wins.
"""

import logging

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from app.api.websocket import channel_name
from app.api.websocket.feed import snapshot_message
from app.core.config import get_settings
from app.domain.exceptions import HousingException
from app.schemas.websocket import SnapshotErrorMessage, WebSocketStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


def _site_scope(websocket: WebSocket) -> str | None:
    header = websocket.headers.get(get_settings().site_scope_header_name, "").strip()
    if header:
        return header
    return websocket.query_params.get("site_id", "").strip() or None


@router.get("/ws/status", response_model=WebSocketStatusResponse)
async def websocket_status(request: Request) -> WebSocketStatusResponse:
    """Number of open WebSocket connections, total and per channel."""
    manager = request.app.state.ws_manager
    return WebSocketStatusResponse(
        total_connections=await manager.get_connection_count(),
        channels=await manager.get_channel_counts(),
    )


@router.websocket("/ws/{collection}")
async def websocket_endpoint(websocket: WebSocket, collection: str):
    """Stream snapshots of one collection (sites, rooms or workers).

    The current snapshot is sent right after the connection is accepted;
    each later change pushes the full collection again. Client messages
    are ignored.
    """
    feed = getattr(websocket.app.state, "ws_feed", None)
    if feed is None:
        await _reject_websocket(websocket, "Document store not configured", code=1011)
        return
    if not feed.knows(collection):
        await _reject_websocket(websocket, f"Unknown collection: {collection}")
        return

    manager = websocket.app.state.ws_manager
    site_id = _site_scope(websocket)
    await manager.connect(websocket, channel_name(collection, site_id))
    try:
        await feed.start(collection)
        try:
            documents = await feed.current(collection, site_id)
        except HousingException as e:
            logger.warning("Initial %s snapshot failed: %s", collection, e.message)
            await websocket.send_json(
                SnapshotErrorMessage(
                    collection=collection, error=e.error_code, message=e.message
                ).model_dump()
            )
        else:
            await websocket.send_json(snapshot_message(collection, documents))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket)
        await feed.release(collection)
