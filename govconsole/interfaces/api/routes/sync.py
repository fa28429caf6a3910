"""Websocket que transmite las instantáneas completas de una colección."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from govconsole.application.binding import COLLECTION_KINDS, bind_collection
from govconsole.application.live_sync import SnapshotStream, SubscriptionError
from govconsole.infrastructure.document_store import DocumentStore
from govconsole.interfaces.api.dependencies import (
    get_deployment_id,
    get_document_store,
    resolve_identity,
)

router = APIRouter(prefix="/sync", tags=["sync"])
logger = logging.getLogger(__name__)


async def _forward_snapshots(websocket: WebSocket, stream: SnapshotStream) -> None:
    try:
        async for documents in stream:
            await websocket.send_json({"type": "snapshot", "data": documents})
    except SubscriptionError as exc:
        logger.error("Snapshot stream for %s failed: %s", stream.handle.path, exc)
        await websocket.send_json({"type": "error", "detail": str(exc)})
        await websocket.close(code=1011)


@router.websocket("/{kind}")
async def sync_websocket(
    websocket: WebSocket,
    kind: str,
    store: DocumentStore = Depends(get_document_store),
    deployment_id: str = Depends(get_deployment_id),
) -> None:
    """Envía la colección del usuario cada vez que cambia."""

    token = websocket.query_params.get("token")
    if kind not in COLLECTION_KINDS or not token:
        await websocket.close(code=1008)
        return

    try:
        identity = resolve_identity(token)
    except HTTPException:
        await websocket.close(code=1008)
        return

    handle = bind_collection(store, deployment_id, identity.user_id, kind)
    if handle is None:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    stream = SnapshotStream(store, handle)
    sender = asyncio.create_task(_forward_snapshots(websocket, stream))
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug("Sync client for %s disconnected", handle.path)
    finally:
        stream.close()
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
            await sender
