"""Websocket de la consola: recibe comandos y envía la vista renderizada."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from govconsole.application.context import ConsoleContext
from govconsole.application.identity import IdentityBootstrap
from govconsole.application.shell import STATUS_ERROR, ConsoleShell
from govconsole.config import get_settings
from govconsole.infrastructure.auth_service import AuthService
from govconsole.infrastructure.document_store import DocumentStore, DocumentStoreError
from govconsole.infrastructure.gemini_client import RuleSuggestionService
from govconsole.interfaces.api.dependencies import (
    get_api_key,
    get_deployment_id,
    get_document_store,
    get_suggestion_service_factory,
)

router = APIRouter(prefix="/console", tags=["console"])
logger = logging.getLogger(__name__)

Send = Callable[[dict[str, Any]], Awaitable[None]]


def _text(message: Mapping[str, Any], key: str) -> str:
    value = message.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Command field '{key}' expects text")
    return value


def _optional_text(message: Mapping[str, Any], key: str) -> str | None:
    value = message.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Command field '{key}' expects text")
    return value


async def _dispatch(
    shell: ConsoleShell,
    message: Mapping[str, Any],
    start_suggestion: Callable[[], None],
) -> None:
    command = message.get("type")
    editor = shell.editor

    if command == "select_tab":
        shell.select_tab(_text(message, "tab"))
    elif command == "open_new":
        editor.open_new()
    elif command == "open_existing":
        editor.open_existing(_text(message, "id"))
    elif command == "change":
        editor.change(_text(message, "field"), message.get("value"))
    elif command == "close":
        editor.close()
    elif command == "submit":
        await editor.submit()
    elif command == "suggest":
        start_suggestion()
    elif command == "request_delete":
        editor.request_delete(_text(message, "id"))
    elif command == "confirm_delete":
        await editor.confirm_delete()
    elif command == "cancel_delete":
        editor.cancel_delete()
    elif command == "set_filters":
        shell.violation_view.set_filters(
            platform=_optional_text(message, "platform"),
            user=_optional_text(message, "user"),
            search=_optional_text(message, "search"),
        )
    elif command == "simulate_violation":
        await shell.violation_view.add_simulated_violation()
    elif command == "sign_out":
        await shell.sign_out()
    else:
        raise ValueError(f"Unknown command '{command}'")


async def _push_views(shell: ConsoleShell, dirty: asyncio.Event, send: Send) -> None:
    while True:
        await dirty.wait()
        dirty.clear()
        await send({"type": "view", "data": shell.render()})


@router.websocket("/ws")
async def console_websocket(
    websocket: WebSocket,
    store: DocumentStore = Depends(get_document_store),
    deployment_id: str = Depends(get_deployment_id),
    api_key: str | None = Depends(get_api_key),
    suggestion_service_factory: Callable[[], RuleSuggestionService] = Depends(
        get_suggestion_service_factory
    ),
) -> None:
    """Abre una sesión de consola y la mantiene sincronizada con el almacén."""

    custom_token = websocket.query_params.get("custom_token") or get_settings().initial_auth_token
    await websocket.accept()

    identity = IdentityBootstrap(AuthService(api_key=api_key), initial_token=custom_token)
    context = ConsoleContext(
        store=store,
        deployment_id=deployment_id,
        identity=identity,
        suggestion_service_factory=suggestion_service_factory,
    )
    shell = ConsoleShell(context)

    send_lock = asyncio.Lock()

    async def send(payload: dict[str, Any]) -> None:
        async with send_lock:
            await websocket.send_json(payload)

    dirty = asyncio.Event()
    shell.add_listener(dirty.set)
    pusher = asyncio.create_task(_push_views(shell, dirty, send))
    suggestions: set[asyncio.Task[None]] = set()

    async def run_suggestion() -> None:
        await shell.editor.suggest_details()
        dirty.set()

    def start_suggestion() -> None:
        task = asyncio.create_task(run_suggestion())
        suggestions.add(task)
        task.add_done_callback(suggestions.discard)

    try:
        await shell.start()
        if shell.status == STATUS_ERROR:
            await send({"type": "view", "data": shell.render()})
            await websocket.close(code=1008)
            return
        dirty.set()

        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                continue
            if not isinstance(message, dict):
                continue

            if message.get("type") == "ping":
                await send({"type": "pong"})
                continue

            try:
                await _dispatch(shell, message, start_suggestion)
            except (ValueError, DocumentStoreError) as exc:
                await send({"type": "error", "detail": str(exc)})
            dirty.set()
    except WebSocketDisconnect:
        logger.debug("Console client %s disconnected", context.user_id)
    finally:
        for task in (pusher, *suggestions):
            task.cancel()
        for task in (pusher, *suggestions):
            with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
                await task
        await shell.close()
