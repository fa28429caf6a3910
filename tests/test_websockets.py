"""Tests for the snapshot sync and console websockets."""

from __future__ import annotations

import pytest
from fastapi import WebSocketDisconnect

from datetime import datetime, timedelta, timezone

from jose import jwt

from govconsole.config import get_settings
from govconsole.infrastructure.security import ALGORITHM, create_custom_token

RULE_PAYLOAD = {
    "name": "Max Budget",
    "type": "Budget Limit",
    "platform": "Google Ads",
    "condition": "100-1000",
    "message": "Budget must be 100-1000",
}


def _receive_view(websocket, predicate, attempts: int = 20) -> dict:
    for _ in range(attempts):
        message = websocket.receive_json()
        if message["type"] == "view" and predicate(message["data"]):
            return message["data"]
    raise AssertionError("Expected view was never pushed")


def _rules(view: dict) -> list[dict]:
    return view.get("view", {}).get("rules", [])


def test_sync_stream_pushes_snapshots(client, auth_headers) -> None:
    token = auth_headers["Authorization"].removeprefix("Bearer ")

    with client.websocket_connect(f"/sync/rules?token={token}") as websocket:
        assert websocket.receive_json() == {"type": "snapshot", "data": []}

        created = client.post("/rules", json=RULE_PAYLOAD, headers=auth_headers).json()
        snapshot = websocket.receive_json()
        assert snapshot["type"] == "snapshot"
        assert [document["id"] for document in snapshot["data"]] == [created["id"]]

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_sync_stream_rejects_invalid_tokens(client) -> None:
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/sync/rules?token=forged") as websocket:
            websocket.receive_json()


def test_sync_stream_rejects_unknown_collections(client, auth_headers) -> None:
    token = auth_headers["Authorization"].removeprefix("Bearer ")

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/sync/campaigns?token={token}") as websocket:
            websocket.receive_json()


def test_console_session_creates_a_rule(client) -> None:
    token = create_custom_token("analyst-7")

    with client.websocket_connect(f"/console/ws?custom_token={token}") as websocket:
        view = _receive_view(websocket, lambda data: data["status"] == "ready")
        assert view["userId"] == "analyst-7"
        assert view["activeTab"] == "rules"

        websocket.send_json({"type": "open_new"})
        for field, value in RULE_PAYLOAD.items():
            websocket.send_json({"type": "change", "field": field, "value": value})
        websocket.send_json({"type": "submit"})

        view = _receive_view(websocket, lambda data: len(_rules(data)) == 1)
        [rule] = _rules(view)
        assert rule["name"] == "Max Budget"
        assert rule["createdBy"] == "analyst-7"


def test_console_session_filters_violations(client) -> None:
    with client.websocket_connect("/console/ws") as websocket:
        _receive_view(websocket, lambda data: data["status"] == "ready")

        websocket.send_json({"type": "select_tab", "tab": "violations"})
        websocket.send_json({"type": "simulate_violation"})
        view = _receive_view(
            websocket, lambda data: len(data.get("view", {}).get("rows", [])) == 1
        )
        assert view["view"]["message"] == "Simulated violation added!"

        websocket.send_json({"type": "set_filters", "search": "no such value"})
        view = _receive_view(websocket, lambda data: data["view"]["filters"]["search"])
        assert view["view"]["rows"] == []
        assert view["view"]["emptyText"] == "No violations found."


def test_console_reports_invalid_commands(client) -> None:
    with client.websocket_connect("/console/ws") as websocket:
        _receive_view(websocket, lambda data: data["status"] == "ready")

        websocket.send_json({"type": "select_tab", "tab": "reports"})

        for _ in range(20):
            message = websocket.receive_json()
            if message["type"] == "error":
                break
        assert message == {"type": "error", "detail": "Unknown tab 'reports'"}


def test_console_with_invalid_token_shows_the_error_state(client) -> None:
    with client.websocket_connect("/console/ws?custom_token=forged") as websocket:
        message = websocket.receive_json()

        assert message["type"] == "view"
        assert message["data"]["status"] == "error"
        assert message["data"]["error"] == (
            "Error: Failed to authenticate. Please check your configuration."
        )


def test_console_with_a_multi_segment_user_id_shows_the_error_state(client) -> None:
    token = jwt.encode(
        {
            "sub": "team/alice",
            "typ": "custom",
            "exp": datetime.now(tz=timezone.utc) + timedelta(minutes=5),
        },
        get_settings().secret_key,
        algorithm=ALGORITHM,
    )

    with client.websocket_connect(f"/console/ws?custom_token={token}") as websocket:
        message = websocket.receive_json()

        assert message["type"] == "view"
        assert message["data"]["status"] == "error"
