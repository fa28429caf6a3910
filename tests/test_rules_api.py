"""Integration tests for the rule endpoints."""

from __future__ import annotations

import json

import httpx

from govconsole.infrastructure.gemini_client import RuleSuggestionService
from govconsole.interfaces.api.dependencies import get_suggestion_service_factory

RULE_PAYLOAD = {
    "name": "Max Budget",
    "type": "Budget Limit",
    "platform": "Google Ads",
    "condition": "100-1000",
    "message": "Budget must be 100-1000",
    "isActive": True,
}


def test_rule_crud_flow(client, auth_headers) -> None:
    """Exercise the full lifecycle of a rule."""

    assert client.get("/rules", headers=auth_headers).json() == []

    created = client.post("/rules", json=RULE_PAYLOAD, headers=auth_headers)
    assert created.status_code == 201
    rule = created.json()
    assert rule["name"] == "Max Budget"
    assert rule["createdBy"] == client.get("/auth/me", headers=auth_headers).json()["userId"]
    assert rule["createdAt"]
    assert rule["lastModifiedAt"] is None

    updated = client.put(
        f"/rules/{rule['id']}",
        json={**RULE_PAYLOAD, "condition": "200-2000", "isActive": False},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["condition"] == "200-2000"
    assert updated.json()["isActive"] is False
    assert updated.json()["createdAt"] == rule["createdAt"]
    assert updated.json()["createdBy"] == rule["createdBy"]
    assert updated.json()["lastModifiedAt"]

    listed = client.get("/rules", headers=auth_headers).json()
    assert [item["id"] for item in listed] == [rule["id"]]

    deleted = client.delete(f"/rules/{rule['id']}?confirm=true", headers=auth_headers)
    assert deleted.status_code == 204
    assert client.get("/rules", headers=auth_headers).json() == []


def test_rules_are_scoped_to_the_signed_in_user(client, auth_headers) -> None:
    client.post("/rules", json=RULE_PAYLOAD, headers=auth_headers)
    other = client.post("/auth/anonymous").json()["access_token"]

    response = client.get("/rules", headers={"Authorization": f"Bearer {other}"})

    assert response.json() == []


def test_rules_require_authentication(client) -> None:
    assert client.get("/rules").status_code == 401
    assert client.post("/rules", json=RULE_PAYLOAD).status_code == 401


def test_invalid_rules_are_rejected(client, auth_headers) -> None:
    for payload in (
        {**RULE_PAYLOAD, "type": "Frequency Cap"},
        {**RULE_PAYLOAD, "platform": "MySpace Ads"},
        {**RULE_PAYLOAD, "name": ""},
        {**RULE_PAYLOAD, "createdBy": "someone-else"},
    ):
        response = client.post("/rules", json=payload, headers=auth_headers)
        assert response.status_code == 422


def test_update_of_missing_rule_returns_not_found(client, auth_headers) -> None:
    response = client.put("/rules/missing", json=RULE_PAYLOAD, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Rule not found"


def test_delete_requires_confirmation(client, auth_headers) -> None:
    rule = client.post("/rules", json=RULE_PAYLOAD, headers=auth_headers).json()

    response = client.delete(f"/rules/{rule['id']}", headers=auth_headers)

    assert response.status_code == 400
    assert len(client.get("/rules", headers=auth_headers).json()) == 1


def _use_gemini_handler(app, handler) -> None:
    app.dependency_overrides[get_suggestion_service_factory] = lambda: (
        lambda: RuleSuggestionService(transport=httpx.MockTransport(handler))
    )


def test_rule_suggestions(app, client, auth_headers) -> None:
    suggestion = {"condition": "100-1000", "message": "Budget must be 100-1000"}
    _use_gemini_handler(
        app,
        lambda request: httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": json.dumps(suggestion)}]}}]},
        ),
    )

    response = client.post(
        "/rules/suggestions",
        json={"name": "Max Budget", "type": "Budget Limit"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json() == suggestion


def test_malformed_suggestions_are_a_bad_gateway(app, client, auth_headers) -> None:
    _use_gemini_handler(app, lambda request: httpx.Response(200, json={"candidates": []}))

    response = client.post(
        "/rules/suggestions",
        json={"name": "Max Budget", "type": "Budget Limit"},
        headers=auth_headers,
    )

    assert response.status_code == 502


def test_suggestions_without_api_key_are_unavailable(client, auth_headers, override_settings) -> None:
    override_settings(gemini_api_key="")

    response = client.post(
        "/rules/suggestions",
        json={"name": "Max Budget", "type": "Budget Limit"},
        headers=auth_headers,
    )

    assert response.status_code == 503
