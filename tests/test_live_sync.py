"""Tests for live collection mirrors and snapshot streams."""

from __future__ import annotations

import asyncio

import pytest

from govconsole.application.live_sync import LiveCollection, SnapshotStream, SubscriptionError
from govconsole.domain.entities import Rule
from govconsole.infrastructure.database import Base

pytestmark = pytest.mark.anyio


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def _rule_document(name: str) -> dict:
    return {
        "name": name,
        "type": "Budget Limit",
        "platform": "Google Ads",
        "condition": "100-1000",
        "message": "Budget must be 100-1000",
        "isActive": True,
    }


async def test_mirror_follows_the_bound_collection(store) -> None:
    handle = store.collection("artifacts/app/users/u1/rules")
    store.insert(handle, _rule_document("Existing"))
    rules = LiveCollection(store, Rule.from_document, error_message="Error fetching rules.")
    changes: list[int] = []
    rules.add_listener(lambda: changes.append(len(rules.items)))

    await rules.bind(handle)
    await _settle()

    assert rules.synced is True
    assert rules.is_subscribed is True
    assert [rule.name for rule in rules.items] == ["Existing"]

    store.insert(handle, _rule_document("Added"))
    await _settle()

    assert [rule.name for rule in rules.items] == ["Existing", "Added"]
    assert changes[-1] == 2
    rules.close()
    assert store.subscriber_count(handle) == 0


async def test_rebinding_drops_the_previous_subscription(store) -> None:
    first = store.collection("artifacts/app/users/u1/rules")
    second = store.collection("artifacts/app/users/u2/rules")
    store.insert(second, _rule_document("Other user"))
    rules = LiveCollection(store, Rule.from_document, error_message="Error fetching rules.")

    await rules.bind(first)
    await _settle()
    await rules.bind(second)
    await _settle()
    store.insert(first, _rule_document("Stale"))
    await _settle()

    assert store.subscriber_count(first) == 0
    assert [rule.name for rule in rules.items] == ["Other user"]


async def test_binding_to_nothing_clears_the_mirror(store) -> None:
    handle = store.collection("artifacts/app/users/u1/rules")
    store.insert(handle, _rule_document("Existing"))
    rules = LiveCollection(store, Rule.from_document, error_message="Error fetching rules.")
    await rules.bind(handle)
    await _settle()

    await rules.bind(None)

    assert rules.items == []
    assert rules.synced is False
    assert rules.is_subscribed is False


async def test_subscription_failure_sets_error_message(store, db_engine) -> None:
    handle = store.collection("artifacts/app/users/u1/rules")
    Base.metadata.drop_all(bind=db_engine)
    rules = LiveCollection(store, Rule.from_document, error_message="Error fetching rules.")

    await rules.bind(handle)
    await _settle()

    assert rules.error == "Error fetching rules."
    assert rules.is_subscribed is False
    assert rules.items == []


async def test_snapshot_stream_yields_each_snapshot(store) -> None:
    handle = store.collection("artifacts/app/users/u1/violations")
    stream = SnapshotStream(store, handle)

    async with stream:
        initial = await stream.__anext__()
        store.insert(handle, {"ruleName": "Budget"})
        updated = await stream.__anext__()

    assert initial == []
    assert [document["ruleName"] for document in updated] == ["Budget"]
    assert store.subscriber_count(handle) == 0


async def test_closing_a_stream_ends_iteration(store) -> None:
    handle = store.collection("artifacts/app/users/u1/violations")
    stream = SnapshotStream(store, handle)
    received: list[list[dict]] = []

    async def consume() -> None:
        async for documents in stream:
            received.append(documents)

    consumer = asyncio.create_task(consume())
    await _settle()
    while not received:
        await asyncio.sleep(0.01)
    stream.close()
    await asyncio.wait_for(consumer, timeout=1)

    assert received == [[]]


async def test_stream_raises_when_the_subscription_fails(store, db_engine) -> None:
    handle = store.collection("artifacts/app/users/u1/violations")
    Base.metadata.drop_all(bind=db_engine)

    with pytest.raises(SubscriptionError):
        async for _ in SnapshotStream(store, handle):
            pass
