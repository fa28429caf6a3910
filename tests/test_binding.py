"""Tests for deriving per-user collection handles."""

from __future__ import annotations

import pytest

from govconsole.application.binding import (
    bind_collection,
    collection_path,
    rules_collection,
    violations_collection,
)


def test_collection_path_scopes_by_deployment_and_user() -> None:
    assert collection_path("app-1", "user-9", "rules") == "artifacts/app-1/users/user-9/rules"
    assert (
        collection_path("app-1", "user-9", "violations")
        == "artifacts/app-1/users/user-9/violations"
    )


def test_collection_path_rejects_unknown_kinds() -> None:
    with pytest.raises(ValueError):
        collection_path("app-1", "user-9", "campaigns")


def test_collection_path_rejects_segments_containing_slashes() -> None:
    with pytest.raises(ValueError):
        collection_path("app-1", "team/alice", "rules")
    with pytest.raises(ValueError):
        collection_path("app/1", "user-9", "violations")


@pytest.mark.parametrize(
    ("deployment_id", "user_id"),
    [(None, "user-9"), ("app-1", None), ("", "user-9"), ("app-1", "")],
)
def test_unresolved_inputs_yield_no_handle(store, deployment_id, user_id) -> None:
    assert bind_collection(store, deployment_id, user_id, "rules") is None


def test_missing_store_yields_no_handle() -> None:
    assert rules_collection(None, "app-1", "user-9") is None


def test_handles_point_at_the_user_collections(store) -> None:
    assert rules_collection(store, "app-1", "u").path == "artifacts/app-1/users/u/rules"
    assert violations_collection(store, "app-1", "u").name == "violations"
