"""Derive the per-user collection handles from an identity."""

from __future__ import annotations

from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore

RULES_COLLECTION = "rules"
VIOLATIONS_COLLECTION = "violations"

COLLECTION_KINDS: tuple[str, ...] = (RULES_COLLECTION, VIOLATIONS_COLLECTION)


def collection_path(deployment_id: str, user_id: str, kind: str) -> str:
    """Return ``artifacts/{deployment_id}/users/{user_id}/{kind}``."""

    if kind not in COLLECTION_KINDS:
        raise ValueError(f"Unknown collection '{kind}'")
    for segment in (deployment_id, user_id):
        if "/" in segment:
            raise ValueError(f"Path segment '{segment}' must not contain '/'")
    return f"artifacts/{deployment_id}/users/{user_id}/{kind}"


def bind_collection(
    store: DocumentStore | None,
    deployment_id: str | None,
    user_id: str | None,
    kind: str,
) -> CollectionHandle | None:
    """Return the handle for ``kind`` or ``None`` while any input is unresolved."""

    if store is None or not deployment_id or not user_id:
        return None
    return store.collection(collection_path(deployment_id, user_id, kind))


def rules_collection(
    store: DocumentStore | None, deployment_id: str | None, user_id: str | None
) -> CollectionHandle | None:
    return bind_collection(store, deployment_id, user_id, RULES_COLLECTION)


def violations_collection(
    store: DocumentStore | None, deployment_id: str | None, user_id: str | None
) -> CollectionHandle | None:
    return bind_collection(store, deployment_id, user_id, VIOLATIONS_COLLECTION)


__all__ = [
    "COLLECTION_KINDS",
    "RULES_COLLECTION",
    "VIOLATIONS_COLLECTION",
    "bind_collection",
    "collection_path",
    "rules_collection",
    "violations_collection",
]
