"""Use case for deleting governance rules."""

from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore


def delete_rule(store: DocumentStore, handle: CollectionHandle, rule_id: str) -> None:
    """Delete the specified rule; there is no undo."""

    store.remove(handle, rule_id)
