"""Use case for deleting violation records."""

from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore


def delete_violation(
    store: DocumentStore, handle: CollectionHandle, violation_id: str
) -> None:
    """Delete the specified violation record."""

    store.remove(handle, violation_id)
