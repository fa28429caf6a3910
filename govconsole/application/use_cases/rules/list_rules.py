"""Use case for listing governance rules."""

from collections.abc import Sequence

from govconsole.domain.entities import Rule
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore


def list_rules(store: DocumentStore, handle: CollectionHandle) -> Sequence[Rule]:
    """Return every rule of the collection in snapshot order."""

    return [Rule.from_document(document) for document in store.snapshot(handle)]
