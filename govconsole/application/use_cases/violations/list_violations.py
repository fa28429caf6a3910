"""Use case for listing violation records."""

from collections.abc import Sequence

from govconsole.domain.entities import Violation
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore


def list_violations(store: DocumentStore, handle: CollectionHandle) -> Sequence[Violation]:
    """Return every violation of the collection in snapshot order."""

    return [Violation.from_document(document) for document in store.snapshot(handle)]
